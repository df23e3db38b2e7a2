"""
ezsingbox command line.

    ezsingbox [generate|run]

Everything else is configured through EZ_* environment variables (or .env).
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from ezsingbox.commands import cmd_generate, cmd_run
from ezsingbox.config.logging_config import setup_logging
from ezsingbox.config.settings import get_settings
from ezsingbox.exceptions import EzSingBoxError

COMMANDS = {
    "generate": cmd_generate,
    "run": cmd_run,
}

ENV_HELP = """\
server: EZ_CONFIG_PATH, EZ_PUBLIC_IP, EZ_DOMAIN, EZ_ACME_EMAIL, EZ_ENABLE_ANYTLS,
  EZ_ENABLE_HYSTERIA2, EZ_ENABLE_TUIC, EZ_ENABLE_VLESS_REALITY, EZ_ANYTLS_PORT,
  EZ_HYSTERIA2_PORT, EZ_TUIC_PORT, EZ_VLESS_REALITY_PORT, EZ_USER, EZ_PASSWORD,
  EZ_HY2_OBFS, EZ_HY2_UP_MBPS, EZ_HY2_DOWN_MBPS, EZ_TUIC_CC,
  EZ_VLESS_HANDSHAKE_SERVER, EZ_VLESS_HANDSHAKE_PORT, EZ_LOG_LEVEL,
  EZ_PRINT_CONFIG, EZ_PRINT_DETAILS
client: EZ_CLIENT_CONFIG_PATH, EZ_CLIENT_PROTOCOL, EZ_CLIENT_USER,
  EZ_CLIENT_MIXED_LISTEN, EZ_CLIENT_MIXED_PORT
extras: EZ_REMOTE_PROFILE_URL, EZ_REMOTE_PROFILE_NAME, EZ_QR_DIR, EZ_SING_BOX_BIN,
  EZ_APP_LOG_LEVEL, EZ_APP_LOG_FILE
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ezsingbox",
        description="Generate (and run) a sing-box server config with zero required input",
        epilog=ENV_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="generate",
        help="generate (default) or run",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help(sys.stderr)
        return 2

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"❌ invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(settings)

    try:
        return command(settings)
    except (EzSingBoxError, OSError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
