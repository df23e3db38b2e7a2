"""
generate / run commands.

Both build the multi-protocol result from Settings, write the server config
and print what a user needs to connect. ``run`` then hands the config to the
sing-box binary.
"""

import json
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ezsingbox.autoconfig.base import IpDetector
from ezsingbox.autoconfig.material import MaterialGenerator
from ezsingbox.autoconfig.multi import MultiProtocolBuilder
from ezsingbox.autoconfig.results import MultiProtocolResult
from ezsingbox.autoconfig.types import Protocol
from ezsingbox.config.settings import Settings
from ezsingbox.exceptions import ConfigError, SingBoxLaunchError
from ezsingbox.qr import write_qr_codes
from ezsingbox.sharelink import import_remote_profile_uri, share_links
from ezsingbox.singbox.full import SingBoxConfig
from ezsingbox.singbox.outbound import build_proxy_outbound, pick_client_protocol, pick_user

logger = logging.getLogger(__name__)

SING_BOX_CANDIDATES = ("/usr/bin/sing-box", "/bin/sing-box", "/sing-box")


# ============================================================================
# SETTINGS -> RESULT
# ============================================================================

def builder_from_settings(
    settings: Settings,
    generator: Optional[MaterialGenerator] = None,
    ip_detector: Optional[IpDetector] = None,
) -> MultiProtocolBuilder:
    """Map EZ_* settings onto a MultiProtocolBuilder (not built yet)"""
    builder = MultiProtocolBuilder(generator=generator, ip_detector=ip_detector)

    if settings.public_ip:
        builder.public_ip(settings.public_ip)
    if settings.domain:
        builder.domain(settings.domain)
    if settings.acme_email:
        builder.acme_email(settings.acme_email)

    if settings.enable_anytls:
        builder.enable_anytls(settings.anytls_port)
    if settings.enable_hysteria2:
        builder.enable_hysteria2(settings.hysteria2_port)
    if settings.enable_tuic:
        builder.enable_tuic(settings.tuic_port)
    if settings.enable_vless_reality:
        builder.enable_vless_reality(settings.vless_reality_port)
        builder.vless_handshake(settings.vless_handshake_server, settings.vless_handshake_port)

    if not (
        settings.enable_anytls
        or settings.enable_hysteria2
        or settings.enable_tuic
        or settings.enable_vless_reality
    ):
        logger.info("No protocol enabled, enabling all of them")
        builder.enable_all()

    builder.add_user(settings.user, password=settings.password)

    if settings.hy2_obfs:
        builder.hy2_obfs()
    if settings.hy2_bandwidth is not None:
        builder.hy2_bandwidth(*settings.hy2_bandwidth)
    if settings.tuic_cc is not None:
        builder.tuic_congestion(settings.tuic_cc)

    return builder


def build_from_settings(
    settings: Settings,
    generator: Optional[MaterialGenerator] = None,
    ip_detector: Optional[IpDetector] = None,
) -> MultiProtocolResult:
    return builder_from_settings(settings, generator, ip_detector).build()


# ============================================================================
# JSON DOCUMENTS
# ============================================================================

def generate_config_json(result: MultiProtocolResult, log_level: str = "info") -> str:
    """Server config for every enabled inbound"""
    return SingBoxConfig.server_default(result.inbounds(), log_level).to_json()


def generate_client_config_json(
    result: MultiProtocolResult, settings: Settings
) -> Tuple[str, str]:
    """
    Client config for one protocol/user pair.

    Returns:
        (config JSON, profile name "ezsingbox-<protocol>-<user>@<domain>")

    Raises:
        ConfigError: Nothing enabled, no user, or the chosen protocol is not enabled
    """
    protocol = pick_client_protocol(result, settings.client_protocol)
    if protocol is None:
        raise ConfigError("no protocol available for the client config")

    protocol_result = result.get(protocol)
    if protocol_result is None:
        raise ConfigError(f"{protocol.display_name} is not enabled")
    user = pick_user(protocol_result.users, settings.client_user)
    if user is None:
        raise ConfigError(f"no user available for the {protocol.display_name} client config")

    proxy = build_proxy_outbound(result, protocol, user)
    config = SingBoxConfig.client_default(
        proxy,
        settings.log_level,
        settings.client_mixed_listen,
        settings.client_mixed_port,
    )
    profile_name = f"ezsingbox-{protocol.as_str()}-{user.name}@{result.domain}"
    return config.to_json(), profile_name


def write_text(path: str, text: str) -> Path:
    """Write text, creating parent directories"""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    return target


# ============================================================================
# OUTPUT
# ============================================================================

def print_summary(result: MultiProtocolResult, config_path: str) -> None:
    print(f"✅ sing-box config written: {config_path}")
    print(f"Public IP: {result.public_ip}")
    print(f"Domain: {result.domain}")
    for protocol in result.enabled_protocols():
        protocol_result = result.get(protocol)
        print(
            f"{protocol.display_name} port: {protocol_result.port} "
            f"(tag={protocol_result.inbound.tag})"
        )


def print_details(result: MultiProtocolResult, settings: Settings) -> None:
    """Share links, credentials and client outbounds. Contains secrets."""
    print("\n==== Details (contains secrets) ====")
    print(f"Public IP: {result.public_ip}")
    print(f"Domain: {result.domain}")

    print("\n==== Share links ====")
    current = None
    for link in share_links(result):
        if link.protocol is not current:
            current = link.protocol
            print(f"\n[{current.display_name}] port: {result.get(current).port}")
        print(f"  user {link.user}: {link.link}")

    print("\n==== Credentials ====")
    for protocol in result.enabled_protocols():
        protocol_result = result.get(protocol)
        print(f"\n[{protocol.as_str()}] port: {protocol_result.port}")
        if protocol is Protocol.VLESS_REALITY:
            print(f"  handshake server: {protocol_result.handshake_server}:{protocol_result.handshake_port}")
            print(f"  public key (client): {protocol_result.public_key}")
            print(f"  short id: {protocol_result.short_id}")
            print(f"  private key (server): {protocol_result.private_key}")
        if protocol is Protocol.HYSTERIA2 and protocol_result.obfs_password:
            print(f"  obfs password: {protocol_result.obfs_password}")
        for user in protocol_result.users:
            print(f"- user: {user.name}")
            if protocol is not Protocol.VLESS_REALITY:
                print(f"  password: {user.password}")
            if user.uuid:
                print(f"  UUID: {user.uuid}")
            outbound = build_proxy_outbound(result, protocol, user)
            print(f"  sing-box outbound:\n{json.dumps(outbound, indent=2)}")

    if settings.remote_profile_url:
        print(f"\nRemote profile: {settings.remote_profile_url}")
        print(
            "Import URI: "
            f"{import_remote_profile_uri(settings.remote_profile_url, settings.remote_profile_name)}"
        )


# ============================================================================
# COMMANDS
# ============================================================================

def _write_outputs(
    settings: Settings,
    generator: Optional[MaterialGenerator],
    ip_detector: Optional[IpDetector],
) -> MultiProtocolResult:
    result = build_from_settings(settings, generator, ip_detector)
    config_json = generate_config_json(result, settings.log_level)
    write_text(settings.config_path, config_json)
    logger.info(f"Server config written to {settings.config_path}")

    print_summary(result, settings.config_path)
    if settings.print_config:
        print(f"\n{config_json}")
    if settings.print_details:
        print_details(result, settings)
    return result


def cmd_generate(
    settings: Settings,
    generator: Optional[MaterialGenerator] = None,
    ip_detector: Optional[IpDetector] = None,
) -> int:
    """Write the server config (plus client config and QR codes if configured)"""
    result = _write_outputs(settings, generator, ip_detector)

    if settings.client_config_path:
        client_json, profile_name = generate_client_config_json(result, settings)
        write_text(settings.client_config_path, client_json)
        print(f"✅ client config written: {settings.client_config_path} ({profile_name})")

    if settings.qr_dir:
        paths = write_qr_codes(share_links(result), settings.qr_dir)
        print(f"✅ {len(paths)} QR code(s) written to {settings.qr_dir}")

    return 0


def pick_sing_box_bin(settings: Settings) -> str:
    """Configured binary, else sing-box on PATH, else a well-known location"""
    if settings.sing_box_bin:
        return settings.sing_box_bin
    if shutil.which("sing-box"):
        return "sing-box"
    for candidate in SING_BOX_CANDIDATES:
        if Path(candidate).exists():
            return candidate
    return "sing-box"


def cmd_run(
    settings: Settings,
    generator: Optional[MaterialGenerator] = None,
    ip_detector: Optional[IpDetector] = None,
    runner: Callable[[List[str]], subprocess.CompletedProcess] = subprocess.run,
) -> int:
    """Write the server config, then run sing-box on it and return its exit code"""
    _write_outputs(settings, generator, ip_detector)

    sing_box = pick_sing_box_bin(settings)
    command = [sing_box, "run", "-c", settings.config_path]
    logger.info(f"Starting {' '.join(command)}")
    try:
        completed = runner(command)
    except OSError as e:
        raise SingBoxLaunchError(f"failed to start sing-box ({sing_box}): {e}") from e
    return completed.returncode
