"""
Logging configuration for ezsingbox.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from ezsingbox.config.settings import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Setup logging configuration."""
    level_name = settings.app_log_level if settings else "INFO"
    log_file = settings.app_log_file if settings else None

    # stderr keeps stdout clean for the printed config
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path))

    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Set specific log levels for noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
