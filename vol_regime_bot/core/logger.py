"""
Logging for the bot: UTC timestamps (matching the audit log), stderr console,
optional file handler under LOG_DIR, and quieter HTTP library loggers.
"""

from __future__ import annotations
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from vol_regime_bot.core.config import Config

LOGGER_NAME = "vol_regime_bot"
NOISY_LIBRARIES = ("urllib3", "binance")


class UtcFormatter(logging.Formatter):
    converter = time.gmtime


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
    noisy: Iterable[str] = NOISY_LIBRARIES,
) -> logging.Logger:
    """
    Configure the package logger. stdout is left to the CLI report.
    Never log API keys or secrets.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    pkg = logging.getLogger(LOGGER_NAME)
    pkg.setLevel(log_level)
    pkg.handlers.clear()

    formatter = UtcFormatter("%(asctime)sZ | %(levelname)-8s | %(name)s | %(message)s", datefmt="%Y-%m-%dT%H:%M:%S")
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    pkg.addHandler(console)

    if log_dir and log_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / log_file, encoding="utf-8")
        fh.setFormatter(formatter)
        pkg.addHandler(fh)

    # request/response dumps from the exchange client only at DEBUG
    for name in noisy:
        logging.getLogger(name).setLevel(logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING)
    return pkg


def setup_logging_from_config(config: "Config") -> logging.Logger:
    """LOG_LEVEL / LOG_DIR / LOG_FILE from config; also creates the audit log directory."""
    pkg = setup_logging(config.log_level, config.log_dir, config.log_file)
    Path(config.audit_log).parent.mkdir(parents=True, exist_ok=True)
    pkg.debug("Logging to %s, audit events to %s", Path(config.log_dir) / config.log_file, config.audit_log)
    return pkg
