"""Logging configuration for the Backoffice console.

File handler: everything at the configured level (LOG_LEVEL, default DEBUG)
Console handler: WARNING and above only
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from backoffice.shared.core.configuration import LoggingConfig

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_configured = False


def configure_logging(config: Optional[LoggingConfig] = None, force: bool = False) -> Path:
    """Install the rotating file handler and the console handler on the root logger.

    Streamlit re-executes the app script on every interaction, so repeated
    calls are ignored unless ``force`` is set.

    Args:
        config: Logging section of the system config (defaults when omitted)
        force: Reconfigure even if logging was already set up

    Returns:
        Path of the log file
    """
    global _configured
    config = config or LoggingConfig()
    log_file_path = Path(config.file)

    if _configured and not force:
        return log_file_path

    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    file_log_level = LOG_LEVEL_MAP.get(config.level.upper(), logging.DEBUG)
    console_log_level = LOG_LEVEL_MAP.get(config.console_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_log_level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    # Suppress verbose third-party library logs
    for noisy in ("httpx", "httpcore", "urllib3", "watchdog", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True
    logging.getLogger(__name__).info(f"Logging configured: file={log_file_path}, console={config.console_level.upper()}+")
    return log_file_path
