"""Process-wide logging configuration.

File handler: everything at the configured level to a rotating log file.
Console handler: only warnings and errors reach the terminal.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from .configuration import LoggingConfig

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty at DEBUG
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "hpack",
    "flet",
    "flet_controls",
    "flet_transport",
)


def configure_logging(config: LoggingConfig, project_root: Optional[Path] = None) -> Path:
    """Install file and console handlers on the root logger.

    Calling this twice replaces the handlers instead of duplicating them.

    Returns:
        Path of the active log file
    """
    root = Path(project_root) if project_root else Path.cwd()
    log_dir = Path(config.log_dir)
    if not log_dir.is_absolute():
        log_dir = root / log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = log_dir / config.file_name

    file_log_level = LOG_LEVEL_MAP.get(config.level.upper(), logging.DEBUG)
    console_log_level = LOG_LEVEL_MAP.get(config.console_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)

    # Remove existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    # Suppress observer errors during shutdown
    logging.getLogger("fletx.core.state").setLevel(logging.CRITICAL)

    logging.getLogger(__name__).info(f"Logging configured: file={log_file_path}, console={config.console_level.upper()}+")
    return log_file_path
