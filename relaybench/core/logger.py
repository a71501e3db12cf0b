"""
Logging configuration for RelayBench.

Console messages are short ("WARNING: Invalid country code at position 1")
and go to stderr, away from the report summary and progress line on stdout.
Debug runs and the optional log file get timestamps and logger names.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import LoggingConfig

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Libraries that log every request or packet at INFO/DEBUG
NOISY_LOGGERS = ('urllib3', 'requests', 'ping3')


def resolve_level(name: str) -> int:
    """Turn a level name such as 'warning' into its numeric value.

    Raises ValueError for names the logging module does not know.
    """
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def setup_logging(config: "LoggingConfig", level: int = logging.WARNING) -> None:
    """Setup logging configuration."""
    detailed = logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    if level <= logging.DEBUG:
        console_handler.setFormatter(detailed)
    else:
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if config.file:
        try:
            log_path = Path(config.file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=config.max_size * 1024 * 1024,  # MB to bytes
                backupCount=config.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(detailed)
            root_logger.addHandler(file_handler)

        except OSError as e:
            logging.warning(f"Failed to setup file logging: {e}")

    logging.getLogger('relaybench').setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(f"relaybench.{name}")
