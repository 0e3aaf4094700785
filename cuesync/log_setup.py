"""Logging configuration for CueSync."""

import logging
import sys
from logging.handlers import RotatingFileHandler
import os
from .utils import ensure_dir_exists
from .exceptions import FileSystemError

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logging(
    log_level: int = logging.INFO,
    log_dir: str = "logs",
    log_file: str = "cuesync.log",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    max_bytes: int = 10 * 1024 * 1024, # 10 MB
    backup_count: int = 5
) -> None:
    """
    Configures logging for the application.

    Sets up logging to both the console (stdout) and a rotating file.
    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_level: The minimum logging level (e.g., logging.INFO, logging.DEBUG).
        log_dir: The directory to store log files.
        log_file: The name of the log file.
        log_format: The format string for log messages.
        date_format: The format string for timestamps in logs.
        max_bytes: Maximum size of a log file before rotation.
        backup_count: Number of backup log files to keep.
    """
    logger = logging.getLogger() # Get root logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(log_level)
    formatter = logging.Formatter(log_format, datefmt=date_format)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(log_level)
    logger.addHandler(stream_handler)

    try:
        ensure_dir_exists(log_dir)
        log_path = os.path.join(log_dir, log_file)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.debug(f"Logging initialized. Log file: {log_path}")
    except (FileSystemError, OSError, ValueError) as e:
        # Console logging still works without the file handler
        logger.error(f"Failed to set up file logging handler at {log_dir}/{log_file}: {e}", exc_info=True)

    # Whisper pulls in chatty HTTP clients when downloading models
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
