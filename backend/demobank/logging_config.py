"""
Logging configuration for the demo bank API.

Console output always; a rotating file log when LOG_FILE is set.
"""

import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


def setup_logging(level_name: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger and the demobank service logger.
    Safe to call more than once.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    service_logger = logging.getLogger("demobank")
    service_logger.setLevel(level)
    # Avoid duplicate handlers if setup_logging is called multiple times
    service_logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    service_logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        service_logger.addHandler(file_handler)

    # SQL echo is noise for an in-memory demo store
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
