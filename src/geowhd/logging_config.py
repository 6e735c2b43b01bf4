"""Logging setup driven by AppSettings"""
import logging
from pathlib import Path
from typing import Optional

from geowhd.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Optional[str] = None, log_file_path: Optional[str] = None) -> None:
    """
    Configure root logging for scripts and the admin API

    Args:
        level: Log level name. Defaults to LOG_LEVEL from settings.
        log_file_path: Optional log file. Defaults to LOG_FILE_PATH from settings.
    """
    level = (level or settings.app.log_level).upper()
    log_file_path = log_file_path or settings.app.log_file_path

    handlers = [logging.StreamHandler()]
    if log_file_path:
        Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file_path))

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
