"""
Structured Logging Configuration

Console logging for applications embedding the accumulator, in either
JSON or plain text form.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from .config import AccumulatorSettings, get_settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with timestamp and service fields."""

    def __init__(self, *args: Any, version: str = "0.1.0", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.version = version

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['service'] = 'set-accumulator'
        log_record['version'] = self.version

        if not log_record.get('level'):
            log_record['level'] = record.levelname


def setup_logging(settings: Optional[AccumulatorSettings] = None) -> logging.Handler:
    """
    Configure root logging for the accumulator.

    Replaces any handlers already on the root logger with a single stdout
    handler.

    Args:
        settings: Settings to read level and format from (default: get_settings())

    Returns:
        logging.Handler: The installed handler
    """
    settings = settings or get_settings()

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if settings.log_format == 'json':
        formatter = CustomJsonFormatter(
            fmt='%(timestamp)s %(level)s %(name)s %(message)s',
            version=settings.app_version,
        )
    else:
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    return console_handler
