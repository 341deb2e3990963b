"""
Logging configuration for the front desk.
Plain text for local use, JSON lines (python-json-logger) for log shipping.
"""
import logging
import logging.config
from datetime import datetime, timezone
from typing import Dict, Any

from pythonjsonlogger.json import JsonFormatter

from .config import Settings


class FrontDeskJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level and logger name to every record."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': FrontDeskJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s'
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'json' if settings.log_json else 'standard',
            },
        },
        'loggers': {
            'frontdesk': {
                'handlers': ['console'],
                'level': settings.log_level,
                'propagate': False,
            },
            'frontdesk_app': {
                'handlers': ['console'],
                'level': settings.log_level,
                'propagate': False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """Configure the ``frontdesk`` and ``frontdesk_app`` loggers."""
    logging.config.dictConfig(build_logging_config(settings))
