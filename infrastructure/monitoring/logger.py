import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from config.settings import Settings

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'


class CustomJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, Decimal):
            return str(o)
        if isinstance(o, Enum):
            return o.value
        return super().default(o)


class JSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs structured JSON logs.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.now(UTC).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_data'):
            log_entry['data'] = record.extra_data

        return json.dumps(log_entry, ensure_ascii=False, cls=CustomJSONEncoder)


def configure_logging(settings: Settings,
                      max_file_size: int = 10 * 1024 * 1024,
                      backup_count: int = 5) -> None:
    """
    Console logging always; rotating JSON logs when LOG_DIRECTORY is set.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)

    logging.getLogger("httpx").setLevel(logging.WARNING)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    root_logger.addHandler(console_handler)

    if not settings.LOG_DIRECTORY:
        return

    log_directory = Path(settings.LOG_DIRECTORY)
    log_directory.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_directory / "fx_service.log",
        maxBytes=max_file_size,
        backupCount=backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(file_handler)


def log_rate_resolution(logger: logging.Logger, from_currency: str, to_currency: str,
                        rate: Decimal, source: str, stale: bool,
                        misses: list[dict[str, Any]]) -> None:
    level = logging.WARNING if stale or source == 'fallback-mock' else logging.INFO
    suffix = ' (stale)' if stale else ''
    logger.log(
        level,
        f"Rate resolved {from_currency}->{to_currency}: {rate} via {source}{suffix}",
        extra={'extra_data': {
            'from_currency': from_currency,
            'to_currency': to_currency,
            'rate': rate,
            'source': source,
            'stale': stale,
            'misses': misses,
        }}
    )
