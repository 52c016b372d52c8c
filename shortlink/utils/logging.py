"""Structured JSON logging for the shortlink Lambdas

`initialize_logging()` must run once per Lambda container, before the first log
call. Each handler package does so in its `__init__.py`.

One JSON object is written per line to stdout (CloudWatch picks it up as-is):
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "shortlink.registry",
    "service": "shortlink:prod",
    "message": "Link shortened.",
    "code": "Gh71WPT",
    "attempt": 1,
    "event": "LINK_SHORTENED"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortlink.constants import ENV
from shortlink.utils.config import app_prefix


# Attributes every LogRecord carries. Anything else on a record came from `extra`.
_RESERVED = frozenset(logging.LogRecord('', logging.INFO, '', 0, '', None, None).__dict__) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, `extra` fields included, as one JSON line"""

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
        }
        if self.service:
            log['service'] = self.service
        log['message'] = record.getMessage()

        log.update((key, value) for key, value in record.__dict__.items() if key not in _RESERVED)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # datetimes, enums and other non-JSON values in `extra` are stringified
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    """Route all loggers to stdout through JsonFormatter at LOG_LEVEL (default INFO)"""
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'service': app_prefix(),
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper(),
                'handlers': ['stdout'],
            },
        }
    )
