"""JSON logging for the lambda handlers

Call `initialize_logging()` from the handler package's `__init__.py`,
before anything else logs.

Each record is written to stdout as one JSON object, e.g.:
{
    "timestamp": "2026-01-01T12:00:00.000Z",
    "level": "INFO",
    "logger": "shortlinks.service.mapping_service",
    "message": "Shortened long URL.",
    "shortcode": "9f3c1a2b7d4e5f60"
}
Anything passed through `extra=` is appended as top-level keys.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortlinks.constants import ENV


# Attributes every LogRecord carries; whatever else is on a record came from `extra=`
RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}

# Chatty third-party loggers, capped at WARNING
QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


def utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, extras included, as a single JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': log_level, 'handlers': ['stdout']},
        }
    )
