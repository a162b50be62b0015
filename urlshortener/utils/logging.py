"""Application-wide logging initialization

IMPORTANT: `initialize_logging()` runs when `urlshortener.lambdas` is imported,
before any handler logs anything.

Every record is one JSON object per line on stdout (CloudWatch picks it up
as-is). Anything passed through `extra=` is attached at the top level:

{
    "timestamp": "2026-10-18T12:00:00.000Z",
    "level": "INFO",
    "logger": "urlshortener.services.link_service",
    "message": "Link created.",
    "event": "LINK_CREATED",
    "link_id": "aZ3kP9qL",
    "exception": "Traceback ..."      <- only when exc_info is set
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any

from urlshortener.constants import ENV


# Attributes every LogRecord carries, plus the ones Formatter.format() adds
_RESERVED = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}

# AWS SDK debug output drowns application logs
_QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, including its `extra` fields, as a single JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            'timestamp': _utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        payload.update((key, value) for key, value in vars(record).items() if key not in _RESERVED)

        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        # extras may carry datetimes, enums, exceptions...
        return json.dumps(payload, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Route the root logger to stdout through JsonFormatter

    Args:
        level (str | None):
            Log level name. Defaults to the `LOG_LEVEL` env var, then 'INFO'.
    """
    root_level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {'class': 'logging.StreamHandler', 'formatter': 'json', 'stream': 'ext://sys.stdout'},
            },
            'loggers': {name: {'level': 'WARNING'} for name in _QUIET_LOGGERS},
            'root': {'level': root_level, 'handlers': ['stdout']},
        }
    )
