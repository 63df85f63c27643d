"""Structured JSON logs for the qrlinks lambdas

Each lambda package calls `initialize_logging()` from its `__init__.py`, so
the root logger is configured once per cold start. Every record becomes one
JSON line on stdout, which CloudWatch stores as-is:

    {"timestamp": "2025-10-15T12:00:00.000Z", "level": "INFO",
     "logger": "qrlinks.lambdas.redirect_link.app",
     "message": "Redirecting client to destination. Responding with 307.",
     "event": "REDIRECT_SUCCESS", "slug": "promo"}

Context goes in `extra=`. Credentials never do: fields named after one
(password, token, session, cookie) are masked before serialization.
"""

import os
import json
import time
import logging
import logging.config

from qrlinks.constants import ENV


# Attributes every LogRecord carries; anything else came in through `extra=`
RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.INFO, '', 0, '', None, None))) | {'message', 'asctime'}

MASKED_FIELDS = frozenset({'password', 'token', 'session', 'cookie'})
MASK = '***'

# Chatty third-party loggers kept at WARNING regardless of LOG_LEVEL
QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


def _utc_timestamp(record: logging.LogRecord) -> str:
    return time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(record.created)) + f'.{int(record.msecs):03d}Z'


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': _utc_timestamp(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for field, value in vars(record).items():
            if field in RECORD_ATTRS:
                continue
            entry[field] = MASK if field.lower() in MASKED_FIELDS else value

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def initialize_logging() -> None:
    """Route all logging to stdout as JSON at LOG_LEVEL (default INFO)"""
    level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
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
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
