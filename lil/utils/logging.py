"""Structured JSON logging for lil

IMPORTANT: Call `initialize_logging()` once at process start-up (see
`lil.app.get_app()`) before any other logging is done.

Every record is written to stdout as a single JSON object. Service-wide
fields (service name, version and LIL_ENV) are stamped on each line so
records from several deployments can share one log sink:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "lil.handlers.redirect",
    "message": "Redirecting client to target URL. Responding with 302.",
    "service": "lil",
    "version": "0.1.0",
    "env": "prod",
    "event": "REDIRECT_SUCCESS",
    "shortcode": "abc12345"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any, Optional

import lil
from lil.constants import ENV
from lil.utils.runtime import app_env


DEFAULT_LOG_LEVEL = 'INFO'

# Attributes every LogRecord carries; anything else arrived through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}

# Third-party loggers that are too chatty at DEBUG
_QUIET_LOGGERS = ('redis', 'urllib3')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord as one JSON line

    Args:
        static_fields (dict[str, Any] | None): fields added to every record.
            Values passed through `extra` take precedence over them.
    """

    def __init__(self, static_fields: Optional[dict[str, Any]] = None):
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        moment = datetime.fromtimestamp(record.created, tz=UTC)
        return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update(self.static_fields)
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in ('timestamp', 'level', 'logger'):
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        return json.dumps(log, default=str)


def resolve_log_level(level: Optional[str] = None) -> str:
    """Pick the log level from the argument or LOG_LEVEL, falling back to INFO

    Unknown names fall back too, so a typo in the environment never keeps
    the service from starting.
    """
    name = (level or os.getenv(ENV.App.LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()
    if name not in logging.getLevelNamesMapping():
        return DEFAULT_LOG_LEVEL
    return name


def initialize_logging(level: Optional[str] = None) -> None:
    log_level = resolve_log_level(level)
    static_fields = {'service': 'lil', 'version': lil.__version__, 'env': app_env() or None}

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'static_fields': static_fields,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in _QUIET_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
