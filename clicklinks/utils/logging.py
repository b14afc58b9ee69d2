"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Logging format (one JSON object per line):
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "clicklinks.lambdas.redirect_url.app",
    "message": "Redirecting client to target URL. Responding with 302.",
    "shortcode": "abc123",
    "event": "REDIRECT_SUCCESS"
}

Fields passed via `extra=` are attached at the top level. Exceptions logged via
`logger.exception()` are attached as a formatted traceback under "exception".
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from clicklinks.utils.constants import LOG_LEVEL_ENV


# AWS SDK and HTTP client loggers flood DEBUG output with wire dumps
QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


def _log_record_attributes() -> frozenset[str]:
    blank = logging.LogRecord(name='', level=logging.NOTSET, pathname='', lineno=0, msg='', args=(), exc_info=None)
    return frozenset(vars(blank)) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents, `extra` fields included"""

    STANDARD_ATTRS = _log_record_attributes()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update({key: value for key, value in vars(record).items() if key not in self.STANDARD_ATTRS})

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # Non-JSON extras (datetimes, models, ...) fall back to their str()
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(LOG_LEVEL_ENV, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {'()': JsonFormatter},
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
