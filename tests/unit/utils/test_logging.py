"""Unit tests for JSON logging in logging.py.

Test coverage includes:

1. JsonFormatter
   - Ensures records are rendered as one JSON object with timestamp, level, logger and message.
   - Ensures `extra` fields are attached at the top level.
   - Ensures exceptions are attached as formatted tracebacks.
   - Ensures non-JSON extras fall back to their string representation.

2. initialize_logging()
   - Ensures the root logger emits JSON to stdout at LOG_LEVEL.
"""

import sys
import json
import logging
from datetime import datetime, UTC

import pytest

from clicklinks.utils.logging import JsonFormatter, initialize_logging


@pytest.fixture
def formatter():
    return JsonFormatter()


@pytest.fixture
def root_logger():
    """Restore the root logger's handlers and level after reconfiguring it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def make_record(msg='Short link created.', args=(), level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord('clicklinks.test', level, __file__, 1, msg, args, exc_info)
    record.created = datetime(2025, 10, 15, 12, 0, 0, 500000, tzinfo=UTC).timestamp()
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter
# -------------------------------


def test_format_basic_record(formatter):
    """Ensure standard fields are rendered."""
    log = json.loads(formatter.format(make_record('Responding with %s.', args=(302,))))

    assert log == {
        'timestamp': '2025-10-15T12:00:00.500Z',
        'level': 'INFO',
        'logger': 'clicklinks.test',
        'message': 'Responding with 302.',
    }


def test_format_extra_fields(formatter):
    """Ensure `extra` fields are attached at the top level."""
    log = json.loads(formatter.format(make_record(shortcode='abc123', event='REDIRECT_SUCCESS')))

    assert log['shortcode'] == 'abc123'
    assert log['event'] == 'REDIRECT_SUCCESS'


def test_format_exception(formatter):
    """Ensure exceptions are attached as formatted tracebacks."""
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record('Unhandled exception.', level=logging.ERROR, exc_info=sys.exc_info())

    log = json.loads(formatter.format(record))

    assert log['level'] == 'ERROR'
    assert 'RuntimeError: boom' in log['exception']
    assert 'exc_info' not in log


def test_format_non_json_extras(formatter):
    """Ensure non-JSON extras are rendered via str()."""
    expires_at = datetime(2025, 10, 15, 12, 30, tzinfo=UTC)

    log = json.loads(formatter.format(make_record(expiresAt=expires_at)))

    assert log['expiresAt'] == str(expires_at)


# -------------------------------
# 2. initialize_logging()
# -------------------------------


def test_initialize_logging(monkeypatch, capsys, root_logger):
    """Ensure the root logger writes JSON lines to stdout at LOG_LEVEL."""
    monkeypatch.setenv('LOG_LEVEL', 'warning')

    initialize_logging()
    logger = logging.getLogger('clicklinks.test')
    logger.info('Not emitted.')
    logger.warning('Emitted.', extra={'shortcode': 'abc123'})

    [line] = capsys.readouterr().out.splitlines()
    log = json.loads(line)
    assert log['level'] == 'WARNING'
    assert log['message'] == 'Emitted.'
    assert log['shortcode'] == 'abc123'
