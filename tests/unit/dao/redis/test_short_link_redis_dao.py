"""Unit tests for the ShortLinkRedisDAO

Test coverage includes:

1. Existence checks
   - Ensures exists() reflects Redis EXISTS on the record key.

2. Insertion behavior
   - Validates inserting runs the insert-if-absent script with record and click payloads.
   - Confirms duplicate shortcodes raise ShortLinkAlreadyExistsError.
   - Ensures invalid types raise BeartypeCallHintParamViolation.
   - Confirms Redis connection and command errors raise DataStoreError.

3. Retrieval behavior
   - Ensures record and clicks are read in one transaction into a ShortLinkModel.
   - Confirms missing keys raise ShortLinkNotFoundError.
   - Confirms corrupted records raise DataStoreError.

4. Click appends
   - Ensures the append script receives the click JSON and its total is returned.
   - Confirms missing links raise ShortLinkNotFoundError.
   - Ensures scripts are registered once per DAO.
"""

import json
import re
from unittest.mock import MagicMock, call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from clicklinks.dao.exceptions import DataStoreError, ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from clicklinks.dao.redis import ShortLinkRedisDAO
from clicklinks.dao.redis.short_link_redis_dao import APPEND_CLICK_SCRIPT, INSERT_LINK_SCRIPT


RECORD_KEY = 'testapp:test:links:abc123:record'
CLICKS_KEY = 'testapp:test:links:abc123:clicks'


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def script():
    """Mock a registered Lua script (callable returning the script's reply)."""
    return MagicMock(return_value=1)


@pytest.fixture
def redis_client(script):
    """Mock a Redis pipeline-compatible client."""
    _redis_client = MagicMock(spec=redis.client.Pipeline)
    _redis_client.connection_pool = MagicMock()
    _redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}
    _redis_client.exists.return_value = 0
    _redis_client.pipeline.return_value = _redis_client
    _redis_client.__enter__.return_value = _redis_client
    _redis_client.__exit__.return_value = None
    _redis_client.register_script.return_value = script
    return _redis_client


@pytest.fixture
def dao(redis_client):
    """Create a ShortLinkRedisDAO instance with a mocked Redis client."""
    return ShortLinkRedisDAO(redis_client=redis_client, prefix='testapp:test')


# -------------------------------
# 1. Existence checks
# -------------------------------


@pytest.mark.parametrize('reply, expected', [(0, False), (1, True)])
def test_exists(dao, redis_client, reply, expected):
    """Ensure exists() checks the record key."""
    redis_client.exists.return_value = reply

    assert dao.exists('abc123') is expected
    redis_client.exists.assert_called_once_with(RECORD_KEY)


# -------------------------------
# 2. Insertion behavior
# -------------------------------


def test_insert_short_link(dao, redis_client, script, short_link):
    """Ensure insert() runs the insert-if-absent script with the record JSON."""
    assert dao.insert(short_link) is dao

    redis_client.register_script.assert_called_once_with(INSERT_LINK_SCRIPT)
    script.assert_called_once_with(keys=[RECORD_KEY, CLICKS_KEY], args=[json.dumps(short_link.to_dict(include_clicks=False))])
    redis_client.set.assert_not_called()  # no separate EXISTS-then-SET round trips
    redis_client.exists.assert_not_called()


def test_insert_short_link_with_clicks(dao, script, short_link, click):
    """Ensure initial clicks are pushed by the same script call."""
    dao.insert(short_link.with_click(click))

    _, kwargs = script.call_args
    assert kwargs['args'][1:] == [json.dumps(click.to_dict())]
    assert json.loads(kwargs['args'][0]) == short_link.to_dict(include_clicks=False)


def test_insert_short_link_which_already_exists(dao, script, short_link):
    """Ensure duplicate shortcodes raise ShortLinkAlreadyExistsError."""
    script.return_value = 0

    with pytest.raises(ShortLinkAlreadyExistsError, match=re.escape("Short link with code 'abc123' already exists.")):
        dao.insert(short_link)


def test_insert_short_link_with_invalid_type(dao):
    """Ensure inserting invalid types raises a Beartype error."""
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.insert('https://example.com/notamodel')


def test_insert_short_link_with_redis_connection_error(dao, script, short_link):
    """Ensure Redis connection errors during insert raise DataStoreError."""
    script.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.insert(short_link)


def test_insert_short_link_with_redis_response_error(dao, script, short_link):
    """Ensure server-side command failures raise DataStoreError."""
    script.side_effect = redis.exceptions.ResponseError('WRONGTYPE Operation against a key holding the wrong kind of value')

    with pytest.raises(DataStoreError, match='rejected command'):
        dao.insert(short_link)


# -------------------------------
# 3. Retrieval behavior
# -------------------------------


def test_get_short_link(dao, redis_client, short_link, click):
    """Ensure get() reads record and clicks in one transaction."""
    redis_client.execute.return_value = (
        json.dumps(short_link.to_dict(include_clicks=False)),
        [json.dumps(click.to_dict()), json.dumps(click.to_dict())],
    )

    result = dao.get('abc123')

    assert result == short_link.with_click(click).with_click(click)
    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.get.assert_has_calls([call(RECORD_KEY)])
    redis_client.lrange.assert_called_once_with(CLICKS_KEY, 0, -1)


def test_get_missing_short_link(dao, redis_client):
    """Ensure missing keys raise ShortLinkNotFoundError."""
    redis_client.execute.return_value = (None, [])

    with pytest.raises(ShortLinkNotFoundError, match=re.escape("Short link with code 'abc123' not found.")):
        dao.get('abc123')


def test_get_corrupted_short_link(dao, redis_client):
    """Ensure unparsable records raise DataStoreError."""
    redis_client.execute.return_value = ('{"shortcode": "abc123"', [])

    with pytest.raises(DataStoreError, match='corrupted'):
        dao.get('abc123')


def test_get_with_invalid_type(dao):
    """Ensure non-string shortcodes raise a Beartype error."""
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.get(123)


def test_get_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during get raise DataStoreError."""
    redis_client.execute.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis"):
        dao.get('abc123')


# -------------------------------
# 4. Click appends
# -------------------------------


def test_append_click(dao, redis_client, script, click):
    """Ensure append_click() runs the append script and returns the total."""
    script.return_value = 3

    assert dao.append_click('abc123', click) == 3

    redis_client.register_script.assert_called_once_with(APPEND_CLICK_SCRIPT)
    script.assert_called_once_with(keys=[RECORD_KEY, CLICKS_KEY], args=[json.dumps(click.to_dict())])
    redis_client.rpush.assert_not_called()


def test_append_click_to_missing_short_link(dao, script, click):
    """Ensure appends to missing links raise ShortLinkNotFoundError."""
    script.return_value = -1

    with pytest.raises(ShortLinkNotFoundError):
        dao.append_click('abc123', click)


def test_scripts_are_registered_once(dao, redis_client, script, short_link, click):
    """Ensure each Lua script is registered once and reused."""
    dao.insert(short_link)
    dao.append_click('abc123', click)
    dao.append_click('abc123', click)

    assert redis_client.register_script.call_count == 2
    assert script.call_count == 3
