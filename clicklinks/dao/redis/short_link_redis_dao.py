"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of ShortLinkBaseDAO, letting
several processes (e.g. concurrent Lambda containers) share one link store.

Storage layout (see RedisKeySchema):
    <prefix>:links:<shortcode>:record  -> link JSON without clicks (string)
    <prefix>:links:<shortcode>:clicks  -> click JSON documents in append order (list)

Neither key carries a Redis TTL: expired links must remain inspectable.

Responsibilities:
    - Insert links with an atomic insert-if-absent;
    - Append clicks atomically, only to existing links;
    - Retrieve a link together with its click ledger in one transaction;
    - Translate Redis failures into DAO exceptions.

Classes:
    ShortLinkRedisDAO:
        DAO for storing and retrieving ShortLinkModel in a Redis datastore.

Example:
    >>> from clicklinks.dao.redis import ShortLinkRedisDAO

    >>> dao = ShortLinkRedisDAO(prefix='clicklinks:dev')
    >>> dao.insert(short_link)
    <ShortLinkRedisDAO prefix='clicklinks:dev'>

    >>> dao.get('abc123').target
    'https://example.com/page'

    >>> dao.append_click('abc123', click)
    1
"""

import json

from beartype import beartype

from clicklinks.models import ShortLinkModel, ClickEventModel
from clicklinks.dao.base import ShortLinkBaseDAO
from clicklinks.dao.redis.mixins import RedisClientMixin
from clicklinks.dao.redis.helpers import handle_redis_errors
from clicklinks.dao.exceptions import DataStoreError, ShortLinkAlreadyExistsError, ShortLinkNotFoundError


# KEYS[1]: link record key, KEYS[2]: link clicks key
# ARGV[1]: link record JSON, ARGV[2..n]: initial click JSONs
INSERT_LINK_SCRIPT = """
if not redis.call('SET', KEYS[1], ARGV[1], 'NX') then
    return 0
end
for i = 2, #ARGV do
    redis.call('RPUSH', KEYS[2], ARGV[i])
end
return 1
"""

# KEYS[1]: link record key, KEYS[2]: link clicks key
# ARGV[1]: click JSON
APPEND_CLICK_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return -1
end
return redis.call('RPUSH', KEYS[2], ARGV[1])
"""


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short links

    This class implements the ShortLinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        exists(shortcode: str, **kwargs) -> bool:
            Check whether a shortcode is allocated.

        get(shortcode: str, **kwargs) -> ShortLinkModel:
            Retrieve a link and its clicks.
            Raises ShortLinkNotFoundError when the shortcode doesn't exist.

        insert(short_link: ShortLinkModel, **kwargs) -> ShortLinkRedisDAO:
            Insert a link if its shortcode is free.
            Raises ShortLinkAlreadyExistsError when the shortcode exists.

        append_click(shortcode: str, click: ClickEventModel, **kwargs) -> int:
            Append a click and return the link's new click total.
            Raises ShortLinkNotFoundError when the shortcode doesn't exist.

        All methods raise DataStoreError on Redis failures.
    """

    @handle_redis_errors
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_record_key(shortcode)))

    @handle_redis_errors
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        """Retrieve a stored short link by shortcode

        The record and its click list are read in a single Redis transaction,
        so the returned ledger is never torn by a concurrent append.

        Raises:
            ShortLinkNotFoundError:
                If the short link does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur or the record is corrupted.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(self.keys.link_record_key(shortcode))
            pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            record, clicks = pipe.execute()

        if record is None:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")

        try:
            return ShortLinkModel.from_dict(json.loads(record), clicks=[json.loads(click) for click in clicks])
        except (ValueError, KeyError, TypeError) as e:
            raise DataStoreError(f"Short link with code '{shortcode}' is corrupted.") from e

    @handle_redis_errors
    @beartype
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkRedisDAO':
        """Insert a short link into Redis if its shortcode is free

        NOTE: SET NX and the RPUSH of initial clicks run inside one Lua script.
              A plain EXISTS followed by SET would let two concurrent requests
              both see a free shortcode:

              (lambda 1): EXISTS <app>:links:<shortcode>:record  => 0
              (lambda 2): EXISTS <app>:links:<shortcode>:record  => 0
              (lambda 1): SET <app>:links:<shortcode>:record <link 1>
              (lambda 2): SET <app>:links:<shortcode>:record <link 2>  => link 1 is lost

        Raises:
            ShortLinkAlreadyExistsError:
                If a short link with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        record = json.dumps(short_link.to_dict(include_clicks=False))
        clicks = [json.dumps(click.to_dict()) for click in short_link.clicks]

        inserted = self._script(INSERT_LINK_SCRIPT)(
            keys=[self.keys.link_record_key(short_link.shortcode), self.keys.link_clicks_key(short_link.shortcode)],
            args=[record, *clicks],
        )
        if not inserted:
            raise ShortLinkAlreadyExistsError(f"Short link with code '{short_link.shortcode}' already exists.")
        return self

    @handle_redis_errors
    @beartype
    def append_click(self, shortcode: str, click: ClickEventModel, **kwargs) -> int:
        """Append a click to a short link's click list

        The existence check and RPUSH run inside one Lua script, so a click is
        never pushed for a shortcode that doesn't exist.

        Returns:
            int: total clicks recorded for the link after the append.

        Raises:
            ShortLinkNotFoundError:
                If no short link with the given shortcode exists.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        total_clicks = self._script(APPEND_CLICK_SCRIPT)(
            keys=[self.keys.link_record_key(shortcode), self.keys.link_clicks_key(shortcode)],
            args=[json.dumps(click.to_dict())],
        )
        if total_clicks < 0:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
        return int(total_clicks)
