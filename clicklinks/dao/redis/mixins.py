"""Redis mixin providing shared client initialization and connectivity checks.

Responsibilities:
    - Initialize Redis client (or adopt an injected one)
    - Healthcheck Redis client
    - Register server-side Lua scripts used for atomic multi-key operations

Classes:
    - RedisClientMixin: Base mixin to inject Redis key management, client setup & healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
        ...     pass
        ...
        >>> dao = ShortLinkRedisDAO(redis_host='redis.internal', prefix='clicklinks:prod')
        >>> dao
        <ShortLinkRedisDAO prefix='clicklinks:prod'>
"""

from typing import Optional

import redis
from redis.commands.core import Script

from clicklinks.dao.redis.helpers import _redis_address
from clicklinks.dao.redis.redis_key_schema import RedisKeySchema
from clicklinks.dao.exceptions import DataStoreError


DEFAULT_SOCKET_TIMEOUT = 5.0  # seconds


class RedisClientMixin:
    """Redis client setup, health check and script registry for Redis-backed DAOs.

    Connection parameters mirror the keys of the AppConfig `redis` section,
    prefixed with `redis_` (see clicklinks.dao.factory). A pre-built client can
    be injected via `redis_client` instead, in which case they are ignored.

    The client is PINGed on construction, so a misconfigured DAO fails when
    it's built rather than halfway through a request.

    Attributes:
        redis (redis.Redis):
            Active Redis client instance used by subclasses.
        keys (RedisKeySchema):
            Namespaced key builder (`prefix` is typically '<app name>:<app env>').
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = DEFAULT_SOCKET_TIMEOUT,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                socket_connect_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        self._scripts: dict[str, Script] = {}

        self._healthcheck()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} prefix={self.keys.prefix!r}>'

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: True if Redis answered. False if it didn't and raise_error=False.

        Raises:
            DataStoreError:
                If Redis is unreachable and raise_error=True.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(f"Can't connect to Redis at {_redis_address(self.redis)}. Check the provided configuration parameters.") from e
        return True

    def _script(self, source: str) -> Script:
        """Return a registered Lua script, registering it on first use

        redis-py scripts are invoked via EVALSHA and transparently fall back to
        loading the script if the server doesn't know its SHA yet.
        """
        if source not in self._scripts:
            self._scripts[source] = self.redis.register_script(source)
        return self._scripts[source]
