import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from clicklinks.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def _redis_address(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_errors[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to translate Redis failures

    Connection problems (refused connections, timeouts) and server-side command
    failures (e.g. a Lua script error, WRONGTYPE on a corrupted key) are both
    reported as DataStoreError, so callers only handle DAO exceptions.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on Redis failures.

    Example:
        >>> @handle_redis_errors
        ... def exists(self, shortcode):
        ...     return self.redis.exists(self.keys.link_record_key(shortcode))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {_redis_address(self.redis)}.") from e
        except redis.exceptions.ResponseError as e:
            raise DataStoreError(f'Redis at {_redis_address(self.redis)} rejected command: {e}') from e

    return wrapper
