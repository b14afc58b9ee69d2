"""Build the ShortLink DAO selected by the application's config

Functions:
    short_link_dao(app_config: dict) -> ShortLinkBaseDAO
        Build a DAO for the active backend in a config returned by load_config().

Supported backends:
    redis:  ShortLinkRedisDAO(redis_<key>=<value>, prefix=app_prefix())
    memory: ShortLinkMemoryDAO, one per app prefix, reused by warm invocations
            of the same container (links are NOT shared between containers)

Example:
    >>> short_link_dao({'redis': {'host': 'localhost', 'port': 6379, 'db': 0}})
    <ShortLinkRedisDAO prefix='clicklinks:local'>
"""

import logging

from clicklinks.dao.base import ShortLinkBaseDAO
from clicklinks.dao.memory import ShortLinkMemoryDAO
from clicklinks.dao.redis import ShortLinkRedisDAO
from clicklinks.utils.config import app_prefix


logger = logging.getLogger(__name__)

_memory_daos: dict[str | None, ShortLinkMemoryDAO] = {}


def short_link_dao(app_config: dict) -> ShortLinkBaseDAO:
    """Build the DAO for the (single) backend section of `app_config`

    Raises:
        ValueError:
            If the config doesn't name exactly one supported backend.
    """
    if len(app_config) != 1:
        raise ValueError(f'Expected exactly one active backend in config (given: {sorted(app_config)}).')

    [(backend, settings)] = app_config.items()
    prefix = app_prefix()

    if backend == 'redis':
        logger.debug('Using Redis as the backend database for short links.')
        redis_config = {f'redis_{k}': v for k, v in (settings or {}).items()}
        return ShortLinkRedisDAO(**redis_config, prefix=prefix)

    if backend == 'memory':
        logger.debug('Using process memory as the backend database for short links.')
        return _memory_daos.setdefault(prefix, ShortLinkMemoryDAO())

    raise ValueError(f"Unsupported short link backend '{backend}'.")
