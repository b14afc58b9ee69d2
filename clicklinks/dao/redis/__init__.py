from clicklinks.dao.redis.redis_key_schema import RedisKeySchema
from clicklinks.dao.redis.mixins import RedisClientMixin
from clicklinks.dao.redis.short_link_redis_dao import ShortLinkRedisDAO


__all__ = [
    'RedisKeySchema',
    'ShortLinkRedisDAO',
    'RedisClientMixin',
]
