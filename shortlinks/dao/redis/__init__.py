from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.mapping_redis_dao import MappingRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'MappingRedisDAO',
]
