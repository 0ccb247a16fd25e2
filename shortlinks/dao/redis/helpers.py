import logging
import functools

import redis

from shortlinks.dao.exceptions import DataStoreError


__all__ = []

logger = logging.getLogger(__name__)

# redis-py raises AuthenticationError as a ConnectionError subclass
CONNECTIVITY_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def redis_endpoint(client: redis.Redis) -> str:
    """Describe the server a client talks to as '<host>:<port>/<db>'"""
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def handle_redis_connection_error[F](method: F) -> F:
    """Translate connectivity failures of a Redis DAO method into DataStoreError

    Transport-level errors and values the client can't encode as UTF-8
    (e.g. lone surrogates) are translated. Anything else raised by the method
    (e.g. MappingNotFoundError) propagates unchanged.

    Example:
        >>> @handle_redis_connection_error
        ... def get_by_short_code(self, short_code):
        ...     return self.redis.get(self.keys.link_url_key(short_code))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except CONNECTIVITY_ERRORS as e:
            endpoint = redis_endpoint(self.redis)
            logger.error('Redis call failed.', extra={'operation': method.__name__, 'endpoint': endpoint, 'reason': str(e)})
            raise DataStoreError(f"Can't connect to Redis at {endpoint}.") from e
        except UnicodeError as e:
            logger.error('Redis call rejected its arguments.', extra={'operation': method.__name__, 'reason': str(e)})
            raise DataStoreError(f'Redis client rejected a value that is not valid UTF-8 in {method.__name__}().') from e

    return wrapper
