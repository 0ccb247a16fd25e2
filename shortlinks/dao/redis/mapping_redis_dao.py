"""Data Access Object (DAO) implementation for managing mappings in Redis

This module provides a Redis-based implementation of MappingBaseDAO. Each
mapping is stored under two keys, one per lookup direction:

    <prefix>:links:<short code>:url     -> long URL
    <prefix>:targets:<long URL>:code    -> short code

Neither key carries a TTL: mappings are immutable and never expire.

Responsibilities:
    - Insert both directions of a mapping atomically;
    - Enforce uniqueness of the short code and the long URL;
    - Retrieve mappings by either side;
    - Raise appropriate DAO exceptions.

Classes:
    MappingRedisDAO:
        DAO for storing and retrieving MappingModel in a Redis datastore.

Example:
    >>> from shortlinks.models import MappingModel
    >>> from shortlinks.dao.redis import MappingRedisDAO

    >>> dao = MappingRedisDAO(prefix="shortlinks:dev")

    >>> mapping = MappingModel(long_url="https://example.com/page", short_code="9f3c1a2b7d4e5f60")
    >>> dao.insert(mapping)
    <MappingRedisDAO>

    >>> dao.get_by_short_code("9f3c1a2b7d4e5f60").long_url
    'https://example.com/page'
    >>> dao.get_by_long_url("https://example.com/page").short_code
    '9f3c1a2b7d4e5f60'
"""

import logging

from beartype import beartype

from shortlinks.models import MappingModel
from shortlinks.dao.base import MappingBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_connection_error
from shortlinks.dao.exceptions import MappingAlreadyExistsError, MappingNotFoundError


logger = logging.getLogger(__name__)


class MappingRedisDAO(RedisClientMixin, MappingBaseDAO):
    """Redis-based Data Access Object (DAO) for managing URL mappings

    This class implements the MappingBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(mapping: MappingModel, **kwargs) -> MappingRedisDAO:
            Insert both directions of a mapping with a single MSETNX.
            Raises MappingAlreadyExistsError when either key already exists.
            Raises DataStoreError on connectivity issues with Redis.

        get_by_short_code(short_code: str, **kwargs) -> MappingModel:
            Retrieve a mapping by short code.
            Raises MappingNotFoundError when the short code doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.

        get_by_long_url(long_url: str, **kwargs) -> MappingModel:
            Retrieve a mapping by long URL.
            Raises MappingNotFoundError when the long URL isn't mapped.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, mapping: MappingModel, **kwargs) -> 'MappingRedisDAO':
        """Insert a mapping into Redis

        Both keys are written with a single MSETNX command, which sets all
        keys or none of them. This acts as the uniqueness constraint on both
        the short code and the long URL:

            (caller 1): MappingRedisDAO.insert():
                        -> MSETNX links:<code>:url <url> targets:<url>:code <code>  => 1
            (caller 2): MappingRedisDAO.insert():
                        -> MSETNX links:<code>:url <url> targets:<url>:code <code>  => 0
                        => MappingAlreadyExistsError, nothing written

        Args:
            mapping (MappingModel):
                MappingModel instance representing the URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            MappingRedisDAO: self (for method chaining)

        Raises:
            MappingAlreadyExistsError:
                If the short code or the long URL is already mapped.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        inserted = self.redis.msetnx(self.keys.mapping_keys(mapping))
        if not inserted:
            raise MappingAlreadyExistsError(f"Mapping for code '{mapping.short_code}' or URL '{mapping.long_url}' already exists.")

        logger.debug('Inserted mapping into Redis.', extra={'shortcode': mapping.short_code})
        return self

    @handle_redis_connection_error
    @beartype
    def get_by_short_code(self, short_code: str, **kwargs) -> MappingModel:
        """Retrieve a stored mapping by short code

        Args:
            short_code (str):
                The short code identifying the mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            MappingModel:
                The retrieved MappingModel instance.

        Raises:
            MappingNotFoundError:
                If the short code does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        long_url = self.redis.get(self.keys.link_url_key(short_code))
        if long_url is None:
            raise MappingNotFoundError(f"Mapping with code '{short_code}' not found.")

        return MappingModel(long_url=long_url, short_code=short_code)

    @handle_redis_connection_error
    @beartype
    def get_by_long_url(self, long_url: str, **kwargs) -> MappingModel:
        """Retrieve a stored mapping by long URL

        Args:
            long_url (str):
                The long URL identifying the mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            MappingModel:
                The retrieved MappingModel instance.

        Raises:
            MappingNotFoundError:
                If the long URL is not mapped in Redis.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        short_code = self.redis.get(self.keys.target_code_key(long_url))
        if short_code is None:
            raise MappingNotFoundError(f"Mapping for URL '{long_url}' not found.")

        return MappingModel(long_url=long_url, short_code=short_code)
