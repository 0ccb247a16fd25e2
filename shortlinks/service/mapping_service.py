"""Mapping service: shorten long URLs and resolve short codes

The service orchestrates the shortcode generator, the dual cache and the
durable store (DAO). It is the only component that mutates the cache and the
only holder of the DAO.

    shorten(long_url):
        long_to_short HIT  -> return cached code (no I/O)
        MISS               -> generate code -> dao.insert()
            inserted       -> populate both cache tables, return code
            already exists -> a concurrent caller won the race:
                              long_to_short HIT          -> return winner's code
                              dao.get_by_long_url() HIT  -> populate cache, return persisted code
                              otherwise                  -> UnresolvableConflictError / ShortCodeCollisionError
            store failure  -> StoreUnavailableError (cache untouched)

    resolve(short_code):
        short_to_long HIT  -> return cached URL (no I/O)
        MISS               -> dao.get_by_short_code()
            found          -> populate short_to_long, return URL
            not found      -> ShortCodeNotFoundError (cache untouched)
            store failure  -> StoreUnavailableError

The store's uniqueness constraints, not an application lock, serialize
concurrent shorten() calls for the same long URL. Cache locks are only held
inside CacheTable.get()/put() and therefore never across a store call.

Classes:
    MappingService

Example:
    >>> from shortlinks.cache import DualCache
    >>> from shortlinks.dao.sqlite import MappingSQLiteDAO
    >>> service = MappingService(dao=MappingSQLiteDAO(), cache=DualCache())
    >>> code = service.shorten('https://example.com/a')
    >>> service.resolve(code)
    'https://example.com/a'
"""

import logging
from typing import Optional

from beartype import beartype

from shortlinks.cache import DualCache
from shortlinks.constants import Shortcode
from shortlinks.dao.base import MappingBaseDAO
from shortlinks.dao.exceptions import DataStoreError, MappingAlreadyExistsError, MappingNotFoundError
from shortlinks.exceptions import (
    ShortCodeCollisionError,
    ShortCodeNotFoundError,
    StoreUnavailableError,
    UnresolvableConflictError,
)
from shortlinks.models import MappingModel
from shortlinks.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)


class MappingService:
    """Bidirectional URL mapping over a write-through dual cache

    Attributes:
        dao (MappingBaseDAO):
            Durable store. Owned exclusively by this service.
        cache (DualCache):
            In-memory tables. Mutated exclusively by this service.
        seed (int):
            Shortcode generator seed.
    """

    def __init__(self, dao: MappingBaseDAO, cache: Optional[DualCache] = None, seed: int = Shortcode.SEED):
        self.dao = dao
        self.cache = cache if cache is not None else DualCache()
        self.seed = seed

    @beartype
    def shorten(self, long_url: str) -> str:
        """Return the short code for a long URL, creating the mapping if needed

        Args:
            long_url (str):
                Non-empty long URL. Empty input is rejected at the boundary.

        Returns:
            str: the short code of the (single) persisted mapping for long_url.

        Raises:
            StoreUnavailableError:
                If the store fails; nothing is cached.
            UnresolvableConflictError:
                If a concurrent insert won but isn't visible yet. Retry shortly.
            ShortCodeCollisionError:
                If the generated code already belongs to a different long URL.
        """
        short_code = self.cache.long_to_short.get(long_url)
        if short_code is not None:
            logger.debug('Long URL found in cache.', extra={'shortcode': short_code})
            return short_code

        short_code = generate_shortcode(long_url, seed=self.seed)
        logger.debug('Cache miss. Generated short code.', extra={'shortcode': short_code})

        try:
            self.dao.insert(MappingModel(long_url=long_url, short_code=short_code))
        except MappingAlreadyExistsError:
            logger.info('Insert lost a uniqueness race. Resolving conflict.', extra={'shortcode': short_code})
            return self._resolve_conflict(long_url, short_code)
        except DataStoreError as e:
            logger.error('Failed to store mapping.', extra={'shortcode': short_code, 'reason': str(e)})
            raise StoreUnavailableError(f'Failed to store mapping for {long_url!r}.') from e

        # write-through: only after the durable insert succeeded
        self.cache.remember(long_url, short_code)
        logger.info('Shortened long URL.', extra={'shortcode': short_code})
        return short_code

    @beartype
    def resolve(self, short_code: str) -> str:
        """Return the long URL a short code maps to

        Raises:
            ShortCodeNotFoundError:
                If no mapping exists for short_code. The cache is left untouched.
            StoreUnavailableError:
                If the store fails.
        """
        long_url = self.cache.short_to_long.get(short_code)
        if long_url is not None:
            logger.debug('Short code found in cache.', extra={'shortcode': short_code})
            return long_url

        logger.debug('Cache miss. Looking up short code in store.', extra={'shortcode': short_code})
        try:
            mapping = self.dao.get_by_short_code(short_code)
        except MappingNotFoundError as e:
            raise ShortCodeNotFoundError(f"Short code '{short_code}' not found.") from e
        except DataStoreError as e:
            logger.error('Failed to look up short code.', extra={'shortcode': short_code, 'reason': str(e)})
            raise StoreUnavailableError(f"Failed to look up short code '{short_code}'.") from e

        # read-through
        self.cache.short_to_long.put(short_code, mapping.long_url)
        return mapping.long_url

    def _resolve_conflict(self, long_url: str, short_code: str) -> str:
        """Find the mapping that beat this caller's insert

        The winner's code is preferred over the locally generated one, even
        though a deterministic generator usually makes them equal.
        """
        winner = self.cache.long_to_short.get(long_url)
        if winner is not None:
            logger.debug('Conflict resolved from cache.', extra={'shortcode': winner})
            return winner

        try:
            mapping = self.dao.get_by_long_url(long_url)
        except MappingNotFoundError:
            mapping = None
        except DataStoreError as e:
            logger.error('Failed to look up conflicting long URL.', extra={'shortcode': short_code, 'reason': str(e)})
            raise StoreUnavailableError(f'Failed to resolve conflicting insert for {long_url!r}.') from e

        if mapping is not None:
            self.cache.remember(mapping.long_url, mapping.short_code)
            logger.debug('Conflict resolved from store.', extra={'shortcode': mapping.short_code})
            return mapping.short_code

        # The long URL isn't mapped, so the violated constraint may be the short code's
        try:
            holder = self.dao.get_by_short_code(short_code)
        except MappingNotFoundError:
            holder = None
        except DataStoreError as e:
            logger.error('Failed to look up conflicting short code.', extra={'shortcode': short_code, 'reason': str(e)})
            raise StoreUnavailableError(f'Failed to resolve conflicting insert for {long_url!r}.') from e

        if holder is not None and holder.long_url == long_url:
            # the winner committed between the two lookups
            self.cache.remember(holder.long_url, holder.short_code)
            return holder.short_code
        if holder is not None:
            logger.error('Short code collision.', extra={'shortcode': short_code})
            raise ShortCodeCollisionError(f"Short code '{short_code}' already maps to a different long URL.")

        logger.warning('Conflicting insert not yet visible.', extra={'shortcode': short_code})
        raise UnresolvableConflictError(f'A concurrent request is creating the mapping for {long_url!r}. Retry shortly.')
