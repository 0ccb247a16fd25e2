"""Unit tests for the MappingService

Test coverage includes:

1. Shortening
   - Ensures shorten() is idempotent and persists exactly one mapping per long URL.
   - Ensures both cache directions are populated after a confirmed insert.
   - Ensures distinct long URLs receive distinct short codes.

2. Resolving
   - Ensures resolve(shorten(url)) round-trips.
   - Ensures a warm resolve is served from the cache without a store query.
   - Ensures unknown short codes raise ShortCodeNotFoundError and leave the cache untouched.
   - Ensures a cold resolve reads through into short_to_long only.

3. Concurrent shortening
   - Ensures N concurrent callers with the same long URL get the same code and one row.

4. Conflict resolution
   - Ensures a lost insert race is resolved from the cache, from the long URL lookup
     and from the short code lookup.
   - Ensures an invisible winner raises UnresolvableConflictError.
   - Ensures a short code held by another long URL raises ShortCodeCollisionError.

5. Store failures
   - Ensures DataStoreError surfaces as StoreUnavailableError with nothing cached.
   - Ensures store failures while resolving a conflict are logged with their reason.

6. Parameter validation
   - Ensures non-string arguments raise TypeError or BeartypeCallHintParamViolation.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from shortlinks.cache import DualCache
from shortlinks.dao.exceptions import MappingAlreadyExistsError
from shortlinks.exceptions import (
    InternalMappingError,
    ShortCodeCollisionError,
    ShortCodeNotFoundError,
    StoreUnavailableError,
    UnresolvableConflictError,
)
from shortlinks.service import MappingService
from shortlinks.utils import generate_shortcode


LONG_URL = 'https://example.com/blog/article-123'


# -------------------------------
# 1. Shortening
# -------------------------------


def test_shorten_returns_generated_code(service):
    """Ensure shorten() returns the deterministic code for the long URL"""
    assert service.shorten(LONG_URL) == generate_shortcode(LONG_URL)


def test_shorten_is_idempotent(service, fake_dao):
    """Ensure shortening the same long URL twice yields one code and one row"""
    first = service.shorten(LONG_URL)
    second = service.shorten(LONG_URL)

    assert first == second
    assert fake_dao.row_count == 1
    assert fake_dao.calls['insert'] == 1


def test_shorten_populates_both_cache_tables(service, cache):
    """Ensure a confirmed insert writes through to both directions"""
    code = service.shorten(LONG_URL)

    assert cache.long_to_short.get(LONG_URL) == code
    assert cache.short_to_long.get(code) == LONG_URL


def test_shorten_uses_configured_seed(fake_dao):
    """Ensure the service generates codes with its configured seed"""
    service = MappingService(dao=fake_dao, cache=DualCache(), seed=42)
    assert service.shorten(LONG_URL) == generate_shortcode(LONG_URL, seed=42)


def test_shorten_creates_own_cache_when_none_given(fake_dao):
    """Ensure a MappingService without an injected cache owns a fresh DualCache"""
    service = MappingService(dao=fake_dao)
    assert isinstance(service.cache, DualCache)
    assert len(service.cache.long_to_short) == 0


def test_concrete_scenario(service):
    """Ensure two long URLs get distinct codes that resolve back, and an unknown code is not found"""
    c1 = service.shorten('https://example.com/a')
    c2 = service.shorten('https://example.com/b')

    assert c1 != c2
    assert service.resolve(c1) == 'https://example.com/a'
    assert service.resolve(c2) == 'https://example.com/b'
    with pytest.raises(ShortCodeNotFoundError):
        service.resolve('zzzzzz')


# -------------------------------
# 2. Resolving
# -------------------------------


@pytest.mark.parametrize(
    'long_url',
    [
        'https://example.com',
        'https://example.com/path?query=1&other=two#fragment',
        'https://例え.jp/パス',
        'not even a url',
    ],
)
def test_resolve_round_trip(service, long_url):
    """Ensure resolve(shorten(url)) returns url"""
    assert service.resolve(service.shorten(long_url)) == long_url


def test_warm_resolve_skips_store(service, fake_dao):
    """Ensure resolve() right after shorten() is served from the cache"""
    code = service.shorten(LONG_URL)

    assert service.resolve(code) == LONG_URL
    assert fake_dao.calls['get_by_short_code'] == 0


def test_resolve_not_found_leaves_cache_untouched(service, cache):
    """Ensure unknown short codes raise ShortCodeNotFoundError, not an internal error"""
    with pytest.raises(ShortCodeNotFoundError) as exc_info:
        service.resolve('doesNotExist')

    assert not isinstance(exc_info.value, InternalMappingError)
    assert len(cache.long_to_short) == 0
    assert len(cache.short_to_long) == 0


def test_cold_resolve_reads_through(service, fake_dao, cache):
    """Ensure a store hit warms short_to_long only, and the next resolve skips the store"""
    fake_dao.seed(LONG_URL, 'abc123')

    assert service.resolve('abc123') == LONG_URL
    assert cache.short_to_long.get('abc123') == LONG_URL
    assert cache.long_to_short.get(LONG_URL) is None

    assert service.resolve('abc123') == LONG_URL
    assert fake_dao.calls['get_by_short_code'] == 1


# -------------------------------
# 3. Concurrent shortening
# -------------------------------


@pytest.mark.parametrize('callers', [2, 8, 32])
def test_concurrent_shorten_same_long_url(service, fake_dao, callers):
    """Ensure concurrent callers all get the same code while only one insert wins"""
    fake_dao.insert_barrier = threading.Barrier(callers)

    with ThreadPoolExecutor(max_workers=callers) as pool:
        codes = list(pool.map(lambda _: service.shorten(LONG_URL), range(callers)))

    assert len(set(codes)) == 1
    assert fake_dao.row_count == 1
    assert fake_dao.calls['insert'] == callers


def test_concurrent_shorten_and_resolve(service):
    """Ensure mixed shorten/resolve traffic over many long URLs stays consistent"""
    long_urls = [f'https://example.com/{i}' for i in range(50)]

    def roundtrip(long_url):
        return service.resolve(service.shorten(long_url))

    with ThreadPoolExecutor(max_workers=8) as pool:
        resolved = list(pool.map(roundtrip, long_urls * 4))

    assert resolved == long_urls * 4


# -------------------------------
# 4. Conflict resolution
# -------------------------------


def test_conflict_resolved_from_long_url_lookup(service, fake_dao, cache):
    """Ensure a mapping persisted by another instance is returned and cached"""
    fake_dao.seed(LONG_URL, 'winner0000000001')

    assert service.shorten(LONG_URL) == 'winner0000000001'
    assert cache.long_to_short.get(LONG_URL) == 'winner0000000001'
    assert cache.short_to_long.get('winner0000000001') == LONG_URL
    assert fake_dao.calls['get_by_long_url'] == 1
    assert fake_dao.row_count == 1


def test_conflict_resolved_from_cache(fake_dao, cache, monkeypatch):
    """Ensure the cache is consulted first once an insert loses the race"""
    service = MappingService(dao=fake_dao, cache=cache)

    def losing_insert(mapping, **kwargs):
        # a concurrent caller in this process finished first
        cache.remember(mapping.long_url, mapping.short_code)
        raise MappingAlreadyExistsError('already exists')

    monkeypatch.setattr(fake_dao, 'insert', losing_insert)

    assert service.shorten(LONG_URL) == generate_shortcode(LONG_URL)
    assert fake_dao.calls['get_by_long_url'] == 0


def test_conflict_resolved_from_short_code_lookup(service, fake_dao, cache):
    """Ensure a winner visible only by short code is accepted when it maps the same long URL"""
    code = generate_shortcode(LONG_URL)
    fake_dao.seed(LONG_URL, code)
    fake_dao.hide_long_url = True

    assert service.shorten(LONG_URL) == code
    assert cache.long_to_short.get(LONG_URL) == code
    assert fake_dao.calls['get_by_short_code'] == 1


def test_conflict_unresolvable(service, fake_dao, cache):
    """Ensure UnresolvableConflictError when neither cache nor store shows the winner"""
    fake_dao.seed(LONG_URL, 'winner0000000001')
    fake_dao.hide_long_url = True

    with pytest.raises(UnresolvableConflictError, match='Retry shortly'):
        service.shorten(LONG_URL)

    assert len(cache.long_to_short) == 0
    assert len(cache.short_to_long) == 0


def test_conflict_short_code_collision(service, fake_dao, cache):
    """Ensure a generated code already mapping another long URL is reported, not returned"""
    code = generate_shortcode(LONG_URL)
    fake_dao.seed('https://example.com/someone-else', code)

    with pytest.raises(ShortCodeCollisionError):
        service.shorten(LONG_URL)

    assert cache.long_to_short.get(LONG_URL) is None
    assert cache.short_to_long.get(code) is None


# -------------------------------
# 5. Store failures
# -------------------------------


def test_shorten_store_failure(service, fake_dao, cache):
    """Ensure an insert failure surfaces as StoreUnavailableError and nothing is cached"""
    fake_dao.fail_on = {'insert'}

    with pytest.raises(StoreUnavailableError):
        service.shorten(LONG_URL)

    assert len(cache.long_to_short) == 0
    assert len(cache.short_to_long) == 0


@pytest.mark.parametrize('operation', ['get_by_long_url', 'get_by_short_code'])
def test_conflict_resolution_store_failure(service, fake_dao, cache, operation, caplog):
    """Ensure lookup failures while resolving a conflict surface as StoreUnavailableError and are logged"""
    caplog.set_level(logging.ERROR, logger='shortlinks.service.mapping_service')
    fake_dao.seed(LONG_URL, generate_shortcode(LONG_URL))
    fake_dao.hide_long_url = True
    fake_dao.fail_on = {operation}

    with pytest.raises(StoreUnavailableError):
        service.shorten(LONG_URL)

    assert len(cache.long_to_short) == 0

    failures = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(failures) == 1
    assert failures[0].reason == f'{operation} failed'
    assert failures[0].shortcode == generate_shortcode(LONG_URL)


def test_resolve_store_failure(service, fake_dao, cache):
    """Ensure a lookup failure surfaces as StoreUnavailableError, distinct from not found"""
    fake_dao.fail_on = {'get_by_short_code'}

    with pytest.raises(StoreUnavailableError):
        service.resolve('abc123')

    assert len(cache.short_to_long) == 0


def test_service_recovers_after_store_failure(service, fake_dao):
    """Ensure a failed shorten doesn't poison later attempts"""
    fake_dao.fail_on = {'insert'}
    with pytest.raises(StoreUnavailableError):
        service.shorten(LONG_URL)

    fake_dao.fail_on = set()
    assert service.resolve(service.shorten(LONG_URL)) == LONG_URL


# -------------------------------
# 6. Parameter validation
# -------------------------------


@pytest.mark.parametrize('value', [None, 123, b'https://example.com', ['https://example.com']])
def test_shorten_invalid_type(service, value):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        service.shorten(value)


@pytest.mark.parametrize('value', [None, 123, b'abc123'])
def test_resolve_invalid_type(service, value):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        service.resolve(value)
