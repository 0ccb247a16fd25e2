import threading
from collections import Counter

import pytest

from shortlinks.cache import DualCache
from shortlinks.dao.base import MappingBaseDAO
from shortlinks.dao.exceptions import DataStoreError, MappingAlreadyExistsError, MappingNotFoundError
from shortlinks.models import MappingModel
from shortlinks.service import MappingService


class FakeMappingDAO(MappingBaseDAO):
    """In-memory MappingBaseDAO with both uniqueness constraints

    Attributes:
        calls (Counter): number of calls per DAO operation.
        fail_on (set[str]): operations that raise DataStoreError.
        insert_barrier (threading.Barrier | None): makes concurrent inserts start together.
        hide_long_url (bool): get_by_long_url() misses, as if the winner wasn't visible yet.
    """

    def __init__(self):
        self.by_code: dict[str, str] = {}
        self.by_url: dict[str, str] = {}
        self.calls = Counter()
        self.fail_on: set[str] = set()
        self.insert_barrier: threading.Barrier | None = None
        self.hide_long_url = False
        self._lock = threading.Lock()

    @property
    def row_count(self) -> int:
        return len(self.by_code)

    def _enter(self, operation: str) -> None:
        with self._lock:
            self.calls[operation] += 1
        if operation in self.fail_on:
            raise DataStoreError(f'{operation} failed')

    def insert(self, mapping: MappingModel, **kwargs) -> 'FakeMappingDAO':
        self._enter('insert')
        if self.insert_barrier is not None:
            self.insert_barrier.wait(timeout=5)
        with self._lock:
            if mapping.short_code in self.by_code or mapping.long_url in self.by_url:
                raise MappingAlreadyExistsError(f"Mapping for code '{mapping.short_code}' already exists.")
            self.by_code[mapping.short_code] = mapping.long_url
            self.by_url[mapping.long_url] = mapping.short_code
        return self

    def get_by_short_code(self, short_code: str, **kwargs) -> MappingModel:
        self._enter('get_by_short_code')
        with self._lock:
            long_url = self.by_code.get(short_code)
        if long_url is None:
            raise MappingNotFoundError(f"Mapping with code '{short_code}' not found.")
        return MappingModel(long_url=long_url, short_code=short_code)

    def get_by_long_url(self, long_url: str, **kwargs) -> MappingModel:
        self._enter('get_by_long_url')
        with self._lock:
            short_code = None if self.hide_long_url else self.by_url.get(long_url)
        if short_code is None:
            raise MappingNotFoundError(f"Mapping for URL '{long_url}' not found.")
        return MappingModel(long_url=long_url, short_code=short_code)

    def seed(self, long_url: str, short_code: str) -> None:
        """Persist a mapping behind the service's back (e.g. written by another instance)"""
        self.by_code[short_code] = long_url
        self.by_url[long_url] = short_code


@pytest.fixture
def fake_dao() -> FakeMappingDAO:
    return FakeMappingDAO()


@pytest.fixture
def cache() -> DualCache:
    return DualCache()


@pytest.fixture
def service(fake_dao, cache) -> MappingService:
    return MappingService(dao=fake_dao, cache=cache)
