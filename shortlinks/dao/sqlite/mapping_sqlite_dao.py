"""Data Access Object (DAO) implementation for managing mappings in SQLite

This module provides a SQLite-based implementation of MappingBaseDAO backed by
a single `url` table with unique indexes on both `short_code` and `long_url`
(see shortlinks.dao.sqlite.schema). The schema is created idempotently when
the DAO is initialized.

Classes:
    MappingSQLiteDAO:
        DAO for storing and retrieving MappingModel in a SQLite database.

Example:
    >>> from shortlinks.models import MappingModel
    >>> from shortlinks.dao.sqlite import MappingSQLiteDAO

    >>> dao = MappingSQLiteDAO(sqlite_database='/tmp/urlshortener.db')
    >>> dao.insert(MappingModel(long_url='https://example.com', short_code='9f3c1a2b7d4e5f60'))
    <MappingSQLiteDAO>
    >>> dao.get_by_short_code('9f3c1a2b7d4e5f60').long_url
    'https://example.com'
"""

import logging
import sqlite3
import threading
from typing import Optional

from beartype import beartype

from shortlinks.models import MappingModel
from shortlinks.dao.base import MappingBaseDAO
from shortlinks.dao.exceptions import DataStoreError, MappingNotFoundError
from shortlinks.dao.sqlite.helpers import handle_sqlite_error
from shortlinks.dao.sqlite.schema import (
    SCHEMA_SQL,
    INSERT_MAPPING_SQL,
    SELECT_BY_SHORT_CODE_SQL,
    SELECT_BY_LONG_URL_SQL,
)


logger = logging.getLogger(__name__)


class MappingSQLiteDAO(MappingBaseDAO):
    """SQLite-based Data Access Object (DAO) for managing URL mappings

    One connection is shared by all threads of the process. Statements are
    serialized by a DAO-private lock; the connection runs in autocommit mode,
    so a successful insert is durable before insert() returns.

    Attributes:
        connection (sqlite3.Connection):
            Connection to the SQLite database.
        database (str):
            Database path (or ':memory:'), used in error messages.

    Methods:
        insert(mapping: MappingModel, **kwargs) -> MappingSQLiteDAO:
            Insert a mapping row.
            Raises MappingAlreadyExistsError on a uniqueness constraint violation.
            Raises DataStoreError on any other SQLite failure.

        get_by_short_code(short_code: str, **kwargs) -> MappingModel:
            Raises MappingNotFoundError when the short code doesn't exist.

        get_by_long_url(long_url: str, **kwargs) -> MappingModel:
            Raises MappingNotFoundError when the long URL isn't mapped.
    """

    def __init__(
        self,
        sqlite_database: str = ':memory:',
        sqlite_timeout: float = 5.0,
        sqlite_connection: Optional[sqlite3.Connection] = None,
    ):
        """Initialize a SQLite-based DAO and ensure the schema exists

        Args:
            sqlite_database (str):
                Path to the database file. Defaults to ':memory:'.

            sqlite_timeout (float):
                Seconds to wait on a locked database before failing. Defaults to 5.0.

            sqlite_connection (Optional[sqlite3.Connection]):
                Pre-initialized connection. If None, a new connection is created.

        Raises:
            DataStoreError:
                If the database can't be opened or the schema can't be created.
        """
        self.database = sqlite_database
        self._lock = threading.Lock()

        if sqlite_connection is None:
            try:
                sqlite_connection = sqlite3.connect(
                    sqlite_database,
                    timeout=float(sqlite_timeout),
                    check_same_thread=False,
                    isolation_level=None,
                )
            except sqlite3.Error as e:
                raise DataStoreError(f"Can't open SQLite database {sqlite_database}.") from e

        self.connection = sqlite_connection
        self._migrate()

    @handle_sqlite_error
    def _migrate(self) -> None:
        with self._lock:
            self.connection.executescript(SCHEMA_SQL)

    @handle_sqlite_error
    @beartype
    def insert(self, mapping: MappingModel, **kwargs) -> 'MappingSQLiteDAO':
        with self._lock:
            self.connection.execute(INSERT_MAPPING_SQL, (mapping.long_url, mapping.short_code))

        logger.debug('Inserted mapping into SQLite.', extra={'shortcode': mapping.short_code})
        return self

    @handle_sqlite_error
    @beartype
    def get_by_short_code(self, short_code: str, **kwargs) -> MappingModel:
        row = self._fetch_one(SELECT_BY_SHORT_CODE_SQL, short_code)
        if row is None:
            raise MappingNotFoundError(f"Mapping with code '{short_code}' not found.")
        return MappingModel(long_url=row[0], short_code=row[1])

    @handle_sqlite_error
    @beartype
    def get_by_long_url(self, long_url: str, **kwargs) -> MappingModel:
        row = self._fetch_one(SELECT_BY_LONG_URL_SQL, long_url)
        if row is None:
            raise MappingNotFoundError(f"Mapping for URL '{long_url}' not found.")
        return MappingModel(long_url=row[0], short_code=row[1])

    def _fetch_one(self, sql: str, value: str) -> tuple[str, str] | None:
        with self._lock:
            return self.connection.execute(sql, (value,)).fetchone()
