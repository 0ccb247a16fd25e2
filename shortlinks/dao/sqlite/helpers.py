import functools
import sqlite3

from shortlinks.dao.exceptions import DataStoreError, MappingAlreadyExistsError


__all__ = []


def handle_sqlite_error[F](method: F) -> F:
    """Wrap SQLite-interacting DAO methods to classify sqlite3 errors

    Args:
        method (Callable[..., Any]):
            DAO method executing SQL statements which may raise sqlite3.Error.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises MappingAlreadyExistsError on uniqueness
            constraint violations and DataStoreError on any other SQLite failure,
            including parameters SQLite can't encode as UTF-8 (e.g. lone surrogates).

    Example:
        >>> @handle_sqlite_error
        ... def insert(self, mapping):
        ...     self.connection.execute(INSERT_MAPPING_SQL, (mapping.long_url, mapping.short_code))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except sqlite3.IntegrityError as e:
            raise MappingAlreadyExistsError(f'Uniqueness constraint violated in SQLite database {self.database}: {e}') from e
        except sqlite3.Error as e:
            raise DataStoreError(f'SQLite database {self.database} failed: {e}') from e
        except UnicodeError as e:
            # sqlite3 encodes text parameters before executing, outside sqlite3.Error
            raise DataStoreError(f'SQLite database {self.database} rejected a parameter that is not valid UTF-8.') from e

    return wrapper
