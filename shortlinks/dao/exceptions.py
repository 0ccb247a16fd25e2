"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    MappingNotFoundError:
        Raised when a MappingModel is not found in the data store.

    MappingAlreadyExistsError:
        Raised when an insert violates a uniqueness constraint (short code or long URL).

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, locked database, etc.).

Example:
    >>> from shortlinks.dao.exceptions import MappingNotFoundError
    >>> raise MappingNotFoundError("Mapping with short code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    shortlinks.dao.exceptions.MappingNotFoundError: Mapping with short code 'abc123' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class MappingNotFoundError(DAOError):
    """Exception raised when a MappingModel is not found in the data store."""

    pass


class MappingAlreadyExistsError(DAOError):
    """Exception raised when an insert violates a uniqueness constraint in the data store.

    Either the short code or the long URL is already mapped.
    """

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, locked database, etc.
    """

    pass
