"""Abstract base class for Mapping data access objects (DAOs).

This class establishes a consistent contract for all Mapping DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, SQLite).

Responsibilities:
    - Provide an interface for inserting and retrieving MappingModel objects.
    - Enforce uniqueness of both the short code and the long URL on insert.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlinks.models import MappingModel
        >>> from shortlinks.dao.sqlite import MappingSQLiteDAO

        >>> dao = MappingSQLiteDAO(sqlite_database=':memory:')

        >>> mapping = MappingModel(
        ...     long_url="https://example.com/blog/article-123",
        ...     short_code="9f3c1a2b7d4e5f60",
        ... )
        >>> dao.insert(mapping)

        >>> dao.get_by_short_code("9f3c1a2b7d4e5f60").long_url
        'https://example.com/blog/article-123'

        >>> dao.get_by_long_url("https://example.com/blog/article-123").short_code
        '9f3c1a2b7d4e5f60'
"""

from abc import ABC, abstractmethod

from shortlinks.models import MappingModel


class MappingBaseDAO(ABC):
    """Interface for Mapping data access objects (DAOs).

    Methods:
        insert(mapping: MappingModel, **kwargs) -> MappingBaseDAO:
            Insert a new MappingModel into the data store.
            Raises MappingAlreadyExistsError if the short code or long URL is already mapped.
            Raises DataStoreError on connection or write failure.

        get_by_short_code(short_code: str, **kwargs) -> MappingModel:
            Retrieve a MappingModel from the data store by short code.
            Raises MappingNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        get_by_long_url(long_url: str, **kwargs) -> MappingModel:
            Retrieve a MappingModel from the data store by long URL.
            Raises MappingNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., MappingRedisDAO or
        MappingSQLiteDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Mappings are immutable and never expire. The DAO does not
          provide an interface to update or delete entries.
        - The insert must be atomic with respect to both uniqueness
          constraints: a failed insert leaves no partial mapping behind.
    """

    @abstractmethod
    def insert(self, mapping: MappingModel, **kwargs) -> 'MappingBaseDAO':
        """Insert a new MappingModel into the data store.

        Args:
            mapping (MappingModel):
                The MappingModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            MappingBaseDAO: self (for method chaining)

        Raises:
            MappingAlreadyExistsError:
                If the short code or the long URL is already mapped.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get_by_short_code(self, short_code: str, **kwargs) -> MappingModel:
        """Retrieve a MappingModel from the data store by its short code.

        Args:
            short_code (str):
                The short code of the MappingModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            MappingModel: The persisted mapping.

        Raises:
            MappingNotFoundError:
                If no MappingModel with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get_by_long_url(self, long_url: str, **kwargs) -> MappingModel:
        """Retrieve a MappingModel from the data store by its long URL.

        Args:
            long_url (str):
                The long URL of the MappingModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            MappingModel: The persisted mapping.

        Raises:
            MappingNotFoundError:
                If no MappingModel with the given long URL exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
