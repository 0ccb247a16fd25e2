from dataclasses import dataclass


@dataclass(frozen=True)
class MappingModel:
    """Represent a persisted long URL <-> short code mapping.

    Mappings are immutable once created; neither side is ever updated.

    Attributes:
        long_url (str):
            The original long URL that the short code resolves to.
        short_code (str):
            The unique short identifier representing the long URL.

    Example:
        >>> mapping = MappingModel(
        ...     long_url="https://example.com/article/123",
        ...     short_code="9f3c1a2b7d4e5f60",
        ... )
        >>> mapping.long_url
        'https://example.com/article/123'
        >>> mapping.short_code
        '9f3c1a2b7d4e5f60'
    """

    long_url: str
    short_code: str
