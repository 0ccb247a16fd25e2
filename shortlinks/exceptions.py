class ShortlinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortlinks_error'


class ConfigurationError(ShortlinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class MappingError(ShortlinksError):
    """Base exception for errors surfaced by the mapping service."""

    error_code = 'mapping:mapping_error'


class InvalidInputError(MappingError):
    """Raised when a request carries an empty or missing long URL."""

    error_code = 'mapping:invalid_input'


class ShortCodeNotFoundError(MappingError):
    """Raised when a short code has no persisted mapping."""

    error_code = 'mapping:not_found'


class InternalMappingError(MappingError):
    """Base exception for mapping failures that are the server's fault."""

    error_code = 'mapping:internal_error'


class StoreUnavailableError(InternalMappingError):
    """Raised when the durable store can't be reached or fails mid-operation."""

    error_code = 'mapping:store_unavailable'


class UnresolvableConflictError(InternalMappingError):
    """Raised when a concurrent insert won the race but isn't visible yet.

    Retrying shortly succeeds once the winner's mapping is committed.
    """

    error_code = 'mapping:unresolvable_conflict'


class ShortCodeCollisionError(InternalMappingError):
    """Raised when the generated short code already belongs to another long URL."""

    error_code = 'mapping:short_code_collision'
