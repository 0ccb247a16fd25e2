from enum import StrEnum


class Shortcode:
    """Shortcode generation defaults."""

    SEED = 0  # xxh64 seed used when the AppConfig document doesn't set one
    LENGTH = 16  # xxh64 hex digest width
    SEED_LIMIT = 2**64  # xxh64 seeds are unsigned 64-bit


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


class Backend(StrEnum):
    """Supported durable store backends (AppConfig `active_backend`)."""

    REDIS = 'redis'
    SQLITE = 'sqlite'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
