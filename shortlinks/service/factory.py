"""Build a MappingService from a lambda's configuration section

Example:
    >>> config = {'sqlite': {'database': '/tmp/urlshortener.db'}, 'shortcode': {'seed': 0}}
    >>> service = build_mapping_service(config)
    >>> type(service.dao).__name__
    'MappingSQLiteDAO'
"""

import logging

from shortlinks.cache import DualCache
from shortlinks.constants import Backend, Shortcode
from shortlinks.dao.base import MappingBaseDAO
from shortlinks.exceptions import BadConfigurationError
from shortlinks.service.mapping_service import MappingService
from shortlinks.types import BackendSettings, LambdaConfiguration
from shortlinks.utils.config import app_prefix


logger = logging.getLogger(__name__)


def backend_kwargs(backend: Backend, settings: BackendSettings) -> dict:
    """Turn a backend section into DAO keyword arguments, e.g. {'host': 'redis'} -> {'redis_host': 'redis'}"""
    if not isinstance(settings, dict):
        raise BadConfigurationError(f"The '{backend}' section must be a JSON object (given type: {type(settings).__name__}).")
    return {f'{backend}_{key}': value for key, value in settings.items()}


def build_dao(app_config: LambdaConfiguration) -> MappingBaseDAO:
    """Instantiate the DAO for whichever backend the configuration holds

    Backend settings are passed on as '<backend>_<key>' keyword arguments,
    e.g. {'redis': {'host': 'redis'}} -> MappingRedisDAO(redis_host='redis').

    Raises:
        BadConfigurationError:
            If no supported backend section is present.
        DataStoreError:
            If the DAO can't reach its data store.
    """
    if Backend.REDIS in app_config:
        from shortlinks.dao.redis import MappingRedisDAO

        redis_config = backend_kwargs(Backend.REDIS, app_config[Backend.REDIS])
        logger.debug('Using Redis as the backend database for mappings.')
        return MappingRedisDAO(**redis_config, prefix=app_prefix())

    if Backend.SQLITE in app_config:
        from shortlinks.dao.sqlite import MappingSQLiteDAO

        sqlite_config = backend_kwargs(Backend.SQLITE, app_config[Backend.SQLITE])
        logger.debug('Using SQLite as the backend database for mappings.')
        return MappingSQLiteDAO(**sqlite_config)

    backends = ', '.join(sorted(k for k in app_config if k != 'shortcode')) or 'none'
    raise BadConfigurationError(f'Unsupported backend in configuration (given: {backends}).')


def shortcode_seed(app_config: LambdaConfiguration) -> int:
    """Read the xxh64 seed from the 'shortcode' section, defaulting to Shortcode.SEED

    Raises:
        BadConfigurationError:
            If the seed is not an integer in [0, 2**64).
    """
    seed = (app_config.get('shortcode') or {}).get('seed', Shortcode.SEED)
    if isinstance(seed, bool) or (isinstance(seed, float) and not seed.is_integer()):
        raise BadConfigurationError(f'Shortcode seed must be an integer (given: {seed!r}).')
    try:
        seed = int(seed)
    except (TypeError, ValueError, OverflowError) as e:
        raise BadConfigurationError(f'Shortcode seed must be an integer (given: {seed!r}).') from e

    if not 0 <= seed < Shortcode.SEED_LIMIT:
        raise BadConfigurationError(f'Shortcode seed must be in [0, 2**64) (given: {seed}).')
    return seed


def build_mapping_service(app_config: LambdaConfiguration) -> MappingService:
    """Create a MappingService with a fresh DualCache and the configured DAO"""
    seed = shortcode_seed(app_config)
    return MappingService(dao=build_dao(app_config), cache=DualCache(), seed=seed)
