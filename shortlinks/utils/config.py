"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`) and deployed to the
corresponding environment.

The configuration JSON follows this structure:

    {
        "active_backend": "sqlite",
        "build": "2026.01.1",
        "shortcode": {"seed": 0},
        "configs": {
            "shorten_url": {
                "sqlite": {"database": "/mnt/efs/urlshortener.db"},
                "redis": { ... }
            },
            "redirect_url": {
                "sqlite": {"database": "/mnt/efs/urlshortener.db"},
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) for the active
backend, plus the shared `"shortcode"` section:

    {
        "sqlite": {"database": "/mnt/efs/urlshortener.db"},
        "shortcode": {"seed": 0}
    }

Typical usage inside a Lambda handler:
    >>> from shortlinks.utils.config import load_config
    >>> config = load_config('shorten_url')
    >>> print(config['sqlite']['database'])
    /mnt/efs/urlshortener.db
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from collections.abc import Callable

import boto3

from shortlinks.types import AppConfig, LambdaConfiguration
from shortlinks.constants import ENV
from shortlinks.exceptions import BadConfigurationError
from shortlinks.utils.helpers import require_environment
from shortlinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = 'backend-config'

# Where a local AppConfig agent may live; anything else is refused
AGENT_SCHEMES = frozenset({'http', 'https'})
AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
AGENT_PORTS = frozenset({2772, None})
AGENT_TIMEOUT = 5


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Key namespace for DAOs: '<app name>:<app env>', or None without APP_NAME

    Example:
        >>> os.environ['APP_NAME'] = 'shortlinks'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'shortlinks:local'
    """
    name = app_name()
    return None if name is None else f'{name}:{app_env()}'


def parse_document(raw: bytes, source: str) -> AppConfig:
    """Decode a deployed AppConfig document

    Raises:
        BadConfigurationError:
            If the payload isn't a JSON object.
    """
    try:
        document = json.loads(raw.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise BadConfigurationError(f'AppConfig document from {source} is not valid JSON.') from e

    if not isinstance(document, dict):
        raise BadConfigurationError(f'AppConfig document from {source} must be a JSON object (given type: {type(document).__name__}).')
    return document


def extract_lambda_config(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Pick the active backend's section for one lambda out of an AppConfig document

    Raises:
        BadConfigurationError:
            If the document lacks `active_backend` or a section for the lambda/backend pair.
    """
    try:
        backend = document['active_backend']
        data = {backend: document['configs'][lambda_name][backend]}
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no active backend section for '{lambda_name}'.") from e

    data['shortcode'] = document.get('shortcode') or {}
    return data


def validate_agent_url(url: str | None) -> str:
    """Return `url` if it points at a local AppConfig agent, '' if unset

    Raises:
        BadConfigurationError:
            If the scheme, host or port is not one a local agent uses.
    """
    if not url:
        return ''

    components = urllib.parse.urlparse(url)
    if components.scheme not in AGENT_SCHEMES:
        raise BadConfigurationError(f"Refusing AppConfig agent URL '{url}': scheme must be http or https.")
    if components.hostname not in AGENT_HOSTS:
        raise BadConfigurationError(f"Refusing AppConfig agent URL '{url}': host is not a local agent.")
    if components.port not in AGENT_PORTS:
        raise BadConfigurationError(f"Refusing AppConfig agent URL '{url}': port must be 2772.")
    return url.rstrip('/')


def _prefer_local_agent(func: Callable) -> Callable:
    """Decorator: under SAM, read AppConfig from the local agent at APPCONFIG_AGENT_URL

    Falls through to the wrapped loader when not running locally or when no
    agent URL is configured. APPCONFIG_PROFILE_NAME selects the profile
    (default: 'backend-config').
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = validate_agent_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, DEFAULT_PROFILE_NAME)
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=AGENT_TIMEOUT) as r:  # noqa: S310
            document = parse_document(r.read(), source='local agent')

        data = extract_lambda_config(document, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return data

    return wrapper


@_prefer_local_agent
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       : AppConfig Application ID
        APPCONFIG_ENV_ID       : AppConfig Environment ID
        APPCONFIG_PROFILE_ID   : AppConfig Configuration Profile ID

    Raises:
        MissingEnvironmentVariableError:
            If any of the AppConfig identifiers is not set.
        BadConfigurationError:
            If the document is malformed or has no section for this lambda's active backend.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')
    session = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )
    response = appconfig.get_latest_configuration(ConfigurationToken=session['InitialConfigurationToken'])
    document = parse_document(response['Configuration'].read(), source='AWS AppConfig')

    data = extract_lambda_config(document, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return data
