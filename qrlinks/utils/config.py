"""Utility functions for application configuration management.

Configuration comes from environment variables and, in deployed
environments, from an **AWS AppConfig** document. The only structural
decision made here is which key-value store backend the process uses; it is
made once per process (see `qrlinks.dao.factory`).

Backend selection, first match wins:

    1. `REDIS_URL` (or `KV_URL`) is set          -> Redis from URL
    2. `APPCONFIG_*` identifiers are set        -> `active_backend` of the AppConfig document
    3. otherwise                                -> process-local in-memory store

The AppConfig document follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "backends": {
            "redis": {"host": "...", "port": 6379, "db": 0, "username": "...", "password": "..."}
        }
    }

Typical usage:
    >>> from qrlinks.utils.config import store_config
    >>> store_config()
    {'redis': {'url': 'redis://localhost:6379/0'}}
"""

import os
import json
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from qrlinks.types import AppConfig, AppConfigDataClient, StoreConfiguration
from qrlinks.constants import ENV
from qrlinks.exceptions import BadConfigurationError, MissingEnvironmentVariableError
from qrlinks.utils.helpers import require_environment


logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = frozenset({'redis', 'memory'})


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return the store key prefix as <app name>:<app env>, or None if APP_NAME is not set."""
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(appconfig_client: AppConfigDataClient | None = None) -> AppConfig:
    """Load the application's AppConfig document from AWS AppConfig.

    Environment variables required:
        APPCONFIG_APP_ID       : AppConfig Application ID
        APPCONFIG_ENV_ID       : AppConfig Environment ID
        APPCONFIG_PROFILE_ID   : AppConfig Configuration Profile ID

    Args:
        appconfig_client (AppConfigDataClient | None):
            Optional boto3 appconfigdata client. Created on demand if omitted.

    Returns:
        dict: The full AppConfig document.

    Raises:
        MissingEnvironmentVariableError:
            If any AppConfig identifier is missing.
        botocore.exceptions.BotoCoreError / ClientError:
            On AWS API failures while fetching the configuration.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.')

    appconfig = appconfig_client or boto3.client('appconfigdata')

    try:
        # Start an AppConfig data session
        session_token = appconfig.start_configuration_session(
            ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
            EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
            ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
        )['InitialConfigurationToken']

        # Fetch the configuration
        response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    except (BotoCoreError, ClientError):
        logger.exception('Failed to fetch AppConfig from AWS AppConfig.')
        raise

    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'build': config.get('build')})
    return config


def store_config() -> StoreConfiguration:
    """Return the key-value store backend configuration as {<backend>: {...params}}

    Raises:
        BadConfigurationError:
            If the AppConfig document names an unsupported backend.
    """
    url = os.getenv(ENV.Store.REDIS_URL) or os.getenv(ENV.Store.KV_URL)
    if url:
        return {'redis': {'url': url}}

    try:
        config = load_config()
    except MissingEnvironmentVariableError:
        logger.debug('No remote store configured. Using the in-memory store.')
        return {'memory': {}}

    backend = config.get('active_backend')
    if backend not in SUPPORTED_BACKENDS:
        raise BadConfigurationError(f'Unsupported store backend {backend!r} in AppConfig (build {config.get("build")}).')
    return {backend: config.get('backends', {}).get(backend, {})}
