"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to
access configuration data stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. Configuration data is
stored as a JSON document under a configuration profile (typically
`backend-config`) and deployed to the corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 42,
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { "host": ..., "port": ..., "db": ..., "socket_timeout": 2.0 },
                "registry": { "strategy": "counter", "code_length": 7, "canonicalize": false, ... }
            },
            "redirect_url": {
                "redis": { ... },
                "registry": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this
AppConfig document, determined by the current application environment.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig and
        return it as a Python dictionary. In SAM, load configuration
        from a local AppConfig agent.
        Sections are cached in process memory for TTL.APPCONFIG seconds.

Classes:
    RegistrySettings
        Validated link registry settings parsed from the `registry` section.

Example:
    Typical usage inside a Lambda handler:

        >>> from shortlink.utils.config import load_config, RegistrySettings
        >>> config = load_config('shorten_url')
        >>> print(config['redis']['host'])
        redis-15501.host.docker.internal
        >>> RegistrySettings.from_config(config['registry']).code_length
        7
"""

import os
import copy
import time
import json
import functools
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any
from collections.abc import Callable

import boto3

from shortlink.constants import ENV, TTL, Registry, Shortcode, Strategy
from shortlink.exceptions import BadConfigurationError
from shortlink.utils.helpers import require_environment
from shortlink.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Finds the project root via the CloudFormation environment variable PROJECT_ROOT.
    Falls back to the current file.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.path.dirname(__file__)))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'shortlink'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'shortlink:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@dataclass(frozen=True)
class RegistrySettings:
    """Link registry settings.

    Attributes:
        strategy (Strategy):
            'counter' derives codes from the durable Redis sequence,
            'random' draws them from a secure random source.
        code_length (int):
            Length of generated codes, within [Shortcode.MIN_LENGTH, Shortcode.MAX_LENGTH].
        salt (str):
            Secret salt for counter-based codes.
        canonicalize (bool):
            If True, re-shortening a URL returns its existing code.
        max_attempts (int):
            Candidate codes tried before raising GenerationExhaustedError.
        store_retries (int):
            Extra attempts for a store call failing with DataStoreError.
        retry_backoff (float):
            Initial backoff in seconds between store retries (doubled each retry).
        base_url (str | None):
            Public base URL of short links. Derived from the request if None.
        link_ttl_seconds (int | None):
            Expire links after this many seconds. None keeps links forever.
        idempotency_ttl_seconds (int):
            Replay window for responses cached under an Idempotency-Key.
    """

    strategy: Strategy = Strategy.COUNTER
    code_length: int = Shortcode.DEFAULT_LENGTH
    salt: str = Registry.DEFAULT_SALT
    canonicalize: bool = False
    max_attempts: int = Registry.MAX_ATTEMPTS
    store_retries: int = Registry.STORE_RETRIES
    retry_backoff: float = Registry.RETRY_BACKOFF
    base_url: str | None = None
    link_ttl_seconds: int | None = None
    idempotency_ttl_seconds: int = TTL.IDEMPOTENCY

    def __post_init__(self):
        if self.strategy not in set(Strategy):
            raise BadConfigurationError(f"Unknown shortcode strategy '{self.strategy}' (expected one of {[s.value for s in Strategy]}).")
        if not Shortcode.MIN_LENGTH <= self.code_length <= Shortcode.MAX_LENGTH:
            raise BadConfigurationError(
                f'Code length must be within [{Shortcode.MIN_LENGTH}, {Shortcode.MAX_LENGTH}] (given value: {self.code_length}).'
            )
        if not self.salt:
            raise BadConfigurationError('Salt must be a non-empty string.')
        if self.max_attempts < 1:
            raise BadConfigurationError(f'max_attempts must be at least 1 (given value: {self.max_attempts}).')
        if self.store_retries < 0:
            raise BadConfigurationError(f'store_retries must be non-negative (given value: {self.store_retries}).')
        if self.retry_backoff < 0:
            raise BadConfigurationError(f'retry_backoff must be non-negative (given value: {self.retry_backoff}).')
        if self.link_ttl_seconds is not None and self.link_ttl_seconds <= 0:
            raise BadConfigurationError(f'link_ttl_seconds must be positive (given value: {self.link_ttl_seconds}).')
        if self.idempotency_ttl_seconds <= 0:
            raise BadConfigurationError(f'idempotency_ttl_seconds must be positive (given value: {self.idempotency_ttl_seconds}).')

    @classmethod
    def from_config(cls, section: dict[str, Any] | None) -> 'RegistrySettings':
        """Build settings from the `registry` config section, ignoring unknown keys

        Raises:
            BadConfigurationError:
                If a value has the wrong type or is out of range.
        """
        section = section or {}
        known = {f.name for f in fields(cls)}
        unknown = set(section) - known
        if unknown:
            logger.warning('Ignoring unknown registry settings.', extra={'unknown': sorted(unknown)})

        try:
            values = {k: v for k, v in section.items() if k in known}
            if 'strategy' in values:
                values['strategy'] = Strategy(values['strategy'])
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f'Invalid registry configuration: {e}') from e


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise ValueError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise ValueError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise ValueError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            config = json.load(r)

        data = _lambda_section(config, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
        return data

    return wrapper


def _lambda_section(config: dict[str, Any], lambda_name: str) -> dict[str, Any]:
    """Extract the active backend config and registry settings for one lambda"""
    backend = config['active_backend']
    lambda_config = config['configs'][lambda_name]
    return {
        backend: lambda_config[backend],
        'registry': lambda_config.get('registry', {}),
    }


def cache_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: keep loaded AppConfig sections in process memory for TTL.APPCONFIG seconds

    Lambda containers are reused across invocations. Within the window a warm
    container answers `load_config()` from memory instead of starting a new
    AppConfig data session. Each call gets its own copy of the cached section.

    The wrapper exposes `cache_clear()` to drop every cached section.
    """
    cache: dict[str, tuple[float, dict]] = {}

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        now = time.monotonic()
        loaded_at, data = cache.get(lambda_name, (None, None))
        if loaded_at is None or now - loaded_at >= TTL.APPCONFIG:
            data = func(lambda_name, *args, **kwargs)
            cache[lambda_name] = (now, data)
        else:
            logger.debug('Loaded AppConfig from process cache.', extra={'lambdaName': lambda_name})
        return copy.deepcopy(data)

    wrapper.cache_clear = cache.clear
    return wrapper


@_sam_load_local_appconfig
@cache_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> dict:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: The lambda's config section, e.g. {'redis': {...}, 'registry': {...}}

    Raises:
        MissingEnvironmentVariableError:
            If any of the required environment variables is missing.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    data = _lambda_section(config, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
    return data
