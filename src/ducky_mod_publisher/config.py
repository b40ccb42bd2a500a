"""Configuration resolution for publishing commands.

Values are resolved with the precedence CLI flag > environment variable
> built-in default.

Environment variables:
    NUGET_API_KEY: API key used by ``nuget push``
    NUGET_SERVER: NuGet server URL
    NUGET_VERBOSE: ``true`` or ``1`` enables verbose output
    STEAM_APP_ID: Steam application the Workshop items belong to
    DUCKY_STEAM_BACKEND: Workshop backend factory as ``module:callable``
"""

import os
from dataclasses import dataclass
from urllib.parse import urlparse

from .errors import ConfigError

DEFAULT_NUGET_SERVER = "https://api.nuget.org/v3/index.json"
DEFAULT_STEAM_APP_ID = 3167020

STEAM_APP_ID_ENV = "STEAM_APP_ID"
STEAM_BACKEND_ENV = "DUCKY_STEAM_BACKEND"


@dataclass
class NuGetConfig:
    api_key: str | None = None
    server: str = DEFAULT_NUGET_SERVER
    verbose: bool = False


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("true", "1")


def resolve_nuget_config(
    api_key: str | None = None,
    server: str | None = None,
    verbose: bool | None = None,
    env_prefix: str = "NUGET",
) -> NuGetConfig:
    """Resolve NuGet configuration from CLI flags, environment and defaults.

    Args:
        api_key: ``--api-key`` flag value, if given
        server: ``--server`` flag value, if given
        verbose: ``--verbose`` flag value, if given
        env_prefix: Prefix of the environment variables to read

    Returns:
        Resolved NuGetConfig

    Example:
        >>> config = resolve_nuget_config(server="https://nuget.example.com/v3/index.json")
        >>> config.server
        'https://nuget.example.com/v3/index.json'
    """
    config = NuGetConfig()

    env_api_key = os.environ.get(f"{env_prefix}_API_KEY")
    env_server = os.environ.get(f"{env_prefix}_SERVER")
    env_verbose = os.environ.get(f"{env_prefix}_VERBOSE")

    if env_api_key:
        config.api_key = env_api_key
    if env_server:
        config.server = env_server
    if env_verbose:
        config.verbose = _env_flag(env_verbose)

    if api_key is not None:
        config.api_key = api_key
    if server is not None:
        config.server = server
    if verbose is not None:
        config.verbose = verbose

    return config


def get_api_key(config: NuGetConfig) -> str:
    """Return the API key.

    Raises:
        ConfigError: If no API key was configured
    """
    if not config.api_key:
        raise ConfigError(
            "NuGet API key is required for this operation",
            [
                "Set the NUGET_API_KEY environment variable",
                "Use the --api-key flag",
                "For nuget.org, create an API key at https://www.nuget.org/account/apikeys",
            ],
        )
    return config.api_key


def validate_url(url: str) -> None:
    """Validate URL format and scheme.

    Only allows http:// and https:// URLs with a host.

    Args:
        url: URL to validate

    Raises:
        ValueError: If URL has invalid format or dangerous scheme
    """
    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Invalid URL scheme: {parsed.scheme}. Only http and https are allowed.")

    if not parsed.netloc:
        raise ValueError(f"URL has no host: {url}")


def get_server_url(config: NuGetConfig) -> str:
    """Return the validated server URL.

    Raises:
        ConfigError: If the server URL is invalid
    """
    if not config.server:
        return DEFAULT_NUGET_SERVER

    try:
        validate_url(config.server)
    except ValueError as e:
        raise ConfigError(
            f"Invalid server URL: {config.server}",
            [
                f"Ensure the URL is valid (e.g., {DEFAULT_NUGET_SERVER})",
                "Use the --server flag with a valid URL",
            ],
        ) from e

    return config.server


def get_steam_app_id() -> int:
    """Return the Steam App ID from ``STEAM_APP_ID`` or the default.

    Raises:
        ConfigError: If the environment variable is not an integer
    """
    value = os.environ.get(STEAM_APP_ID_ENV)
    if not value:
        return DEFAULT_STEAM_APP_ID

    try:
        return int(value.strip())
    except ValueError as e:
        raise ConfigError(
            f"Invalid {STEAM_APP_ID_ENV} environment variable: {value}",
            [f"Set {STEAM_APP_ID_ENV} to a numeric App ID", f"Default App ID is {DEFAULT_STEAM_APP_ID}"],
        ) from e


def get_steam_backend_spec() -> str | None:
    return os.environ.get(STEAM_BACKEND_ENV) or None
