"""Client configuration.

Example:
    ```python
    # MY_API_BASE_URL=https://api.example.com/api/ in the environment or .env
    settings = ClientSettings.from_env(prefix="MY_API")
    ```
"""

import math
from dataclasses import dataclass

from refresh_client_core.auth.credentials import CredentialResolver
from refresh_client_core.auth.refresh import DEFAULT_REFRESH_PATH

DEFAULT_TIMEOUT = 10.0


class ConfigurationError(ValueError):
    """Raised when a configuration value is present but unusable."""

    pass


@dataclass(frozen=True)
class ClientSettings:
    """Connection settings for AuthenticatedClient.

    Attributes:
        base_url: API base URL; request paths are resolved against it
        refresh_path: Refresh route relative to ``base_url``
        timeout: Per-request timeout in seconds, also used for the refresh call
        env_prefix: Prefix used for environment lookups (tokens, settings)
    """

    base_url: str
    refresh_path: str = DEFAULT_REFRESH_PATH
    timeout: float = DEFAULT_TIMEOUT
    env_prefix: str = "API"

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        if not (math.isfinite(self.timeout) and self.timeout > 0):
            raise ConfigurationError(f"timeout must be a positive number, got {self.timeout}")

    @classmethod
    def from_env(cls, prefix: str = "API", resolver: CredentialResolver | None = None) -> "ClientSettings":
        """Build settings from ``<PREFIX>_BASE_URL``, ``<PREFIX>_REFRESH_PATH`` and ``<PREFIX>_TIMEOUT``.

        Raises:
            MissingValueError: ``<PREFIX>_BASE_URL`` is not set.
            ConfigurationError: ``<PREFIX>_TIMEOUT`` is not a positive number.
        """
        resolver = resolver or CredentialResolver()
        base_url = resolver.resolve(env_var_name=f"{prefix}_BASE_URL", required=True, sensitive=False)
        refresh_path = resolver.resolve(
            env_var_name=f"{prefix}_REFRESH_PATH", default=DEFAULT_REFRESH_PATH, sensitive=False
        )
        raw_timeout = resolver.resolve(
            env_var_name=f"{prefix}_TIMEOUT", default=str(DEFAULT_TIMEOUT), sensitive=False
        )
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(f"{prefix}_TIMEOUT must be a number, got {raw_timeout!r}") from e

        return cls(base_url=base_url, refresh_path=refresh_path, timeout=timeout, env_prefix=prefix)
