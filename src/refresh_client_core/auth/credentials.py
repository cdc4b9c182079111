"""Resolve client settings and seed tokens from several sources.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable (including values loaded from a .env file)
3. Default value

Example:
    ```python
    from refresh_client_core.auth import CredentialResolver

    resolver = CredentialResolver()
    base_url = resolver.resolve(env_var_name="MY_API_BASE_URL", required=True)
    refresh_token = resolver.resolve(env_var_name="MY_API_REFRESH_TOKEN")
    ```

Security Considerations:
    - Values marked sensitive are logged as *** only
    - Only the source (env var name, file path) is logged
    - File contents have surrounding whitespace stripped
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from refresh_client_core.auth.exceptions import CredentialError

logger = logging.getLogger(__name__)


class MissingValueError(CredentialError):
    """Raised when a required value cannot be resolved from any source.

    Attributes:
        env_var_name: The environment variable that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialResolver:
    """Resolve values from explicit arguments, the environment, .env and defaults.

    The .env file is loaded once per resolver, into ``os.environ``, without
    overriding variables that are already set.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize the resolver.

        Args:
            dotenv_path: Path to a .env file. If None, python-dotenv searches
                parent directories.
            load_dotenv: Set to False to skip .env loading entirely.
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return
            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for client configuration")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        sensitive: bool = True,
    ) -> str | None:
        """Resolve a value, first match wins.

        Args:
            value: Explicit value; when given, every other source is ignored.
            env_var_name: Environment variable to check.
            default: Fallback when nothing else is set.
            required: Raise MissingValueError instead of returning None.
            sensitive: Mask the resolved value in log messages.

        Returns:
            The resolved value, or None if not found and not required.

        Raises:
            MissingValueError: If required and no source provides a value.
        """
        result = None
        source = None

        if value is not None:
            result, source = value, "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result, source = os.environ[env_var_name], f"environment variable '{env_var_name}'"
        elif default is not None:
            result, source = default, "default value"

        if result is not None:
            shown = "***" if sensitive else result
            logger.debug(f"Resolved {env_var_name or 'value'} from {source}: {shown}")

        if required and result is None:
            message = "Required value not found"
            if env_var_name:
                message += f" (checked env var: {env_var_name})"
            raise MissingValueError(message, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a value from a file, e.g. a refresh token mounted as a secret.

        The path may come from ``env_var_name`` and supports ``~`` and ``$VAR``
        expansion.

        Raises:
            MissingValueError: If required and no path or no readable file exists.
        """
        path = str(file_path) if file_path is not None else None
        if path is None and env_var_name:
            path = self.resolve(env_var_name=env_var_name, sensitive=False)

        if path is None:
            if required:
                raise MissingValueError("No file path provided", env_var_name=env_var_name)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path)))
        try:
            content = path_obj.read_text().strip()
        except OSError as e:
            if required:
                raise MissingValueError(f"Cannot read {path_obj}: {e}", env_var_name=env_var_name) from e
            logger.warning(f"Cannot read {path_obj}: {e}")
            return None

        logger.debug(f"Resolved value from file: {path_obj} (***)")
        return content
