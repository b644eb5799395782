"""Multi-source credential resolution.

This module loads the credential fields an auth scheme needs from several
sources, so that callers can keep secrets out of code and still hand the
client factory a plain credential set.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable (including values loaded from a .env file)
3. Default value

Example:
    ```python
    from api_session_core import AuthScheme, basic_auth
    from api_session_core.auth import CredentialResolver

    resolver = CredentialResolver()

    # Reads TIMESHEETS_USERNAME and TIMESHEETS_PASSWORD
    creds = resolver.resolve_credential_set(AuthScheme.BASIC, env_prefix="TIMESHEETS_")
    client = basic_auth("https://api.example.com", creds)

    # Secrets mounted as files
    token = resolver.resolve_from_file(file_path="/run/secrets/api_token", required=True)
    ```

Security Considerations:
    - Credential values are never logged (masked with ***)
    - Only source information is logged (env var name, file path, etc.)
    - File-based credentials have whitespace stripped
    - Thread-safe dotenv loading with lock
"""

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from api_session_core.auth.credential_set import CredentialSet
from api_session_core.auth.exceptions import CredentialFileError, CredentialNotFoundError
from api_session_core.auth.schemes import AuthScheme

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve credential fields from explicit values, the environment and files.

    Args:
        dotenv_path: Path to a .env file. If None, python-dotenv searches
            parent directories for one.
        load_dotenv: Whether to load the .env file at all.

    Example:
        ```python
        resolver = CredentialResolver(load_dotenv=False)
        client_id = resolver.resolve(env_var_name="API_CLIENT_ID", required=True)
        ```
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
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
    ) -> str | None:
        """Resolve a single credential value.

        Args:
            value: Explicitly provided value; wins over every other source.
            env_var_name: Environment variable to check.
            default: Value used when no other source has one.
            required: Raise instead of returning None when nothing is found.

        Returns:
            The resolved value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If ``required`` and no source has a value.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            logger.debug(f"Resolved credential from {source}: ***")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential from a file.

        The path may come from ``file_path`` or from the environment variable
        ``env_var_name``; ``~`` and ``$VAR`` are expanded. Contents are
        returned stripped of surrounding whitespace.

        Raises:
            CredentialFileError: If ``required`` and the file cannot be read.
        """
        path_to_use = None
        if file_path is not None:
            path_to_use = str(file_path)
        elif env_var_name:
            path_to_use = self.resolve(env_var_name=env_var_name)

        if not path_to_use:
            if required:
                error_msg = "No file path provided for credential resolution"
                if env_var_name:
                    error_msg += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(error_msg)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path_to_use)))

        try:
            content = path_obj.read_text().strip()
        except FileNotFoundError:
            error_msg = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.debug(error_msg)
            return None
        except OSError as e:
            error_msg = f"Error reading credential file {path_obj}: {e}"
            if required:
                raise CredentialFileError(error_msg) from e
            logger.warning(error_msg)
            return None

        logger.debug(f"Resolved credential from file: {path_obj} (***)")
        return content

    def resolve_credential_set(
        self,
        fields: AuthScheme | Iterable[str],
        *,
        env_prefix: str = "",
        values: Mapping[str, str] | None = None,
        optional: Iterable[str] = (),
    ) -> CredentialSet:
        """Resolve every field of a scheme into a CredentialSet.

        Each field is looked up in ``values`` first, then in the environment
        variable ``<env_prefix><FIELD>`` (field name upper-cased).

        Args:
            fields: An AuthScheme (its required and optional fields are used)
                or an explicit list of required field names.
            env_prefix: Prefix for environment variable names, e.g. ``"JIRA_"``.
            values: Explicit values that take priority over the environment.
            optional: Extra field names that are included only when found.

        Raises:
            CredentialNotFoundError: If a required field cannot be resolved.
        """
        if isinstance(fields, AuthScheme):
            required = fields.required_fields
            optional = fields.optional_fields.union(optional)
        else:
            required = frozenset(fields)
            optional = frozenset(optional)

        values = values or {}
        resolved: dict[str, str] = {}

        for name in sorted(required | optional):
            result = self.resolve(
                value=values.get(name),
                env_var_name=f"{env_prefix}{name.upper()}",
                required=name in required,
            )
            if result is not None:
                resolved[name] = result

        return CredentialSet(resolved)
