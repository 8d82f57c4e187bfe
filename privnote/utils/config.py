"""Configuration management for the privnote client.

This module centralizes all configuration settings: the service endpoint,
network timeout, logging level, and the layered resolution of the
per-invocation options.

Architecture:
    Every option is resolved from its sources with a fixed precedence
    (command-line flag > ``PRIVNOTE_<KEY>`` environment variable > config
    file > default) into an immutable Settings object before the pipeline
    is built. Domain code never reads configuration on its own.

    The config file is ``--config-file PATH`` or ``~/.privnote`` and holds
    ``KEY=value`` lines, for example::

        expires=24h
        notify_email=me@example.com
        do_not_prompt=true
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from privnote.domain.entities.duration import DEFAULT_DURATION_TOKEN
from privnote.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

CLIENT_VERSION = "0.1.0"
USER_AGENT = f"privnote/v{CLIENT_VERSION} (https://github.com/dombo/privnote)"

# Service configuration
PRIVNOTE_URL = os.getenv("PRIVNOTE_URL", "https://privnote.com/legacy/")
DEFAULT_TIMEOUT = 30.0

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

ENV_PREFIX = "PRIVNOTE_"
DEFAULT_CONFIG_FILE = Path.home() / ".privnote"

# Options resolvable from flags, environment and config file
OPTION_KEYS = (
    "expires",
    "file",
    "notify_email",
    "notify_reference",
    "password",
    "do_not_prompt",
)

DEFAULTS: Dict[str, Any] = {
    "expires": DEFAULT_DURATION_TOKEN,
    "file": None,
    "notify_email": "",
    "notify_reference": "",
    "password": None,
    "do_not_prompt": False,
}


class Settings(BaseModel):
    """Fully resolved options for a single invocation.

    Attributes:
        expires (str): Duration token, validated later against the duration table.
        file (Optional[str]): Path of the file to encrypt.
        notify_email (str): Address notified when the note is read.
        notify_reference (str): Reference included in the notification.
        password (Optional[str]): Manual password from environment or config file.
        do_not_prompt (bool): Skip the reader's confirmation page.
        service_url (str): Legacy note-creation endpoint.
        timeout (float): Network timeout in seconds.
        config_file (Optional[str]): Config file actually read, if any.
    """

    model_config = ConfigDict(frozen=True)

    expires: str = DEFAULT_DURATION_TOKEN
    file: Optional[str] = None
    notify_email: str = ""
    notify_reference: str = ""
    password: Optional[str] = None
    do_not_prompt: bool = False
    service_url: str = PRIVNOTE_URL
    timeout: float = DEFAULT_TIMEOUT
    config_file: Optional[str] = None

    @field_validator("service_url")
    @classmethod
    def service_url_is_http(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"service URL must be an http(s) URL, got {value!r}")
        return value

    @field_validator("timeout")
    @classmethod
    def timeout_is_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    def __repr__(self) -> str:
        fields = self.model_dump()
        if fields.get("password"):
            fields["password"] = "<hidden>"
        return f"Settings({fields})"

    __str__ = __repr__


def _normalize_key(key: str) -> str:
    return key.strip().lower().replace("-", "_")


def load_config_file(path: Optional[str] = None) -> Dict[str, Optional[str]]:
    """Read option values from a config file.

    Args:
        path (Optional[str]): Explicit config file. When None, ``~/.privnote``
            is read if it exists.

    Returns:
        Dict[str, Optional[str]]: Option values keyed by normalized option name.

    Raises:
        ConfigurationError: If an explicit config file does not exist.
    """
    if path:
        config_path = Path(path).expanduser()
        if not config_path.is_file():
            raise ConfigurationError(f"config file does not exist: {path}")
    else:
        config_path = DEFAULT_CONFIG_FILE
        if not config_path.is_file():
            return {}

    values = {
        _normalize_key(key): value
        for key, value in dotenv_values(config_path).items()
    }
    unknown = sorted(set(values) - set(OPTION_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown keys in {config_path}: {', '.join(unknown)}")

    logger.info(f"Using config file: {config_path}")
    return {key: value for key, value in values.items() if key in OPTION_KEYS}


def resolve_settings(
    cli_values: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
    config_file: Optional[str] = None,
) -> Settings:
    """Resolve every option into an immutable Settings object.

    Args:
        cli_values (Mapping[str, Any]): Options given on the command line;
            None means "not given".
        environ (Optional[Mapping[str, str]]): Environment to read, defaults
            to ``os.environ``.
        config_file (Optional[str]): Explicit config file path.

    Returns:
        Settings: The resolved settings.

    Raises:
        ConfigurationError: If the config file is missing or a value is invalid.

    Example:
        >>> settings = resolve_settings({"expires": "24h"}, environ={})
        >>> settings.expires
        "24h"
    """
    environ = os.environ if environ is None else environ
    file_values = load_config_file(config_file)

    resolved: Dict[str, Any] = {}
    for key in OPTION_KEYS:
        env_value = environ.get(f"{ENV_PREFIX}{key.upper()}")
        if cli_values.get(key) is not None:
            resolved[key] = cli_values[key]
        elif env_value is not None:
            resolved[key] = env_value
        elif file_values.get(key) is not None:
            resolved[key] = file_values[key]
        else:
            resolved[key] = DEFAULTS[key]

    resolved["service_url"] = environ.get("PRIVNOTE_URL", PRIVNOTE_URL)
    resolved["timeout"] = environ.get("PRIVNOTE_TIMEOUT", DEFAULT_TIMEOUT)
    if config_file:
        resolved["config_file"] = str(Path(config_file).expanduser())
    elif file_values:
        resolved["config_file"] = str(DEFAULT_CONFIG_FILE)

    try:
        settings = Settings(**resolved)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"invalid configuration: {problems}") from e

    logger.debug(f"Resolved settings: {settings!r}")
    return settings
