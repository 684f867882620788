"""Configuration loading for the one-time secret client."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Tuple

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older interpreters
    import tomli as tomllib  # type: ignore


CONFIG_ENV_PREFIX = "OTS_"
DEFAULT_HOST = "https://onetimesecret.com"
DEFAULT_API_VERSION = "v1"
OUTPUT_FORMATS = ("json", "yaml", "fmt", "raw")
FORMAT_ALIASES = {"printf": "fmt"}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_config_path() -> Path:
    base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "ots" / "config.toml"


@dataclass(frozen=True)
class ClientConfig:
    """Connection, authentication and output settings for one invocation."""

    host: str = DEFAULT_HOST
    api_version: str = DEFAULT_API_VERSION
    username: Optional[str] = None
    api_key: Optional[str] = None
    output: str = "fmt"
    template: Optional[str] = None
    debug: bool = False
    timeout: float = 10.0
    log_level: str = "WARNING"
    log_format: str = "plain"

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "host", self.host.rstrip("/"))
        object.__setattr__(self, "output", normalize_output(self.output))
        object.__setattr__(self, "log_level", self.log_level.upper())
        _validate_config(self)

    @property
    def api_url(self) -> str:
        return f"{self.host}/api/{self.api_version}"

    @property
    def has_auth(self) -> bool:
        return bool(self.username) and bool(self.api_key)

    @property
    def auth(self) -> Optional[Tuple[str, str]]:
        if not self.has_auth:
            return None
        return (str(self.username), str(self.api_key))

    def logging_dict(self) -> Dict[str, Any]:
        """Return a sanitized mapping suitable for structured logging."""

        return {
            "host": self.host,
            "api_version": self.api_version,
            "username": self.username,
            "api_key": "***REDACTED***" if self.api_key else None,
            "output": self.output,
            "template": self.template,
            "debug": self.debug,
            "timeout": self.timeout,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }

    def with_overrides(self, overrides: Mapping[str, Any]) -> "ClientConfig":
        """Return a copy with `overrides` applied (unset values are skipped)."""

        return _apply_mapping(self, overrides)

    @classmethod
    def from_sources(
        cls,
        path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ClientConfig":
        """Load configuration from defaults, file and env (in that order)."""

        environ = os.environ if environ is None else environ
        if path is None:
            env_path = environ.get(f"{CONFIG_ENV_PREFIX}CONFIG")
            path = _coerce_path(env_path) if env_path else None
        file_config = _load_file_config(path)
        env_config = _load_env_config(CONFIG_ENV_PREFIX, environ)

        config = cls()
        config = _apply_mapping(config, file_config)
        config = _apply_mapping(config, env_config)
        return config


def normalize_output(value: str) -> str:
    value = value.lower()
    return FORMAT_ALIASES.get(value, value)


def _validate_config(config: ClientConfig) -> None:
    if not config.host.startswith(("http://", "https://")):
        raise ValueError(f"host must be an http(s) URL; got {config.host}.")
    if not config.api_version:
        raise ValueError("api_version must not be empty.")
    if config.output not in OUTPUT_FORMATS:
        raise ValueError(f"output must be one of {list(OUTPUT_FORMATS)}; got {config.output}.")
    if config.timeout <= 0 or config.timeout > 600:
        raise ValueError(f"timeout must be between 0 and 600; got {config.timeout}.")
    if config.log_level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {list(LOG_LEVELS)}; got {config.log_level}.")
    if config.log_format not in ("plain", "json"):
        raise ValueError(f"log_format must be 'plain' or 'json'; got {config.log_format}.")


def _load_file_config(path: Optional[Path]) -> Dict[str, Any]:
    if path is None:
        default = _default_config_path()
        if not default.exists():
            return {}
        path = default
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as f:
        parsed = tomllib.load(f)
    if not isinstance(parsed, Mapping):
        raise ValueError("Configuration file must contain a TOML table.")
    return {k.replace("-", "_"): v for k, v in parsed.items()}


_ENV_ALIASES = {
    "USER": "username",
    "KEY": "api_key",
    "FORMAT": "output",
}


def _load_env_config(prefix: str, environ: Mapping[str, str]) -> Dict[str, Any]:
    mapping: Dict[str, Any] = {}
    for field in ClientConfig.__dataclass_fields__:
        env_key = f"{prefix}{field}".upper()
        if env_key in environ:
            mapping[field] = environ[env_key]
    for suffix, field in _ENV_ALIASES.items():
        env_key = f"{prefix}{suffix}"
        if env_key in environ:
            mapping[field] = environ[env_key]
    return mapping


def _apply_mapping(config: ClientConfig, overrides: Mapping[str, Any]) -> ClientConfig:
    data: MutableMapping[str, Any] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in ClientConfig.__dataclass_fields__:
            raise ValueError(f"Unknown configuration key: {key}")
        if key == "timeout":
            data[key] = float(value)
        elif key == "debug":
            data[key] = _coerce_bool(value)
        elif key == "log_format":
            data[key] = str(value).lower()
        else:
            data[key] = str(value)
    return replace(config, **data)


def _coerce_path(value: Any) -> Path:
    return value if isinstance(value, Path) else Path(str(value)).expanduser()


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
