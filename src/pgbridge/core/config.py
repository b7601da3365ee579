"""Configuration management for pgbridge.

Handles TOML config files, environment variables, named profiles,
and configuration precedence resolution.

Precedence order (highest to lowest):
1. CLI flags (--host, --port, etc.)
2. --dsn flag (parsed into components)
3. Environment variables (PGHOST, PGPORT, PGDATABASE, PGUSER, PGPASSWORD)
4. Named profile (--profile or PGBRIDGE_PROFILE env var)
5. Built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, computed_field, field_validator, model_validator

from pgbridge.core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "pgbridge" / "config.toml"

_PG_ENV_VARS: dict[str, str] = {
    "PGHOST": "host",
    "PGPORT": "port",
    "PGDATABASE": "database",
    "PGUSER": "user",
    "PGPASSWORD": "password",  # pragma: allowlist secret
}

_PROFILE_DEFAULTS: dict[str, Any] = {
    "host": "localhost",
    "port": 5432,
    "database": "postgres",
    "user": None,
    "password": None,
}


def _validate_port(v: int) -> int:
    if not (1 <= v <= 65535):
        msg = f"Invalid port: {v}. Must be 1-65535"
        raise ValueError(msg)
    return v


def parse_dsn(dsn: str) -> dict[str, Any]:
    """Supports postgresql:// and postgres:// schemes."""
    parsed = urlparse(dsn)
    if parsed.scheme not in ("postgresql", "postgres"):
        msg = f"Invalid DSN scheme: '{parsed.scheme}'. Expected 'postgresql' or 'postgres'"
        raise ConfigError(msg)

    result: dict[str, Any] = {}
    if parsed.hostname:
        result["host"] = parsed.hostname
    if parsed.port:
        result["port"] = parsed.port
    if parsed.path and parsed.path.strip("/"):
        result["database"] = parsed.path.strip("/")
    if parsed.username:
        result["user"] = parsed.username
    if parsed.password:
        result["password"] = parsed.password
    return result


class ConnectionParams(BaseModel):
    """Parameters handed to the database client when connecting."""

    host: str = "localhost"
    port: int = 5432
    user: str | None = None
    password: str | None = None
    database: str = "postgres"

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        return _validate_port(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def conninfo(self) -> str:
        """libpq keyword/value connection string.

        Values are inserted verbatim; callers supply trusted values.
        """
        pairs = [
            ("dbname", self.database),
            ("user", self.user),
            ("password", self.password),
            ("host", self.host),
            ("port", str(self.port)),
        ]
        return " ".join(f"{key}={value}" for key, value in pairs if value is not None)


class PgProfile(BaseModel):
    dsn: str | None = None
    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    user: str | None = None
    password: str | None = None

    @model_validator(mode="before")
    @classmethod
    def parse_dsn_into_components(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("dsn"):
            dsn_fields = parse_dsn(data["dsn"])
            for key, value in dsn_fields.items():
                if key not in data:
                    data[key] = value
        return data

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        return _validate_port(v)


class AppConfig(BaseModel):
    default_profile: str | None = None
    strict_params: bool = False
    column_types: dict[str, str] = {}
    sentry_dsn: str | None = None
    profiles: dict[str, PgProfile] = {}

    @field_validator("column_types")
    @classmethod
    def validate_column_types(cls, v: dict[str, str]) -> dict[str, str]:
        valid_kinds = {"integer", "float", "text"}
        unknown = sorted(set(v) - valid_kinds)
        if unknown:
            msg = (
                f"Unknown column kind(s): {', '.join(unknown)}. "
                f"Must be one of: {', '.join(sorted(valid_kinds))}"
            )
            raise ValueError(msg)
        return v


class ResolvedConfig(BaseModel):
    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    user: str | None = None
    password: str | None = None
    strict_params: bool = False
    column_types: dict[str, str] = {}
    sentry_dsn: str | None = None
    active_profile: str | None = None
    sources: dict[str, str] = {}

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        return _validate_port(v)

    def connection_params(self) -> ConnectionParams:
        return ConnectionParams(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            database=self.database,
        )


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigError(msg) from e


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    dsn: str | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    CLI > DSN > env > profile > built-in defaults.
    """
    sources: dict[str, str] = {}
    resolved: dict[str, Any] = {}

    # Layer 1: Built-in defaults
    resolved.update(_PROFILE_DEFAULTS)
    for key in resolved:
        sources[key] = "default"

    # Layer 2: Named profile
    effective_profile = profile_name
    if not effective_profile:
        effective_profile = os.environ.get("PGBRIDGE_PROFILE")
    if not effective_profile:
        effective_profile = config.default_profile

    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = f"Unknown profile: '{effective_profile}'. Available profiles: {available}"
            raise ConfigError(msg)
        profile = config.profiles[effective_profile]
        for key in profile.model_fields_set:
            if key in resolved:
                resolved[key] = getattr(profile, key)
                sources[key] = f"profile: {effective_profile}"

    # Layer 3: Environment variables
    for env_var, field_name in _PG_ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is not None:
            if field_name == "port":
                try:
                    resolved[field_name] = int(value)
                except ValueError:
                    msg = f"Invalid {env_var} value: '{value}'. Must be an integer"
                    raise ConfigError(msg) from None
            else:
                resolved[field_name] = value
            sources[field_name] = f"env: {env_var}"

    # Layer 4: DSN flag
    if dsn:
        for key, value in parse_dsn(dsn).items():
            resolved[key] = value
            sources[key] = "dsn"

    # Layer 5: CLI flags (highest priority)
    strict = cli_overrides.pop("strict", None)
    for cli_name in ("host", "port", "database", "user", "password"):
        value = cli_overrides.get(cli_name)
        if value is not None:
            resolved[cli_name] = value
            sources[cli_name] = f"cli: --{cli_name}"

    resolved["strict_params"] = config.strict_params or bool(strict)
    resolved["column_types"] = dict(config.column_types)
    resolved["sentry_dsn"] = config.sentry_dsn
    resolved["active_profile"] = effective_profile
    resolved["sources"] = sources
    try:
        return ResolvedConfig(**resolved)
    except ValueError as e:
        raise ConfigError(f"Invalid connection settings: {e}") from e
