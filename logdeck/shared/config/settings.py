# Path: logdeck/shared/config/settings.py
"""Configuration resolver.

User options arrive as plain dicts (camelCase keys as documented, or their
snake_case equivalents) and are merged over the defaults declared on the
models below. The resulting ``LogManagerConfig`` is frozen; updates produce a
new instance through ``resolve_config(options, base=current)``.
"""
import os
import typing
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from logdeck.shared.errors.domain.config import ConfigurationError
from logdeck.shared.utilities.constants import (
    DEFAULT_ALLOWED_IPS,
    DEFAULT_BUFFER_SIZE,
    DEFAULT_ERROR_LEVEL,
    DEFAULT_LEVELS,
    DEFAULT_LOG_FILE_NAME,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_SERVER_PORT,
)
from logdeck.shared.utilities.types import LogFormatter, Options


class _Settings(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore"
    )


class Credentials(_Settings):
    """Username/password pair (dashboard Basic auth, SMTP login)."""
    user: Optional[str] = None
    password: Optional[str] = Field(default=None, alias="pass")


class ServerConfig(_Settings):
    """Settings of the access-gated dashboard server."""
    start_web_server: bool = False
    host: str = "127.0.0.1"
    server_port: int = Field(default=DEFAULT_SERVER_PORT, ge=0, le=65535)
    auth_enabled: bool = True
    allowed_ips: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_IPS), alias="allowedIPs")
    bypass_ip_check: bool = Field(default=False, alias="bypassIPCheck")
    auth: Credentials = Field(default_factory=Credentials)
    enable_realtime: bool = True
    enable_metrics: bool = True
    enable_search: bool = True
    enable_charts: bool = True


class SmtpConfig(_Settings):
    host: str
    port: Optional[int] = None
    secure: bool = False
    auth: Optional[Credentials] = None
    timeout: float = 10.0

    @property
    def effective_port(self) -> int:
        if self.port:
            return self.port
        return 465 if self.secure else 587


class EmailAlertRule(_Settings):
    """Send an e-mail when an entry of ``level`` (containing ``pattern``) is logged."""
    level: str
    pattern: Optional[str] = None
    smtp: SmtpConfig
    sender: str = Field(alias="from")
    to: str
    subject: Optional[str] = None

    @property
    def recipients(self) -> List[str]:
        return [address.strip() for address in self.to.split(",") if address.strip()]


class MongoSettings(_Settings):
    uri: str = "mongodb://localhost:27017"
    database: str = "logdeck"
    collection_name: str = "logs"
    timeout_ms: int = 5000
    connect_attempts: int = Field(default=3, ge=1)


class DbConfig(_Settings):
    type: Literal["mongodb", "sql"]
    mongodb: MongoSettings = Field(default_factory=MongoSettings)


class LogManagerConfig(_Settings):
    """Effective, immutable engine configuration."""
    levels: List[str] = Field(default_factory=lambda: list(DEFAULT_LEVELS))
    log_level: Optional[str] = None
    error_level: str = DEFAULT_ERROR_LEVEL
    console_only: bool = False
    file_only: bool = False
    log_file: Optional[str] = None
    log_dir: Optional[str] = None
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0)
    compress_old_logs: bool = True
    enable_metrics: bool = False
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    email_alerts: List[EmailAlertRule] = Field(default_factory=list)
    db_config: Optional[DbConfig] = None
    log_format: Optional[LogFormatter] = None
    server_config: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("levels")
    @classmethod
    def normalize_levels(cls, value: List[str]) -> List[str]:
        levels = []
        for level in value:
            level = str(level).strip()
            if level and level not in levels:
                levels.append(level)
        if not levels:
            raise ValueError("At least one log level must be configured.")
        return levels

    @model_validator(mode="after")
    def check_consistency(self) -> "LogManagerConfig":
        if self.console_only and self.file_only:
            raise ValueError("Cannot have both consoleOnly and fileOnly set to true.")
        if self.log_level is not None and self.log_level not in self.levels:
            raise ValueError(f"Default log level {self.log_level!r} is not one of {self.levels}.")
        return self

    @property
    def default_level(self) -> str:
        return self.log_level or self.levels[0]

    @property
    def log_path(self) -> Path:
        """Path of the active log file."""
        directory = Path(self.log_dir) if self.log_dir else None
        if self.log_file:
            path = Path(self.log_file)
            if directory is not None and not path.is_absolute():
                path = directory / path
            return path
        return (directory or Path(os.getcwd())) / DEFAULT_LOG_FILE_NAME

    @property
    def metrics_endpoint_enabled(self) -> bool:
        return self.enable_metrics and self.server_config.enable_metrics


def _nested_model(annotation: Any) -> Optional[Type[BaseModel]]:
    """Find the pydantic model inside Optional[...] / List[...] annotations."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    for arg in typing.get_args(annotation):
        model = _nested_model(arg)
        if model is not None:
            return model
    return None


def _to_aliases(model: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, Any]:
    """Rewrite option keys (field name or alias) to the model's aliases, recursively."""
    lookup = {}
    for name, field in model.model_fields.items():
        alias = field.alias or name
        lookup[name] = (alias, field)
        lookup[alias] = (alias, field)

    normalized = {}
    for key, value in data.items():
        if key not in lookup:
            normalized[key] = value
            continue
        alias, field = lookup[key]
        nested = _nested_model(field.annotation)
        if nested is not None and isinstance(value, dict):
            value = _to_aliases(nested, value)
        elif nested is not None and isinstance(value, list):
            value = [_to_aliases(nested, item) if isinstance(item, dict) else item for item in value]
        normalized[alias] = value
    return normalized


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config(
        options: Union[Options, LogManagerConfig, None] = None,
        base: Optional[LogManagerConfig] = None
) -> LogManagerConfig:
    """
    Merge user options over defaults (or over ``base``) into an effective config.

    Args:
        options: User options; camelCase or snake_case keys.
        base: Existing configuration to update instead of the defaults.

    Returns:
        A validated, frozen LogManagerConfig.

    Raises:
        ConfigurationError: If the merged options are invalid, e.g. both
            consoleOnly and fileOnly are set.
    """
    if isinstance(options, LogManagerConfig):
        if base is None:
            return options
        options = options.model_dump(by_alias=True)

    raw = _to_aliases(LogManagerConfig, dict(options or {}))
    if base is not None:
        raw = _deep_merge(base.model_dump(by_alias=True), raw)

    try:
        return LogManagerConfig.model_validate(raw)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
            for error in exc.errors()
        ]
        raise ConfigurationError(
            message="; ".join(errors),
            details={"errors": errors}
        ) from exc
