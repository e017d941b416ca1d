"""Configuration management for the notes application."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class CognitoSettings(BaseModel):
    """User pool and identity pool identifiers.

    These are provisioned outside this project and treated as opaque strings.
    """

    region: str = Field(default="us-east-1")
    user_pool_id: str | None = Field(default=None)
    app_client_id: str | None = Field(default=None)
    identity_pool_id: str | None = Field(default=None)

    @property
    def is_configured(self) -> bool:
        return bool(self.user_pool_id and self.app_client_id and self.identity_pool_id)


class ApiGatewaySettings(BaseModel):
    region: str = Field(default="us-east-1")
    url: str | None = Field(default=None)

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().rstrip("/")
        return value or None


class StorageSettings(BaseModel):
    bucket: str | None = Field(default=None)
    region: str | None = Field(default=None)


class AuthSettings(BaseModel):
    credential_expiry_margin_seconds: int = Field(
        default=60,
        ge=0,
        le=3600,
        description="Credentials are treated as expired this many seconds early.",
    )
    token_store_path: str = Field(default="./data/session.json")


class NotesTableSettings(BaseModel):
    table_name: str = Field(default="notes", min_length=1)


class Settings(BaseModel):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cognito: CognitoSettings = Field(default_factory=CognitoSettings)
    api_gateway: ApiGatewaySettings = Field(default_factory=ApiGatewaySettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    notes: NotesTableSettings = Field(default_factory=NotesTableSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "cognito_region": "COGNITO_REGION",
    "user_pool_id": "COGNITO_USER_POOL_ID",
    "app_client_id": "COGNITO_APP_CLIENT_ID",
    "identity_pool_id": "COGNITO_IDENTITY_POOL_ID",
    "api_region": "API_GATEWAY_REGION",
    "api_url": "API_GATEWAY_URL",
    "s3_bucket": "S3_BUCKET",
    "s3_region": "S3_REGION",
    "expiry_margin": "AUTH_CREDENTIAL_EXPIRY_MARGIN_SECONDS",
    "token_store_path": "AUTH_TOKEN_STORE_PATH",
    "table_name": "NOTES_TABLE_NAME",
}


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_path(path: str) -> str:
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return str(candidate.resolve())
    return str((_project_root() / candidate).resolve())


def _env_str(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %d", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")
    log_file_env = _env_str(ENV_KEYS["log_file"])
    cognito_region = _env_str(ENV_KEYS["cognito_region"]) or CognitoSettings().region

    settings_data: dict[str, object] = {
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _resolve_path(log_file_env) if log_file_env else None,
        },
        "cognito": {
            "region": cognito_region,
            "user_pool_id": _env_str(ENV_KEYS["user_pool_id"]),
            "app_client_id": _env_str(ENV_KEYS["app_client_id"]),
            "identity_pool_id": _env_str(ENV_KEYS["identity_pool_id"]),
        },
        "api_gateway": {
            "region": _env_str(ENV_KEYS["api_region"]) or cognito_region,
            "url": _env_str(ENV_KEYS["api_url"]),
        },
        "storage": {
            "bucket": _env_str(ENV_KEYS["s3_bucket"]),
            "region": _env_str(ENV_KEYS["s3_region"]) or cognito_region,
        },
        "auth": {
            "credential_expiry_margin_seconds": _env_int(
                ENV_KEYS["expiry_margin"],
                AuthSettings().credential_expiry_margin_seconds,
            ),
            "token_store_path": _resolve_path(
                os.getenv(ENV_KEYS["token_store_path"], AuthSettings().token_store_path)
            ),
        },
        "notes": {
            "table_name": os.getenv(ENV_KEYS["table_name"], NotesTableSettings().table_name),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
