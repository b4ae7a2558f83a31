"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class CosmosConfig:
    endpoint: str = field(default_factory=lambda: _env("COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("COSMOS_KEY"))
    database: str = field(default_factory=lambda: _env("COSMOS_DATABASE", "techpack-agent"))


@dataclass(frozen=True)
class OpenAIConfig:
    endpoint: str = field(default_factory=lambda: _env("AZURE_OPENAI_ENDPOINT"))
    deployment: str = field(default_factory=lambda: _env("AZURE_OPENAI_DEPLOYMENT"))
    api_key: str = field(default_factory=lambda: _env("AZURE_OPENAI_API_KEY"))
    completion_timeout: int = field(
        default_factory=lambda: _env_int("COMPLETION_TIMEOUT_SECONDS", 60)
    )


@dataclass(frozen=True)
class ImageConfig:
    deployment: str = field(
        default_factory=lambda: _env("AZURE_OPENAI_IMAGE_DEPLOYMENT", "gpt-image-1")
    )
    api_version: str = field(
        default_factory=lambda: _env("AZURE_OPENAI_API_VERSION", "2025-04-01-preview")
    )
    retry_attempts: int = field(default_factory=lambda: _env_int("IMAGE_RETRY_ATTEMPTS", 3))


@dataclass(frozen=True)
class StorageConfig:
    account_url: str = field(default_factory=lambda: _env("AZURE_STORAGE_ACCOUNT_URL"))
    connection_string: str = field(
        default_factory=lambda: _env("AZURE_STORAGE_CONNECTION_STRING")
    )
    container: str = field(
        default_factory=lambda: _env("AZURE_STORAGE_CONTAINER", "product-views")
    )


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    session_idle_seconds: int = field(
        default_factory=lambda: _env_int("CHAT_SESSION_IDLE_SECONDS", 3600)
    )

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class Settings:
    cosmos: CosmosConfig = field(default_factory=CosmosConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    image: ImageConfig = field(default_factory=ImageConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    app: AppConfig = field(default_factory=AppConfig)


def load_settings() -> Settings:
    """Load ``.env`` (if present) and build the settings tree."""
    load_dotenv()
    return Settings()
