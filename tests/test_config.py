"""Tests for configuration module."""

from techpack_agent.config import (
    AppConfig,
    CosmosConfig,
    ImageConfig,
    OpenAIConfig,
    Settings,
    StorageConfig,
    _env,
    _env_int,
)


def test_env_returns_value(monkeypatch):
    monkeypatch.setenv("TEST_KEY", "hello")
    assert _env("TEST_KEY") == "hello"


def test_env_returns_default_when_missing(monkeypatch):
    monkeypatch.delenv("TEST_KEY", raising=False)
    assert _env("TEST_KEY", "fallback") == "fallback"


def test_env_int_parses_and_falls_back(monkeypatch):
    monkeypatch.setenv("TEST_INT", "12")
    assert _env_int("TEST_INT", 3) == 12
    monkeypatch.setenv("TEST_INT", "twelve")
    assert _env_int("TEST_INT", 3) == 3
    monkeypatch.delenv("TEST_INT")
    assert _env_int("TEST_INT", 3) == 3


def test_app_config_is_development_true():
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "env", "development")
    assert config.is_development is True


def test_app_config_is_development_false():
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "env", "production")
    assert config.is_development is False


def test_cosmos_config_defaults(monkeypatch):
    monkeypatch.setenv("COSMOS_ENDPOINT", "https://cosmos.example.com")
    monkeypatch.setenv("COSMOS_KEY", "secret")
    monkeypatch.delenv("COSMOS_DATABASE", raising=False)
    config = CosmosConfig()
    assert config.endpoint == "https://cosmos.example.com"
    assert config.key == "secret"
    assert config.database == "techpack-agent"


def test_openai_config(monkeypatch):
    monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://oai.example.com")
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o")
    monkeypatch.delenv("COMPLETION_TIMEOUT_SECONDS", raising=False)
    config = OpenAIConfig()
    assert config.endpoint == "https://oai.example.com"
    assert config.deployment == "gpt-4o"
    assert config.completion_timeout == 60


def test_image_config_defaults(monkeypatch):
    monkeypatch.delenv("AZURE_OPENAI_IMAGE_DEPLOYMENT", raising=False)
    monkeypatch.setenv("IMAGE_RETRY_ATTEMPTS", "5")
    config = ImageConfig()
    assert config.deployment == "gpt-image-1"
    assert config.retry_attempts == 5


def test_storage_config_default_container(monkeypatch):
    monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", "conn")
    monkeypatch.delenv("AZURE_STORAGE_CONTAINER", raising=False)
    config = StorageConfig()
    assert config.connection_string == "conn"
    assert config.container == "product-views"


def test_settings_composes_all_configs():
    settings = Settings()
    assert isinstance(settings.cosmos, CosmosConfig)
    assert isinstance(settings.openai, OpenAIConfig)
    assert isinstance(settings.image, ImageConfig)
    assert isinstance(settings.storage, StorageConfig)
    assert isinstance(settings.app, AppConfig)


def test_app_config_session_idle_seconds(monkeypatch):
    monkeypatch.setenv("CHAT_SESSION_IDLE_SECONDS", "900")
    assert AppConfig().session_idle_seconds == 900
    monkeypatch.delenv("CHAT_SESSION_IDLE_SECONDS")
    assert AppConfig().session_idle_seconds == 3600
