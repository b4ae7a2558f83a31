"""Tests for the LLM client factory."""

from unittest.mock import patch

import pytest

from techpack_agent.config import OpenAIConfig


@pytest.fixture
def openai_config() -> OpenAIConfig:
    return OpenAIConfig(
        endpoint="https://oai.example.com",
        deployment="gpt-4o",
        api_key="",
        completion_timeout=60,
    )


@pytest.mark.unit
class TestCreateChatClient:
    """Test the Create Chat Client."""

    def test_creates_client_with_api_key(self, openai_config: OpenAIConfig) -> None:
        """Verify creates client with api key."""
        with patch("techpack_agent.agents.llm.AzureOpenAIChatClient") as MockClient:
            from techpack_agent.agents.llm import create_chat_client

            client = create_chat_client(openai_config, use_key="test-api-key")

            MockClient.assert_called_once_with(
                endpoint=openai_config.endpoint,
                deployment_name=openai_config.deployment,
                api_key="test-api-key",
            )
            assert client == MockClient.return_value

    def test_configured_key_is_used(self, openai_config: OpenAIConfig) -> None:
        """Verify AZURE_OPENAI_API_KEY from settings selects key auth."""
        config = OpenAIConfig(
            endpoint=openai_config.endpoint,
            deployment=openai_config.deployment,
            api_key="from-env",
            completion_timeout=60,
        )
        with patch("techpack_agent.agents.llm.AzureOpenAIChatClient") as MockClient:
            from techpack_agent.agents.llm import create_chat_client

            create_chat_client(config)

            assert MockClient.call_args.kwargs["api_key"] == "from-env"

    def test_creates_client_with_managed_identity(self, openai_config: OpenAIConfig) -> None:
        """Verify creates client with managed identity."""
        with (
            patch("techpack_agent.agents.llm.AzureOpenAIChatClient") as MockClient,
            patch("techpack_agent.agents.llm.DefaultAzureCredential") as MockCred,
        ):
            from techpack_agent.agents.llm import create_chat_client

            client = create_chat_client(openai_config)

            MockClient.assert_called_once_with(
                endpoint=openai_config.endpoint,
                deployment_name=openai_config.deployment,
                credential=MockCred.return_value,
            )
            assert client == MockClient.return_value
