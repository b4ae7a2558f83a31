"""Azure OpenAI chat client factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agent_framework.azure import AzureOpenAIChatClient
from azure.identity import DefaultAzureCredential

if TYPE_CHECKING:
    from techpack_agent.config import OpenAIConfig

logger = logging.getLogger(__name__)


def create_chat_client(
    config: OpenAIConfig, *, use_key: str | None = None
) -> AzureOpenAIChatClient:
    """Create an AzureOpenAIChatClient.

    An explicit ``use_key`` (or ``AZURE_OPENAI_API_KEY``) authenticates with an
    API key; otherwise DefaultAzureCredential is used, which resolves to Azure
    CLI credentials locally and managed identity when deployed.
    """
    api_key = use_key or config.api_key
    logger.info(
        "Chat client created — endpoint=%s deployment=%s auth=%s",
        config.endpoint,
        config.deployment,
        "key" if api_key else "identity",
    )
    if api_key:
        return AzureOpenAIChatClient(
            endpoint=config.endpoint,
            deployment_name=config.deployment,
            api_key=api_key,
        )
    return AzureOpenAIChatClient(
        endpoint=config.endpoint,
        deployment_name=config.deployment,
        credential=DefaultAzureCredential(),
    )
