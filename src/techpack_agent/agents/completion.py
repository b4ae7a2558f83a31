"""Text-completion service backed by an Agent Framework agent."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Protocol

from agent_framework import Agent

from techpack_agent.errors import CompletionError
from techpack_agent.models.conversation import MessageRole

if TYPE_CHECKING:
    from collections.abc import Sequence

    from agent_framework.azure import AzureOpenAIChatClient

    from techpack_agent.models.conversation import ConversationMessage

logger = logging.getLogger(__name__)

_ROLE_LABELS = {MessageRole.USER: "User", MessageRole.ASSISTANT: "Assistant"}


class CompletionService(Protocol):
    async def complete(
        self,
        system_prompt: str,
        history: Sequence[ConversationMessage],
        message: str,
    ) -> str: ...


def format_task(history: Sequence[ConversationMessage], message: str) -> str:
    """Render prior turns and the new user message as a single agent task."""
    lines: list[str] = []
    turns = [m for m in history if m.role in _ROLE_LABELS]
    if turns:
        lines.append("Conversation so far:")
        lines.extend(f"{_ROLE_LABELS[m.role]}: {m.content}" for m in turns)
        lines.append("")
        lines.append("Latest user message:")
    lines.append(message)
    return "\n".join(lines)


class AgentCompletionService:
    """Run one agent call per chat turn, bounded by ``timeout`` seconds.

    No retries happen here; any failure or timeout surfaces as
    :class:`CompletionError`.
    """

    def __init__(self, client: AzureOpenAIChatClient, *, timeout: float = 60.0) -> None:
        self._client = client
        self._timeout = timeout

    async def complete(
        self,
        system_prompt: str,
        history: Sequence[ConversationMessage],
        message: str,
    ) -> str:
        agent = Agent(self._client, instructions=system_prompt, name="techpack-assistant")
        task = format_task(history, message)
        started_at = time.monotonic()
        try:
            async with asyncio.timeout(self._timeout):
                response = await agent.run(task)
        except TimeoutError as exc:
            logger.warning("Completion timed out — timeout_s=%.0f", self._timeout)
            raise CompletionError("The assistant took too long to respond") from exc
        except Exception as exc:
            logger.exception("Completion failed")
            raise CompletionError(str(exc) or "Failed to get AI response") from exc

        text = getattr(response, "text", None) or ""
        logger.info(
            "Completion received — chars=%d history=%d duration_ms=%.0f",
            len(text),
            len(history),
            (time.monotonic() - started_at) * 1000,
        )
        if not text.strip():
            raise CompletionError("No response generated from AI")
        return text
