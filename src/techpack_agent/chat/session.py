"""Chat sessions — per-conversation transcript, focus and turn state."""

from __future__ import annotations

import asyncio
import logging
import time
from enum import StrEnum
from typing import TYPE_CHECKING

from techpack_agent.models.conversation import ConversationMessage, MessageMetadata, MessageRole

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

HISTORY_TURNS = 10

WELCOME_TEMPLATE = """Hi! I'm your tech pack assistant for **{product_name}**. I can help you view and edit your product using natural language.

**Try saying:**
- "Change the product name to..."
- "Update the materials to use..."
- "What are the dimensions?"
- "Suggest improvements for the construction"

Just tell me what you want to change or ask!"""


class TurnState(StrEnum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    CONTEXT_BUILDING = "context_building"
    AWAITING_COMPLETION = "awaiting_completion"
    EXTRACTING = "extracting"
    APPLYING = "applying"
    REPORTING = "reporting"


class Transcript:
    """Ordered, append-only message list.

    The only permitted mutation of an appended message is replacing a loading
    placeholder with its resolved content.
    """

    def __init__(self) -> None:
        self._messages: list[ConversationMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> list[ConversationMessage]:
        return list(self._messages)

    def append(self, message: ConversationMessage) -> ConversationMessage:
        self._messages.append(message)
        return message

    def resolve_placeholder(
        self, placeholder_id: str, message: ConversationMessage
    ) -> ConversationMessage:
        """Replace the loading placeholder ``placeholder_id`` with ``message``."""
        for index, existing in enumerate(self._messages):
            if existing.id == placeholder_id:
                if not existing.metadata.is_loading:
                    raise ValueError(f"Message {placeholder_id} is not a loading placeholder")
                resolved = message.model_copy(update={"id": placeholder_id})
                self._messages[index] = resolved
                return resolved
        raise KeyError(placeholder_id)

    def recent(self, turns: int = HISTORY_TURNS) -> list[ConversationMessage]:
        """Return the last ``turns`` resolved user/assistant messages."""
        eligible = [
            message
            for message in self._messages
            if message.role in (MessageRole.USER, MessageRole.ASSISTANT)
            and not message.metadata.is_loading
        ]
        return eligible[-turns:] if turns > 0 else []

    def clear(self) -> None:
        self._messages.clear()


class ChatSession:
    """State owned by one conversation about one product."""

    def __init__(
        self,
        product_id: str,
        *,
        product_name: str = "",
        active_section: str = "overview",
        on_navigate: Callable[[str], None] | None = None,
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.active_section = active_section
        self.on_navigate = on_navigate
        self.transcript = Transcript()
        self.state = TurnState.IDLE
        self.last_error: str | None = None
        self._lock = asyncio.Lock()
        self._initialized = False

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    def navigate(self, tab: str) -> None:
        """Move UI focus to ``tab``."""
        self.active_section = tab
        if self.on_navigate:
            self.on_navigate(tab)

    def initialize(self) -> ConversationMessage | None:
        """Post the welcome message once per session."""
        if self._initialized:
            return None
        self._initialized = True
        welcome = ConversationMessage(
            role=MessageRole.ASSISTANT,
            content=WELCOME_TEMPLATE.format(product_name=self.product_name or "your product"),
            metadata=MessageMetadata(section=self.active_section),
        )
        return self.transcript.append(welcome)

    def add_system_message(self, content: str) -> ConversationMessage:
        return self.transcript.append(ConversationMessage(role=MessageRole.SYSTEM, content=content))

    def clear(self) -> None:
        self.transcript.clear()
        self.last_error = None
        self._initialized = False
        logger.info("Chat session cleared — product=%s", self.product_id)


class SessionRegistry:
    """In-process sessions keyed by (client session id, product id).

    Sessions untouched for ``max_idle_seconds`` are dropped on the next lookup
    unless a turn is still running on them.
    """

    def __init__(
        self,
        *,
        max_idle_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: dict[tuple[str, str], ChatSession] = {}
        self._last_used: dict[tuple[str, str], float] = {}
        self._max_idle_seconds = max_idle_seconds
        self._clock = clock

    def __len__(self) -> int:
        return len(self._sessions)

    def get_or_create(
        self, client_id: str, product_id: str, *, product_name: str = ""
    ) -> ChatSession:
        now = self._clock()
        self._evict_idle(now)
        key = (client_id, product_id)
        session = self._sessions.get(key)
        if session is None:
            session = ChatSession(product_id, product_name=product_name)
            self._sessions[key] = session
        self._last_used[key] = now
        return session

    def get(self, client_id: str, product_id: str) -> ChatSession | None:
        now = self._clock()
        self._evict_idle(now)
        key = (client_id, product_id)
        session = self._sessions.get(key)
        if session is not None:
            self._last_used[key] = now
        return session

    def discard(self, client_id: str, product_id: str) -> None:
        self._sessions.pop((client_id, product_id), None)
        self._last_used.pop((client_id, product_id), None)

    def _evict_idle(self, now: float) -> None:
        expired = [
            key
            for key, used in self._last_used.items()
            if now - used > self._max_idle_seconds and not self._sessions[key].is_busy
        ]
        for key in expired:
            del self._sessions[key]
            del self._last_used[key]
        if expired:
            logger.info("Idle chat sessions evicted — count=%d", len(expired))
