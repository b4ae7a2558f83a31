"""Edit application orchestrator — runs one chat turn end to end."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from techpack_agent.agents.prompts import render_prompt
from techpack_agent.chat.extractor import extract, strip_edit_blocks
from techpack_agent.chat.intent import RuleBasedIntentClassifier
from techpack_agent.chat.quick_actions import find_quick_action
from techpack_agent.chat.session import HISTORY_TURNS, TurnState
from techpack_agent.errors import CompletionError, SessionBusyError
from techpack_agent.models.conversation import (
    ConversationMessage,
    Intent,
    MessageMetadata,
    MessageRole,
)
from techpack_agent.techpack.context import build_product_context, tab_for_section
from techpack_agent.techpack.schema import SECTIONS

if TYPE_CHECKING:
    from techpack_agent.agents.completion import CompletionService
    from techpack_agent.chat.intent import IntentClassifier
    from techpack_agent.chat.session import ChatSession
    from techpack_agent.database.repositories.products import DocumentStore
    from techpack_agent.models.edit_action import EditAction
    from techpack_agent.models.product import Product

logger = logging.getLogger(__name__)

ERROR_REPLY = "I'm sorry, I encountered an error processing your request. Please try again."
APPLIED_NOTE = "✅ **Change applied successfully!**"
NOT_APPLIED_NOTE = (
    "⚠️ **Could not apply the change automatically. Please make the change manually.**"
)


class EditOrchestrator:
    """Drives a session through classify → context → complete → extract → apply → report.

    Every accepted turn ends with exactly one assistant message replacing the
    loading placeholder, whether the turn succeeded or not.
    """

    def __init__(
        self,
        completion: CompletionService,
        store: DocumentStore,
        classifier: IntentClassifier | None = None,
    ) -> None:
        self._completion = completion
        self._store = store
        self._classifier = classifier or RuleBasedIntentClassifier()

    async def send_message(
        self,
        session: ChatSession,
        text: str,
        *,
        quick_action: str | None = None,
    ) -> ConversationMessage | None:
        """Run one turn and return the terminal assistant message.

        Returns ``None`` for an empty message. Raises :class:`SessionBusyError`
        when a turn is already running for ``session``.
        """
        if quick_action and not text.strip():
            action = find_quick_action(quick_action)
            if action is not None:
                text = action.prompt
        text = text.strip()
        if not text:
            return None
        if session.is_busy:
            raise SessionBusyError(session.product_id)

        async with session.lock:
            session.initialize()
            history = session.transcript.recent(HISTORY_TURNS)
            session.transcript.append(
                ConversationMessage(
                    role=MessageRole.USER,
                    content=text,
                    metadata=MessageMetadata(
                        section=session.active_section, quick_action=quick_action
                    ),
                )
            )
            placeholder = session.transcript.append(
                ConversationMessage(
                    role=MessageRole.ASSISTANT,
                    content="",
                    metadata=MessageMetadata(is_loading=True),
                )
            )
            try:
                reply = await self._run_turn(session, text, history)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Chat turn failed — product=%s", session.product_id)
                reply = self._error_reply(session, str(exc))
            finally:
                session.state = TurnState.IDLE
            return session.transcript.resolve_placeholder(placeholder.id, reply)

    async def _run_turn(
        self,
        session: ChatSession,
        text: str,
        history: list[ConversationMessage],
    ) -> ConversationMessage:
        session.state = TurnState.CLASSIFYING
        intent = self._classifier.classify(text)
        logger.info("Chat turn — product=%s intent=%s", session.product_id, intent)

        session.state = TurnState.CONTEXT_BUILDING
        try:
            product = await self._store.get_product(session.product_id)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Product lookup failed — product=%s", session.product_id)
            return self._error_reply(session, str(exc))
        system_prompt = self._system_prompt(product, session.active_section, intent)

        session.state = TurnState.AWAITING_COMPLETION
        try:
            completion = await self._completion.complete(system_prompt, history, text)
        except CompletionError as exc:
            return self._error_reply(session, str(exc))

        session.state = TurnState.EXTRACTING
        action = extract(completion)

        applied: bool | None = None
        if action is not None:
            session.state = TurnState.APPLYING
            applied = await self._apply(session, action)

        session.state = TurnState.REPORTING
        session.last_error = None
        content = strip_edit_blocks(completion)
        if applied is not None:
            content = f"{content}\n\n{APPLIED_NOTE if applied else NOT_APPLIED_NOTE}"
        return ConversationMessage(
            role=MessageRole.ASSISTANT,
            content=content,
            metadata=MessageMetadata(
                section=session.active_section,
                intent=intent,
                edit_action=action,
                edit_applied=applied,
            ),
        )

    def _system_prompt(self, product: Product | None, active_section: str, intent: Intent) -> str:
        if product is None:
            context = "No tech pack data available for this product."
        else:
            context = build_product_context(product, active_section)
        prompt = render_prompt("techpack_assistant", product_context=context)
        if intent is Intent.EDIT:
            tech_pack = product.tech_pack.sections if product is not None else {}
            prompt += "\n\n" + render_prompt(
                "edit_mode",
                valid_sections=", ".join(SECTIONS),
                tech_pack=json.dumps(tech_pack, indent=2, default=str),
            )
        return prompt

    async def _apply(self, session: ChatSession, action: EditAction) -> bool:
        tab = tab_for_section(action.section)
        if tab:
            session.navigate(tab)
        try:
            applied = await self._store.update_section(
                session.product_id, action.section, action.value, action.field
            )
        except Exception:  # noqa: BLE001
            logger.exception(
                "Edit apply failed — product=%s section=%s", session.product_id, action.section
            )
            return False
        logger.info(
            "Edit applied — product=%s section=%s field=%s ok=%s",
            session.product_id,
            action.section,
            action.field,
            applied,
        )
        return applied

    def _error_reply(self, session: ChatSession, error: str) -> ConversationMessage:
        session.state = TurnState.REPORTING
        session.last_error = error or "Failed to get response"
        return ConversationMessage(
            role=MessageRole.ASSISTANT,
            content=ERROR_REPLY,
            metadata=MessageMetadata(error=session.last_error),
        )
