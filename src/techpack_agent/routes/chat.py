"""Chat routes — run turns, read and clear a session transcript."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, Request, Response, status
from pydantic import BaseModel

from techpack_agent.chat.quick_actions import QuickAction, quick_actions_for
from techpack_agent.chat.session import ChatSession
from techpack_agent.errors import SessionBusyError
from techpack_agent.models.conversation import ConversationMessage

router = APIRouter(prefix="/products/{product_id}/chat", tags=["chat"])
logger = logging.getLogger(__name__)

DEFAULT_CLIENT_ID = "default"


class ChatRequest(BaseModel):
    message: str = ""
    active_section: str | None = None
    quick_action: str | None = None


class QuickActionOut(BaseModel):
    id: str
    label: str
    prompt: str


class ChatResponse(BaseModel):
    message: ConversationMessage
    active_section: str
    quick_actions: list[QuickActionOut]


class TranscriptResponse(BaseModel):
    messages: list[ConversationMessage]
    active_section: str
    is_busy: bool
    last_error: str | None
    quick_actions: list[QuickActionOut]


def _quick_actions(section: str) -> list[QuickActionOut]:
    return [_quick_action_out(action) for action in quick_actions_for(section)]


def _quick_action_out(action: QuickAction) -> QuickActionOut:
    return QuickActionOut(id=action.id, label=action.label, prompt=action.prompt)


async def _session(request: Request, product_id: str, client_id: str) -> ChatSession:
    products = request.app.state.products
    product = await products.get_product(product_id)
    if product is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"Product {product_id} not found")
    return request.app.state.sessions.get_or_create(
        client_id, product_id, product_name=product.name
    )


@router.post("", response_model=ChatResponse)
async def send_message(
    request: Request,
    product_id: str,
    body: ChatRequest,
    x_session_id: str = Header(default=DEFAULT_CLIENT_ID),
) -> ChatResponse:
    """Run one chat turn and return the assistant's reply."""
    orchestrator = request.app.state.orchestrator
    if orchestrator is None:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, "Chat is not configured")
    session = await _session(request, product_id, x_session_id)
    if body.active_section and not session.is_busy:
        session.active_section = body.active_section

    try:
        reply = await orchestrator.send_message(
            session, body.message, quick_action=body.quick_action
        )
    except SessionBusyError as exc:
        raise HTTPException(
            status.HTTP_409_CONFLICT, "A message is already being processed"
        ) from exc
    if reply is None:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Message is empty")

    return ChatResponse(
        message=reply,
        active_section=session.active_section,
        quick_actions=_quick_actions(session.active_section),
    )


@router.get("", response_model=TranscriptResponse)
async def get_transcript(
    request: Request,
    product_id: str,
    x_session_id: str = Header(default=DEFAULT_CLIENT_ID),
) -> TranscriptResponse:
    """Return the transcript, posting the welcome message on first visit."""
    session = await _session(request, product_id, x_session_id)
    session.initialize()
    return TranscriptResponse(
        messages=session.transcript.messages,
        active_section=session.active_section,
        is_busy=session.is_busy,
        last_error=session.last_error,
        quick_actions=_quick_actions(session.active_section),
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_transcript(
    request: Request,
    product_id: str,
    x_session_id: str = Header(default=DEFAULT_CLIENT_ID),
) -> Response:
    session = request.app.state.sessions.get(x_session_id, product_id)
    if session is not None:
        if session.is_busy:
            raise HTTPException(status.HTTP_409_CONFLICT, "A message is being processed")
        session.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
