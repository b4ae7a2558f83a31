"""Chat sessions, intent classification, edit extraction and turn orchestration."""

from techpack_agent.chat.extractor import (
    ParseFailure,
    ParseFailureReason,
    extract,
    parse_edit_action,
    strip_edit_blocks,
)
from techpack_agent.chat.intent import IntentClassifier, RuleBasedIntentClassifier, classify
from techpack_agent.chat.orchestrator import EditOrchestrator
from techpack_agent.chat.quick_actions import QuickAction, find_quick_action, quick_actions_for
from techpack_agent.chat.session import ChatSession, SessionRegistry, Transcript, TurnState

__all__ = [
    "ChatSession",
    "EditOrchestrator",
    "IntentClassifier",
    "ParseFailure",
    "ParseFailureReason",
    "QuickAction",
    "RuleBasedIntentClassifier",
    "SessionRegistry",
    "Transcript",
    "TurnState",
    "classify",
    "extract",
    "find_quick_action",
    "parse_edit_action",
    "quick_actions_for",
    "strip_edit_blocks",
]
