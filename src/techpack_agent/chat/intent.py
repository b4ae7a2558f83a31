"""Intent classifier — rule-based edit/question/chat detection."""

from __future__ import annotations

import re
from typing import Protocol

from techpack_agent.models.conversation import Intent

# Checked first so that "can you change X to Y?" is still an edit.
EDIT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(change|update|modify|edit|set|make|replace|adjust|alter)\b", re.IGNORECASE),
    re.compile(r"\bto\s+be\b", re.IGNORECASE),
    re.compile(r"\bshould\s+be\b", re.IGNORECASE),
    re.compile(r"\bneeds?\s+to\s+be\b", re.IGNORECASE),
    re.compile(r"\bwant\s+(to\s+)?(change|update|modify|set|make)\b", re.IGNORECASE),
    re.compile(r"\bcan\s+you\s+(change|update|modify|set|make)\b", re.IGNORECASE),
)

QUESTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(what|why|how|when|where|who|which|is|are|do|does|can|could|would|should)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\?$"),
    re.compile(r"\b(explain|describe|tell\s+me|what\s+is|what\s+are)\b", re.IGNORECASE),
)


class IntentClassifier(Protocol):
    def classify(self, utterance: str) -> Intent: ...


class RuleBasedIntentClassifier:
    """First matching rule wins: edit patterns, then question patterns, else chat."""

    def __init__(
        self,
        edit_patterns: tuple[re.Pattern[str], ...] = EDIT_PATTERNS,
        question_patterns: tuple[re.Pattern[str], ...] = QUESTION_PATTERNS,
    ) -> None:
        self._edit_patterns = edit_patterns
        self._question_patterns = question_patterns

    def classify(self, utterance: str) -> Intent:
        text = utterance.strip()
        if any(pattern.search(text) for pattern in self._edit_patterns):
            return Intent.EDIT
        if any(pattern.search(text) for pattern in self._question_patterns):
            return Intent.QUESTION
        return Intent.CHAT


_default = RuleBasedIntentClassifier()


def classify(utterance: str) -> Intent:
    return _default.classify(utterance)
