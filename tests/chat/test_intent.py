"""Tests for rule-based intent classification."""

import re

import pytest

from techpack_agent.chat.intent import RuleBasedIntentClassifier, classify
from techpack_agent.models.conversation import Intent


class TestClassify:
    """Test ordered rule evaluation."""

    def test_edit_phrased_as_question_is_edit(self) -> None:
        """Verify edit patterns win over the interrogative form."""
        assert classify("Can you change the product name to Aria?") is Intent.EDIT

    @pytest.mark.parametrize(
        "utterance",
        [
            "Update the materials to use organic cotton",
            "The price should be 49 USD",
            "set the lead time to 6 weeks",
            "Replace the zipper with a YKK #5",
        ],
    )
    def test_edit(self, utterance: str) -> None:
        assert classify(utterance) is Intent.EDIT

    @pytest.mark.parametrize(
        "utterance",
        [
            "What are the dimensions?",
            "how sustainable is canvas",
            "Is this waterproof?",
            "Tell me about the hardware",
        ],
    )
    def test_question(self, utterance: str) -> None:
        assert classify(utterance) is Intent.QUESTION

    @pytest.mark.parametrize("utterance", ["Thanks!", "Great work", "hello there"])
    def test_chat(self, utterance: str) -> None:
        assert classify(utterance) is Intent.CHAT


def test_custom_patterns() -> None:
    """Verify the rule lists can be swapped without touching callers."""
    classifier = RuleBasedIntentClassifier(
        edit_patterns=(re.compile(r"^/edit\b"),),
        question_patterns=(),
    )
    assert classifier.classify("/edit price") is Intent.EDIT
    assert classifier.classify("What is this?") is Intent.CHAT
