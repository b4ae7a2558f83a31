"""Quick actions — canned prompts offered per tech pack tab."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QuickAction:
    id: str
    label: str
    prompt: str


QUICK_ACTIONS_BY_SECTION: dict[str, tuple[QuickAction, ...]] = {
    "overview": (
        QuickAction(
            "describe-product",
            "Describe product",
            "Describe this product in detail based on all available data and images.",
        ),
        QuickAction(
            "suggest-improvements",
            "Suggest improvements",
            "What improvements would you suggest for this product design?",
        ),
    ),
    "colors": (
        QuickAction(
            "analyze-palette",
            "Analyze palette",
            "Analyze the color palette of this product. Are the colors well-balanced?",
        ),
        QuickAction(
            "suggest-colors",
            "Suggest alternatives",
            "Suggest alternative color combinations for this product.",
        ),
    ),
    "materials": (
        QuickAction(
            "analyze-materials",
            "Analyze materials",
            "Analyze the materials used in this product. What are their properties?",
        ),
        QuickAction(
            "material-alternatives",
            "Suggest alternatives",
            "Suggest alternative materials that could reduce costs or improve quality.",
        ),
        QuickAction(
            "sustainability-check",
            "Sustainability",
            "How sustainable are the current materials? What eco-friendly alternatives exist?",
        ),
    ),
    "construction": (
        QuickAction(
            "complexity-analysis",
            "Complexity analysis",
            "What is the manufacturing complexity of this design?",
        ),
        QuickAction(
            "cost-optimization",
            "Cost optimization",
            "How can we optimize the construction to reduce manufacturing costs?",
        ),
    ),
    "measurements": (
        QuickAction(
            "verify-dimensions",
            "Verify dimensions",
            "Are the measurements consistent across all views and sketches?",
        ),
        QuickAction(
            "grading-suggestions",
            "Grading rules",
            "What grading rules would you suggest for scaling this product to different sizes?",
        ),
    ),
    "hardware": (
        QuickAction(
            "hardware-analysis",
            "Analyze hardware",
            "Analyze the hardware components. Are they suitable for this product?",
        ),
    ),
    "packaging": (
        QuickAction(
            "packaging-analysis",
            "Analyze packaging",
            "Is the packaging suitable for this product? Any improvements needed?",
        ),
        QuickAction(
            "eco-packaging",
            "Eco-friendly options",
            "What eco-friendly packaging alternatives would you suggest?",
        ),
    ),
    "default": (
        QuickAction(
            "explain-section",
            "Explain this",
            "Explain the current section and its importance in the tech pack.",
        ),
        QuickAction(
            "suggest-edits",
            "Suggest edits",
            "Review this section and suggest any improvements or corrections.",
        ),
    ),
}


def quick_actions_for(section: str) -> tuple[QuickAction, ...]:
    return QUICK_ACTIONS_BY_SECTION.get(section, QUICK_ACTIONS_BY_SECTION["default"])


def find_quick_action(action_id: str) -> QuickAction | None:
    for actions in QUICK_ACTIONS_BY_SECTION.values():
        for action in actions:
            if action.id == action_id:
                return action
    return None
