"""Prompt loader — reads prompt templates from the prompts/ directory."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from string import Template

PROMPTS_DIR = Path(__file__).resolve().parent.parent.parent.parent / "prompts"

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load the markdown prompt file ``name``.

    Raises ``FileNotFoundError`` if the prompt file does not exist.
    """
    path = PROMPTS_DIR / f"{name}.md"
    text = path.read_text(encoding="utf-8")
    logger.debug("Prompt loaded — name=%s path=%s", name, path)
    return text


def render_prompt(name: str, **values: str) -> str:
    """Load ``name`` and substitute ``$placeholders``; unknown ``$`` text is left intact."""
    return Template(load_prompt(name)).safe_substitute(values)
