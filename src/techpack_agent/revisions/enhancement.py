"""Edit-prompt enhancement before multi-view generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from techpack_agent.agents.prompts import render_prompt

if TYPE_CHECKING:
    from techpack_agent.agents.completion import CompletionService

logger = logging.getLogger(__name__)

_LABEL = "enhanced prompt:"


def _request(edit_prompt: str, product_details: str) -> str:
    if not product_details:
        return f'The user wants to: "{edit_prompt}"'
    return f'Current product:\n{product_details}\n\nThe user wants to: "{edit_prompt}"'


class PromptEnhancer:
    """Rewrites a short edit request into a detailed image prompt.

    The rewrite is best effort: when the completion service fails or returns
    nothing usable, the caller gets ``edit_prompt`` back unchanged.
    """

    def __init__(self, completion: CompletionService) -> None:
        self._completion = completion

    async def enhance(
        self,
        edit_prompt: str,
        *,
        product_name: str = "Product",
        product_details: str = "",
    ) -> str:
        try:
            system_prompt = render_prompt("view_edit_enhance", product_name=product_name)
            enhanced = await self._completion.complete(
                system_prompt, [], _request(edit_prompt, product_details)
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Prompt enhancement failed, using edit as given — %s", exc)
            return edit_prompt

        enhanced = enhanced.strip()
        if enhanced.lower().startswith(_LABEL):
            enhanced = enhanced[len(_LABEL) :].strip()
        enhanced = enhanced.strip('"')
        if not enhanced:
            return edit_prompt
        logger.info(
            "Edit prompt enhanced — chars_in=%d chars_out=%d", len(edit_prompt), len(enhanced)
        )
        return enhanced
