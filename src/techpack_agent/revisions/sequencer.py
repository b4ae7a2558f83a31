"""Multi-view generation — front first, then back and side from the new front."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from azure.core.exceptions import AzureError

from techpack_agent.agents.prompts import render_prompt
from techpack_agent.errors import ImageGenerationError, TechPackAgentError, UploadError
from techpack_agent.imaging.generation import decode_data_url
from techpack_agent.models.view_revision import ViewRevision, ViewType
from techpack_agent.revisions.batches import BatchKind, new_batch_id

if TYPE_CHECKING:
    from techpack_agent.imaging.generation import ImageGenerator
    from techpack_agent.revisions.enhancement import PromptEnhancer
    from techpack_agent.revisions.ledger import RevisionLedger
    from techpack_agent.storage.blob import BlobStore

logger = logging.getLogger(__name__)

_PROMPT_FOR_VIEW = {
    ViewType.FRONT: "view_front",
    ViewType.BACK: "view_back",
    ViewType.SIDE: "view_side",
}
_DEPENDENT_VIEWS = (ViewType.BACK, ViewType.SIDE)


@dataclass
class SequenceResult:
    """Outcome of one generation run, reported per view."""

    batch_id: str
    prompt: str = ""
    revisions: dict[ViewType, ViewRevision] = field(default_factory=dict)
    failures: dict[ViewType, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.revisions)

    @property
    def partial(self) -> bool:
        return bool(self.revisions) and bool(self.failures)


class MultiViewSequencer:
    """Generates, uploads and commits view images as one batch.

    Back and side depend on the freshly generated front image and only start
    once it exists. A view whose generation, upload or commit fails is recorded
    in :attr:`SequenceResult.failures` while the other views carry on. With an
    ``enhancer`` the edit request is rewritten once before any view is generated;
    the ledger still records the request as the user wrote it.
    """

    def __init__(
        self,
        generator: ImageGenerator,
        blobs: BlobStore,
        ledger: RevisionLedger,
        *,
        enhancer: PromptEnhancer | None = None,
    ) -> None:
        self._generator = generator
        self._blobs = blobs
        self._ledger = ledger
        self._enhancer = enhancer

    async def apply_edit(
        self,
        product_id: str,
        edit_prompt: str,
        current_front: str,
        *,
        product_name: str = "Product",
        product_details: str = "",
    ) -> SequenceResult:
        result = SequenceResult(batch_id=new_batch_id(BatchKind.EDIT), prompt=edit_prompt)
        logger.info(
            "Multi-view edit started — product=%s batch=%s", product_id, result.batch_id
        )

        if self._enhancer is not None:
            result.prompt = await self._enhancer.enhance(
                edit_prompt, product_name=product_name, product_details=product_details
            )

        try:
            front_image = await self._generate(
                ViewType.FRONT, product_name, result.prompt, current_front
            )
        except Exception as exc:  # noqa: BLE001
            self._record_failure(result, product_id, ViewType.FRONT, exc)
            for view_type in _DEPENDENT_VIEWS:
                result.failures[view_type] = "Skipped because the front view failed"
            return result

        await self._persist(result, product_id, ViewType.FRONT, front_image, edit_prompt)

        generated = await asyncio.gather(
            *(
                self._generate(view_type, product_name, result.prompt, front_image)
                for view_type in _DEPENDENT_VIEWS
            ),
            return_exceptions=True,
        )
        for view_type, outcome in zip(_DEPENDENT_VIEWS, generated, strict=True):
            if isinstance(outcome, Exception):
                self._record_failure(result, product_id, view_type, outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                await self._persist(result, product_id, view_type, outcome, edit_prompt)

        logger.info(
            "Multi-view edit finished — product=%s batch=%s committed=%d failed=%d",
            product_id,
            result.batch_id,
            len(result.revisions),
            len(result.failures),
        )
        return result

    async def regenerate_view(
        self,
        product_id: str,
        view_type: ViewType,
        edit_prompt: str,
        *,
        product_name: str = "Product",
        fallback_reference: str | None = None,
    ) -> SequenceResult:
        """Regenerate a single view against the product's active front image."""
        result = SequenceResult(batch_id=new_batch_id(BatchKind.SINGLE), prompt=edit_prompt)
        active = await self._ledger.list_active(product_id)
        front = active.get(ViewType.FRONT)
        reference = front.image_url if front is not None else fallback_reference
        if not reference:
            result.failures[view_type] = "No front view available to use as a reference"
            return result

        try:
            image = await self._generate(view_type, product_name, edit_prompt, reference)
        except Exception as exc:  # noqa: BLE001
            self._record_failure(result, product_id, view_type, exc)
            return result
        await self._persist(result, product_id, view_type, image, edit_prompt)
        return result

    @staticmethod
    def _record_failure(
        result: SequenceResult, product_id: str, view_type: ViewType, exc: Exception
    ) -> None:
        if isinstance(exc, ImageGenerationError):
            logger.warning(
                "View generation failed — product=%s view=%s: %s", product_id, view_type, exc
            )
            result.failures[view_type] = str(exc)
            return
        logger.error(
            "View generation crashed — product=%s view=%s",
            product_id,
            view_type,
            exc_info=exc,
        )
        result.failures[view_type] = f"Unexpected error: {str(exc) or type(exc).__name__}"

    async def _generate(
        self,
        view_type: ViewType,
        product_name: str,
        edit_prompt: str,
        reference: str,
    ) -> str:
        prompt = render_prompt(
            _PROMPT_FOR_VIEW[view_type],
            product_name=product_name,
            edit_prompt=edit_prompt,
        )
        return await self._generator.generate(prompt, reference)

    async def _persist(
        self,
        result: SequenceResult,
        product_id: str,
        view_type: ViewType,
        image: str,
        edit_prompt: str,
    ) -> None:
        file_name = f"{product_id}/{view_type}-{result.batch_id}.png"
        try:
            data, content_type = decode_data_url(image)
            url = await self._blobs.upload(data, file_name, content_type)
        except (UploadError, ValueError) as exc:
            logger.warning(
                "View upload skipped — product=%s view=%s: %s", product_id, view_type, exc
            )
            result.failures[view_type] = f"Upload failed: {exc}"
            return

        try:
            revision = await self._ledger.commit_revision(
                product_id, view_type, result.batch_id, url, edit_prompt
            )
        except (AzureError, TechPackAgentError) as exc:
            logger.exception(
                "View commit failed — product=%s view=%s", product_id, view_type
            )
            result.failures[view_type] = f"Could not save revision: {exc}"
            return
        result.revisions[view_type] = revision
