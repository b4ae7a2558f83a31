"""View revision routes — multi-view edits, initial images, batches."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field

from techpack_agent.errors import RevisionNotFoundError
from techpack_agent.models.product import Product
from techpack_agent.models.view_revision import RevisionBatch, ViewRevision, ViewType
from techpack_agent.revisions.sequencer import SequenceResult
from techpack_agent.techpack.context import build_product_context

router = APIRouter(prefix="/products/{product_id}", tags=["revisions"])
logger = logging.getLogger(__name__)


class ViewEditRequest(BaseModel):
    edit_prompt: str = Field(min_length=1)


class InitialViewsRequest(BaseModel):
    front: str | None = None
    back: str | None = None
    side: str | None = None


class GenerationResponse(BaseModel):
    batch_id: str
    success: bool
    revisions: dict[ViewType, ViewRevision]
    failures: dict[ViewType, str]


class DeleteResponse(BaseModel):
    deleted: int


async def _product(request: Request, product_id: str) -> Product:
    product = await request.app.state.products.get_product(product_id)
    if product is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"Product {product_id} not found")
    return product


def _sequencer(request: Request):
    sequencer = request.app.state.sequencer
    if sequencer is None:
        raise HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE, "Image generation is not configured"
        )
    return sequencer


def _generation_response(result: SequenceResult) -> GenerationResponse:
    return GenerationResponse(
        batch_id=result.batch_id,
        success=result.success,
        revisions=result.revisions,
        failures=result.failures,
    )


@router.post("/views/edit", response_model=GenerationResponse)
async def edit_views(
    request: Request, product_id: str, body: ViewEditRequest
) -> GenerationResponse:
    """Regenerate front, back and side from one edit prompt."""
    sequencer = _sequencer(request)
    product = await _product(request, product_id)
    active = await request.app.state.ledger.list_active(product_id)
    front = active.get(ViewType.FRONT)
    current_front = front.image_url if front is not None else product.images.front
    if not current_front:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Product has no front view to edit")

    result = await sequencer.apply_edit(
        product_id,
        body.edit_prompt,
        current_front,
        product_name=product.name,
        product_details=build_product_context(product),
    )
    return _generation_response(result)


@router.post("/views/{view_type}/regenerate", response_model=GenerationResponse)
async def regenerate_view(
    request: Request, product_id: str, view_type: ViewType, body: ViewEditRequest
) -> GenerationResponse:
    """Regenerate a single view against the active front image."""
    sequencer = _sequencer(request)
    product = await _product(request, product_id)
    result = await sequencer.regenerate_view(
        product_id,
        view_type,
        body.edit_prompt,
        product_name=product.name,
        fallback_reference=product.images.front or None,
    )
    return _generation_response(result)


@router.post("/views/initial", response_model=list[ViewRevision])
async def save_initial_views(
    request: Request, product_id: str, body: InitialViewsRequest | None = None
) -> list[ViewRevision]:
    """Record the product's first images as revision 0 of each view."""
    product = await _product(request, product_id)
    body = body or InitialViewsRequest()
    images = {
        ViewType.FRONT: body.front or product.images.front,
        ViewType.BACK: body.back or product.images.back or "",
        ViewType.SIDE: body.side or product.images.side or "",
    }
    return await request.app.state.ledger.save_initial_revisions(product_id, images)


@router.get("/revisions", response_model=list[RevisionBatch])
async def list_revisions(request: Request, product_id: str) -> list[RevisionBatch]:
    return await request.app.state.ledger.list_grouped(product_id)


@router.post("/revisions/{batch_id}/activate", response_model=list[ViewRevision])
async def activate_batch(request: Request, product_id: str, batch_id: str) -> list[ViewRevision]:
    """Make an earlier batch the active revision for the views it contains."""
    try:
        return await request.app.state.ledger.set_active_batch(product_id, batch_id)
    except RevisionNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"Batch {batch_id} not found") from exc


@router.delete("/revisions/{revision_id}", response_model=DeleteResponse)
async def delete_revision(request: Request, product_id: str, revision_id: str) -> DeleteResponse:
    """Soft-delete one revision, or a whole batch when given a batch id."""
    try:
        deleted = await request.app.state.ledger.soft_delete(revision_id, product_id=product_id)
    except RevisionNotFoundError as exc:
        raise HTTPException(
            status.HTTP_404_NOT_FOUND, f"Revision {revision_id} not found"
        ) from exc
    return DeleteResponse(deleted=deleted)
