"""Data models for Cosmos DB document types and chat values."""

from techpack_agent.models.conversation import (
    ConversationMessage,
    Intent,
    MessageMetadata,
    MessageRole,
)
from techpack_agent.models.edit_action import EditAction, EditActionType
from techpack_agent.models.product import Product, ProductImages, ProductSpecification
from techpack_agent.models.view_revision import (
    BatchView,
    EditType,
    RevisionBatch,
    ViewRevision,
    ViewType,
)

__all__ = [
    "BatchView",
    "ConversationMessage",
    "EditAction",
    "EditActionType",
    "EditType",
    "Intent",
    "MessageMetadata",
    "MessageRole",
    "Product",
    "ProductImages",
    "ProductSpecification",
    "RevisionBatch",
    "ViewRevision",
    "ViewType",
]
