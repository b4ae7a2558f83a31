"""Domain exceptions raised at collaborator boundaries."""

from __future__ import annotations


class TechPackAgentError(Exception):
    """Base class for all application errors."""


class SessionBusyError(TechPackAgentError):
    """A chat turn is already in flight for the session."""


class CompletionError(TechPackAgentError):
    """The text-completion service failed or timed out."""


class ImageGenerationError(TechPackAgentError):
    """The image-generation service failed to produce an image."""


class UploadError(TechPackAgentError):
    """A generated image could not be written to blob storage."""


class RevisionNotFoundError(TechPackAgentError):
    """No revision or batch matches the given identifier."""
