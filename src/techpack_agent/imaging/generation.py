"""Image generation via Azure OpenAI image edits."""

from __future__ import annotations

import base64
import binascii
import logging
import time
from typing import TYPE_CHECKING, Protocol

import httpx
import openai
from azure.identity.aio import DefaultAzureCredential, get_bearer_token_provider
from openai import AsyncAzureOpenAI

from techpack_agent.errors import ImageGenerationError
from techpack_agent.retry import retry_async

if TYPE_CHECKING:
    from techpack_agent.config import ImageConfig, OpenAIConfig

logger = logging.getLogger(__name__)

_COGNITIVE_SCOPE = "https://cognitiveservices.azure.com/.default"
_IMAGE_SIZE = "1024x1024"
_FETCH_TIMEOUT_SECONDS = 30.0

_RETRYABLE = (
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class ImageGenerator(Protocol):
    async def generate(self, prompt: str, reference_image: str) -> str:
        """Return a URL (possibly ``data:``) for an image derived from the reference."""
        ...


def encode_data_url(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> tuple[bytes, str]:
    """Split a base64 ``data:`` URL into ``(bytes, mime_type)``.

    Raises ``ValueError`` for anything that is not a base64 data URL.
    """
    if not url.startswith("data:") or "," not in url:
        msg = "not a data URL"
        raise ValueError(msg)
    header, payload = url[5:].split(",", 1)
    mime_type, _, encoding = header.partition(";")
    if encoding != "base64":
        msg = f"unsupported data URL encoding: {encoding or 'none'}"
        raise ValueError(msg)
    try:
        return base64.b64decode(payload, validate=True), mime_type or "application/octet-stream"
    except binascii.Error as exc:
        msg = "invalid base64 payload"
        raise ValueError(msg) from exc


class AzureImageGenerator:
    """Generate product views by editing a reference image with ``gpt-image-1``.

    Transient API errors are retried ``retry_attempts`` times with backoff;
    everything else surfaces as :class:`ImageGenerationError`.
    """

    def __init__(
        self,
        client: AsyncAzureOpenAI,
        *,
        deployment: str,
        http: httpx.AsyncClient | None = None,
        retry_attempts: int = 3,
    ) -> None:
        self._client = client
        self._deployment = deployment
        self._http = http or httpx.AsyncClient(timeout=_FETCH_TIMEOUT_SECONDS)
        self._retry_attempts = retry_attempts

    async def _load_reference(self, reference_image: str) -> tuple[bytes, str]:
        if reference_image.startswith("data:"):
            return decode_data_url(reference_image)
        response = await self._http.get(reference_image, follow_redirects=True)
        response.raise_for_status()
        mime_type = response.headers.get("content-type", "image/png").split(";")[0]
        return response.content, mime_type

    async def generate(self, prompt: str, reference_image: str) -> str:
        started_at = time.monotonic()
        try:
            data, mime_type = await self._load_reference(reference_image)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Reference image unavailable — %s", exc)
            raise ImageGenerationError("Could not load the reference image") from exc

        async def _edit() -> str | None:
            result = await self._client.images.edit(
                model=self._deployment,
                image=("reference.png", data, mime_type),
                prompt=prompt,
                n=1,
                size=_IMAGE_SIZE,
            )
            return result.data[0].b64_json if result.data else None

        try:
            b64 = await retry_async(
                _edit,
                attempts=self._retry_attempts,
                retry_on=_RETRYABLE,
                description="Image edit",
            )
        except openai.OpenAIError as exc:
            logger.exception("Image generation failed — deployment=%s", self._deployment)
            raise ImageGenerationError(str(exc) or "Image generation failed") from exc

        if not b64:
            raise ImageGenerationError("No image returned from the generation service")
        logger.info(
            "Image generated — deployment=%s duration_ms=%.0f",
            self._deployment,
            (time.monotonic() - started_at) * 1000,
        )
        return f"data:image/png;base64,{b64}"

    async def close(self) -> None:
        await self._http.aclose()
        await self._client.close()


def create_image_generator(
    openai_config: OpenAIConfig, image_config: ImageConfig
) -> AzureImageGenerator:
    """Build an AzureImageGenerator using an API key or DefaultAzureCredential."""
    if openai_config.api_key:
        client = AsyncAzureOpenAI(
            azure_endpoint=openai_config.endpoint,
            api_version=image_config.api_version,
            api_key=openai_config.api_key,
        )
    else:
        client = AsyncAzureOpenAI(
            azure_endpoint=openai_config.endpoint,
            api_version=image_config.api_version,
            azure_ad_token_provider=get_bearer_token_provider(
                DefaultAzureCredential(), _COGNITIVE_SCOPE
            ),
        )
    logger.info(
        "Image generator created — endpoint=%s deployment=%s auth=%s",
        openai_config.endpoint,
        image_config.deployment,
        "key" if openai_config.api_key else "identity",
    )
    return AzureImageGenerator(
        client,
        deployment=image_config.deployment,
        retry_attempts=image_config.retry_attempts,
    )
