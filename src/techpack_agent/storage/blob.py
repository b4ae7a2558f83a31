"""Azure Blob Storage for generated view images."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from azure.core.exceptions import (
    AzureError,
    ResourceExistsError,
    ServiceRequestError,
    ServiceResponseError,
)
from azure.identity.aio import DefaultAzureCredential
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from techpack_agent.errors import UploadError
from techpack_agent.retry import retry_async

if TYPE_CHECKING:
    from techpack_agent.config import StorageConfig

logger = logging.getLogger(__name__)

_UPLOAD_ATTEMPTS = 3


class BlobStore(Protocol):
    async def upload(self, data: bytes, file_name: str, content_type: str = "image/png") -> str:
        """Store ``data`` under ``file_name`` and return its public URL."""
        ...


class BlobImageStore:
    """Uploads images into a single container and returns blob URLs."""

    def __init__(
        self,
        service: BlobServiceClient,
        container: str,
        *,
        attempts: int = _UPLOAD_ATTEMPTS,
    ) -> None:
        self._service = service
        self._container = service.get_container_client(container)
        self._attempts = attempts

    async def ensure_container(self) -> None:
        try:
            await self._container.create_container()
            logger.info("Blob container created — name=%s", self._container.container_name)
        except ResourceExistsError:
            pass

    async def upload(self, data: bytes, file_name: str, content_type: str = "image/png") -> str:
        blob = self._container.get_blob_client(file_name)

        async def _upload() -> None:
            await blob.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )

        try:
            await retry_async(
                _upload,
                attempts=self._attempts,
                retry_on=(ServiceRequestError, ServiceResponseError),
                description="Blob upload",
            )
        except AzureError as exc:
            logger.exception("Blob upload failed — name=%s", file_name)
            raise UploadError(f"Failed to upload {file_name}") from exc
        logger.info("Blob uploaded — name=%s bytes=%d", file_name, len(data))
        return blob.url

    async def close(self) -> None:
        await self._service.close()


def create_blob_store(config: StorageConfig) -> BlobImageStore:
    """Connect with a connection string when set, otherwise DefaultAzureCredential."""
    if config.connection_string:
        service = BlobServiceClient.from_connection_string(config.connection_string)
    else:
        service = BlobServiceClient(config.account_url, credential=DefaultAzureCredential())
    return BlobImageStore(service, config.container)
