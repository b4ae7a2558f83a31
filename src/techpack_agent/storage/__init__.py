"""Blob storage for generated images."""

from techpack_agent.storage.blob import BlobImageStore, BlobStore, create_blob_store

__all__ = ["BlobImageStore", "BlobStore", "create_blob_store"]
