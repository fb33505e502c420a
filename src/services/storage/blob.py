"""
Blob storage for uploaded payment advice images.

AzureBlobStore is used when AZ_STORAGE_CONNECTION_STRING is configured;
LocalBlobStore keeps files on disk for local development.
"""

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional
from loguru import logger


class BlobStoreBase(ABC):
    @abstractmethod
    def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        """
        Upload bytes under a key.

        Returns:
            Public URL of the stored object
        """
        pass


class AzureBlobStore(BlobStoreBase):
    """
    Uploads to an Azure Storage container.

    Usage:
        from azure.storage.blob import BlobServiceClient
        service = BlobServiceClient.from_connection_string(conn_str)
        store = AzureBlobStore(service.get_container_client("payment-advice"))
    """

    def __init__(self, container_client, timeout_seconds: int = 30):
        self.container_client = container_client
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_connection_string(cls, connection_string: str, container: str, timeout_seconds: int = 30):
        from azure.storage.blob import BlobServiceClient

        service = BlobServiceClient.from_connection_string(connection_string)
        return cls(service.get_container_client(container), timeout_seconds=timeout_seconds)

    def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        from azure.storage.blob import ContentSettings

        content_settings = ContentSettings(content_type=content_type) if content_type else None
        blob_client = self.container_client.upload_blob(
            name=key,
            data=data,
            overwrite=True,
            content_settings=content_settings,
            timeout=self.timeout_seconds,
        )
        logger.info("Uploaded payment advice to blob storage", key=key, size_bytes=len(data))
        return blob_client.url


class LocalBlobStore(BlobStoreBase):
    """Writes uploads beneath a local directory and returns file:// URLs."""

    def __init__(self, root: str = "uploads"):
        self.root = Path(root)

    def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        relative = PurePosixPath(key)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Invalid blob key: {key}")

        target = self.root.joinpath(*relative.parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

        logger.info("Stored payment advice locally", path=str(target), size_bytes=len(data))
        return target.resolve().as_uri()
