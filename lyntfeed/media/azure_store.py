"""Azure Blob Storage implementation."""

from typing import Optional

from lyntfeed.exceptions import StorageUnavailable
from lyntfeed.media.blob_store import BlobStore, StoredBlob

try:
    from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
    from azure.storage.blob import ContentSettings
    from azure.storage.blob.aio import BlobServiceClient
    AZURE_AVAILABLE = True
except ImportError:
    AZURE_AVAILABLE = False


class AzureBlobStore(BlobStore):
    """
    Blob store backed by an Azure Storage container.

    Requires: pip install azure-storage-blob aiohttp

    Example:
        store = AzureBlobStore(conn_str, "lynts")
        async with store:
            await store.put("123.webp", data, "image/webp")
    """

    def __init__(self, connection_string: str, container: str = "lynts"):
        if not AZURE_AVAILABLE:
            raise ImportError(
                "Azure packages not installed. Install with: pip install azure-storage-blob aiohttp"
            )
        if not connection_string:
            raise ValueError("connection_string is required for Azure blob storage")

        self.connection_string = connection_string
        self.container = container
        self._service: Optional[BlobServiceClient] = None
        self._container_ready = False

    async def _ensure_container(self):
        """Get the container client, creating the container on first use."""
        if self._service is None:
            self._service = BlobServiceClient.from_connection_string(self.connection_string)
        container = self._service.get_container_client(self.container)
        if not self._container_ready:
            try:
                await container.create_container()
            except ResourceExistsError:
                pass
            self._container_ready = True
        return container

    async def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        kwargs = {}
        if content_type:
            kwargs["content_settings"] = ContentSettings(content_type=content_type)
        try:
            container = await self._ensure_container()
            await container.upload_blob(key, data, overwrite=True, **kwargs)
        except AzureError as e:
            raise StorageUnavailable(f"Failed to upload blob {key}: {e}") from e

    async def get(self, key: str) -> StoredBlob | None:
        try:
            container = await self._ensure_container()
            downloader = await container.download_blob(key)
            data = await downloader.readall()
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            raise StorageUnavailable(f"Failed to download blob {key}: {e}") from e
        return StoredBlob(
            data=data,
            content_type=downloader.properties.content_settings.content_type,
        )

    async def delete(self, key: str) -> None:
        try:
            container = await self._ensure_container()
            await container.delete_blob(key)
        except ResourceNotFoundError:
            pass
        except AzureError as e:
            raise StorageUnavailable(f"Failed to delete blob {key}: {e}") from e

    async def close(self) -> None:
        if self._service is not None:
            await self._service.close()
            self._service = None
            self._container_ready = False
