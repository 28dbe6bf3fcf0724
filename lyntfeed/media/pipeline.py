"""Media pipeline - transcode uploads and write them to the blob store."""

import asyncio

from lyntfeed.exceptions import LyntfeedError, StorageUnavailable
from lyntfeed.logging import get_logger
from lyntfeed.media.blob_store import BlobStore
from lyntfeed.media.transcode import (
    DEFAULT_MAX_WIDTH,
    DEFAULT_QUALITY,
    TARGET_CONTENT_TYPE,
    TARGET_EXTENSION,
    transcode,
)


def item_image_key(item_id: str) -> str:
    """Blob key of an item's attached image."""
    return f"{item_id}.{TARGET_EXTENSION}"


def avatar_key(user_id: str) -> str:
    """Blob key of a user's avatar. Re-uploads overwrite it."""
    return user_id


class MediaPipeline:
    """Transcodes images and stores them under deterministic keys."""

    def __init__(
        self,
        blob_store: BlobStore,
        max_width: int = DEFAULT_MAX_WIDTH,
        quality: int = DEFAULT_QUALITY,
    ):
        self.blob_store = blob_store
        self.max_width = max_width
        self.quality = quality
        self._log = get_logger("media")

    def transcode(self, raw: bytes) -> bytes:
        """Synchronous transcode with this pipeline's settings."""
        return transcode(raw, max_width=self.max_width, quality=self.quality)

    async def transcode_async(self, raw: bytes) -> bytes:
        """Transcode in a worker thread so the event loop keeps serving."""
        return await asyncio.to_thread(self.transcode, raw)

    async def store(self, data: bytes, key: str) -> None:
        """
        Write encoded bytes to the blob store.

        Raises:
            StorageUnavailable: On any blob store failure
        """
        try:
            await self.blob_store.put(key, data, content_type=TARGET_CONTENT_TYPE)
        except StorageUnavailable:
            raise
        except LyntfeedError as e:
            raise StorageUnavailable(str(e)) from e

        self._log.debug("media_stored", key=key, size=len(data))

    async def process(self, raw: bytes, key: str) -> int:
        """
        Transcode and store an upload.

        Returns:
            Size of the stored object in bytes
        """
        data = await self.transcode_async(raw)
        await self.store(data, key)
        return len(data)

    async def close(self) -> None:
        await self.blob_store.close()
