"""Media transcoding and blob storage."""

from lyntfeed.config import BlobBackend, FeedConfig
from lyntfeed.media.blob_store import BlobStore, FilesystemBlobStore, StoredBlob
from lyntfeed.media.azure_store import AzureBlobStore
from lyntfeed.media.pipeline import MediaPipeline, avatar_key, item_image_key
from lyntfeed.media.transcode import TARGET_CONTENT_TYPE, transcode


def create_blob_store(config: FeedConfig) -> BlobStore:
    """Build the blob store selected by configuration."""
    if config.blob_backend == BlobBackend.AZURE:
        return AzureBlobStore(config.azure_connection_string or "", config.azure_container)
    return FilesystemBlobStore(config.blob_root)


__all__ = [
    "BlobStore",
    "FilesystemBlobStore",
    "AzureBlobStore",
    "StoredBlob",
    "MediaPipeline",
    "TARGET_CONTENT_TYPE",
    "avatar_key",
    "item_image_key",
    "transcode",
    "create_blob_store",
]
