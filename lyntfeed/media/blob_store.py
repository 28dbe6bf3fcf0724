"""Blob store interface and local filesystem implementation."""

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from lyntfeed.exceptions import StorageUnavailable


@dataclass
class StoredBlob:
    """Bytes and metadata of a stored object."""

    data: bytes
    content_type: str | None = None


class BlobStore(ABC):
    """Abstract base class for blob store implementations."""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        """
        Write an object, replacing any existing object under the key.

        Raises:
            StorageUnavailable: On transport or service failure
        """
        ...

    @abstractmethod
    async def get(self, key: str) -> StoredBlob | None:
        """Read an object, None if absent."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove an object if present."""
        ...

    async def exists(self, key: str) -> bool:
        """Check whether an object is stored under the key."""
        return await self.get(key) is not None

    async def close(self) -> None:
        """Cleanup connections and resources."""

    async def __aenter__(self) -> "BlobStore":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class FilesystemBlobStore(BlobStore):
    """
    Stores objects as files under a root directory.

    The content type is kept in a ``<key>.meta.json`` sidecar.
    File I/O runs in a worker thread.
    """

    def __init__(self, root: str | Path = "media"):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Invalid blob key: {key!r}")
        return path

    def _meta_path(self, path: Path) -> Path:
        return path.with_name(path.name + ".meta.json")

    def _write(self, key: str, data: bytes, content_type: str | None) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_bytes(data)
        tmp.replace(path)
        self._meta_path(path).write_text(
            json.dumps({"content_type": content_type}), encoding="utf-8"
        )

    def _read(self, key: str) -> StoredBlob | None:
        path = self._path(key)
        if not path.is_file():
            return None
        content_type = None
        meta = self._meta_path(path)
        if meta.is_file():
            content_type = json.loads(meta.read_text(encoding="utf-8")).get("content_type")
        return StoredBlob(data=path.read_bytes(), content_type=content_type)

    def _remove(self, key: str) -> None:
        path = self._path(key)
        path.unlink(missing_ok=True)
        self._meta_path(path).unlink(missing_ok=True)

    async def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        try:
            await asyncio.to_thread(self._write, key, data, content_type)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(f"Failed to write blob {key}: {e}") from e

    async def get(self, key: str) -> StoredBlob | None:
        try:
            return await asyncio.to_thread(self._read, key)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(f"Failed to read blob {key}: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(f"Failed to delete blob {key}: {e}") from e
