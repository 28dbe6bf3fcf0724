"""Shared fixtures - local SQLite store and filesystem blobs, no network."""

from io import BytesIO

import pytest
from PIL import Image

from lyntfeed.auth.jwt_auth import JwtAuthenticator
from lyntfeed.config import FeedConfig
from lyntfeed.core.service import FeedService
from lyntfeed.core.snowflake import SnowflakeGenerator
from lyntfeed.media.blob_store import FilesystemBlobStore
from lyntfeed.media.pipeline import MediaPipeline
from lyntfeed.store.sqlite_store import SQLiteItemStore


TEST_SECRET = "test-secret"


def _make_image(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    """Encode a solid-colour image of the given size."""
    color = (200, 30, 30, 128)[: len(mode)] if mode in ("RGB", "RGBA") else 128
    img = Image.new(mode, (width, height), color=color)
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def make_image():
    """Factory for encoded test images."""
    return _make_image


@pytest.fixture
def config(tmp_path) -> FeedConfig:
    """Config pointing every backend at a temp directory."""
    return FeedConfig(
        sqlite_path=str(tmp_path / "test.db"),
        blob_root=str(tmp_path / "media"),
        jwt_secret=TEST_SECRET,
        node_id=1,
    )


@pytest.fixture
def auth() -> JwtAuthenticator:
    return JwtAuthenticator(TEST_SECRET)


@pytest.fixture
def token(auth) -> str:
    """Valid credential for user-1."""
    return auth.issue("user-1")


@pytest.fixture
def store(config) -> SQLiteItemStore:
    """Temporary SQLite item store (enter with async with)."""
    return SQLiteItemStore(config.sqlite_path)


@pytest.fixture
def blobs(config) -> FilesystemBlobStore:
    return FilesystemBlobStore(config.blob_root)


@pytest.fixture
def service(config, auth, store, blobs) -> FeedService:
    """FeedService wired to temp backends (enter with async with)."""
    return FeedService(
        config,
        authenticator=auth,
        store=store,
        media=MediaPipeline(blobs),
        ids=SnowflakeGenerator(node_id=1),
    )
