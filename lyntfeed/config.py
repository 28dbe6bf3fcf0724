"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic_settings import BaseSettings


# 2024-07-13T11:29:44.526Z
DEFAULT_EPOCH_MS = 1720870184526


class StoreBackend(str, Enum):
    """Item store backend type."""
    SQLITE = "sqlite"
    REDIS = "redis"


class BlobBackend(str, Enum):
    """Blob store backend type."""
    FILESYSTEM = "filesystem"
    AZURE = "azure"


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class FeedConfig(BaseSettings):
    """Configuration for the lyntfeed service."""

    # Item store
    store_backend: StoreBackend = StoreBackend.SQLITE
    sqlite_path: str = "lyntfeed.db"
    redis_url: str = "redis://localhost:6379/0"

    # Blob store
    blob_backend: BlobBackend = BlobBackend.FILESYSTEM
    blob_root: str = "media"
    azure_connection_string: str | None = None
    azure_container: str = "lynts"

    # Authentication
    auth_cookie_name: str = "_TOKEN__DO_NOT_SHARE"
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_user_claim: str = "userId"

    # Content rules
    max_content_length: int = 280
    image_max_width: int = 800
    image_quality: int = 50

    # Identifiers
    node_id: int | None = None
    id_epoch_ms: int = DEFAULT_EPOCH_MS

    # Chain resolution
    max_chain_depth: int = 64

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "LYNTFEED_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
