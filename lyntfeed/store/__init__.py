"""Item store implementations."""

from lyntfeed.config import FeedConfig, StoreBackend
from lyntfeed.store.base import ItemStore
from lyntfeed.store.sqlite_store import SQLiteItemStore
from lyntfeed.store.redis_store import RedisItemStore


def create_item_store(config: FeedConfig) -> ItemStore:
    """Build the item store selected by configuration."""
    if config.store_backend == StoreBackend.REDIS:
        return RedisItemStore(config.redis_url)
    return SQLiteItemStore(config.sqlite_path)


__all__ = ["ItemStore", "SQLiteItemStore", "RedisItemStore", "create_item_store"]
