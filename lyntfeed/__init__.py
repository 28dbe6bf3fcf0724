"""lyntfeed - short-form post creation and retrieval pipeline."""

from lyntfeed.models.item import Item, ItemView, ItemReadResult, NewItem
from lyntfeed.config import FeedConfig
from lyntfeed.core.service import FeedService
from lyntfeed.core.snowflake import SnowflakeGenerator
from lyntfeed.core.exporter import to_json, to_dict, save_json

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "FeedService",
    "FeedConfig",
    "SnowflakeGenerator",
    # Models
    "Item",
    "ItemView",
    "ItemReadResult",
    "NewItem",
    # Export utilities
    "to_json",
    "to_dict",
    "save_json",
    "__version__",
]
