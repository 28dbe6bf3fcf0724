"""Pydantic models for lyntfeed."""

from lyntfeed.models.item import (
    MAX_CONTENT_LENGTH,
    Item,
    ItemReadResult,
    ItemView,
    NewItem,
)

__all__ = [
    "MAX_CONTENT_LENGTH",
    "Item",
    "ItemReadResult",
    "ItemView",
    "NewItem",
]
