"""Abstract item store interface."""

from abc import ABC, abstractmethod

from lyntfeed.models.item import Item, ItemView, NewItem


class ItemStore(ABC):
    """Abstract base class for item store implementations."""

    @abstractmethod
    async def create(self, item: NewItem) -> Item:
        """
        Persist a new item in a single write.

        Args:
            item: Validated item to insert

        Returns:
            The stored Item

        Raises:
            PersistenceError: If the write fails
        """
        ...

    @abstractmethod
    async def resolve_repost_target(self, candidate_id: str) -> str | None:
        """
        Look up an item that is about to be reposted.

        Args:
            candidate_id: Id submitted as the repost target

        Returns:
            The id if the item exists, None otherwise
        """
        ...

    @abstractmethod
    async def fetch_for_read(self, item_id: str, viewer_id: str) -> ItemView | None:
        """
        Fetch an item joined with its author and per-viewer fields.

        Args:
            item_id: Item to fetch
            viewer_id: User the derived fields are computed for

        Returns:
            ItemView (carrying parent_id) or None if absent
        """
        ...

    @abstractmethod
    async def increment_view_count(self, item_id: str) -> None:
        """Atomically add one to an item's view count."""
        ...

    @abstractmethod
    async def upsert_author(self, user_id: str, username: str, handle: str) -> None:
        """Insert or update the display fields joined onto items."""
        ...

    @abstractmethod
    async def add_like(self, item_id: str, user_id: str) -> None:
        """Record that a user liked an item. Repeated likes are ignored."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Cleanup connections and resources."""
        ...

    async def __aenter__(self) -> "ItemStore":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup."""
        await self.close()
