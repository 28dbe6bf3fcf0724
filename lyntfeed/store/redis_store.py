"""Redis item store implementation."""

from datetime import datetime
from typing import Optional

from lyntfeed.exceptions import PersistenceError
from lyntfeed.models.item import Item, ItemView, NewItem
from lyntfeed.store.base import ItemStore

try:
    import redis.asyncio as redis
    from redis.exceptions import RedisError
    REDIS_AVAILABLE = True
except ImportError:
    REDIS_AVAILABLE = False


class RedisItemStore(ItemStore):
    """
    Redis-based item store.

    Each item is a hash, likes are a set per item. View counts use
    HINCRBY so concurrent readers never lose an increment.

    Requires redis package: pip install redis

    Example:
        store = RedisItemStore("redis://localhost:6379/0")
        async with store:
            view = await store.fetch_for_read("123", viewer_id="u1")
    """

    def __init__(self, redis_url: str = "redis://localhost:6379/0"):
        """
        Initialize Redis store.

        Args:
            redis_url: Redis connection URL
        """
        if not REDIS_AVAILABLE:
            raise ImportError(
                "Redis package not installed. Install with: pip install redis"
            )

        self.redis_url = redis_url
        self._client: Optional[redis.Redis] = None
        self._key_prefix = "lyntfeed:"

    async def _ensure_client(self) -> "redis.Redis":
        """Get or create Redis client."""
        if self._client is None:
            self._client = redis.from_url(self.redis_url, decode_responses=True)
        return self._client

    def _item_key(self, item_id: str) -> str:
        return f"{self._key_prefix}lynt:{item_id}"

    def _user_key(self, user_id: str) -> str:
        return f"{self._key_prefix}user:{user_id}"

    def _likes_key(self, item_id: str) -> str:
        return f"{self._key_prefix}likes:{item_id}"

    async def create(self, item: NewItem) -> Item:
        """Write the item hash in one transaction."""
        client = await self._ensure_client()
        mapping = {
            "id": item.id,
            "user_id": item.author_id,
            "content": item.content,
            "has_link": int(item.has_link),
            "has_image": int(item.has_image),
            "reposted": int(item.is_repost),
            "parent": item.parent_id or "",
            "views": 0,
            "created_at": item.created_at.isoformat(),
        }
        try:
            pipe = client.pipeline(transaction=True)
            pipe.hset(self._item_key(item.id), mapping=mapping)
            await pipe.execute()
        except RedisError as e:
            raise PersistenceError(f"Failed to insert lynt {item.id}: {e}") from e

        return Item(**item.model_dump(), views=0)

    async def resolve_repost_target(self, candidate_id: str) -> str | None:
        """Return the id if the item hash exists."""
        client = await self._ensure_client()
        try:
            exists = await client.exists(self._item_key(candidate_id))
        except RedisError as e:
            raise PersistenceError(f"Failed to look up lynt {candidate_id}: {e}") from e
        return candidate_id if exists else None

    async def fetch_for_read(self, item_id: str, viewer_id: str) -> ItemView | None:
        """Fetch item, author, and like fields in one round trip."""
        client = await self._ensure_client()
        try:
            data = await client.hgetall(self._item_key(item_id))
            if not data:
                return None

            pipe = client.pipeline()
            pipe.hgetall(self._user_key(data["user_id"]))
            pipe.scard(self._likes_key(item_id))
            pipe.sismember(self._likes_key(item_id), viewer_id)
            author, like_count, liked = await pipe.execute()
        except RedisError as e:
            raise PersistenceError(f"Failed to fetch lynt {item_id}: {e}") from e

        return ItemView(
            id=data["id"],
            author_id=data["user_id"],
            content=data.get("content", ""),
            has_link=data.get("has_link") == "1",
            has_image=data.get("has_image") == "1",
            is_repost=data.get("reposted") == "1",
            parent_id=data.get("parent") or None,
            views=int(data.get("views", 0)),
            created_at=datetime.fromisoformat(data["created_at"]),
            author_username=author.get("username"),
            author_handle=author.get("handle"),
            like_count=like_count,
            liked_by_viewer=bool(liked),
        )

    async def increment_view_count(self, item_id: str) -> None:
        """HINCRBY on an existing item."""
        client = await self._ensure_client()
        key = self._item_key(item_id)
        try:
            # HINCRBY would create a stub hash for a missing item
            if await client.exists(key):
                await client.hincrby(key, "views", 1)
        except RedisError as e:
            raise PersistenceError(f"Failed to increment views for {item_id}: {e}") from e

    async def upsert_author(self, user_id: str, username: str, handle: str) -> None:
        """Store author display fields."""
        client = await self._ensure_client()
        try:
            await client.hset(
                self._user_key(user_id),
                mapping={"username": username, "handle": handle},
            )
        except RedisError as e:
            raise PersistenceError(f"Failed to store user {user_id}: {e}") from e

    async def add_like(self, item_id: str, user_id: str) -> None:
        """Add user to the item's like set."""
        client = await self._ensure_client()
        try:
            await client.sadd(self._likes_key(item_id), user_id)
        except RedisError as e:
            raise PersistenceError(f"Failed to like lynt {item_id}: {e}") from e

    async def set_parent(self, item_id: str, parent_id: str | None, is_repost: bool) -> None:
        """Rewrite an item's repost link without any acyclicity check."""
        client = await self._ensure_client()
        try:
            await client.hset(
                self._item_key(item_id),
                mapping={"parent": parent_id or "", "reposted": int(is_repost)},
            )
        except RedisError as e:
            raise PersistenceError(f"Failed to relink lynt {item_id}: {e}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def ping(self) -> bool:
        """Check if Redis is available."""
        try:
            client = await self._ensure_client()
            return await client.ping()
        except RedisError:
            return False
