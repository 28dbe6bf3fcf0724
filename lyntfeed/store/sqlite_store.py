"""SQLite-based item store implementation."""

import asyncio
from datetime import datetime
from pathlib import Path

import aiosqlite

from lyntfeed.exceptions import PersistenceError
from lyntfeed.models.item import Item, ItemView, NewItem
from lyntfeed.store.base import ItemStore


SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    username TEXT NOT NULL,
    handle TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS lynts (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    content TEXT NOT NULL DEFAULT '',
    has_link INTEGER NOT NULL DEFAULT 0,
    has_image INTEGER NOT NULL DEFAULT 0,
    reposted INTEGER NOT NULL DEFAULT 0,
    parent TEXT,
    views INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_lynts_parent ON lynts(parent);
CREATE TABLE IF NOT EXISTS likes (
    lynt_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    PRIMARY KEY (lynt_id, user_id)
);
"""

READ_QUERY = """
SELECT
    l.id, l.user_id, l.content, l.has_link, l.has_image, l.reposted,
    l.parent, l.views, l.created_at,
    u.username, u.handle,
    (SELECT COUNT(*) FROM likes WHERE lynt_id = l.id) AS like_count,
    EXISTS(SELECT 1 FROM likes WHERE lynt_id = l.id AND user_id = ?) AS liked
FROM lynts l
LEFT JOIN users u ON u.id = l.user_id
WHERE l.id = ?
LIMIT 1
"""


class SQLiteItemStore(ItemStore):
    """SQLite-based item store using aiosqlite."""

    def __init__(self, db_path: str = "lyntfeed.db"):
        """
        Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._db: aiosqlite.Connection | None = None
        self._connect_lock = asyncio.Lock()

    async def _ensure_db(self) -> aiosqlite.Connection:
        """Ensure database connection and schema exist."""
        if self._db is not None:
            return self._db

        # Concurrent first callers share one connection
        async with self._connect_lock:
            if self._db is None:
                db = None
                try:
                    db = await aiosqlite.connect(self.db_path)
                    await db.executescript(SCHEMA)
                    await db.commit()
                except aiosqlite.Error as e:
                    if db is not None:
                        await db.close()
                    raise PersistenceError(f"Cannot open item store: {e}") from e
                self._db = db
        return self._db

    async def create(self, item: NewItem) -> Item:
        """Insert a new item."""
        db = await self._ensure_db()
        try:
            await db.execute(
                """
                INSERT INTO lynts (id, user_id, content, has_link, has_image, reposted, parent, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.id,
                    item.author_id,
                    item.content,
                    int(item.has_link),
                    int(item.has_image),
                    int(item.is_repost),
                    item.parent_id,
                    item.created_at.isoformat(),
                ),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to insert lynt {item.id}: {e}") from e

        return Item(**item.model_dump(), views=0)

    async def resolve_repost_target(self, candidate_id: str) -> str | None:
        """Return the id if the item exists."""
        db = await self._ensure_db()
        try:
            async with db.execute(
                "SELECT id FROM lynts WHERE id = ? LIMIT 1", (candidate_id,)
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to look up lynt {candidate_id}: {e}") from e

        return row[0] if row else None

    async def fetch_for_read(self, item_id: str, viewer_id: str) -> ItemView | None:
        """Fetch item joined with author and like fields."""
        db = await self._ensure_db()
        try:
            async with db.execute(READ_QUERY, (viewer_id, item_id)) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to fetch lynt {item_id}: {e}") from e

        if row is None:
            return None

        (
            id_, user_id, content, has_link, has_image, reposted,
            parent, views, created_at, username, handle, like_count, liked,
        ) = row
        return ItemView(
            id=id_,
            author_id=user_id,
            content=content,
            has_link=bool(has_link),
            has_image=bool(has_image),
            is_repost=bool(reposted),
            parent_id=parent,
            views=views,
            created_at=datetime.fromisoformat(created_at),
            author_username=username,
            author_handle=handle,
            like_count=like_count,
            liked_by_viewer=bool(liked),
        )

    async def increment_view_count(self, item_id: str) -> None:
        """Atomic single-row increment."""
        db = await self._ensure_db()
        try:
            await db.execute("UPDATE lynts SET views = views + 1 WHERE id = ?", (item_id,))
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to increment views for {item_id}: {e}") from e

    async def upsert_author(self, user_id: str, username: str, handle: str) -> None:
        """Insert or replace author display fields."""
        db = await self._ensure_db()
        try:
            await db.execute(
                "INSERT OR REPLACE INTO users (id, username, handle) VALUES (?, ?, ?)",
                (user_id, username, handle),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to store user {user_id}: {e}") from e

    async def add_like(self, item_id: str, user_id: str) -> None:
        """Record a like."""
        db = await self._ensure_db()
        try:
            await db.execute(
                "INSERT OR IGNORE INTO likes (lynt_id, user_id) VALUES (?, ?)",
                (item_id, user_id),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to like lynt {item_id}: {e}") from e

    async def set_parent(self, item_id: str, parent_id: str | None, is_repost: bool) -> None:
        """
        Rewrite an item's repost link.

        Maintenance hook for repairing records; the create flow never
        calls it, and it performs no acyclicity check.
        """
        db = await self._ensure_db()
        try:
            await db.execute(
                "UPDATE lynts SET parent = ?, reposted = ? WHERE id = ?",
                (parent_id, int(is_repost), item_id),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to relink lynt {item_id}: {e}") from e

    async def close(self) -> None:
        """Close database connection."""
        async with self._connect_lock:
            if self._db is not None:
                await self._db.close()
                self._db = None
