"""Request orchestrators - coordinate auth, validation, media, and storage."""

import asyncio

from lyntfeed.auth.base import Authenticator
from lyntfeed.auth.jwt_auth import JwtAuthenticator
from lyntfeed.config import FeedConfig
from lyntfeed.core.chain import resolve_chain
from lyntfeed.core.sanitizer import has_link, sanitize, validate_content
from lyntfeed.core.snowflake import SnowflakeGenerator
from lyntfeed.exceptions import (
    InvalidRepostTarget,
    ItemNotFound,
    LyntfeedError,
    MissingParameter,
    PersistenceError,
)
from lyntfeed.logging import bind_log_context, configure_logging, get_logger
from lyntfeed.media import MediaPipeline, avatar_key, create_blob_store, item_image_key
from lyntfeed.models.item import Item, ItemReadResult, NewItem
from lyntfeed.store import ItemStore, create_item_store


class FeedService:
    """
    High-level interface for creating and reading lynts.

    Collaborators not passed in are built from config on entry.

    Example:
        async with FeedService() as service:
            item = await service.create_item(token, content="hello")
            result = await service.read_item(token, item.id)
    """

    def __init__(
        self,
        config: FeedConfig | None = None,
        authenticator: Authenticator | None = None,
        store: ItemStore | None = None,
        media: MediaPipeline | None = None,
        ids: SnowflakeGenerator | None = None,
    ):
        """
        Initialize service with optional configuration and collaborators.

        Args:
            config: FeedConfig instance, uses defaults if None
            authenticator: Credential verifier
            store: Item store gateway
            media: Media pipeline over a blob store
            ids: Identifier generator
        """
        self.config = config or FeedConfig()
        self.authenticator = authenticator
        self.store = store
        self.media = media
        self.ids = ids
        self._log = get_logger("service")

    async def __aenter__(self) -> "FeedService":
        """Async context manager entry - initialize resources."""
        configure_logging(self.config)

        if self.authenticator is None:
            self.authenticator = JwtAuthenticator.from_config(self.config)
        if self.store is None:
            self.store = create_item_store(self.config)
        if self.media is None:
            self.media = MediaPipeline(
                create_blob_store(self.config),
                max_width=self.config.image_max_width,
                quality=self.config.image_quality,
            )
        if self.ids is None:
            self.ids = SnowflakeGenerator(self.config.node_id, self.config.id_epoch_ms)

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup resources."""
        if self.store:
            await self.store.close()
        if self.media:
            await self.media.close()

    async def authenticate(self, token: str | None) -> str:
        """Resolve the request credential to a user id."""
        return await self.authenticator.verify(token)

    async def create_item(
        self,
        token: str | None,
        content: str | None = None,
        image: bytes | None = None,
        reposted: str | None = None,
    ) -> Item:
        """
        Create a lynt.

        All validation (content, repost target, image decoding) happens
        before the first write.

        Args:
            token: Auth credential
            content: Raw text, None treated as empty
            image: Uploaded image bytes
            reposted: Id of the lynt being reposted

        Returns:
            The stored Item
        """
        user_id = await self.authenticate(token)
        bind_log_context(user_id=user_id)

        raw = validate_content(content, self.config.max_content_length)
        cleaned = sanitize(raw)

        parent_id = None
        if reposted:
            parent_id = await self.store.resolve_repost_target(reposted)
            if parent_id is None:
                raise InvalidRepostTarget(f"Reposted lynt {reposted} does not exist")

        media_data = await self.media.transcode_async(image) if image else None

        item_id = self.ids.next()
        new_item = NewItem(
            id=item_id,
            author_id=user_id,
            content=cleaned,
            has_link=has_link(cleaned),
            has_image=media_data is not None,
            is_repost=parent_id is not None,
            parent_id=parent_id,
            created_at=self.ids.timestamp_of(item_id),
        )

        # Writes run to completion even if the request is cancelled
        stored = await asyncio.shield(self._persist(new_item, media_data))

        self._log.info(
            "item_created",
            item_id=stored.id,
            author_id=user_id,
            is_repost=stored.is_repost,
            has_image=stored.has_image,
        )
        return stored

    async def _persist(self, new_item: NewItem, media_data: bytes | None) -> Item:
        """Write media then the record; the record is the source of truth."""
        key = item_image_key(new_item.id)

        if media_data is not None:
            try:
                await self.media.store(media_data, key)
            except LyntfeedError:
                self._log.error("create_failed", item_id=new_item.id, step="media_store", key=key)
                raise

        try:
            return await self.store.create(new_item)
        except PersistenceError:
            self._log.error(
                "create_failed",
                item_id=new_item.id,
                step="persist",
                orphaned_media=key if media_data is not None else None,
            )
            raise

    async def read_item(self, token: str | None, item_id: str | None) -> ItemReadResult:
        """
        Read a lynt with its ancestor chain and count the view.

        Args:
            token: Auth credential
            item_id: Lynt to read

        Returns:
            ItemReadResult with referenced_lynts root first
        """
        user_id = await self.authenticate(token)
        bind_log_context(user_id=user_id)

        if not item_id:
            raise MissingParameter("id", "Missing lynt ID")

        view = await self.store.fetch_for_read(item_id, user_id)
        if view is None:
            raise ItemNotFound(f"Lynt {item_id} not found")

        try:
            await self.store.increment_view_count(item_id)
        except PersistenceError as e:
            self._log.warning("view_increment_failed", item_id=item_id, error=str(e))

        chain = await resolve_chain(
            self.store,
            user_id,
            view.parent_id,
            max_depth=self.config.max_chain_depth,
        )

        return ItemReadResult(**view.model_dump(), referenced_lynts=chain)

    async def upload_avatar(self, token: str | None, file: bytes | None) -> None:
        """
        Transcode and store the caller's avatar, replacing any previous one.

        Awaited so processing failures reach the caller.
        """
        user_id = await self.authenticate(token)
        bind_log_context(user_id=user_id)

        if not file:
            raise MissingParameter("file", "No file uploaded")

        key = avatar_key(user_id)
        try:
            size = await self.media.process(file, key)
        except LyntfeedError:
            self._log.error("avatar_upload_failed", key=key)
            raise

        self._log.info("avatar_uploaded", key=key, size=size)
