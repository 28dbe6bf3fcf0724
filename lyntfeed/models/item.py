"""Item (lynt) data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


MAX_CONTENT_LENGTH = 280


class _ApiModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class NewItem(_ApiModel):
    """
    A fully-formed item ready to be inserted.

    A repost flag without a parent id (or a parent id without the flag)
    fails validation, so a half-built record never reaches the store.
    """

    id: str = Field(min_length=1)
    author_id: str = Field(min_length=1)
    content: str = ""
    has_link: bool = False
    has_image: bool = False
    is_repost: bool = False
    parent_id: str | None = None
    created_at: datetime

    @model_validator(mode="after")
    def _check_repost_link(self) -> "NewItem":
        if self.is_repost and not self.parent_id:
            raise ValueError("repost requires parent_id")
        if self.parent_id and not self.is_repost:
            raise ValueError("parent_id is only valid on a repost")
        if self.parent_id == self.id:
            raise ValueError("item cannot repost itself")
        return self


class Item(_ApiModel):
    """A stored item record."""

    id: str
    author_id: str
    content: str = ""
    has_link: bool = False
    has_image: bool = False
    is_repost: bool = False
    parent_id: str | None = None
    views: int = 0
    created_at: datetime


class ItemView(Item):
    """An item joined with its author and fields derived for one viewer."""

    author_username: str | None = None
    author_handle: str | None = None
    like_count: int = 0
    liked_by_viewer: bool = False


class ItemReadResult(ItemView):
    """An item together with its ancestor chain, root first."""

    referenced_lynts: list[ItemView] = []
