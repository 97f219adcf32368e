"""
Content item model — a piece of content eligible for recommendation.

Supplied by the data source for each call and never mutated by the pipeline.
Built from data-source rows via ContentItem.model_validate(d) or ensure_items().
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ItemId = Union[int, str]


class ItemMeta(BaseModel):
    """Generation metadata: parent item, server and method used."""

    model_config = ConfigDict(extra="allow")

    mutate_of_id: Optional[ItemId] = None
    server_id: Optional[ItemId] = None
    method: Optional[str] = None


class ContentItem(BaseModel):
    """
    Content item as stored by the data source.

    Only id is required; everything else is optional to support partial rows.
    published=None means "unknown" and is treated as published.
    """

    model_config = ConfigDict(extra="allow")

    id: ItemId
    user_id: Optional[ItemId] = None
    created_at: Optional[datetime] = None
    published: Optional[bool] = None
    family_id: Optional[ItemId] = None
    title: Optional[str] = None
    meta: ItemMeta = Field(default_factory=ItemMeta)

    @field_validator("meta", mode="before")
    @classmethod
    def _empty_meta(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_unpublished(self) -> bool:
        """True only when the item is explicitly marked unpublished."""
        return self.published is False


def ensure_item(item: Union[Dict[str, Any], ContentItem]) -> ContentItem:
    """Convert a dict to a ContentItem; ContentItems pass through."""
    return ContentItem.model_validate(item) if isinstance(item, dict) else item


def ensure_items(items: List[Union[Dict[str, Any], ContentItem]]) -> List[ContentItem]:
    """Convert list of dicts or ContentItems to list of ContentItem models for the pipeline."""
    return [ensure_item(i) for i in items]
