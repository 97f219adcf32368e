"""
Transition model — aggregate "users viewed A, then B" events.

Field names follow the data-source columns. Built via Transition.model_validate(d)
or ensure_transitions().
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from .item import ItemId


class Transition(BaseModel):
    """
    One transition aggregate.

    count: how many times the transition was observed (negative counts read as 0).
    last_updated: when it was last observed; None means "now" (no decay).
    """

    model_config = ConfigDict(extra="allow")

    from_created_image_id: ItemId
    to_created_image_id: ItemId
    count: float = 0
    last_updated: Optional[datetime] = None

    @field_validator("count", mode="before")
    @classmethod
    def _none_count(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("last_updated")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def from_id(self) -> ItemId:
        return self.from_created_image_id

    @property
    def to_id(self) -> ItemId:
        return self.to_created_image_id


def ensure_transitions(
    items: List[Union[Dict[str, Any], Transition]],
) -> List[Transition]:
    """Convert list of dicts or Transitions to list of Transition models for the pipeline."""
    return [
        Transition.model_validate(t) if isinstance(t, dict) else t
        for t in items
    ]
