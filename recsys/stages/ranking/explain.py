"""
Display details for reason tags (e.g. "Child of anchor", "Same creator").

Used by the web layer to explain why each related item was shown.
"""

from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel

from ...models.item import ContentItem, ItemId
from ...models.scoring import Reason, RecommendedItem


class ReasonDetail(BaseModel):
    type: str
    label: str
    related_creation_id: Optional[ItemId] = None
    related_creation_title: Optional[str] = None


_ANCHOR_LABELS = {
    Reason.CLICK_NEXT.value: "Users clicked next from anchor",
    Reason.SAME_CREATOR.value: "Same creator",
    Reason.SAME_SERVER_METHOD.value: "Same server/method",
}


def _lineage_label(anchor: ContentItem, candidate: Optional[ContentItem]) -> str:
    if candidate is not None and candidate.meta.mutate_of_id == anchor.id:
        return "Child of anchor"
    if candidate is not None and anchor.meta.mutate_of_id == candidate.id:
        return "Parent of anchor"
    return "Same lineage"


def reason_details(
    anchor: ContentItem,
    candidate: Optional[ContentItem],
    reasons: Iterable[Union[Reason, str]],
) -> List[ReasonDetail]:
    """
    One detail per reason tag.

    Anchor-relative reasons point at the anchor; fallback points at the
    candidate itself; unknown tags are passed through with no related item.
    """
    out = []
    for reason in reasons:
        tag = reason.value if isinstance(reason, Reason) else str(reason)
        if tag in _ANCHOR_LABELS:
            out.append(ReasonDetail(
                type=tag,
                label=_ANCHOR_LABELS[tag],
                related_creation_id=anchor.id,
                related_creation_title=anchor.title,
            ))
        elif tag == Reason.LINEAGE.value:
            out.append(ReasonDetail(
                type=tag,
                label=_lineage_label(anchor, candidate),
                related_creation_id=anchor.id,
                related_creation_title=anchor.title,
            ))
        elif tag == Reason.FALLBACK.value:
            out.append(ReasonDetail(
                type=tag,
                label="Fallback candidate",
                related_creation_id=candidate.id if candidate is not None else None,
                related_creation_title=candidate.title if candidate is not None else None,
            ))
        else:
            out.append(ReasonDetail(type=tag, label=tag))
    return out


def explain_items(
    anchor: ContentItem,
    pool: List[ContentItem],
    items: List[RecommendedItem],
) -> Dict[ItemId, List[ReasonDetail]]:
    """Reason details for every output row, keyed by item id."""
    by_id = {item.id: item for item in pool}
    return {
        row.id: reason_details(anchor, by_id.get(row.id), row.reasons)
        for row in items
    }
