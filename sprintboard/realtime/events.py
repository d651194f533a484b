"""Item-change events as they arrive from the realtime feed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

logger = logging.getLogger(__name__)

EVENT_TYPES = (
    "item.status_changed",
    "item.assignee_changed",
    "item.due_changed",
    "item.comment_added",
)


@dataclass
class ItemRef:
    id: str
    title: str
    assignee_id: str | None = None
    created_by: str | None = None
    board_id: str | None = None


@dataclass
class FieldChange:
    field: str
    from_value: Any = None
    to_value: Any = None


@dataclass
class ItemUpdateEvent:
    type: str
    item: ItemRef
    change: FieldChange
    watchers: set[str] = field(default_factory=set)
    actor_id: str | None = None
    at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ItemUpdateEvent":
        """Build an event from the feed's wire shape.

        Raises KeyError/TypeError/ValueError on malformed input.
        """
        item = data["item"]
        change = data["change"]
        actor = data.get("actor")
        if isinstance(actor, dict):
            actor = actor.get("id")
        if not item["id"] or not change["field"]:
            raise ValueError("event is missing an item id or change field")
        return cls(
            type=data.get("type", ""),
            item=ItemRef(
                id=str(item["id"]),
                title=str(item.get("title", "")),
                assignee_id=item.get("assigneeId"),
                created_by=item.get("createdBy"),
                board_id=item.get("boardId"),
            ),
            change=FieldChange(
                field=str(change["field"]),
                from_value=change.get("from"),
                to_value=change.get("to"),
            ),
            watchers=set(data.get("watchers") or ()),
            actor_id=actor,
            at=data.get("at", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "item": {
                "id": self.item.id,
                "title": self.item.title,
                "assigneeId": self.item.assignee_id,
                "createdBy": self.item.created_by,
                "boardId": self.item.board_id,
            },
            "change": {
                "field": self.change.field,
                "from": self.change.from_value,
                "to": self.change.to_value,
            },
            "watchers": sorted(self.watchers),
            "actor": self.actor_id,
            "at": self.at,
        }


def events_from_feed(raw_events: Iterable[dict[str, Any]]) -> Iterator[ItemUpdateEvent]:
    """Parse raw feed dicts, silently dropping malformed ones."""
    for raw in raw_events:
        try:
            yield ItemUpdateEvent.from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Dropping malformed event %r: %s", raw, e)
