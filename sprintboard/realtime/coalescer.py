"""Debounced per-item toast coalescing.

A burst of changes to one item within the debounce window becomes a single
toast listing each distinct change once. Every new event for an item
cancels that item's scheduled delivery and reschedules it; summaries
accumulate rather than being overwritten.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime

from ..config import DEFAULT_MESSAGES, BoardConfig
from ..workflow.models import ToastNotification
from .events import FieldChange, ItemUpdateEvent
from .scheduling import Handle, LoopScheduler, Scheduler
from .toasts import ToastQueue

logger = logging.getLogger(__name__)

_SECTION_BY_FIELD = {
    "status": "status",
    "assignee": "assignee",
    "dueDate": "dueDate",
}


def _format_date(value) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return str(value)


def format_change(change: FieldChange, messages: dict[str, str] | None = None) -> str:
    """Render a field change as a one-line human summary."""
    messages = messages or DEFAULT_MESSAGES
    if change.field == "status":
        return messages["status"].format(status=change.to_value)
    if change.field == "assignee":
        return messages["assignee"].format(assignee=change.to_value)
    if change.field == "dueDate":
        return messages["due"].format(date=_format_date(change.to_value))
    if change.field == "comment":
        return messages["comment"]
    return messages["generic"].format(field=change.field)


def section_for_field(field_name: str) -> str:
    return _SECTION_BY_FIELD.get(field_name, "title")


@dataclass
class _Pending:
    item_id: str
    title: str
    trigger_field: str
    changes: list[str] = field(default_factory=list)
    handle: Handle | None = None


class ToastCoalescer:
    """Per-item debounce buffer feeding a ToastQueue."""

    def __init__(
        self,
        queue: ToastQueue,
        config: BoardConfig | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._queue = queue
        self._config = config or BoardConfig()
        self._scheduler = scheduler or LoopScheduler()
        self._pending: dict[str, _Pending] = {}

    @property
    def queue(self) -> ToastQueue:
        return self._queue

    def add(self, event: ItemUpdateEvent) -> None:
        """Buffer an already-relevant event and (re)schedule its delivery."""
        item_id = event.item.id
        summary = format_change(event.change, self._config.messages)

        pending = self._pending.get(item_id)
        if pending is None:
            pending = _Pending(
                item_id=item_id, title=event.item.title, trigger_field=event.change.field
            )
            self._pending[item_id] = pending
        else:
            if pending.handle is not None:
                pending.handle.cancel()
            pending.title = event.item.title or pending.title
            pending.trigger_field = event.change.field

        if summary not in pending.changes:
            pending.changes.append(summary)

        pending.handle = self._scheduler.call_later(
            self._config.debounce_seconds, lambda: self._deliver(item_id)
        )

    def _deliver(self, item_id: str) -> None:
        pending = self._pending.pop(item_id, None)
        if pending is None:
            return
        toast = ToastNotification(
            id=f"toast-{item_id}-{uuid.uuid4().hex[:8]}",
            item_id=item_id,
            title=pending.title,
            changes=list(pending.changes),
            highlight_section=section_for_field(pending.trigger_field),
        )
        self._queue.push(toast)
        logger.info("Delivered toast for %s with %d change(s)", item_id, len(toast.changes))

    def flush(self) -> int:
        """Deliver every pending entry now. Returns how many were delivered."""
        item_ids = list(self._pending)
        for item_id in item_ids:
            handle = self._pending[item_id].handle
            if handle is not None:
                handle.cancel()
            self._deliver(item_id)
        return len(item_ids)

    def cancel_all(self) -> None:
        """Drop every pending entry without delivering it."""
        for pending in self._pending.values():
            if pending.handle is not None:
                pending.handle.cancel()
        self._pending.clear()

    def pending_item_ids(self) -> list[str]:
        return list(self._pending)
