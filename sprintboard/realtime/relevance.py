"""Decides whether an item-change event concerns the current user."""

from __future__ import annotations

from ..workflow.models import User
from .events import ItemUpdateEvent


def is_relevant(event: ItemUpdateEvent, current_user: User | None) -> bool:
    """True iff the user created, is assigned to, or watches the item."""
    if current_user is None:
        return False
    return (
        current_user.id == event.item.created_by
        or current_user.id == event.item.assignee_id
        or current_user.id in event.watchers
    )
