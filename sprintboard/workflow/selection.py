"""Permission-aware active sprint selection."""

from __future__ import annotations

from datetime import datetime

from .models import Sprint, SprintState, User, WorkItem


def available_active_sprints(
    sprints: list[Sprint],
    items: list[WorkItem],
    user: User | None,
    can_manage: bool,
) -> list[Sprint]:
    """Active sprints the user may pick from.

    Sprint managers see every active sprint; everyone else only sees the
    active sprints holding at least one item assigned to them.
    """
    if user is None:
        return []
    active = [s for s in sprints if s.state is SprintState.ACTIVE]
    if can_manage:
        return active
    with_user_items = {
        item.sprint for item in items if item.assignee_id == user.id and item.sprint
    }
    return [s for s in active if s.name in with_user_items]


def choose_selected_sprint(
    available: list[Sprint], current_id: str | None
) -> str | None:
    """Keep the current selection if still available, else the latest started."""
    if not available:
        return None
    if any(s.id == current_id for s in available):
        return current_id
    most_recent = max(available, key=lambda s: s.start_at or datetime.min)
    return most_recent.id
