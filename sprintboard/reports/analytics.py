"""Board reports: burndown, velocity, epic progress, assignee workload."""

from __future__ import annotations

import math

from ..workflow.models import Epic, User, WorkItem, WorkItemStatus

_OPEN_STATUSES = (WorkItemStatus.BACKLOG, WorkItemStatus.TODO)


def _points(items: list[WorkItem]) -> int:
    return sum(item.estimation_points or 0 for item in items)


def burndown(sprint_name: str, items: list[WorkItem], duration_days: int = 14) -> dict:
    """Ideal vs. actual remaining points per sprint day.

    An item counts as burned on the day (since its creation) it was last
    updated while done; there is no transition log to be more precise.
    """
    sprint_items = [i for i in items if i.sprint == sprint_name]
    if not sprint_name or not sprint_items or duration_days <= 0:
        return {"labels": [], "ideal": [], "actual": [], "total_points": 0}

    labels = [f"Day {d}" for d in range(duration_days + 1)]
    total = _points(sprint_items)
    ideal = [round(total - (total / duration_days) * d, 2) for d in range(duration_days + 1)]

    burned_by_day: dict[int, int] = {}
    for item in sprint_items:
        if item.status is not WorkItemStatus.DONE:
            continue
        elapsed = (item.updated_at - item.created_at).total_seconds() / 86400
        day = min(max(1, math.ceil(elapsed)), duration_days)
        burned_by_day[day] = burned_by_day.get(day, 0) + (item.estimation_points or 0)

    remaining = total
    actual = [total]
    for day in range(1, duration_days + 1):
        remaining -= burned_by_day.get(day, 0)
        actual.append(remaining)

    return {"labels": labels, "ideal": ideal, "actual": actual, "total_points": total}


def velocity(sprint_names: list[str], items: list[WorkItem]) -> dict:
    """Done points per sprint, in the given sprint order, plus the average."""
    by_sprint = {name: 0 for name in sprint_names}
    for item in items:
        if item.status is WorkItemStatus.DONE and item.sprint in by_sprint:
            by_sprint[item.sprint] += item.estimation_points or 0
    data = list(by_sprint.values())
    return {
        "labels": list(by_sprint),
        "data": data,
        "average": round(sum(data) / len(data), 2) if data else 0.0,
    }


def epic_progress(epics: list[Epic], items: list[WorkItem]) -> list[dict]:
    """Per-epic completion, highest ICE score first."""
    rows = []
    for epic in epics:
        children = [i for i in items if i.epic_id == epic.id]
        done = [i for i in children if i.status is WorkItemStatus.DONE]
        total_points = _points(children)
        done_points = _points(done)
        rows.append({
            "epic": epic,
            "total_items": len(children),
            "done_items": len(done),
            "total_estimation": total_points,
            "done_estimation": done_points,
            "progress": round(done_points / total_points * 100, 1) if total_points > 0 else 0.0,
        })
    rows.sort(key=lambda r: r["epic"].ice_score, reverse=True)
    return rows


def assignee_workload(users: list[User], items: list[WorkItem], wip_limit: int = 3) -> list[dict]:
    """Open / in-progress / in-review counts per user, heaviest load first."""
    stats = {u.id: {"open": 0, "in_progress": 0, "in_review": 0} for u in users}
    for item in items:
        row = stats.get(item.assignee_id)
        if row is None:
            continue
        if item.status in _OPEN_STATUSES:
            row["open"] += 1
        elif item.status is WorkItemStatus.IN_PROGRESS:
            row["in_progress"] += 1
        elif item.status is WorkItemStatus.IN_REVIEW:
            row["in_review"] += 1

    rows = []
    for user in users:
        row = stats[user.id]
        rows.append({
            "assignee": user,
            **row,
            "total_load": row["open"] + row["in_progress"] + row["in_review"],
            "wip_breached": row["in_progress"] > wip_limit,
        })
    rows.sort(key=lambda r: r["total_load"], reverse=True)
    return rows
