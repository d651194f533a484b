"""Board configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from sprintboard.workflow.models import SprintDeletePolicy

DEFAULT_MESSAGES: dict[str, str] = {
    "status": "Status changed to {status}",
    "assignee": "Assigned to {assignee}",
    "due": "Due date changed to {date}",
    "comment": "New comment added",
    "generic": "{field} was updated",
}


@dataclass
class BoardConfig:
    """Configuration for the board state and its notification pipeline."""

    debounce_seconds: float = 3.0
    connect_delay_seconds: float = 1.5
    event_interval_seconds: tuple[float, float] = (7.0, 12.0)
    sprint_delete_policy: SprintDeletePolicy = SprintDeletePolicy.UNASSIGN
    wip_limit: int = 3
    sprint_duration_days: int = 14
    messages: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MESSAGES))


def load_config(path: Path) -> BoardConfig:
    """Read a BoardConfig from a YAML file. Missing keys keep their defaults."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a mapping: {path}")

    known = {f.name for f in fields(BoardConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    if "event_interval_seconds" in data:
        low, high = data["event_interval_seconds"]
        if low > high:
            raise ValueError("event_interval_seconds must be (min, max)")
        data["event_interval_seconds"] = (float(low), float(high))
    if "sprint_delete_policy" in data:
        data["sprint_delete_policy"] = SprintDeletePolicy(data["sprint_delete_policy"])
    if "messages" in data:
        data["messages"] = {**DEFAULT_MESSAGES, **(data["messages"] or {})}
    return BoardConfig(**data)
