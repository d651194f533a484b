"""Populate a store from a YAML board seed.

Seed layout::

    users:   [{id, name}]
    teams:   [{name, members: [user ids]}]
    epics:   [{key, name, ease, impact, confidence, description}]
    sprints: [{name, goal, state, epics: [epic keys]}]
    items:   [{title, reporter, assignee, status, epic, sprint, team,
               points, watchers, labels}]

Epics and teams are referred to by their seed ``key``/``name`` since store
ids are generated on creation.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from .adapters.memory import InMemoryBoardStore
from .config import BoardConfig
from .workflow.models import SprintState, User, WorkItemStatus

# Forward walk used to bring a freshly created item to its seeded status.
_STATUS_PATH = (
    WorkItemStatus.TODO,
    WorkItemStatus.IN_PROGRESS,
    WorkItemStatus.IN_REVIEW,
    WorkItemStatus.DONE,
)

DEMO_SEED: dict = {
    "users": [
        {"id": "u-alice", "name": "Alice"},
        {"id": "u-bob", "name": "Bob"},
        {"id": "u-charlie", "name": "Charlie"},
        {"id": "u-diana", "name": "Diana"},
    ],
    "teams": [{"name": "Platform", "members": ["u-alice", "u-bob"]}],
    "epics": [
        {"key": "auth", "name": "Single sign-on", "ease": 4, "impact": 6, "confidence": 8},
        {"key": "reports", "name": "Sprint reports", "ease": 5, "impact": 5, "confidence": 6},
    ],
    "sprints": [
        {"name": "Sprint 1", "goal": "Ship SSO login", "state": "active", "epics": ["auth"]},
        {"name": "Sprint 2", "goal": "Reporting", "state": "planned"},
    ],
    "items": [
        {"title": "OAuth callback handler", "reporter": "u-alice", "assignee": "u-alice",
         "status": "in_progress", "epic": "auth", "sprint": "Sprint 1", "points": 5},
        {"title": "Session cookie rotation", "reporter": "u-bob", "assignee": "u-alice",
         "status": "todo", "epic": "auth", "sprint": "Sprint 1", "points": 3},
        {"title": "Login page copy", "reporter": "u-charlie", "assignee": "u-bob",
         "status": "done", "sprint": "Sprint 1", "points": 1, "watchers": ["u-alice"]},
        {"title": "Burndown chart", "reporter": "u-diana", "assignee": "u-diana",
         "status": "backlog", "epic": "reports", "points": 8},
        {"title": "Velocity export", "reporter": "u-alice", "assignee": "u-charlie",
         "status": "todo", "epic": "reports", "points": 2, "team": "Platform"},
    ],
}


def read_seed(path: Path) -> dict:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Seed file must hold a mapping: {path}")
    return data


async def build_store(seed: dict, config: BoardConfig | None = None) -> InMemoryBoardStore:
    """Create a store and replay the seed through its public operations."""
    store = InMemoryBoardStore(
        board_id=seed.get("board_id", "board-1"),
        config=config,
        users=[User(id=u["id"], name=u["name"]) for u in seed.get("users", [])],
    )

    team_ids = {}
    for team in seed.get("teams", []):
        created = await store.save_team(name=team["name"], member_ids=team.get("members", []))
        team_ids[team["name"]] = created.id

    epic_ids = {}
    for epic in seed.get("epics", []):
        created = await store.create_epic(
            epic["name"],
            ease=epic.get("ease", 5),
            impact=epic.get("impact", 5),
            confidence=epic.get("confidence", 5),
            description=epic.get("description", ""),
        )
        epic_ids[epic.get("key", epic["name"])] = created.id

    for sprint in seed.get("sprints", []):
        created = await store.save_sprint(
            name=sprint["name"],
            goal=sprint.get("goal", ""),
            epic_ids=[epic_ids[key] for key in sprint.get("epics", [])],
        )
        state = SprintState(sprint.get("state", "planned"))
        if state in (SprintState.ACTIVE, SprintState.CLOSED):
            await store.update_sprint_state(created.id, SprintState.ACTIVE)
        if state is SprintState.CLOSED:
            await store.update_sprint_state(created.id, SprintState.CLOSED)

    for item in seed.get("items", []):
        status = WorkItemStatus(item.get("status", "todo"))
        fields = {
            "sprint": item.get("sprint", ""),
            "estimation_points": item.get("points", 0),
            "watchers": item.get("watchers", []),
            "labels": item.get("labels", []),
        }
        if item.get("epic"):
            fields["epic_id"] = epic_ids[item["epic"]]
        if item.get("team"):
            fields["team_id"] = team_ids[item["team"]]
        created = await store.create_work_item(
            item["title"],
            reporter_id=item["reporter"],
            assignee_id=item.get("assignee"),
            status=WorkItemStatus.BACKLOG if status is WorkItemStatus.BACKLOG else WorkItemStatus.TODO,
            **fields,
        )
        if status in _STATUS_PATH:
            for step in _STATUS_PATH[1 : _STATUS_PATH.index(status) + 1]:
                await store.transition_work_item(created.id, step)

    return store
