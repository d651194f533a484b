"""Pure handler functions for board MCP tools.

Each handler takes (args, store) and returns MCP result format.
No SDK dependency, so they are testable with InMemoryBoardStore.
"""

import json
from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from typing import Any

from ..adapters.memory import InMemoryBoardStore
from ..reports import analytics
from ..workflow.exceptions import BoardValidationError, InvalidTransitionError
from ..workflow.models import SprintDeletePolicy, SprintState, WorkItemStatus


def _default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return str(value)


def _text_result(text: str) -> dict[str, Any]:
    """Build MCP tool result with a text content block."""
    return {"content": [{"type": "text", "text": text}]}


def _json_result(data: Any) -> dict[str, Any]:
    """Build MCP tool result with JSON-serialized content."""
    return _text_result(json.dumps(data, indent=2, default=_default))


def _error_result(error: Exception) -> dict[str, Any]:
    message = error.args[0] if isinstance(error, KeyError) and error.args else str(error)
    return _text_result(f"Error: {message}")


def _json_list(raw: Any) -> list:
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return [part.strip() for part in raw.split(",") if part.strip()]
        return parsed if isinstance(parsed, list) else [parsed]
    return list(raw)


def _flag(raw: Any, default: bool) -> bool:
    if raw is None or raw == "":
        return default
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes")
    return bool(raw)


async def get_board_summary_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    """Get overall board status: item counts, sprints by state, progress."""
    return _json_result(await store.get_board_summary())


async def list_epics_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    epics = await store.list_epics(include_deleted=_flag(args.get("include_deleted"), True))
    return _json_result([asdict(e) for e in epics])


async def get_epic_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    """Get an epic with the ids of the work items linked to it."""
    epic_id = args["epic_id"]
    try:
        epic = await store.get_epic(epic_id)
    except KeyError as e:
        return _error_result(e)
    items = await store.list_work_items(epic_id=epic_id)
    return _json_result({"epic": asdict(epic), "item_ids": [i.id for i in items]})


async def create_epic_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    try:
        epic = await store.create_epic(
            args["name"],
            ease=int(args.get("ease", 5)),
            impact=int(args.get("impact", 5)),
            confidence=int(args.get("confidence", 5)),
            description=args.get("description", ""),
        )
    except ValueError as e:
        return _error_result(e)
    return _json_result({"created": asdict(epic)})


async def delete_epic_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    """Soft-delete an epic; its work items are detached, not deleted."""
    epic_id = args["epic_id"]
    detached = [i.id for i in await store.list_work_items(epic_id=epic_id)]
    try:
        epic = await store.delete_epic(epic_id)
    except (KeyError, InvalidTransitionError) as e:
        return _error_result(e)
    return _json_result({"deleted": asdict(epic), "detached_item_ids": detached})


async def restore_epic_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    try:
        epic = await store.restore_epic(args["epic_id"])
    except (KeyError, InvalidTransitionError) as e:
        return _error_result(e)
    return _json_result({"restored": asdict(epic)})


async def list_sprints_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    sprints = await store.list_sprints(include_deleted=_flag(args.get("include_deleted"), True))
    return _json_result([asdict(s) for s in sprints])


async def save_sprint_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    """Create or update a sprint.

    epic_ids is passed as a JSON string to work within MCP's simple schema
    system. Newly attached epics pull their work items into the sprint.
    """
    fields: dict[str, Any] = {}
    for key in ("name", "goal"):
        if args.get(key):
            fields[key] = args[key]
    if args.get("epic_ids") not in (None, ""):
        fields["epic_ids"] = _json_list(args["epic_ids"])

    sprint_id = args.get("sprint_id") or None
    try:
        sprint = await store.save_sprint(sprint_id, **fields)
    except (KeyError, ValueError) as e:
        return _error_result(e)
    items = await store.list_work_items(sprint=sprint.name)
    return _json_result({"saved": asdict(sprint), "item_ids": [i.id for i in items]})


async def delete_sprint_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    """Soft-delete a sprint, unassigning its items or moving them to another sprint."""
    policy = args.get("policy") or None
    try:
        sprint = await store.delete_sprint(
            args["sprint_id"],
            policy=SprintDeletePolicy(policy) if policy else None,
            target_sprint_id=args.get("target_sprint_id") or None,
        )
    except (KeyError, ValueError, InvalidTransitionError) as e:
        return _error_result(e)
    return _json_result({"deleted": asdict(sprint)})


async def restore_sprint_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    try:
        sprint = await store.restore_sprint(args["sprint_id"])
    except (KeyError, BoardValidationError, InvalidTransitionError) as e:
        return _error_result(e)
    return _json_result({"restored": asdict(sprint)})


async def list_work_items_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    """List work items, optionally filtered by sprint name and/or epic id."""
    items = await store.list_work_items(
        sprint=args.get("sprint"),
        epic_id=args.get("epic_id") or None,
    )
    return _json_result([asdict(i) for i in items])


async def create_work_item_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if args.get("epic_id"):
        fields["epic_id"] = args["epic_id"]
    if args.get("sprint"):
        fields["sprint"] = args["sprint"]
    if args.get("points"):
        fields["estimation_points"] = int(args["points"])
    try:
        item = await store.create_work_item(
            args["title"],
            reporter_id=args["reporter_id"],
            assignee_id=args.get("assignee_id") or None,
            **fields,
        )
    except ValueError as e:
        return _error_result(e)
    return _json_result({"created": asdict(item)})


async def transition_work_item_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    try:
        item = await store.transition_work_item(
            args["item_id"], WorkItemStatus(args["status"])
        )
    except (KeyError, ValueError, InvalidTransitionError) as e:
        return _error_result(e)
    return _json_result({"updated": asdict(item)})


async def get_reports_handler(
    args: dict[str, Any], store: InMemoryBoardStore
) -> dict[str, Any]:
    """Burndown for one sprint plus board-wide velocity, epic progress and workload."""
    items = await store.list_work_items()
    sprints = await store.list_sprints(include_deleted=False)
    sprint_name = args.get("sprint") or next(
        (s.name for s in sprints if s.state is SprintState.ACTIVE), ""
    )
    config = store.config

    return _json_result({
        "burndown": analytics.burndown(sprint_name, items, config.sprint_duration_days),
        "velocity": analytics.velocity([s.name for s in sprints], items),
        "epic_progress": [
            {**row, "epic": row["epic"].name}
            for row in analytics.epic_progress(await store.list_epics(include_deleted=False), items)
        ],
        "workload": [
            {**row, "assignee": row["assignee"].name}
            for row in analytics.assignee_workload(store.list_users(), items, config.wip_limit)
        ],
    })
