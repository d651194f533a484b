"""MCP server factory binding handlers to a board store."""

from typing import Any

from claude_agent_sdk import create_sdk_mcp_server, tool

from ..adapters.memory import InMemoryBoardStore
from . import handlers


def create_board_server(store: InMemoryBoardStore):
    """Create an MCP server exposing board state and cascade operations.

    Each handler is bound to the store via closure so the @tool wrappers
    are clean single-argument async functions as the SDK expects.
    """

    @tool(
        "get_board_summary",
        "Get board status: item counts by status, sprints by state, progress percentage",
        {},
    )
    async def get_board_summary(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_board_summary_handler(args, store)

    @tool(
        "list_epics",
        "List epics with ICE scores and status. include_deleted defaults to true.",
        {"include_deleted": str},
    )
    async def list_epics(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.list_epics_handler(args, store)

    @tool(
        "get_epic",
        "Get an epic by ID with the IDs of its work items",
        {"epic_id": str},
    )
    async def get_epic(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_epic_handler(args, store)

    @tool(
        "create_epic",
        "Create an epic. ease, impact and confidence are 1-10; the ICE score is their average.",
        {"name": str, "description": str, "ease": int, "impact": int, "confidence": int},
    )
    async def create_epic(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.create_epic_handler(args, store)

    @tool(
        "delete_epic",
        "Soft-delete an epic. Its work items are detached from it, not deleted.",
        {"epic_id": str},
    )
    async def delete_epic(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.delete_epic_handler(args, store)

    @tool(
        "restore_epic",
        "Restore a deleted epic to active. Detached items are not re-attached.",
        {"epic_id": str},
    )
    async def restore_epic(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.restore_epic_handler(args, store)

    @tool(
        "list_sprints",
        "List sprints with state and attached epic IDs. include_deleted defaults to true.",
        {"include_deleted": str},
    )
    async def list_sprints(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.list_sprints_handler(args, store)

    @tool(
        "save_sprint",
        "Create (omit sprint_id) or update a sprint. epic_ids is a JSON list; "
        "newly attached epics pull their work items into the sprint.",
        {"sprint_id": str, "name": str, "goal": str, "epic_ids": str},
    )
    async def save_sprint(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.save_sprint_handler(args, store)

    @tool(
        "delete_sprint",
        "Soft-delete a sprint. policy is 'unassign' (items go to backlog) or 'move' "
        "(items go to target_sprint_id).",
        {"sprint_id": str, "policy": str, "target_sprint_id": str},
    )
    async def delete_sprint(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.delete_sprint_handler(args, store)

    @tool(
        "restore_sprint",
        "Restore a deleted sprint to planned",
        {"sprint_id": str},
    )
    async def restore_sprint(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.restore_sprint_handler(args, store)

    @tool(
        "list_work_items",
        "List work items, optionally filtered by sprint name and/or epic_id",
        {"sprint": str, "epic_id": str},
    )
    async def list_work_items(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.list_work_items_handler(args, store)

    @tool(
        "create_work_item",
        "Create a work item in todo. epic_id and sprint are optional.",
        {"title": str, "reporter_id": str, "assignee_id": str, "epic_id": str, "sprint": str, "points": int},
    )
    async def create_work_item(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.create_work_item_handler(args, store)

    @tool(
        "transition_work_item",
        "Move a work item to a new status (backlog, todo, in_progress, in_review, done) "
        "following the workflow rules",
        {"item_id": str, "status": str},
    )
    async def transition_work_item(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.transition_work_item_handler(args, store)

    @tool(
        "get_reports",
        "Burndown for a sprint (defaults to the active one), velocity, epic progress and workload",
        {"sprint": str},
    )
    async def get_reports(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_reports_handler(args, store)

    return create_sdk_mcp_server(
        name="sprintboard",
        version="0.1.0",
        tools=[
            get_board_summary,
            list_epics,
            get_epic,
            create_epic,
            delete_epic,
            restore_epic,
            list_sprints,
            save_sprint,
            delete_sprint,
            restore_sprint,
            list_work_items,
            create_work_item,
            transition_work_item,
            get_reports,
        ],
    )
