"""Abstract board backend protocol."""

from typing import Callable, Protocol

from .models import (
    Epic,
    EpicStatus,
    SprintDeletePolicy,
    Sprint,
    SprintState,
    StoreChange,
    WorkItem,
    WorkItemStatus,
)


class BoardBackend(Protocol):
    """Interface that any board state owner must implement.

    Covers the cascade-bearing operations on epics, sprints and work items
    plus the observer hook that replaces UI reactivity.
    """

    def subscribe(self, callback: Callable[[StoreChange], None]) -> Callable[[], None]: ...

    async def get_epic(self, epic_id: str) -> Epic: ...

    async def get_sprint(self, sprint_id: str) -> Sprint: ...

    async def get_work_item(self, item_id: str) -> WorkItem: ...

    async def list_epics(self, include_deleted: bool = True) -> list[Epic]: ...

    async def list_sprints(self, include_deleted: bool = True) -> list[Sprint]: ...

    async def list_work_items(
        self,
        sprint: str | None = None,
        epic_id: str | None = None,
    ) -> list[WorkItem]: ...

    async def get_board_summary(self) -> dict: ...

    # Epic lifecycle

    async def create_epic(
        self,
        name: str,
        ease: int = 5,
        impact: int = 5,
        confidence: int = 5,
        **fields,
    ) -> Epic: ...

    async def update_epic(self, epic_id: str, **fields) -> Epic: ...

    async def update_epic_status(self, epic_id: str, status: EpicStatus) -> Epic: ...

    async def delete_epic(self, epic_id: str) -> Epic: ...

    async def restore_epic(self, epic_id: str) -> Epic: ...

    # Sprint lifecycle

    async def save_sprint(self, sprint_id: str | None = None, **fields) -> Sprint: ...

    async def update_sprint_state(self, sprint_id: str, state: SprintState) -> Sprint: ...

    async def delete_sprint(
        self,
        sprint_id: str,
        policy: SprintDeletePolicy | None = None,
        target_sprint_id: str | None = None,
    ) -> Sprint: ...

    async def restore_sprint(self, sprint_id: str) -> Sprint: ...

    # Work items

    async def create_work_item(
        self, title: str, reporter_id: str, assignee_id: str | None = None, **fields
    ) -> WorkItem: ...

    async def update_work_item(self, item_id: str, **fields) -> WorkItem: ...

    async def transition_work_item(
        self, item_id: str, status: WorkItemStatus
    ) -> WorkItem: ...
