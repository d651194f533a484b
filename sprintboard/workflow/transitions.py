"""Sprint, epic and work-item state machines defined as data."""

from .exceptions import InvalidTransitionError
from .models import EpicStatus, SprintState, WorkItemStatus

SPRINT_TRANSITIONS: frozenset[tuple[SprintState, SprintState]] = frozenset(
    {
        (SprintState.PLANNED, SprintState.ACTIVE),    # start
        (SprintState.ACTIVE, SprintState.CLOSED),     # close
        (SprintState.PLANNED, SprintState.DELETED),
        (SprintState.ACTIVE, SprintState.DELETED),
        (SprintState.CLOSED, SprintState.DELETED),
        (SprintState.DELETED, SprintState.PLANNED),   # restore
    }
)

_LIVE_EPIC_STATES = (
    EpicStatus.ACTIVE,
    EpicStatus.ON_HOLD,
    EpicStatus.DONE,
    EpicStatus.ARCHIVED,
)

EPIC_TRANSITIONS: frozenset[tuple[EpicStatus, EpicStatus]] = frozenset(
    {
        (EpicStatus.ACTIVE, EpicStatus.ON_HOLD),
        (EpicStatus.ON_HOLD, EpicStatus.ACTIVE),
        (EpicStatus.ACTIVE, EpicStatus.DONE),
        (EpicStatus.ON_HOLD, EpicStatus.DONE),
        (EpicStatus.DELETED, EpicStatus.ACTIVE),      # restore
    }
    | {(s, EpicStatus.ARCHIVED) for s in _LIVE_EPIC_STATES if s is not EpicStatus.ARCHIVED}
    | {(s, EpicStatus.DELETED) for s in _LIVE_EPIC_STATES}
)

# Allowed next statuses for a work item, keyed by current status.
WORKFLOW_RULES: dict[WorkItemStatus, tuple[WorkItemStatus, ...]] = {
    WorkItemStatus.BACKLOG: (WorkItemStatus.TODO,),
    WorkItemStatus.TODO: (WorkItemStatus.BACKLOG, WorkItemStatus.IN_PROGRESS),
    WorkItemStatus.IN_PROGRESS: (WorkItemStatus.TODO, WorkItemStatus.IN_REVIEW),
    WorkItemStatus.IN_REVIEW: (WorkItemStatus.IN_PROGRESS, WorkItemStatus.DONE),
    WorkItemStatus.DONE: (WorkItemStatus.IN_PROGRESS,),
}


def validate_sprint_transition(
    sprint_id: str, from_state: SprintState, to_state: SprintState
) -> None:
    """Raise InvalidTransitionError if the sprint transition is not allowed."""
    if (from_state, to_state) not in SPRINT_TRANSITIONS:
        raise InvalidTransitionError("sprint", sprint_id, from_state, to_state)


def validate_epic_transition(
    epic_id: str, from_status: EpicStatus, to_status: EpicStatus
) -> None:
    """Raise InvalidTransitionError if the epic transition is not allowed."""
    if (from_status, to_status) not in EPIC_TRANSITIONS:
        raise InvalidTransitionError("epic", epic_id, from_status, to_status)


def validate_item_transition(
    item_id: str, from_status: WorkItemStatus, to_status: WorkItemStatus
) -> None:
    if to_status not in WORKFLOW_RULES.get(from_status, ()):
        raise InvalidTransitionError("work item", item_id, from_status, to_status)
