"""Domain models for the board state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class WorkItemStatus(Enum):
    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    DONE = "done"


class WorkItemType(Enum):
    STORY = "story"
    TASK = "task"
    BUG = "bug"
    TICKET = "ticket"


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EpicStatus(Enum):
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    DONE = "done"
    ARCHIVED = "archived"
    DELETED = "deleted"


class SprintState(Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    CLOSED = "closed"
    DELETED = "deleted"


class SprintDeletePolicy(Enum):
    UNASSIGN = "unassign"
    MOVE = "move"


class ViewVisibility(Enum):
    PRIVATE = "private"
    GROUP = "group"


class JoinRequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


ICE_MIN = 1
ICE_MAX = 10


def compute_ice_score(ease: float, impact: float, confidence: float) -> float:
    """Average of the three ICE inputs, rounded to 2 decimals."""
    return round((ease + impact + confidence) / 3, 2)


@dataclass
class User:
    id: str
    name: str


@dataclass
class WorkItem:
    id: str
    title: str
    reporter_id: str
    assignee_id: str
    status: WorkItemStatus = WorkItemStatus.TODO
    type: WorkItemType = WorkItemType.TASK
    priority: Priority = Priority.MEDIUM
    description: str = ""
    epic_id: str | None = None
    sprint: str = ""
    team_id: str | None = None
    watchers: set[str] = field(default_factory=set)
    labels: list[str] = field(default_factory=list)
    estimation_points: int = 0
    due_date: datetime | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    version: int = 1


@dataclass
class Epic:
    id: str
    name: str
    description: str = ""
    color: str = "#486966"
    ease: int = 5
    impact: int = 5
    confidence: int = 5
    ice_score: float = 5.0
    status: EpicStatus = EpicStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    archived_at: datetime | None = None

    def recompute_ice_score(self) -> float:
        self.ice_score = compute_ice_score(self.ease, self.impact, self.confidence)
        return self.ice_score


@dataclass
class Sprint:
    id: str
    number: int
    name: str
    goal: str = ""
    start_at: datetime | None = None
    end_at: datetime | None = None
    state: SprintState = SprintState.PLANNED
    epic_ids: list[str] = field(default_factory=list)
    updated_at: datetime = field(default_factory=datetime.now)


@dataclass
class Team:
    id: str
    name: str
    member_ids: list[str] = field(default_factory=list)


@dataclass
class NotificationTarget:
    entity: str  # "work_item" | "epic"
    id: str
    section: str | None = None


@dataclass
class Notification:
    id: str
    actor_id: str
    message: str
    target: NotificationTarget | None = None
    is_read: bool = False
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class ToastNotification:
    id: str
    item_id: str
    title: str
    changes: list[str] = field(default_factory=list)
    highlight_section: str | None = None


@dataclass
class FilterSet:
    search_query: str = ""
    assignee: str = "ALL"
    type: str = "ALL"
    team: str = "ALL"


@dataclass
class SavedView:
    id: str
    name: str
    owner_id: str
    visibility: ViewVisibility = ViewVisibility.PRIVATE
    filter_set: FilterSet = field(default_factory=FilterSet)
    is_pinned: bool = False
    is_default: bool = False


@dataclass
class JoinRequest:
    id: str
    user_id: str
    role_id: str
    status: JoinRequestStatus = JoinRequestStatus.PENDING
    requested_at: datetime = field(default_factory=datetime.now)


@dataclass
class InviteCode:
    code: str
    role_id: str
    created_by: str
    created_at: datetime = field(default_factory=datetime.now)
    expires_at: datetime | None = None
    max_uses: int | None = None
    uses: int = 0


@dataclass
class StoreChange:
    """Observer payload emitted after every store mutation."""

    kind: str
    entity_id: str
    affected_item_ids: list[str] = field(default_factory=list)
