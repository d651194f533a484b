from .models import (
    Epic,
    EpicStatus,
    Sprint,
    SprintDeletePolicy,
    SprintState,
    StoreChange,
    ToastNotification,
    User,
    WorkItem,
    WorkItemStatus,
)
from .interface import BoardBackend

__all__ = [
    "WorkItem",
    "Epic",
    "Sprint",
    "User",
    "ToastNotification",
    "StoreChange",
    "WorkItemStatus",
    "EpicStatus",
    "SprintState",
    "SprintDeletePolicy",
    "BoardBackend",
]
