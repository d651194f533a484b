"""In-memory board state owner.

Holds every session entity (work items, epics, sprints, teams,
notifications, saved views, join/invite records) and applies the cascade
rules that keep them consistent. Mutations happen on the event loop thread
only; subscribers are told about each one through a StoreChange.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable

from ..config import BoardConfig
from ..workflow.exceptions import BoardValidationError, InvalidTransitionError
from ..workflow.models import (
    ICE_MAX,
    ICE_MIN,
    Epic,
    EpicStatus,
    FilterSet,
    InviteCode,
    JoinRequest,
    JoinRequestStatus,
    Notification,
    NotificationTarget,
    Priority,
    SavedView,
    Sprint,
    SprintDeletePolicy,
    SprintState,
    StoreChange,
    Team,
    User,
    ViewVisibility,
    WorkItem,
    WorkItemStatus,
    WorkItemType,
    compute_ice_score,
)
from ..workflow.transitions import (
    validate_epic_transition,
    validate_item_transition,
    validate_sprint_transition,
)

logger = logging.getLogger(__name__)

_EPIC_FIELDS = {"name", "description", "color", "ease", "impact", "confidence"}
_SPRINT_FIELDS = {"name", "goal", "start_at", "end_at", "epic_ids"}
_ITEM_FIELDS = {
    "title",
    "assignee_id",
    "status",
    "type",
    "priority",
    "description",
    "epic_id",
    "sprint",
    "team_id",
    "watchers",
    "labels",
    "estimation_points",
    "due_date",
}
_NEW_ITEM_STATUSES = (WorkItemStatus.BACKLOG, WorkItemStatus.TODO)
_MOVE_TARGET_STATES = (SprintState.ACTIVE, SprintState.PLANNED)


class InMemoryBoardStore:
    """BoardBackend backed by dicts. The single source of truth for a session."""

    def __init__(
        self,
        board_id: str = "board-1",
        config: BoardConfig | None = None,
        users: list[User] | None = None,
    ):
        self._board_id = board_id
        self._config = config or BoardConfig()
        self._users: dict[str, User] = {u.id: u for u in users or []}
        self._items: dict[str, WorkItem] = {}
        self._epics: dict[str, Epic] = {}
        self._sprints: dict[str, Sprint] = {}
        self._teams: dict[str, Team] = {}
        self._notifications: dict[str, Notification] = {}
        self._views: dict[str, SavedView] = {}
        self._join_requests: dict[str, JoinRequest] = {}
        self._invite_codes: dict[str, InviteCode] = {}
        self._next_item_id = 101
        self._next_epic_id = 1
        self._next_team_id = 1
        self._next_notification_id = 1
        self._next_view_id = 1
        self._next_join_request_id = 1
        self._subscribers: list[Callable[[StoreChange], None]] = []

    @property
    def board_id(self) -> str:
        return self._board_id

    @property
    def config(self) -> BoardConfig:
        return self._config

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[StoreChange], None]) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self, kind: str, entity_id: str, affected: list[str] | None = None) -> None:
        change = StoreChange(kind=kind, entity_id=entity_id, affected_item_ids=affected or [])
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                logger.exception("Subscriber failed on %s %s", kind, entity_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _touch(item: WorkItem) -> None:
        item.updated_at = datetime.now()
        item.version += 1

    @staticmethod
    def _check_fields(kind: str, fields: dict, allowed: set[str]) -> None:
        for key in fields:
            if key not in allowed:
                raise ValueError(f"Unknown {kind} field: {key}")

    @staticmethod
    def _check_ice(fields: dict) -> None:
        for key in ("ease", "impact", "confidence"):
            if key in fields and not ICE_MIN <= fields[key] <= ICE_MAX:
                raise BoardValidationError(
                    f"{key} must be between {ICE_MIN} and {ICE_MAX}, got {fields[key]}"
                )

    def _live_sprint_by_name(self, name: str) -> Sprint | None:
        for sprint in self._sprints.values():
            if sprint.name == name and sprint.state is not SprintState.DELETED:
                return sprint
        return None

    def _check_item_refs(self, fields: dict) -> None:
        epic_id = fields.get("epic_id")
        if epic_id is not None:
            epic = self._epics.get(epic_id)
            if epic is None or epic.status is EpicStatus.DELETED:
                raise BoardValidationError(f"Epic is missing or deleted: {epic_id}")
        sprint_name = fields.get("sprint")
        if sprint_name and self._live_sprint_by_name(sprint_name) is None:
            raise BoardValidationError(f"Sprint is missing or deleted: {sprint_name}")
        team_id = fields.get("team_id")
        if team_id is not None and team_id not in self._teams:
            raise BoardValidationError(f"Team not found: {team_id}")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def add_user(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def get_user(self, user_id: str) -> User:
        if user_id not in self._users:
            raise KeyError(f"User not found: {user_id}")
        return self._users[user_id]

    def list_users(self) -> list[User]:
        return list(self._users.values())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_epic(self, epic_id: str) -> Epic:
        if epic_id not in self._epics:
            raise KeyError(f"Epic not found: {epic_id}")
        return self._epics[epic_id]

    async def get_sprint(self, sprint_id: str) -> Sprint:
        if sprint_id not in self._sprints:
            raise KeyError(f"Sprint not found: {sprint_id}")
        return self._sprints[sprint_id]

    async def get_work_item(self, item_id: str) -> WorkItem:
        if item_id not in self._items:
            raise KeyError(f"Work item not found: {item_id}")
        return self._items[item_id]

    async def get_team(self, team_id: str) -> Team:
        if team_id not in self._teams:
            raise KeyError(f"Team not found: {team_id}")
        return self._teams[team_id]

    async def list_epics(self, include_deleted: bool = True) -> list[Epic]:
        epics = list(self._epics.values())
        if not include_deleted:
            epics = [e for e in epics if e.status is not EpicStatus.DELETED]
        return epics

    async def list_sprints(self, include_deleted: bool = True) -> list[Sprint]:
        sprints = list(self._sprints.values())
        if not include_deleted:
            sprints = [s for s in sprints if s.state is not SprintState.DELETED]
        return sprints

    async def list_work_items(
        self,
        sprint: str | None = None,
        epic_id: str | None = None,
    ) -> list[WorkItem]:
        items = list(self._items.values())
        if sprint is not None:
            items = [i for i in items if i.sprint == sprint]
        if epic_id is not None:
            items = [i for i in items if i.epic_id == epic_id]
        return items

    async def list_teams(self) -> list[Team]:
        return list(self._teams.values())

    async def get_board_summary(self) -> dict:
        items = list(self._items.values())
        total = len(items)
        done = sum(1 for i in items if i.status is WorkItemStatus.DONE)
        by_status = {s.value: 0 for s in WorkItemStatus}
        for item in items:
            by_status[item.status.value] += 1
        sprints_by_state = {s.value: 0 for s in SprintState}
        for sprint in self._sprints.values():
            sprints_by_state[sprint.state.value] += 1

        return {
            "board_id": self._board_id,
            "total_items": total,
            "items_by_status": by_status,
            "backlog_items": sum(1 for i in items if not i.sprint),
            "total_epics": sum(
                1 for e in self._epics.values() if e.status is not EpicStatus.DELETED
            ),
            "sprints_by_state": sprints_by_state,
            "unread_notifications": sum(
                1 for n in self._notifications.values() if not n.is_read
            ),
            "progress_pct": round(done / total * 100, 1) if total > 0 else 0.0,
        }

    # ------------------------------------------------------------------
    # Epics
    # ------------------------------------------------------------------

    async def create_epic(
        self,
        name: str,
        ease: int = 5,
        impact: int = 5,
        confidence: int = 5,
        **fields,
    ) -> Epic:
        self._check_fields("epic", fields, _EPIC_FIELDS)
        if not name:
            raise BoardValidationError("Epic name is required")
        self._check_ice({"ease": ease, "impact": impact, "confidence": confidence})

        epic_id = f"epic-{self._next_epic_id}"
        self._next_epic_id += 1
        epic = Epic(
            id=epic_id,
            name=name,
            ease=ease,
            impact=impact,
            confidence=confidence,
            ice_score=compute_ice_score(ease, impact, confidence),
            status=EpicStatus.ACTIVE,
            **fields,
        )
        self._epics[epic_id] = epic
        self._emit("epic.created", epic_id)
        return epic

    async def update_epic(self, epic_id: str, **fields) -> Epic:
        epic = await self.get_epic(epic_id)
        self._check_fields("epic", fields, _EPIC_FIELDS)
        self._check_ice(fields)
        if "name" in fields and not fields["name"]:
            raise BoardValidationError("Epic name is required")

        for key, value in fields.items():
            setattr(epic, key, value)
        epic.recompute_ice_score()
        epic.updated_at = datetime.now()
        self._emit("epic.updated", epic_id)
        return epic

    async def update_epic_status(self, epic_id: str, status: EpicStatus) -> Epic:
        if status is EpicStatus.DELETED:
            return await self.delete_epic(epic_id)
        epic = await self.get_epic(epic_id)
        validate_epic_transition(epic_id, epic.status, status)

        now = datetime.now()
        epic.status = status
        epic.updated_at = now
        if status is EpicStatus.ARCHIVED:
            epic.archived_at = now
        self._emit("epic.status_changed", epic_id)
        return epic

    async def delete_epic(self, epic_id: str) -> Epic:
        """Soft-delete an epic and detach every work item that references it."""
        epic = await self.get_epic(epic_id)
        validate_epic_transition(epic_id, epic.status, EpicStatus.DELETED)

        epic.status = EpicStatus.DELETED
        epic.updated_at = datetime.now()
        detached = []
        for item in self._items.values():
            if item.epic_id == epic_id:
                item.epic_id = None
                self._touch(item)
                detached.append(item.id)
        for sprint in self._sprints.values():
            if epic_id in sprint.epic_ids:
                sprint.epic_ids = [e for e in sprint.epic_ids if e != epic_id]

        logger.info("Deleted epic %s, detached %d item(s)", epic_id, len(detached))
        self._emit("epic.deleted", epic_id, detached)
        return epic

    async def restore_epic(self, epic_id: str) -> Epic:
        """Bring a deleted epic back. Previously detached items stay detached."""
        epic = await self.get_epic(epic_id)
        if epic.status is not EpicStatus.DELETED:
            raise InvalidTransitionError("epic", epic_id, epic.status, EpicStatus.ACTIVE)
        validate_epic_transition(epic_id, epic.status, EpicStatus.ACTIVE)
        epic.status = EpicStatus.ACTIVE
        epic.updated_at = datetime.now()
        self._emit("epic.restored", epic_id)
        return epic

    # ------------------------------------------------------------------
    # Sprints
    # ------------------------------------------------------------------

    async def save_sprint(self, sprint_id: str | None = None, **fields) -> Sprint:
        """Create or edit a sprint.

        Epics newly attached to the sprint pull all of their work items into
        it. Every check runs before any collection is touched, so a rejected
        save leaves the board unchanged.
        """
        self._check_fields("sprint", fields, _SPRINT_FIELDS)
        existing = await self.get_sprint(sprint_id) if sprint_id is not None else None
        if existing is not None and existing.state is SprintState.DELETED:
            raise BoardValidationError(f"Cannot edit deleted sprint: {sprint_id}")

        name = fields.get("name") or (existing.name if existing else "")
        if not name:
            raise BoardValidationError("Sprint save failed: sprint name is missing")
        clash = self._live_sprint_by_name(name)
        if clash is not None and clash is not existing:
            raise BoardValidationError(f"Sprint name already in use: {name}")

        requested = fields.get("epic_ids")
        if requested is None:
            epic_ids = list(existing.epic_ids) if existing else []
        else:
            epic_ids = list(dict.fromkeys(requested))
        prior = set(existing.epic_ids) if existing else set()
        newly_added = {e for e in epic_ids if e not in prior}
        for epic_id in epic_ids:
            if epic_id not in newly_added:
                continue
            epic = self._epics.get(epic_id)
            if epic is None or epic.status is EpicStatus.DELETED:
                raise BoardValidationError(f"Epic is missing or deleted: {epic_id}")

        affected: list[str] = []
        if existing is not None:
            old_name = existing.name
            for key, value in fields.items():
                setattr(existing, key, value)
            existing.name = name
            existing.epic_ids = epic_ids
            existing.updated_at = datetime.now()
            sprint = existing
            if old_name != name:
                for item in self._items.values():
                    if item.sprint == old_name:
                        item.sprint = name
                        self._touch(item)
                        affected.append(item.id)
        else:
            number = max((s.number for s in self._sprints.values()), default=0) + 1
            sprint = Sprint(
                id=f"sprint-{number}",
                number=number,
                name=name,
                goal=fields.get("goal", ""),
                start_at=fields.get("start_at"),
                end_at=fields.get("end_at"),
                epic_ids=epic_ids,
            )
            self._sprints[sprint.id] = sprint

        for item in self._items.values():
            if item.epic_id in newly_added and item.sprint != name:
                item.sprint = name
                self._touch(item)
                affected.append(item.id)

        if newly_added:
            logger.info(
                "Sprint %s picked up %d item(s) from epic(s) %s",
                sprint.id,
                len(affected),
                ", ".join(sorted(newly_added)),
            )
        self._emit("sprint.saved", sprint.id, affected)
        return sprint

    async def update_sprint_state(self, sprint_id: str, state: SprintState) -> Sprint:
        if state is SprintState.DELETED:
            return await self.delete_sprint(sprint_id)
        sprint = await self.get_sprint(sprint_id)
        validate_sprint_transition(sprint_id, sprint.state, state)
        if state is SprintState.PLANNED:
            return await self.restore_sprint(sprint_id)

        sprint.state = state
        sprint.updated_at = datetime.now()
        if state is SprintState.ACTIVE and sprint.start_at is None:
            sprint.start_at = sprint.updated_at
        self._emit("sprint.state_changed", sprint_id)
        return sprint

    async def delete_sprint(
        self,
        sprint_id: str,
        policy: SprintDeletePolicy | None = None,
        target_sprint_id: str | None = None,
    ) -> Sprint:
        """Soft-delete a sprint, unassigning or moving its work items."""
        sprint = await self.get_sprint(sprint_id)
        validate_sprint_transition(sprint_id, sprint.state, SprintState.DELETED)
        policy = policy or self._config.sprint_delete_policy

        new_name = ""
        if policy is SprintDeletePolicy.MOVE:
            target = self._sprints.get(target_sprint_id) if target_sprint_id else None
            if target is None or target.id == sprint_id:
                raise BoardValidationError(
                    f"Move target must be another sprint, got {target_sprint_id!r}"
                )
            if target.state not in _MOVE_TARGET_STATES:
                raise BoardValidationError(
                    f"Move target {target.id} is {target.state.value}, "
                    "expected active or planned"
                )
            new_name = target.name

        sprint.state = SprintState.DELETED
        sprint.updated_at = datetime.now()
        affected = []
        for item in self._items.values():
            if item.sprint == sprint.name:
                item.sprint = new_name
                self._touch(item)
                affected.append(item.id)

        logger.info(
            "Deleted sprint %s (%s), %d item(s) %s",
            sprint_id,
            policy.value,
            len(affected),
            f"moved to {new_name}" if new_name else "returned to backlog",
        )
        self._emit("sprint.deleted", sprint_id, affected)
        return sprint

    async def restore_sprint(self, sprint_id: str) -> Sprint:
        sprint = await self.get_sprint(sprint_id)
        validate_sprint_transition(sprint_id, sprint.state, SprintState.PLANNED)
        if self._live_sprint_by_name(sprint.name) is not None:
            raise BoardValidationError(f"Sprint name already in use: {sprint.name}")
        sprint.state = SprintState.PLANNED
        sprint.updated_at = datetime.now()
        self._emit("sprint.restored", sprint_id)
        return sprint

    # ------------------------------------------------------------------
    # Work items
    # ------------------------------------------------------------------

    async def create_work_item(
        self, title: str, reporter_id: str, assignee_id: str | None = None, **fields
    ) -> WorkItem:
        self._check_fields("work item", fields, _ITEM_FIELDS - {"title", "assignee_id"})
        if not title:
            raise BoardValidationError("Work item title is required")
        status = fields.pop("status", WorkItemStatus.TODO)
        if status not in _NEW_ITEM_STATUSES:
            raise BoardValidationError(
                f"New work items start in backlog or todo, got {status.value}"
            )
        self._check_item_refs(fields)

        item_id = f"PROJ-{self._next_item_id}"
        self._next_item_id += 1
        watchers = set(fields.pop("watchers", ()))
        watchers.add(reporter_id)
        item = WorkItem(
            id=item_id,
            title=title,
            reporter_id=reporter_id,
            assignee_id=assignee_id or reporter_id,
            status=status,
            type=fields.pop("type", WorkItemType.TASK),
            priority=fields.pop("priority", Priority.MEDIUM),
            watchers=watchers,
            **fields,
        )
        self._items[item_id] = item
        self._emit("work_item.created", item_id, [item_id])
        return item

    async def update_work_item(self, item_id: str, **fields) -> WorkItem:
        item = await self.get_work_item(item_id)
        self._check_fields("work item", fields, _ITEM_FIELDS)
        if "title" in fields and not fields["title"]:
            raise BoardValidationError("Work item title is required")
        status = fields.get("status")
        if status is not None and status is not item.status:
            validate_item_transition(item_id, item.status, status)
        self._check_item_refs(fields)

        for key, value in fields.items():
            if key == "watchers":
                value = set(value)
            setattr(item, key, value)
        self._touch(item)
        self._emit("work_item.updated", item_id, [item_id])
        return item

    async def transition_work_item(self, item_id: str, status: WorkItemStatus) -> WorkItem:
        item = await self.get_work_item(item_id)
        validate_item_transition(item_id, item.status, status)
        item.status = status
        self._touch(item)
        self._emit("work_item.transitioned", item_id, [item_id])
        return item

    async def add_watcher(self, item_id: str, user_id: str) -> WorkItem:
        item = await self.get_work_item(item_id)
        if user_id not in item.watchers:
            item.watchers.add(user_id)
            self._touch(item)
            self._emit("work_item.updated", item_id, [item_id])
        return item

    async def remove_watcher(self, item_id: str, user_id: str) -> WorkItem:
        item = await self.get_work_item(item_id)
        if user_id in item.watchers:
            item.watchers.discard(user_id)
            self._touch(item)
            self._emit("work_item.updated", item_id, [item_id])
        return item

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    async def save_team(
        self,
        team_id: str | None = None,
        name: str | None = None,
        member_ids: list[str] | None = None,
    ) -> Team:
        if team_id is not None:
            team = await self.get_team(team_id)
            if name is not None:
                if not name:
                    raise BoardValidationError("Team name is required")
                team.name = name
            if member_ids is not None:
                team.member_ids = list(member_ids)
        else:
            if not name:
                raise BoardValidationError("Team name is required")
            team = Team(id=f"team-{self._next_team_id}", name=name, member_ids=list(member_ids or []))
            self._next_team_id += 1
            self._teams[team.id] = team
        self._emit("team.saved", team.id)
        return team

    async def delete_team(self, team_id: str) -> None:
        await self.get_team(team_id)
        del self._teams[team_id]
        affected = []
        for item in self._items.values():
            if item.team_id == team_id:
                item.team_id = None
                self._touch(item)
                affected.append(item.id)
        self._emit("team.deleted", team_id, affected)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def add_notification(
        self,
        actor_id: str,
        message: str,
        target: NotificationTarget | None = None,
    ) -> Notification:
        notification = Notification(
            id=f"notif-{self._next_notification_id}",
            actor_id=actor_id,
            message=message,
            target=target,
        )
        self._next_notification_id += 1
        self._notifications[notification.id] = notification
        self._emit("notification.added", notification.id)
        return notification

    async def list_notifications(self, unread_only: bool = False) -> list[Notification]:
        notifications = list(self._notifications.values())
        if unread_only:
            notifications = [n for n in notifications if not n.is_read]
        return notifications

    async def mark_all_notifications_read(self) -> int:
        changed = 0
        for notification in self._notifications.values():
            if not notification.is_read:
                notification.is_read = True
                changed += 1
        if changed:
            self._emit("notification.read_all", self._board_id)
        return changed

    async def open_notification(self, notification_id: str) -> NotificationTarget | None:
        """Mark a notification read and return its target if it still resolves."""
        if notification_id not in self._notifications:
            raise KeyError(f"Notification not found: {notification_id}")
        notification = self._notifications[notification_id]
        if not notification.is_read:
            notification.is_read = True
            self._emit("notification.read", notification_id)

        target = notification.target
        if target is None:
            return None
        if target.entity == "work_item" and target.id not in self._items:
            return None
        if target.entity == "epic" and target.id not in self._epics:
            return None
        return target

    # ------------------------------------------------------------------
    # Saved views
    # ------------------------------------------------------------------

    async def get_view(self, view_id: str) -> SavedView:
        if view_id not in self._views:
            raise KeyError(f"View not found: {view_id}")
        return self._views[view_id]

    def _new_view_id(self) -> str:
        view_id = f"view-{self._next_view_id}"
        self._next_view_id += 1
        return view_id

    async def save_view(
        self,
        name: str,
        owner_id: str,
        visibility: ViewVisibility = ViewVisibility.PRIVATE,
        filter_set: FilterSet | None = None,
    ) -> SavedView:
        if not name:
            raise BoardValidationError("View name is required")
        view = SavedView(
            id=self._new_view_id(),
            name=name,
            owner_id=owner_id,
            visibility=visibility,
            filter_set=filter_set or FilterSet(),
        )
        self._views[view.id] = view
        self._emit("view.saved", view.id)
        return view

    async def delete_view(self, view_id: str) -> None:
        await self.get_view(view_id)
        del self._views[view_id]
        self._emit("view.deleted", view_id)

    async def toggle_pin_view(self, view_id: str) -> SavedView:
        view = await self.get_view(view_id)
        view.is_pinned = not view.is_pinned
        self._emit("view.updated", view_id)
        return view

    async def set_default_view(self, view_id: str) -> SavedView:
        view = await self.get_view(view_id)
        for other in self._views.values():
            other.is_default = other.id == view_id
        self._emit("view.updated", view_id)
        return view

    async def rename_view(self, view_id: str, name: str) -> SavedView:
        view = await self.get_view(view_id)
        if not name:
            raise BoardValidationError("View name is required")
        view.name = name
        self._emit("view.updated", view_id)
        return view

    async def duplicate_view(self, view_id: str, owner_id: str) -> SavedView:
        source = await self.get_view(view_id)
        copy = SavedView(
            id=self._new_view_id(),
            name=f"{source.name} (Copy)",
            owner_id=owner_id,
            visibility=source.visibility,
            filter_set=FilterSet(**vars(source.filter_set)),
        )
        self._views[copy.id] = copy
        self._emit("view.saved", copy.id)
        return copy

    async def list_views(self, user_id: str, scope: str = "mine") -> list[SavedView]:
        """Views owned by the user ("mine") or shared by others ("group")."""
        if scope == "mine":
            return [v for v in self._views.values() if v.owner_id == user_id]
        if scope == "group":
            return [
                v
                for v in self._views.values()
                if v.visibility is ViewVisibility.GROUP and v.owner_id != user_id
            ]
        raise ValueError(f"Unknown view scope: {scope}")

    async def pinned_views(self, user_id: str) -> list[SavedView]:
        return [v for v in self._views.values() if v.is_pinned and v.owner_id == user_id]

    # ------------------------------------------------------------------
    # Invites and join requests
    # ------------------------------------------------------------------

    async def create_invite_code(
        self,
        role_id: str,
        created_by: str,
        expires_at: datetime | None = None,
        max_uses: int | None = None,
    ) -> InviteCode:
        if max_uses is not None and max_uses < 1:
            raise BoardValidationError("max_uses must be at least 1")
        invite = InviteCode(
            code=uuid.uuid4().hex[:8].upper(),
            role_id=role_id,
            created_by=created_by,
            expires_at=expires_at,
            max_uses=max_uses,
        )
        self._invite_codes[invite.code] = invite
        self._emit("invite.created", invite.code)
        return invite

    async def list_invite_codes(self) -> list[InviteCode]:
        return list(self._invite_codes.values())

    async def revoke_invite_code(self, code: str) -> None:
        if code not in self._invite_codes:
            raise KeyError(f"Invite code not found: {code}")
        del self._invite_codes[code]
        self._emit("invite.revoked", code)

    async def redeem_invite_code(
        self, code: str, user_id: str, now: datetime | None = None
    ) -> JoinRequest:
        """Use an invite code, opening a pending join request for the user."""
        if code not in self._invite_codes:
            raise KeyError(f"Invite code not found: {code}")
        invite = self._invite_codes[code]
        now = now or datetime.now()
        if invite.expires_at is not None and now >= invite.expires_at:
            raise BoardValidationError(f"Invite code expired: {code}")
        if invite.max_uses is not None and invite.uses >= invite.max_uses:
            raise BoardValidationError(f"Invite code used up: {code}")

        invite.uses += 1
        request = JoinRequest(
            id=f"join-{self._next_join_request_id}",
            user_id=user_id,
            role_id=invite.role_id,
            requested_at=now,
        )
        self._next_join_request_id += 1
        self._join_requests[request.id] = request
        self._emit("join_request.created", request.id)
        return request

    async def list_join_requests(self, pending_only: bool = False) -> list[JoinRequest]:
        requests = list(self._join_requests.values())
        if pending_only:
            requests = [r for r in requests if r.status is JoinRequestStatus.PENDING]
        return requests

    async def _resolve_join_request(
        self, request_id: str, status: JoinRequestStatus
    ) -> JoinRequest:
        if request_id not in self._join_requests:
            raise KeyError(f"Join request not found: {request_id}")
        request = self._join_requests[request_id]
        if request.status is not JoinRequestStatus.PENDING:
            raise BoardValidationError(
                f"Join request {request_id} already {request.status.value}"
            )
        request.status = status
        self._emit(f"join_request.{status.value}", request_id)
        return request

    async def approve_join_request(self, request_id: str) -> JoinRequest:
        return await self._resolve_join_request(request_id, JoinRequestStatus.APPROVED)

    async def reject_join_request(self, request_id: str) -> JoinRequest:
        return await self._resolve_join_request(request_id, JoinRequestStatus.REJECTED)
