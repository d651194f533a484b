"""Simulated realtime feed of item-change events.

Stands in for the board's socket channel: after a short connect delay it
emits a random change (status, assignee, due date or comment) to a random
item every few seconds, attributed to someone other than the current user.
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timedelta
from enum import Enum
from typing import Awaitable, Callable

from ..adapters.memory import InMemoryBoardStore
from ..config import BoardConfig
from ..workflow.transitions import WORKFLOW_RULES
from .events import EVENT_TYPES, FieldChange, ItemRef, ItemUpdateEvent

logger = logging.getLogger(__name__)

_COMMENTS = (
    "Can we split this into smaller tasks?",
    "Blocked on the API review.",
    "Pushed a first draft, please take a look.",
    "Moving this up, the customer asked about it again.",
    "Added acceptance criteria.",
)


class ConnectionStatus(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class SimulatedEventSource:
    """Random item-change generator driven by the asyncio loop."""

    def __init__(
        self,
        store: InMemoryBoardStore,
        current_user_id: str,
        config: BoardConfig | None = None,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._current_user_id = current_user_id
        self._config = config or store.config
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._status = ConnectionStatus.DISCONNECTED
        self._stopped = False

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    def stop(self) -> None:
        self._stopped = True

    async def run(self, on_event: Callable[[ItemUpdateEvent], object]) -> None:
        """Emit events until stop() is called or the task is cancelled."""
        self._stopped = False
        self._status = ConnectionStatus.CONNECTING
        try:
            await self._sleep(self._config.connect_delay_seconds)
            if self._stopped:
                return
            self._status = ConnectionStatus.CONNECTED
            logger.info("Realtime feed connected for %s", self._current_user_id)

            low, high = self._config.event_interval_seconds
            while not self._stopped:
                await self._sleep(self._rng.uniform(low, high))
                if self._stopped:
                    break
                event = await self.next_event()
                if event is not None:
                    on_event(event)
        finally:
            self._status = ConnectionStatus.DISCONNECTED
            logger.info("Realtime feed disconnected")

    async def next_event(self) -> ItemUpdateEvent | None:
        """Build one random event, or None when nothing sensible can be made."""
        items = await self._store.list_work_items()
        others = [u for u in self._store.list_users() if u.id != self._current_user_id]
        if not items or not others:
            return None

        actor = self._rng.choice(others)
        item = self._rng.choice(items)
        kind = self._rng.choice(EVENT_TYPES)

        if kind == "item.status_changed":
            allowed = WORKFLOW_RULES.get(item.status, ())
            if not allowed:
                return None
            change = FieldChange("status", item.status.value, self._rng.choice(allowed).value)
        elif kind == "item.assignee_changed":
            candidates = [u for u in others if u.id != item.assignee_id]
            if not candidates:
                return None
            try:
                current_name = self._store.get_user(item.assignee_id).name
            except KeyError:
                current_name = item.assignee_id
            change = FieldChange("assignee", current_name, self._rng.choice(candidates).name)
        elif kind == "item.due_changed":
            new_due = datetime.now() + timedelta(days=self._rng.uniform(1, 36))
            change = FieldChange(
                "dueDate",
                item.due_date.isoformat() if item.due_date else None,
                new_due.isoformat(),
            )
        else:
            change = FieldChange("comment", None, self._rng.choice(_COMMENTS))

        return ItemUpdateEvent(
            type=kind,
            item=ItemRef(
                id=item.id,
                title=item.title,
                assignee_id=item.assignee_id,
                created_by=item.reporter_id,
                board_id=self._store.board_id,
            ),
            change=change,
            watchers=set(item.watchers),
            actor_id=actor.id,
            at=datetime.now().isoformat(),
        )
