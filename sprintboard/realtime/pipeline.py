"""Wires event source → relevance filter → coalescer → toast queue."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..workflow.models import User
from .coalescer import ToastCoalescer
from .events import ItemUpdateEvent, events_from_feed
from .relevance import is_relevant
from .source import SimulatedEventSource

logger = logging.getLogger(__name__)


class NotificationPipeline:
    def __init__(self, current_user: User | None, coalescer: ToastCoalescer) -> None:
        self._current_user = current_user
        self._coalescer = coalescer

    @property
    def current_user(self) -> User | None:
        return self._current_user

    def set_user(self, user: User | None) -> None:
        """Switch users. Anything still buffered for the previous user is dropped."""
        previous = self._current_user
        self._current_user = user
        if user is None or previous is None or user.id != previous.id:
            self._coalescer.cancel_all()

    def handle(self, event: ItemUpdateEvent) -> bool:
        """Feed one event. Returns True if it was buffered for a toast."""
        if not is_relevant(event, self._current_user):
            logger.debug("Dropping irrelevant event %s for %s", event.type, event.item.id)
            return False
        self._coalescer.add(event)
        return True

    def handle_raw(self, raw_events: Iterable[dict[str, Any]]) -> int:
        return sum(1 for event in events_from_feed(raw_events) if self.handle(event))

    async def attach(self, source: SimulatedEventSource) -> None:
        """Run a source into this pipeline until the source stops."""
        await source.run(self.handle)
