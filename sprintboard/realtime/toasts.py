"""Newest-first queue of pending toast notifications."""

from __future__ import annotations

from typing import Callable, Iterator

from ..workflow.models import ToastNotification

ToastListener = Callable[[str, ToastNotification], None]


class ToastQueue:
    """Ordered toasts, newest first. Each one is dismissible on its own."""

    def __init__(self) -> None:
        self._toasts: list[ToastNotification] = []
        self._listeners: list[ToastListener] = []

    def add_listener(self, listener: ToastListener) -> None:
        """Listener is called with ("pushed" | "dismissed", toast)."""
        self._listeners.append(listener)

    def _notify(self, action: str, toast: ToastNotification) -> None:
        for listener in list(self._listeners):
            listener(action, toast)

    def push(self, toast: ToastNotification) -> None:
        self._toasts.insert(0, toast)
        self._notify("pushed", toast)

    def dismiss(self, toast_id: str) -> bool:
        for i, toast in enumerate(self._toasts):
            if toast.id == toast_id:
                del self._toasts[i]
                self._notify("dismissed", toast)
                return True
        return False

    def clear(self) -> None:
        """Dismiss every toast, notifying listeners once per toast."""
        toasts, self._toasts = self._toasts, []
        for toast in toasts:
            self._notify("dismissed", toast)

    def snapshot(self) -> list[ToastNotification]:
        return list(self._toasts)

    def __iter__(self) -> Iterator[ToastNotification]:
        return iter(list(self._toasts))

    def __len__(self) -> int:
        return len(self._toasts)
