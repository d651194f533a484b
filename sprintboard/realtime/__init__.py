from .coalescer import ToastCoalescer, format_change
from .events import ItemUpdateEvent, events_from_feed
from .pipeline import NotificationPipeline
from .relevance import is_relevant
from .scheduling import LoopScheduler, ManualScheduler
from .source import ConnectionStatus, SimulatedEventSource
from .toasts import ToastQueue

__all__ = [
    "ItemUpdateEvent",
    "events_from_feed",
    "is_relevant",
    "ToastCoalescer",
    "format_change",
    "ToastQueue",
    "NotificationPipeline",
    "SimulatedEventSource",
    "ConnectionStatus",
    "LoopScheduler",
    "ManualScheduler",
]
