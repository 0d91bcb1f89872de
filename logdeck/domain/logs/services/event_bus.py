# Path: logdeck/domain/logs/services/event_bus.py
import asyncio
import inspect
from typing import Any, Callable, Dict, List, Set

from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())

Handler = Callable[..., Any]


class Subscription:
    """Handle returned by ``EventBus.subscribe``; ``remove()`` unsubscribes."""

    def __init__(self, bus: "EventBus", event: str, handler: Handler):
        self.event = event
        self.handler = handler
        self._bus = bus

    def remove(self) -> None:
        self._bus.unsubscribe(self.event, self.handler)


class EventBus:
    """In-process publish/subscribe keyed by event name.

    Handlers of one event are kept in insertion order; subscribing the same
    handler twice registers it once. There is no back-pressure and no
    delivery guarantee.
    """

    def __init__(self):
        self._handlers: Dict[str, Dict[Handler, None]] = {}
        self._pending: Set[asyncio.Task] = set()

    def subscribe(self, event: str, handler: Handler) -> Subscription:
        self._handlers.setdefault(event, {})[handler] = None
        return Subscription(self, event, handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event)
        if handlers is None:
            return
        handlers.pop(handler, None)
        if not handlers:
            del self._handlers[event]

    def handlers(self, event: str) -> List[Handler]:
        return list(self._handlers.get(event, {}))

    def emit(self, event: str, *args: Any) -> int:
        """Call every handler of ``event``; returns how many were invoked.

        Coroutine results are scheduled as tasks on the running loop. A
        failing handler is reported and does not stop the others.
        """
        invoked = 0
        for handler in self.handlers(event):
            invoked += 1
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    task = asyncio.ensure_future(result)
                    self._pending.add(task)
                    task.add_done_callback(self._task_done)
            except Exception as e:
                logger.error("Event handler failed", context={"event": event, "error": str(e)})
        return invoked

    def _task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Async event handler failed", context={"error": str(task.exception())})
