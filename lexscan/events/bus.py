import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventBus:
    """Synchronous in-process publish/subscribe.

    Handlers run in publish order on the caller's stack; one that needs to do
    slow work should hand it off (e.g. by scheduling an asyncio task).
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = {}

    def register(self, event_type: type, handler: Callable[[Any], None]) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def publish(self, event: Any) -> None:
        handlers = self._handlers.get(type(event), [])
        if not handlers:
            logger.warning(f"No handlers registered for {type(event).__name__}")
            return
        for handler in handlers:
            handler(event)
