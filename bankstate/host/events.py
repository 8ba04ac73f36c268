"""Host event types and a minimal event bus (plugin subscriptions)."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


@dataclass(frozen=True)
class ConfigChanged:
    """Posted by ConfigManager when a stored value changes. new_value is often a string from the config UI."""

    group: str
    key: str
    new_value: Optional[Any] = None
    old_value: Optional[Any] = None


class EventBus:
    """Dispatches events to handlers registered per event type. Thread-safe registration."""

    def __init__(self):
        self._lock = threading.Lock()
        self._handlers: Dict[Type[Any], List[Handler]] = {}

    def register(self, event_type: Type[Any], handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)

    def unregister(self, event_type: Type[Any], handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.get(event_type) or []
            if handler in handlers:
                handlers.remove(handler)

    def handler_count(self, event_type: Type[Any]) -> int:
        with self._lock:
            return len(self._handlers.get(event_type) or [])

    def post(self, event: Any) -> None:
        """Deliver event to every handler of its type on the caller's thread. A failing handler is logged and skipped."""
        with self._lock:
            handlers = list(self._handlers.get(type(event)) or [])
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed for %s", handler, type(event).__name__)
