"""Progression events — what the store announces to UI and pricing code.

The progression store publishes to the bus; UI and pricing logic
subscribe and recompute their own state when notified.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Type

T = TypeVar("T")


# -- Progression events --------------------------------------------------

@dataclass(frozen=True)
class FacilityLevelChanged:
    """A facility level was explicitly set. Prices, caps and unlock lists may be stale."""


@dataclass(frozen=True)
class SaveFailed:
    """Writing the save document failed. In-memory state is still authoritative."""
    path: str
    reason: str


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Delivers store notifications to subscribed UI and pricing code.

    Handlers run synchronously inside the store call that emitted the
    event, after the new facility level is already readable.  A handler
    may subscribe or unsubscribe while an event is being delivered; the
    change applies from the next ``emit``.

    Usage:
        bus = EventBus()
        bus.on(FacilityLevelChanged, lambda e: shop.refresh_prices())
        bus.on(SaveFailed, lambda e: hud.show_warning(e.reason))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Subscribe *handler* to *event_type*. Subscribing twice delivers twice."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Unsubscribe *handler*. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: object) -> None:
        """Deliver *event* to the handlers subscribed when the call started."""
        for handler in list(self._handlers.get(type(event), [])):
            handler(event)

    def handler_count(self, event_type: type) -> int:
        """Number of subscribers for *event_type*, e.g. to check UI teardown."""
        return len(self._handlers.get(event_type, []))

    def clear(self) -> None:
        """Drop every subscription, e.g. when a scene is unloaded."""
        self._handlers.clear()
