"""Document-level event listeners and their scoped acquisition."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

POINTER_MOVE = "pointermove"
POINTER_UP = "pointerup"
KEY_DOWN = "keydown"

ESCAPE = "Escape"


@dataclass(slots=True, frozen=True)
class PointerEvent:
    x: float
    y: float = 0.0


@dataclass(slots=True, frozen=True)
class KeyEvent:
    key: str


EventHandler = Callable[[Any], None]


class EventSource(Protocol):
    """Anything that can register global listeners, e.g. a browser document."""

    def add_listener(self, event_type: str, handler: EventHandler) -> None:
        """Install ``handler`` for ``event_type``."""
        ...

    def remove_listener(self, event_type: str, handler: EventHandler) -> None:
        """Uninstall ``handler``; removing an unknown handler is a no-op."""
        ...


class DocumentEvents:
    """In-memory event source that dispatches synthetic events.

    Stands in for the host document: the CLI and the tests use it to drive
    pointer gestures without a real UI toolkit.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventHandler]] = {}

    def add_listener(self, event_type: str, handler: EventHandler) -> None:
        self._listeners.setdefault(event_type, []).append(handler)

    def remove_listener(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._listeners.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self._listeners[event_type]

    def listener_count(self, event_type: str | None = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, ()))
        return sum(len(handlers) for handlers in self._listeners.values())

    def dispatch(self, event_type: str, event: Any) -> None:
        # Copy: a handler may remove itself (pointerup ends the gesture)
        for handler in list(self._listeners.get(event_type, ())):
            handler(event)

    def pointer_move(self, x: float, y: float = 0.0) -> None:
        self.dispatch(POINTER_MOVE, PointerEvent(x, y))

    def pointer_up(self, x: float = 0.0, y: float = 0.0) -> None:
        self.dispatch(POINTER_UP, PointerEvent(x, y))

    def key_down(self, key: str) -> None:
        self.dispatch(KEY_DOWN, KeyEvent(key))


class ListenerScope:
    """Listeners installed for the lifetime of one gesture.

    ``acquire`` installs every handler and ``release`` removes them again.
    Both are idempotent, so the owner can call ``release`` from every exit
    path (commit, cancel, teardown) without tracking which one ran first.
    """

    def __init__(self, source: EventSource, handlers: Mapping[str, EventHandler]) -> None:
        self._source = source
        self._handlers = dict(handlers)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def acquire(self) -> None:
        if self._active:
            return
        for event_type, handler in self._handlers.items():
            self._source.add_listener(event_type, handler)
        self._active = True

    def release(self) -> None:
        if not self._active:
            return
        self._active = False
        for event_type, handler in self._handlers.items():
            self._source.remove_listener(event_type, handler)

    def __enter__(self) -> ListenerScope:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
