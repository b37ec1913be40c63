"""Event-emitting object contract and a minimal synchronous implementation."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from loguru import logger

Listener = Callable[..., Any]


@runtime_checkable
class EmitterProtocol(Protocol):
    """What the adapter needs from an emitting object: on + once."""

    def on(self, event_name: str, listener: Listener) -> Any:
        """Subscribe persistently."""
        ...

    def once(self, event_name: str, listener: Listener) -> Any:
        """Subscribe for the next occurrence only."""
        ...


class _OnceWrapper:
    """Marks a listener registered via once(); unwrapped for off()."""

    __slots__ = ("listener",)

    def __init__(self, listener: Listener) -> None:
        self.listener = listener

    def __call__(self, *args: Any) -> Any:
        return self.listener(*args)


class EventEmitter:
    """Tiny synchronous event emitter with named events.

    Listeners run in subscription order on the caller of emit(). A listener
    that raises stops dispatch and the exception propagates out of emit().
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event_name: str, listener: Listener) -> EventEmitter:
        """Register listener for every occurrence of event_name."""
        self._listeners.setdefault(event_name, []).append(listener)
        return self

    add_listener = on

    def once(self, event_name: str, listener: Listener) -> EventEmitter:
        """Register listener for the next occurrence of event_name."""
        self._listeners.setdefault(event_name, []).append(_OnceWrapper(listener))
        return self

    def off(self, event_name: str, listener: Listener) -> EventEmitter:
        """Remove the most recently added registration of listener, if any."""
        registered = self._listeners.get(event_name)
        if not registered:
            return self
        for i in range(len(registered) - 1, -1, -1):
            candidate = registered[i]
            if candidate is listener or (
                isinstance(candidate, _OnceWrapper) and candidate.listener is listener
            ):
                del registered[i]
                break
        if not registered:
            del self._listeners[event_name]
        return self

    remove_listener = off

    def remove_all_listeners(self, event_name: str | None = None) -> EventEmitter:
        """Drop listeners for one event, or for all events when event_name is None."""
        if event_name is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event_name, None)
        return self

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, ()))

    def event_names(self) -> list[str]:
        return list(self._listeners)

    def emit(self, event_name: str, *args: Any) -> bool:
        """Call every listener of event_name with args. Return True if any ran."""
        registered = self._listeners.get(event_name)
        if not registered:
            logger.trace("No listeners for event {}", event_name)
            return False
        # snapshot: listeners added during dispatch wait for the next emit
        snapshot = list(registered)
        for listener in snapshot:
            if isinstance(listener, _OnceWrapper):
                self._remove_exact(event_name, listener)
            listener(*args)
        return True

    def _remove_exact(self, event_name: str, listener: Listener) -> None:
        registered = self._listeners.get(event_name)
        if registered and listener in registered:
            registered.remove(listener)
            if not registered:
                del self._listeners[event_name]
