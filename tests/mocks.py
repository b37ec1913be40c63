"""Test doubles for emitter factories."""

from __future__ import annotations

from typing import Any

from promisify_emitter import EventEmitter


class RecordingEmitter(EventEmitter):
    """EventEmitter that records every subscription call in order."""

    def __init__(self) -> None:
        super().__init__()
        self.subscriptions: list[tuple[str, str]] = []

    def on(self, event_name: str, listener: Any) -> RecordingEmitter:
        self.subscriptions.append(("on", event_name))
        return super().on(event_name, listener)

    def once(self, event_name: str, listener: Any) -> RecordingEmitter:
        self.subscriptions.append(("once", event_name))
        return super().once(event_name, listener)


class EmitterFactory:
    """Callable factory that hands out RecordingEmitters and remembers them."""

    def __init__(self) -> None:
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
        self.emitters: list[RecordingEmitter] = []

    def __call__(self, *args: Any, **kwargs: Any) -> RecordingEmitter:
        self.calls.append((args, kwargs))
        emitter = RecordingEmitter()
        self.emitters.append(emitter)
        return emitter

    @property
    def last(self) -> RecordingEmitter:
        return self.emitters[-1]


class HandlerLog:
    """Side-effect handler that records the arguments it was called with."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, arg: Any) -> str:
        self.calls.append(arg)
        return "ignored"


class NotAnEmitter:
    """Has emit() but no on()/once()."""

    def emit(self, event_name: str, *args: Any) -> None:
        pass
