"""Listener descriptors: event name, subscription mode and capture flags."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Union

from promisify_emitter.core.errors import ConfigurationError

Handler = Callable[[Any], Any]
SubscribeMethod = Literal["on", "once"]

# Accepted spellings in the mapping form, first match wins.
_NAME_KEYS = ("name", "event_name", "eventName")
_RESULT_KEYS = ("is_result", "isResult")
_ERROR_KEYS = ("is_error", "isError")


@dataclass(frozen=True)
class On:
    """Persistent subscription: handler runs on every occurrence."""

    handler: Handler

    method: ClassVar[SubscribeMethod] = "on"


@dataclass(frozen=True)
class Once:
    """One-shot subscription: handler runs on the first occurrence only."""

    handler: Handler

    method: ClassVar[SubscribeMethod] = "once"


SubscriptionMode = Union[On, Once]


@dataclass(frozen=True)
class ListenerSpec:
    """One event subscription wired by the adapter on every invocation.

    ``is_result`` / ``is_error`` capture the event argument as the pending
    result / error; repeated occurrences overwrite. A listener named ``end``
    also settles the invocation after its own capture and handler ran.
    """

    event_name: str
    mode: SubscriptionMode
    is_result: bool = False
    is_error: bool = False

    @property
    def handler(self) -> Handler:
        return self.mode.handler

    @property
    def method(self) -> SubscribeMethod:
        return self.mode.method


def _first(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _check_handler(handler: Any, slot: str, index: int | None) -> None:
    if not callable(handler):
        raise ConfigurationError(
            f'"{slot}" must be a function',
            code="invalid_listener_handler",
            details={"index": index, "slot": slot, "type": type(handler).__name__},
        )


def _check_name(name: Any, index: int | None) -> None:
    if not name:
        raise ConfigurationError(
            "listener option must have a name",
            code="missing_listener_name",
            details={"index": index},
        )
    if not isinstance(name, str):
        raise ConfigurationError(
            "listener name must be a string",
            code="invalid_listener_name",
            details={"index": index, "type": type(name).__name__},
        )


def parse_listener(raw: ListenerSpec | Mapping[str, Any], *, index: int | None = None) -> ListenerSpec:
    """Validate a listener descriptor and return it as a ListenerSpec.

    Accepts either a ListenerSpec or a mapping such as
    ``{"name": "progress", "on": report, "is_result": False}``.
    Raises ConfigurationError on the first violation found.
    """
    if isinstance(raw, ListenerSpec):
        _check_name(raw.event_name, index)
        if not isinstance(raw.mode, (On, Once)):
            raise ConfigurationError(
                "listener mode must be On or Once",
                code="invalid_listener_mode",
                details={"index": index, "type": type(raw.mode).__name__},
            )
        _check_handler(raw.handler, raw.method, index)
        return raw

    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            "listener option must be a mapping or ListenerSpec",
            code="invalid_listener",
            details={"index": index, "type": type(raw).__name__},
        )

    name = _first(raw, _NAME_KEYS)
    _check_name(name, index)

    on_handler = raw.get("on")
    once_handler = raw.get("once")
    if on_handler is None and once_handler is None:
        raise ConfigurationError(
            'listener option must have a "once" or "on" function',
            code="missing_listener_handler",
            details={"index": index, "event": name},
        )
    if on_handler is not None and once_handler is not None:
        raise ConfigurationError(
            'listener option must have only one of "once" or "on"',
            code="ambiguous_listener_handler",
            details={"index": index, "event": name},
        )

    mode: SubscriptionMode
    if on_handler is not None:
        _check_handler(on_handler, "on", index)
        mode = On(on_handler)
    else:
        _check_handler(once_handler, "once", index)
        mode = Once(once_handler)

    return ListenerSpec(
        event_name=name,
        mode=mode,
        is_result=bool(_first(raw, _RESULT_KEYS)),
        is_error=bool(_first(raw, _ERROR_KEYS)),
    )


def on(event_name: str, handler: Handler, *, is_result: bool = False, is_error: bool = False) -> ListenerSpec:
    """Shorthand for a persistent ListenerSpec."""
    return parse_listener(ListenerSpec(event_name, On(handler), is_result, is_error))


def once(event_name: str, handler: Handler, *, is_result: bool = False, is_error: bool = False) -> ListenerSpec:
    """Shorthand for a one-shot ListenerSpec."""
    return parse_listener(ListenerSpec(event_name, Once(handler), is_result, is_error))
