"""Emitter adapter: turn an event-emitting operation into one awaitable future.

``promisify_event_emitter(config)`` validates the configuration once and
returns ``adapted(*args, **kwargs)``. Each call of ``adapted``:

1. creates a future on the running loop;
2. calls the emitter factory (synchronous errors propagate to the caller);
3. subscribes every configured listener in order, then the defaults
   (``data`` result capture, ``error`` rejection, ``end`` settlement) for
   any role no listener covers;
4. returns the future, settled on the first ``end`` (or default ``error``).

An error captured before settlement always wins over a captured result.
"""

from __future__ import annotations

import asyncio
import functools
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from loguru import logger

from promisify_emitter.config import EmitterConfig, HandlerErrorPolicy, normalize_keys
from promisify_emitter.core.constants import DATA_EVENT, END_EVENT, ERROR_EVENT
from promisify_emitter.core.errors import ConfigurationError, EmittedError
from promisify_emitter.listeners import ListenerSpec

AdaptedFunction = Callable[..., "asyncio.Future[Any]"]


@dataclass
class InvocationState:
    """Everything one call of an adapted function owns until it settles."""

    future: asyncio.Future[Any]
    has_result_listener: bool = False
    has_error_listener: bool = False
    has_end_listener: bool = False
    result: Any = None
    error: Any = None
    error_event: str | None = None


def _as_exception(error: Any, event_name: str | None) -> BaseException:
    if isinstance(error, BaseException):
        return error
    return EmittedError(error, event_name=event_name)


def _settle(state: InvocationState, config: EmitterConfig) -> None:
    """Resolve or reject the future from captured state. No-op once done."""
    future = state.future
    if future.done():
        logger.trace("Settle skipped: future already done")
        return

    if state.error:
        logger.debug("Rejecting with error captured from {}", state.error_event)
        future.set_exception(_as_exception(state.error, state.error_event))
        return

    value = state.result
    if config.transform is not None and value:
        try:
            value = config.transform(value)
        except Exception as exc:
            logger.debug("Transform failed, rejecting: {}", exc)
            future.set_exception(exc)
            return
    logger.debug("Resolving with {} result", type(value).__name__)
    future.set_result(value)


def _run_handler(spec: ListenerSpec, arg: Any, state: InvocationState, config: EmitterConfig) -> bool:
    """Call the caller's side-effect handler. Return False if the future was rejected."""
    if config.handler_error_policy is HandlerErrorPolicy.PROPAGATE:
        spec.handler(arg)
        return True
    try:
        spec.handler(arg)
    except Exception as exc:
        logger.exception("Listener for {!r} raised; rejecting", spec.event_name)
        if not state.future.done():
            state.future.set_exception(exc)
        return False
    return True


def _subscribe(emitter: Any, spec: ListenerSpec, state: InvocationState, config: EmitterConfig) -> None:
    def handle(arg: Any = None, *_: Any) -> None:
        if spec.is_result:
            state.result = arg
        if spec.is_error:
            state.error = arg
            state.error_event = spec.event_name
        logger.trace("Event {!r} captured (result={}, error={})", spec.event_name, spec.is_result, spec.is_error)
        if not _run_handler(spec, arg, state, config):
            return
        if spec.event_name == END_EVENT:
            _settle(state, config)

    getattr(emitter, spec.method)(spec.event_name, handle)


def _subscribe_defaults(emitter: Any, state: InvocationState, config: EmitterConfig) -> None:
    if not state.has_result_listener:

        def capture_data(arg: Any = None, *_: Any) -> None:
            state.result = arg

        emitter.once(DATA_EVENT, capture_data)

    if not state.has_error_listener:

        def capture_error(arg: Any = None, *_: Any) -> None:
            state.error = arg
            state.error_event = ERROR_EVENT
            # no end needed: an unclaimed error rejects at once
            if arg:
                _settle(state, config)

        emitter.on(ERROR_EVENT, capture_error)

    if not state.has_end_listener:

        def settle_on_end(*_: Any) -> None:
            _settle(state, config)

        emitter.once(END_EVENT, settle_on_end)


def _check_emitter(emitter: Any, factory: Callable[..., Any]) -> None:
    for method in ("on", "once"):
        if not callable(getattr(emitter, method, None)):
            raise ConfigurationError(
                f"emitter_factory returned an object without a callable {method}()",
                code="invalid_emitter",
                details={"factory": _name(factory), "type": type(emitter).__name__, "method": method},
            )


def _name(factory: Callable[..., Any]) -> str:
    return getattr(factory, "__qualname__", None) or repr(factory)


def _resolve_config(config: EmitterConfig | Mapping[str, Any] | None, overrides: dict[str, Any]) -> EmitterConfig:
    if config is None:
        return EmitterConfig.from_mapping(overrides)
    if isinstance(config, EmitterConfig):
        normalized = normalize_keys(overrides)
        return replace(config, **normalized) if normalized else config
    if isinstance(config, Mapping):
        # normalise both sides so an alias in overrides beats any spelling in config
        return EmitterConfig.from_mapping({**normalize_keys(config), **normalize_keys(overrides)})
    raise ConfigurationError(
        "configuration must be an EmitterConfig or a mapping",
        code="invalid_configuration",
        details={"type": type(config).__name__},
    )


def promisify_event_emitter(
    config: EmitterConfig | Mapping[str, Any] | None = None,
    /,
    **overrides: Any,
) -> AdaptedFunction:
    """Build a function that runs an emitter factory and returns one future.

    ``config`` is an EmitterConfig or a mapping (``emitter_factory``,
    ``invocation_context``, ``listeners``, ``transform``,
    ``handler_error_policy``). Keyword arguments, in any accepted spelling,
    override it; unknown keys are rejected.
    Raises ConfigurationError right away if the configuration is invalid.
    """
    resolved = _resolve_config(config, overrides)
    factory = resolved.emitter_factory
    if resolved.invocation_context is not None:
        factory = types.MethodType(factory, resolved.invocation_context)

    has_result = resolved.has_result_listener
    has_error = resolved.has_error_listener
    has_end = resolved.has_end_listener

    def adapted(*args: Any, **kwargs: Any) -> asyncio.Future[Any]:
        future = asyncio.get_running_loop().create_future()
        emitter = factory(*args, **kwargs)
        _check_emitter(emitter, resolved.emitter_factory)

        state = InvocationState(
            future=future,
            has_result_listener=has_result,
            has_error_listener=has_error,
            has_end_listener=has_end,
        )
        for spec in resolved.listeners:
            _subscribe(emitter, spec, state, resolved)
        _subscribe_defaults(emitter, state, resolved)
        logger.debug(
            "Wired {} listeners on {} (default data={}, error={}, end={})",
            len(resolved.listeners),
            _name(resolved.emitter_factory),
            not has_result,
            not has_error,
            not has_end,
        )
        return future

    adapted.config = resolved  # type: ignore[attr-defined]
    return adapted


def promisified(**config: Any) -> Callable[[Callable[..., Any]], AdaptedFunction]:
    """Decorator form: ``@promisified(listeners=[...])`` on an emitter factory."""

    def decorator(factory: Callable[..., Any]) -> AdaptedFunction:
        adapted = promisify_event_emitter(emitter_factory=factory, **config)
        functools.update_wrapper(adapted, factory)
        return adapted

    return decorator
