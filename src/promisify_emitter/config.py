"""Adapter configuration and construction-time validation."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loguru import logger

from promisify_emitter.core.constants import END_EVENT
from promisify_emitter.core.errors import ConfigurationError
from promisify_emitter.listeners import ListenerSpec, parse_listener

# Mapping-form keys, canonical name first.
_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "emitter_factory": ("emitter_factory", "emitterFactory", "eventEmitter"),
    "invocation_context": ("invocation_context", "invocationContext", "applyThis"),
    "listeners": ("listeners", "listenerSpecs"),
    "transform": ("transform",),
    "handler_error_policy": ("handler_error_policy", "handlerErrorPolicy"),
}


class HandlerErrorPolicy(str, Enum):
    """What happens when a caller-supplied listener handler raises."""

    PROPAGATE = "propagate"
    """Re-raise out of the emitter's dispatch; the future is not touched."""

    REJECT = "reject"
    """Reject the invocation's future with the exception and stop it there."""


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    for alias in _KEY_ALIASES[key]:
        if data.get(alias) is not None:
            return data[alias]
    return None


_KNOWN_KEYS = frozenset(alias for aliases in _KEY_ALIASES.values() for alias in aliases)


def normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map alias spellings to canonical keys, dropping None values.

    Raises ConfigurationError for keys that are not configuration fields.
    """
    unknown = sorted(str(key) for key in data if key not in _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(
            f"unknown configuration keys: {', '.join(unknown)}",
            code="invalid_configuration",
            details={"keys": unknown},
        )
    normalized: dict[str, Any] = {}
    for key in _KEY_ALIASES:
        value = _lookup(data, key)
        if value is not None:
            normalized[key] = value
    return normalized


@dataclass(frozen=True)
class EmitterConfig:
    """Validated adapter configuration. Immutable for the adapter's lifetime."""

    emitter_factory: Callable[..., Any]
    invocation_context: Any = None
    listeners: tuple[ListenerSpec, ...] = field(default_factory=tuple)
    transform: Callable[[Any], Any] | None = None
    handler_error_policy: HandlerErrorPolicy = HandlerErrorPolicy.PROPAGATE

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Validate every field; raise ConfigurationError on the first failure."""
        if self.emitter_factory is None:
            raise ConfigurationError(
                "emitter_factory is required",
                code="missing_emitter_factory",
            )
        if not callable(self.emitter_factory):
            raise ConfigurationError(
                "emitter_factory must be callable",
                code="invalid_emitter_factory",
                details={"type": type(self.emitter_factory).__name__},
            )
        if not isinstance(self.listeners, (list, tuple)):
            raise ConfigurationError(
                "listeners must be a list of listener options",
                code="invalid_listeners",
                details={"type": type(self.listeners).__name__},
            )
        parsed = tuple(parse_listener(item, index=i) for i, item in enumerate(self.listeners))
        # frozen dataclass: normalise mapping-form listeners in place
        object.__setattr__(self, "listeners", parsed)

        if self.transform is not None and not callable(self.transform):
            raise ConfigurationError(
                "transform must be callable",
                code="invalid_transform",
                details={"type": type(self.transform).__name__},
            )
        try:
            policy = HandlerErrorPolicy(self.handler_error_policy)
        except ValueError as exc:
            raise ConfigurationError(
                f"unknown handler_error_policy: {self.handler_error_policy!r}",
                code="invalid_handler_error_policy",
                details={"allowed": [p.value for p in HandlerErrorPolicy]},
                original_error=exc,
            ) from exc
        object.__setattr__(self, "handler_error_policy", policy)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EmitterConfig:
        """Build a config from a loose mapping (snake_case or camelCase keys)."""
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                "configuration must be a mapping",
                code="invalid_configuration",
                details={"type": type(data).__name__},
            )
        normalized = normalize_keys(data)
        config = cls(
            emitter_factory=normalized.get("emitter_factory"),
            invocation_context=normalized.get("invocation_context"),
            listeners=normalized.get("listeners", ()),
            transform=normalized.get("transform"),
            handler_error_policy=normalized.get("handler_error_policy", HandlerErrorPolicy.PROPAGATE),
        )
        logger.debug("Emitter config loaded: {} listeners", len(config.listeners))
        return config

    @property
    def has_result_listener(self) -> bool:
        return any(spec.is_result for spec in self.listeners)

    @property
    def has_error_listener(self) -> bool:
        return any(spec.is_error for spec in self.listeners)

    @property
    def has_end_listener(self) -> bool:
        return any(spec.event_name == END_EVENT for spec in self.listeners)
