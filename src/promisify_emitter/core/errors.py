"""Promisify domain exceptions."""

from __future__ import annotations

from typing import Any


class PromisifyError(Exception):
    """Base for promisify errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class ConfigurationError(PromisifyError):
    """Adapter configuration or listener descriptor is invalid."""


class EmittedError(PromisifyError):
    """Non-exception value delivered on an error event.

    Futures can only be rejected with exceptions, so plain values such as
    ``"boom"`` are wrapped; ``value`` holds the value exactly as emitted.
    """

    def __init__(self, value: Any, *, event_name: str | None = None) -> None:
        super().__init__(
            str(value),
            code="emitted_error",
            details={"event": event_name} if event_name else None,
        )
        self.value = value
