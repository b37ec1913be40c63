"""Core: error taxonomy and event-name constants."""

from promisify_emitter.core.constants import DATA_EVENT, END_EVENT, ERROR_EVENT
from promisify_emitter.core.errors import ConfigurationError, EmittedError, PromisifyError

__all__ = [
    "DATA_EVENT",
    "END_EVENT",
    "ERROR_EVENT",
    "ConfigurationError",
    "EmittedError",
    "PromisifyError",
]
