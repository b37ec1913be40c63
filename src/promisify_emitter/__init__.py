"""Turn event-emitting operations into single awaitable futures."""

from promisify_emitter.adapter import InvocationState, promisified, promisify_event_emitter
from promisify_emitter.config import EmitterConfig, HandlerErrorPolicy
from promisify_emitter.core.constants import DATA_EVENT, END_EVENT, ERROR_EVENT
from promisify_emitter.core.errors import ConfigurationError, EmittedError, PromisifyError
from promisify_emitter.emitter import EmitterProtocol, EventEmitter
from promisify_emitter.listeners import ListenerSpec, On, Once, on, once, parse_listener

__version__ = "0.1.0"

__all__ = [
    "DATA_EVENT",
    "END_EVENT",
    "ERROR_EVENT",
    "ConfigurationError",
    "EmittedError",
    "EmitterConfig",
    "EmitterProtocol",
    "EventEmitter",
    "HandlerErrorPolicy",
    "InvocationState",
    "ListenerSpec",
    "On",
    "Once",
    "PromisifyError",
    "__version__",
    "on",
    "once",
    "parse_listener",
    "promisified",
    "promisify_event_emitter",
]
