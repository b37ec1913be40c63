"""Well-known event names."""

from __future__ import annotations

from typing import Literal

DefaultEvent = Literal["data", "error", "end"]

DATA_EVENT: DefaultEvent = "data"
ERROR_EVENT: DefaultEvent = "error"
END_EVENT: DefaultEvent = "end"
