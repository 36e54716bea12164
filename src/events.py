"""Structured event sinks injected into the request components."""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

EventSink = Callable[[str, Dict[str, Any]], None]


class LoggingSink:
    """Default sink: forwards events to a standard logger."""

    def __init__(self, name: str = "hate_console.events", level: int = logging.DEBUG):
        self.log = logging.getLogger(name)
        self.level = level

    def __call__(self, event: str, fields: Dict[str, Any]) -> None:
        if self.log.isEnabledFor(self.level):
            pairs = " ".join(f"{k}={v!r}" for k, v in fields.items())
            self.log.log(self.level, "%s %s", event, pairs)


class RecordingSink:
    """Keeps every event in memory, in order."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def __call__(self, event: str, fields: Dict[str, Any]) -> None:
        self.events.append((event, dict(fields)))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


_DEFAULT_SINK = LoggingSink()


def emit(sink: Optional[EventSink], event: str, **fields: Any) -> None:
    (sink or _DEFAULT_SINK)(event, fields)
