from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

import structlog

from sass_bundle.core import elapsed_ms, monotonic_ns, utc_now_iso

log = structlog.get_logger(__name__)


class EventType(str, Enum):
    START = "start"
    END = "end"
    ERROR = "error"


MESSAGES: dict[EventType, str] = {
    EventType.START: "Sass: starting",
    EventType.END: "Sass: finished",
    EventType.ERROR: "Sass: error",
}


@dataclass(frozen=True, slots=True)
class TaskEvent:
    """
    Structured progress record handed to the `log` / `log_error` sinks.

    `time_stamp` and `start_time` are monotonic nanoseconds; only their
    differences are meaningful.
    """

    message: str
    event_type: EventType
    time_stamp: int
    start_time: Optional[int] = None
    err: Optional[BaseException] = None

    @property
    def duration_ms(self) -> int | None:
        if self.start_time is None:
            return None
        return elapsed_ms(self.start_time, self.time_stamp)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "message": self.message,
            "event_type": self.event_type.value,
            "time_stamp": self.time_stamp,
        }
        if self.start_time is not None:
            d["start_time"] = self.start_time
            d["duration_ms"] = self.duration_ms
        if self.err is not None:
            d["err"] = {
                "exc_type": type(self.err).__name__,
                "message": str(self.err),
                "stage": getattr(self.err, "stage", None),
            }
        return d


EventFn = Callable[[TaskEvent], None]


def make_event(
    event_type: EventType,
    *,
    time_stamp: int | None = None,
    start_time: int | None = None,
    err: BaseException | None = None,
) -> TaskEvent:
    return TaskEvent(
        message=MESSAGES[event_type],
        event_type=event_type,
        time_stamp=monotonic_ns() if time_stamp is None else time_stamp,
        start_time=start_time,
        err=err,
    )


def log_event(event: TaskEvent) -> None:
    fields = event.to_dict()
    fields.pop("message")
    log.info(event.message, **fields)


def log_error_event(event: TaskEvent) -> None:
    fields = event.to_dict()
    fields.pop("message")
    fields.pop("err", None)
    log.error(event.message, exc_info=event.err, **fields)


def tee(*sinks: EventFn) -> EventFn:
    def _tee(event: TaskEvent) -> None:
        for sink in sinks:
            sink(event)

    return _tee


class JsonlEventSink:
    """
    Appends one JSON object per event to `path`. Usable directly as a
    `log` / `log_error` sink.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def emit(self, event: TaskEvent) -> None:
        record = {"ts_utc": utc_now_iso(), **event.to_dict()}
        line = json.dumps(record, ensure_ascii=False)
        with self._lock:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line)
                f.write("\n")

    __call__ = emit
