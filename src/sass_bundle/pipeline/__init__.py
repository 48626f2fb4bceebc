from .barrier import run_with_barrier
from .events import (
    EventFn,
    EventType,
    JsonlEventSink,
    TaskEvent,
    log_error_event,
    log_event,
    make_event,
    tee,
)
from .report import TaskResult
from .stream import EndSink, StreamStage, pipe
from .types import FileItem, PathParts

__all__ = [
    "run_with_barrier",
    "EventFn",
    "EventType",
    "JsonlEventSink",
    "TaskEvent",
    "log_error_event",
    "log_event",
    "make_event",
    "tee",
    "TaskResult",
    "EndSink",
    "StreamStage",
    "pipe",
    "FileItem",
    "PathParts",
]
