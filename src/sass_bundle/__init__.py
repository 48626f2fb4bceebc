from .core import (
    CompileError,
    ConfigurationError,
    InlineError,
    SassBundleError,
    SourceError,
    WriteError,
)
from .pipeline import EventType, FileItem, JsonlEventSink, TaskEvent, TaskResult
from .task import CompileSassOptions, CompileSassTask, create_compile_sass

__version__ = "0.1.0"

__all__ = [
    "create_compile_sass",
    "CompileSassOptions",
    "CompileSassTask",
    "TaskResult",
    "TaskEvent",
    "EventType",
    "FileItem",
    "JsonlEventSink",
    "SassBundleError",
    "ConfigurationError",
    "SourceError",
    "CompileError",
    "InlineError",
    "WriteError",
]
