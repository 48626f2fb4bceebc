from .config import DEFAULT_BUNDLE_NAME, Settings, load_settings
from .errors import (
    CompileError,
    ConfigurationError,
    InlineError,
    SassBundleError,
    SourceError,
    StageError,
    WriteError,
    stage_error_from_exc,
)
from .fs import atomic_write_bytes, relpath_posix, safe_unlink
from .logging import bind, configure_logging, get_logger
from .time import elapsed_ms, format_duration_ms, monotonic_ns, utc_now_iso

__all__ = [
    "DEFAULT_BUNDLE_NAME",
    "Settings",
    "load_settings",
    "SassBundleError",
    "ConfigurationError",
    "SourceError",
    "CompileError",
    "InlineError",
    "WriteError",
    "StageError",
    "stage_error_from_exc",
    "atomic_write_bytes",
    "relpath_posix",
    "safe_unlink",
    "bind",
    "configure_logging",
    "get_logger",
    "elapsed_ms",
    "format_duration_ms",
    "monotonic_ns",
    "utc_now_iso",
]
