import time
from datetime import datetime, timezone


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def monotonic_ns() -> int:
    return time.monotonic_ns()


def elapsed_ms(start_ns: int, end_ns: int | None = None) -> int:
    end = monotonic_ns() if end_ns is None else end_ns
    return (end - start_ns) // 1_000_000


def format_duration_ms(ms: int) -> str:
    """Return a short human-readable duration string."""
    if ms < 1000:
        return f"{ms} ms"
    return f"{ms / 1000:.2f} s"
