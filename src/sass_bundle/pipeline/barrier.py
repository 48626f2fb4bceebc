from __future__ import annotations

from typing import Callable, Iterable

import structlog

from sass_bundle.core import (
    elapsed_ms,
    format_duration_ms,
    monotonic_ns,
    stage_error_from_exc,
)

from .events import EventFn, EventType, make_event
from .report import TaskResult
from .types import FileItem

log = structlog.get_logger(__name__)


def run_with_barrier(
    produce: Callable[[], Iterable[FileItem]],
    *,
    started_at: int,
    log_error: EventFn,
) -> TaskResult:
    """
    Drain the stream built by `produce`.

    The first exception from any stage (or from the user's end sink) aborts the
    whole run: it is reported once through `log_error` and returned as a failed
    result. Items pulled before the failure stay in `files` so callers can see
    what was already written.
    """
    files: list[FileItem] = []
    try:
        for item in produce():
            files.append(item)
    except Exception as e:
        finished_at = monotonic_ns()
        err = stage_error_from_exc(e)
        log.debug(
            "Run aborted",
            stage=err.stage,
            exc_type=err.exc_type,
            files_before_failure=len(files),
            duration=format_duration_ms(elapsed_ms(started_at, finished_at)),
        )
        log_error(make_event(EventType.ERROR, time_stamp=finished_at, err=e))
        return TaskResult(
            status="failed",
            started_at=started_at,
            finished_at=finished_at,
            files=files,
            error=err,
        )

    return TaskResult(
        status="success",
        started_at=started_at,
        finished_at=monotonic_ns(),
        files=files,
    )
