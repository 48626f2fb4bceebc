from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from sass_bundle.core import StageError, elapsed_ms

from .types import FileItem


@dataclass(slots=True)
class TaskResult:
    """
    Outcome of one task run.

    `files` holds the bundles that were written and drained from `on_end`. On a
    failed run it still lists the files written before the failure; those stay
    on disk and do not make the run a partial success. `error` is set only when
    `status` is "failed".
    """

    status: str  # "success" | "failed"
    started_at: int
    finished_at: int

    files: list[FileItem] = field(default_factory=list)
    error: Optional[StageError] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @property
    def duration_ms(self) -> int:
        return elapsed_ms(self.started_at, self.finished_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "duration_ms": self.duration_ms,
            "files": [str(f.path) for f in self.files],
            "error": (
                None
                if self.error is None
                else {
                    "exc_type": self.error.exc_type,
                    "message": self.error.message,
                    "stage": self.error.stage,
                }
            ),
        }
