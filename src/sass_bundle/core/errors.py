from __future__ import annotations

import traceback
from dataclasses import dataclass
from pathlib import Path


class SassBundleError(RuntimeError):
    """Base error"""

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        path: Path | str | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.path = None if path is None else str(path)


@dataclass(frozen=True, slots=True)
class StageError:
    """
    A normalized error record for a failed run.
    """

    exc_type: str
    message: str
    traceback: str
    stage: str | None = None


def stage_error_from_exc(exc: BaseException) -> StageError:
    return StageError(
        exc_type=type(exc).__name__,
        message=str(exc),
        traceback="".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        ),
        stage=getattr(exc, "stage", None),
    )


class ConfigurationError(SassBundleError, ValueError):
    """
    Raised synchronously by the task factory for missing paths or bad options.
    Never reported through the error sink.
    """


class SourceError(SassBundleError):
    """Input path could not be resolved"""


class CompileError(SassBundleError):
    """libsass rejected the source (message carries line/column)"""


class InlineError(SassBundleError):
    """A url() resource could not be read for inlining"""


class WriteError(SassBundleError):
    """Bundle could not be written to the output directory"""
