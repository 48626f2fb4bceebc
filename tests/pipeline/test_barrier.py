from __future__ import annotations

from pathlib import Path

from sass_bundle.core import InlineError, monotonic_ns
from sass_bundle.pipeline import EventType, FileItem, run_with_barrier


def _items(tmp_path: Path, fail_after: int | None = None):
    for i in range(3):
        if fail_after is not None and i == fail_after:
            raise InlineError("missing", stage="inline")
        yield FileItem(path=tmp_path / f"{i}.css", base=tmp_path, cwd=tmp_path)


def test_barrier_collects_items(tmp_path: Path) -> None:
    errors = []
    result = run_with_barrier(
        lambda: _items(tmp_path), started_at=monotonic_ns(), log_error=errors.append
    )
    assert result.ok
    assert [f.basename for f in result.files] == ["0.css", "1.css", "2.css"]
    assert errors == []
    assert result.duration_ms >= 0


def test_barrier_stops_at_first_error(tmp_path: Path) -> None:
    errors = []
    result = run_with_barrier(
        lambda: _items(tmp_path, fail_after=1),
        started_at=monotonic_ns(),
        log_error=errors.append,
    )

    assert not result.ok
    # items drained before the failure are still reported
    assert [f.basename for f in result.files] == ["0.css"]
    assert result.to_dict()["status"] == "failed"
    [event] = errors
    assert event.event_type is EventType.ERROR
    assert isinstance(event.err, InlineError)
    assert result.error is not None
    assert result.error.stage == "inline"
    assert "InlineError" in result.error.traceback
    assert result.to_dict()["error"]["exc_type"] == "InlineError"
