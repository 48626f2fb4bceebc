from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from sass_bundle.pipeline import EventType, TaskEvent

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 3


@dataclass
class EventRecorder:
    events: list[TaskEvent] = field(default_factory=list)

    def log(self, event: TaskEvent) -> None:
        self.events.append(event)

    log_error = log

    def of(self, event_type: EventType) -> list[TaskEvent]:
        return [e for e in self.events if e.event_type is event_type]

    def types(self) -> list[str]:
        return [e.event_type.value for e in self.events]

    def sinks(self) -> dict[str, object]:
        return {"log": self.log, "log_error": self.log_error}


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project root that is also the process cwd."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write(path: Path, content: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path
