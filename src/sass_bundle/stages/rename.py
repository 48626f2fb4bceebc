from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from sass_bundle.pipeline.stream import StreamStage
from sass_bundle.pipeline.types import FileItem, PathParts

RenameFn = Callable[[PathParts], Optional[PathParts]]
RenameTarget = Union[str, "os.PathLike[str]", RenameFn]


def rename(target: RenameTarget) -> StreamStage:
    """
    Move each item within its base.

    A literal target replaces the whole relative path. A callable receives the
    item's PathParts and may edit them in place or return new ones.
    """

    def _rename(stream: Iterator[FileItem]) -> Iterator[FileItem]:
        for item in stream:
            if callable(target):
                parts = PathParts.of(item)
                parts = target(parts) or parts
                rel = parts.relpath()
            else:
                rel = Path(target)
            item.path = Path(os.path.normpath(item.base / rel))
            yield item

    return _rename


def _to_base_dir(parts: PathParts) -> None:
    parts.dirname = "."


def flatten() -> StreamStage:
    """Drop any directory structure below the base."""
    return rename(_to_base_dir)
