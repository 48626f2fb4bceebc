from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import structlog

from sass_bundle.core import WriteError, atomic_write_bytes
from sass_bundle.pipeline.stream import StreamStage
from sass_bundle.pipeline.types import FileItem

log = structlog.get_logger(__name__)


def dest(out_dir: str | os.PathLike[str]) -> StreamStage:
    """
    Write each item to `out_dir / item.relative` and re-point the item at the
    written file. `out_dir` is resolved against the item's cwd.
    """

    def _dest(stream: Iterator[FileItem]) -> Iterator[FileItem]:
        for item in stream:
            root = Path(os.path.normpath(os.path.join(item.cwd, out_dir)))
            target = Path(os.path.normpath(root / item.relative))
            try:
                atomic_write_bytes(target, item.contents)
            except OSError as e:
                raise WriteError(
                    f"Cannot write {target}: {e}", stage="dest", path=target
                ) from e

            item.base = root
            item.path = target
            log.debug("Wrote bundle", path=str(target), bytes=len(item.contents))
            yield item

    return _dest
