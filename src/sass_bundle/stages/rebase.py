from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from sass_bundle.pipeline.stream import StreamStage
from sass_bundle.pipeline.types import FileItem


def rebase(root: str | os.PathLike[str] = "./") -> StreamStage:
    """Point every item's base at `root`, resolved against the item's cwd."""

    def _rebase(stream: Iterator[FileItem]) -> Iterator[FileItem]:
        for item in stream:
            item.base = Path(os.path.normpath(os.path.join(item.cwd, root)))
            yield item

    return _rebase
