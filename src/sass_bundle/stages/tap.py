from __future__ import annotations

from typing import Callable, Iterator

from sass_bundle.pipeline.stream import StreamStage
from sass_bundle.pipeline.types import FileItem


def tap(fn: Callable[[FileItem], None]) -> StreamStage:
    """Call `fn` for each item, then forward the item unchanged."""

    def _tap(stream: Iterator[FileItem]) -> Iterator[FileItem]:
        for item in stream:
            fn(item)
            yield item

    return _tap


def passthrough(stream: Iterator[FileItem]) -> Iterator[FileItem]:
    yield from stream
