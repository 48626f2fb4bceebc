from __future__ import annotations

from typing import Callable, Iterable, Iterator

from .types import FileItem

StreamStage = Callable[[Iterator[FileItem]], Iterator[FileItem]]
EndSink = Callable[[Iterator[FileItem]], Iterable[FileItem]]


def pipe(source: Iterable[FileItem], *stages: StreamStage) -> Iterator[FileItem]:
    """
    Chain stages lazily. Nothing runs until the returned iterator is pulled, and
    each item travels through every stage before the next one is read.
    """
    stream: Iterator[FileItem] = iter(source)
    for stage in stages:
        stream = iter(stage(stream))
    return stream
