from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from sass_bundle.core import relpath_posix


def _norm(p: os.PathLike[str] | str) -> Path:
    return Path(os.path.normpath(os.path.abspath(p)))


@dataclass(slots=True)
class FileItem:
    """
    One file moving through the stream stages.

    `path`, `base` and `cwd` are absolute. `relative` is `path` seen from `base`
    and is what the destination writer appends to its output directory.
    Stages mutate items in place.
    """

    path: Path
    base: Path
    cwd: Path
    contents: bytes = b""

    def __post_init__(self) -> None:
        self.cwd = _norm(self.cwd)
        self.path = _norm(self.cwd / self.path)
        self.base = _norm(self.cwd / self.base)

    @property
    def relative(self) -> Path:
        return Path(os.path.relpath(self.path, self.base))

    @property
    def dirname(self) -> Path:
        return self.path.parent

    @property
    def basename(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def extname(self) -> str:
        return self.path.suffix

    @extname.setter
    def extname(self, value: str) -> None:
        self.path = self.path.with_suffix(value)

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")

    @text.setter
    def text(self, value: str) -> None:
        self.contents = value.encode("utf-8")


@dataclass(slots=True)
class PathParts:
    """
    Editable view of an item's location used by the renamer.

    `dirname` is relative to the item's base, `basename` excludes the extension.
    """

    dirname: str
    basename: str
    extname: str

    @classmethod
    def of(cls, item: FileItem) -> "PathParts":
        return cls(
            dirname=relpath_posix(item.dirname, item.base),
            basename=item.stem,
            extname=item.extname,
        )

    def relpath(self) -> Path:
        return Path(self.dirname) / f"{self.basename}{self.extname}"
