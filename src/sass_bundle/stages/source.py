from __future__ import annotations

import glob
import os
from pathlib import Path, PurePath
from typing import Iterable, Iterator, Sequence, Union

import structlog

from sass_bundle.core import SourceError
from sass_bundle.pipeline.types import FileItem

log = structlog.get_logger(__name__)

PathInput = Union[str, "os.PathLike[str]"]
Globs = Union[PathInput, Sequence[PathInput]]

_MAGIC_CHARS = frozenset("*?[")


def has_magic(pattern: str) -> bool:
    return any(c in _MAGIC_CHARS for c in pattern)


def glob_parent(pattern: str) -> Path:
    """
    Directory prefix of `pattern` before the first segment holding a wildcard.
    """
    parts = PurePath(pattern).parts
    kept: list[str] = []
    for part in parts:
        if has_magic(part):
            break
        kept.append(part)
    else:
        # not a glob: parent of the file itself
        kept = kept[:-1]
    return Path(*kept) if kept else Path(".")


def as_glob_list(globs: Globs) -> list[str]:
    if isinstance(globs, (str, os.PathLike)):
        return [os.fspath(globs)]
    return [os.fspath(g) for g in globs]


def _expand(pattern: str, cwd: Path) -> tuple[Path, list[Path]]:
    absolute = pattern if os.path.isabs(pattern) else os.path.join(cwd, pattern)

    if not has_magic(pattern):
        p = Path(os.path.normpath(absolute))
        if not p.is_file():
            raise SourceError(
                f"File not found with singular glob: {p}", stage="source", path=p
            )
        return p.parent, [p]

    matches = sorted(
        Path(os.path.normpath(m))
        for m in glob.glob(absolute, recursive=True)
        if os.path.isfile(m)
    )
    return glob_parent(absolute), matches


def src(globs: Globs, *, cwd: Path | None = None) -> Iterator[FileItem]:
    """
    Yield a FileItem for every file matched by `globs`, in glob order.

    Patterns starting with `!` exclude matches of the positive patterns.
    Relative patterns are resolved against `cwd` (default: the process cwd).
    """
    root = Path(os.path.abspath(cwd or Path.cwd()))
    patterns = as_glob_list(globs)

    positive = [p for p in patterns if not p.startswith("!")]
    excluded: set[Path] = set()
    for neg in (p[1:] for p in patterns if p.startswith("!")):
        if has_magic(neg):
            excluded.update(_expand(neg, root)[1])
        else:
            excluded.add(Path(os.path.normpath(os.path.join(root, neg))))

    seen: set[Path] = set()
    for pattern in positive:
        base, matches = _expand(pattern, root)
        if not matches:
            log.warning("No files matched", glob=pattern, cwd=str(root))

        for path in _unique(matches, seen, excluded):
            try:
                contents = path.read_bytes()
            except OSError as e:
                raise SourceError(
                    f"Cannot read {path}: {e}", stage="source", path=path
                ) from e
            yield FileItem(path=path, base=base, cwd=root, contents=contents)


def _unique(
    matches: Iterable[Path], seen: set[Path], excluded: set[Path]
) -> Iterator[Path]:
    for m in matches:
        if m in seen or m in excluded:
            continue
        seen.add(m)
        yield m
