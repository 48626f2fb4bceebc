from __future__ import annotations

from typing import Iterator, Literal, Sequence

import sass
import structlog

from sass_bundle.core import CompileError
from sass_bundle.pipeline.stream import StreamStage
from sass_bundle.pipeline.types import FileItem

log = structlog.get_logger(__name__)

OutputStyle = Literal["nested", "expanded", "compact", "compressed"]


def output_style_for(minified: bool) -> OutputStyle:
    return "compressed" if minified else "nested"


def compile_sass(
    *,
    output_style: OutputStyle = "compressed",
    include_paths: Sequence[str] = (),
) -> StreamStage:
    """
    Compile each item with libsass.

    - partials (`_name.scss`) are dropped; they are only reachable via @import
    - empty files pass through, renamed to `.css`
    - `.sass` files are read with the indented syntax
    """

    def _compile(stream: Iterator[FileItem]) -> Iterator[FileItem]:
        for item in stream:
            if item.basename.startswith("_"):
                log.debug("Skipping partial", path=str(item.path))
                continue

            if not item.contents:
                item.extname = ".css"
                yield item
                continue

            try:
                css = sass.compile(
                    string=item.text,
                    output_style=output_style,
                    include_paths=[str(item.dirname), *include_paths],
                    indented=item.extname == ".sass",
                )
            except (sass.CompileError, UnicodeDecodeError) as e:
                raise CompileError(
                    f"{item.relative.as_posix()}: {e}", stage="compile", path=item.path
                ) from e

            item.text = css
            item.extname = ".css"
            log.debug(
                "Compiled",
                path=str(item.path),
                output_style=output_style,
                bytes=len(item.contents),
            )
            yield item

    return _compile
