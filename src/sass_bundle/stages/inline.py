from __future__ import annotations

import base64
import mimetypes
import os
import re
from pathlib import Path
from typing import Iterator
from urllib.parse import unquote

import structlog

from sass_bundle.core import InlineError
from sass_bundle.pipeline.stream import StreamStage
from sass_bundle.pipeline.types import FileItem

log = structlog.get_logger(__name__)

# Comments are matched first so url() inside them is left alone.
_URL_RE = re.compile(
    r"""(?P<comment>/\*.*?\*/)"""
    r"""|url\(\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^"'()\s]*))\s*\)""",
    re.IGNORECASE | re.DOTALL,
)

# scheme (http:, https:, data:, ...) or protocol-relative
_EXTERNAL_RE = re.compile(r"^(?:[a-z][a-z0-9+.\-]*:|//)", re.IGNORECASE)

DEFAULT_MIME = "application/octet-stream"


def is_inlinable(ref: str) -> bool:
    ref = ref.strip()
    if not ref or ref.startswith("#"):
        return False
    return _EXTERNAL_RE.match(ref) is None


def resolve_resource(ref: str, base_dir: Path) -> Path:
    """
    Map a url() reference onto disk. Query strings and fragments are dropped;
    root-relative references (`/img/x.png`) resolve against `base_dir` too.
    """
    clean = unquote(ref.strip().split("?", 1)[0].split("#", 1)[0])
    return Path(os.path.normpath(Path(base_dir) / clean.lstrip("/")))


def data_uri(data: bytes, path: Path) -> str:
    mime = mimetypes.guess_type(path.name)[0] or DEFAULT_MIME
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{payload}"


def inline_css(css: str, base_dir: Path) -> tuple[str, int]:
    """
    Replace local url() references in `css` with base64 data URIs.

    Returns the rewritten text and the number of references replaced.
    Raises InlineError if a referenced file cannot be read.
    """
    cache: dict[Path, str] = {}
    count = 0

    def _sub(m: re.Match[str]) -> str:
        nonlocal count
        if m.group("comment") is not None:
            return m.group(0)

        if m.group("dq") is not None:
            ref, q = m.group("dq"), '"'
        elif m.group("sq") is not None:
            ref, q = m.group("sq"), "'"
        else:
            ref, q = m.group("bare"), ""
        if not is_inlinable(ref):
            return m.group(0)

        path = resolve_resource(ref, base_dir)
        uri = cache.get(path)
        if uri is None:
            try:
                data = path.read_bytes()
            except OSError as e:
                raise InlineError(
                    f"Cannot inline url({ref}): {e}", stage="inline", path=path
                ) from e
            uri = cache[path] = data_uri(data, path)

        count += 1
        return f"url({q}{uri}{q})"

    return _URL_RE.sub(_sub, css), count


def inline_resources() -> StreamStage:
    def _inline(stream: Iterator[FileItem]) -> Iterator[FileItem]:
        for item in stream:
            css, count = inline_css(item.text, item.base)
            if count:
                item.text = css
            log.debug("Inlined resources", path=str(item.path), resources=count)
            yield item

    return _inline
