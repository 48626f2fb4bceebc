from .compile import compile_sass, output_style_for
from .dest import dest
from .inline import inline_css, inline_resources
from .rebase import rebase
from .rename import flatten, rename
from .source import src
from .tap import passthrough, tap

__all__ = [
    "src",
    "compile_sass",
    "output_style_for",
    "rebase",
    "rename",
    "flatten",
    "inline_css",
    "inline_resources",
    "dest",
    "tap",
    "passthrough",
]
