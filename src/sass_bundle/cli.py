from __future__ import annotations

import argparse
import uuid
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sass_bundle.core import (
    ConfigurationError,
    Settings,
    bind,
    configure_logging,
    format_duration_ms,
    get_logger,
    load_settings,
)
from sass_bundle.pipeline import JsonlEventSink, log_error_event, log_event, tee
from sass_bundle.task import create_compile_sass

console = Console()


def _build_parser(s: Settings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sass-bundle",
        description="Compile a Sass entry point into one css bundle with inlined resources.",
    )
    p.add_argument(
        "in_paths",
        nargs="+",
        metavar="IN_PATH",
        help="Sass entry file or glob (repeatable; prefix with ! to exclude).",
    )
    p.add_argument("out_path", metavar="OUT_PATH", help="Output directory")
    p.add_argument(
        "--bundle-name",
        default=s.bundle_name,
        help=f"Name of the written css file (default: {s.bundle_name})",
    )
    p.add_argument(
        "--no-minify",
        dest="minified",
        action="store_false",
        default=s.minified,
        help="Emit nested (indented) css instead of compressed css.",
    )
    p.add_argument(
        "--events",
        type=Path,
        default=s.events_path,
        help="Append every task event to this JSON-lines file.",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    s = load_settings()
    args = _build_parser(s).parse_args(argv)

    configure_logging(level=s.log_level, fmt=s.log_format)
    log = get_logger("sass_bundle")

    run_id = uuid.uuid4().hex
    bind(run_id=run_id, command="compile")

    overrides: dict[str, Any] = {
        "bundle_name": args.bundle_name,
        "minified": args.minified,
    }
    if args.events is not None:
        sink = JsonlEventSink(args.events)
        overrides["log"] = tee(log_event, sink)
        overrides["log_error"] = tee(log_error_event, sink)

    try:
        task = create_compile_sass(args.in_paths, args.out_path, **overrides)
    except ConfigurationError as e:
        log.error("Invalid configuration", error=str(e))
        console.print(f"[red]{e}[/red]")
        return 2

    console.print(
        Panel.fit(
            Text(
                f"sass-bundle\nrun_id={run_id}\n"
                f"in={' '.join(args.in_paths)}\nout={args.out_path}",
                style="bold",
            ),
            title="Run",
        )
    )

    with console.status("[bold]compile[/]", spinner="dots"):
        result = task()

    tbl = Table(title="Result", show_header=True, box=None)
    tbl.add_row("status", "[green]ok[/green]" if result.ok else "[red]failed[/red]")
    tbl.add_row("duration", format_duration_ms(result.duration_ms))
    for f in result.files:
        tbl.add_row("file", str(f.path))
    if result.error is not None:
        tbl.add_row("error", f"{result.error.exc_type}: {result.error.message}")
    console.print(tbl)
    log.info("Run complete", **result.to_dict())

    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
