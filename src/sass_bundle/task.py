from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable, Iterator, Mapping, Sequence, Union

import structlog

from sass_bundle.core import DEFAULT_BUNDLE_NAME, ConfigurationError, monotonic_ns
from sass_bundle.pipeline import (
    EndSink,
    EventFn,
    EventType,
    FileItem,
    StreamStage,
    TaskResult,
    log_error_event,
    log_event,
    make_event,
    pipe,
    run_with_barrier,
)
from sass_bundle.stages import (
    compile_sass,
    dest,
    flatten,
    inline_resources,
    output_style_for,
    passthrough,
    rebase,
    rename,
    src,
    tap,
)
from sass_bundle.stages.compile import OutputStyle

log = structlog.get_logger(__name__)

PathInput = Union[str, "os.PathLike[str]"]

# Resource urls in the sources are written relative to the project root.
RESOURCE_ROOT = "./"


@dataclass(frozen=True, slots=True)
class CompileSassOptions:
    """
    Resolved configuration for one task.

    bundle_name: name of the written css file
    log: sink for `start` / `end` events
    log_error: sink for `error` events
    minified: compressed output when true, nested otherwise
    on_end: receives the stream of written files; whatever it yields is
        collected into TaskResult.files
    """

    bundle_name: str = DEFAULT_BUNDLE_NAME
    log: EventFn = log_event
    log_error: EventFn = log_error_event
    minified: bool = True
    on_end: EndSink = passthrough

    @property
    def output_style(self) -> OutputStyle:
        return output_style_for(self.minified)

    def merged(self, overrides: Mapping[str, Any]) -> "CompileSassOptions":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s): {unknown}; expected one of {sorted(known)}"
            )
        return replace(
            self, **{k: v for k, v in overrides.items() if v is not None}
        )

    def validate(self) -> None:
        if not isinstance(self.bundle_name, str) or not self.bundle_name.strip():
            raise ConfigurationError("bundle_name must be a non-empty string")
        if not isinstance(self.minified, bool):
            raise ConfigurationError(
                f"minified must be a bool, got {type(self.minified).__name__}"
            )
        for name in ("log", "log_error", "on_end"):
            if not callable(getattr(self, name)):
                raise ConfigurationError(f"{name} must be callable")


DEFAULT_OPTIONS = CompileSassOptions()


def resolve_options(
    user_opts: Mapping[str, Any] | CompileSassOptions | None = None,
    **overrides: Any,
) -> CompileSassOptions:
    """
    Merge caller options over the defaults, key by key. Keyword overrides win
    over `user_opts`; `None` values keep the default.
    """
    if isinstance(user_opts, CompileSassOptions):
        base, layered = user_opts, dict(overrides)
    else:
        base, layered = DEFAULT_OPTIONS, {**dict(user_opts or {}), **overrides}
    opts = base.merged(layered)
    opts.validate()
    return opts


def _require_inputs(
    in_path: PathInput | Sequence[PathInput] | None,
) -> tuple[PathInput, ...]:
    if in_path is None:
        raise ConfigurationError("Input path argument is required")
    try:
        items = (
            (in_path,) if isinstance(in_path, (str, os.PathLike)) else tuple(in_path)
        )
        empty = not items or any(not os.fspath(p) for p in items)
    except TypeError as e:
        raise ConfigurationError(
            f"Input path must be a path, a glob or a sequence of them, "
            f"got {type(in_path).__name__}"
        ) from e
    if empty:
        raise ConfigurationError("Input path argument is required")
    return items


def _require_output(out_path: PathInput | None) -> PathInput:
    if out_path is None or not os.fspath(out_path):
        raise ConfigurationError("Output path argument is required")
    return out_path


class CompileSassTask:
    """
    Zero-argument build step: Sass entry point -> one inlined css bundle.

    Each call is an independent run. Failures inside the run are reported
    through `log_error` and the returned TaskResult; they are never raised.
    """

    def __init__(
        self,
        in_paths: tuple[PathInput, ...],
        out_path: PathInput,
        opts: CompileSassOptions,
    ) -> None:
        self.in_paths = in_paths
        self.out_path = out_path
        self.opts = opts
        self.__name__ = "compile_sass"

    def __repr__(self) -> str:
        return (
            f"CompileSassTask(in_paths={list(map(os.fspath, self.in_paths))!r}, "
            f"out_path={os.fspath(self.out_path)!r}, "
            f"bundle_name={self.opts.bundle_name!r}, minified={self.opts.minified})"
        )

    def stages(self, start_time: int) -> list[StreamStage]:
        opts = self.opts

        def _finished(_item: FileItem) -> None:
            opts.log(make_event(EventType.END, start_time=start_time))

        return [
            compile_sass(output_style=opts.output_style),
            rebase(RESOURCE_ROOT),
            flatten(),
            inline_resources(),
            rename(opts.bundle_name),
            dest(self.out_path),
            tap(_finished),
        ]

    def __call__(self) -> TaskResult:
        opts = self.opts
        start_time = monotonic_ns()
        opts.log(make_event(EventType.START, time_stamp=start_time))

        def _produce() -> Iterable[FileItem]:
            stream: Iterator[FileItem] = pipe(
                src(self.in_paths), *self.stages(start_time)
            )
            return opts.on_end(stream)

        result = run_with_barrier(
            _produce, started_at=start_time, log_error=opts.log_error
        )
        log.debug(
            "Task run complete",
            task=self.__name__,
            status=result.status,
            files=len(result.files),
            duration_ms=result.duration_ms,
        )
        return result

    async def run_async(self) -> TaskResult:
        """Run one pass in a worker thread so async orchestrators can await it."""
        return await asyncio.to_thread(self)


def create_compile_sass(
    in_path: PathInput | Sequence[PathInput] | None,
    out_path: PathInput | None,
    user_opts: Mapping[str, Any] | CompileSassOptions | None = None,
    **overrides: Any,
) -> CompileSassTask:
    """
    Build a task that compiles `in_path` into `out_path/<bundle_name>`.

    Raises ConfigurationError immediately for a missing input/output path or
    invalid options. No files are touched until the task is called.
    """
    in_paths = _require_inputs(in_path)
    out = _require_output(out_path)
    opts = resolve_options(user_opts, **overrides)
    return CompileSassTask(in_paths, out, opts)
