from __future__ import annotations

import asyncio
import base64
import re
from pathlib import Path

import pytest
from sass_bundle import (
    CompileError,
    CompileSassOptions,
    ConfigurationError,
    EventType,
    InlineError,
    SourceError,
    WriteError,
    create_compile_sass,
)

from .conftest import PNG_BYTES, EventRecorder, write


def _squash(css: str) -> str:
    return re.sub(r"\s+", "", css).replace(";}", "}")


@pytest.mark.parametrize("in_path", [None, "", [], ["", "a.scss"], 42, [42]])
def test_missing_input_path_fails_at_construction(in_path) -> None:
    with pytest.raises(ConfigurationError, match="Input path"):
        create_compile_sass(in_path, "out")


@pytest.mark.parametrize("out_path", [None, ""])
def test_missing_output_path_fails_at_construction(out_path) -> None:
    with pytest.raises(ConfigurationError, match="Output path"):
        create_compile_sass("main.scss", out_path)


def test_construction_does_no_work(project: Path, recorder: EventRecorder) -> None:
    task = create_compile_sass("does/not/exist.scss", "out", **recorder.sinks())
    assert callable(task)
    assert recorder.events == []
    assert not (project / "out").exists()


def test_options_merge_and_validation() -> None:
    task = create_compile_sass(
        "a.scss", "out", {"bundle_name": "x.css", "minified": False}, minified=True
    )
    assert task.opts.bundle_name == "x.css"
    assert task.opts.minified is True

    # None keeps the default
    task = create_compile_sass("a.scss", "out", bundle_name=None)
    assert task.opts.bundle_name == "bundle.css"

    with pytest.raises(ConfigurationError, match="Unknown option"):
        create_compile_sass("a.scss", "out", bundleName="x.css")
    with pytest.raises(ConfigurationError, match="bundle_name"):
        create_compile_sass("a.scss", "out", bundle_name="  ")
    with pytest.raises(ConfigurationError, match="log must be callable"):
        create_compile_sass("a.scss", "out", log="print")

    base = CompileSassOptions(bundle_name="base.css")
    task = create_compile_sass("a.scss", "out", base, minified=False)
    assert task.opts.bundle_name == "base.css"
    assert task.opts.output_style == "nested"


def test_compressed_bundle(project: Path, recorder: EventRecorder) -> None:
    write(
        project / "styles" / "main.scss",
        "$brand: red;\n.a { color: $brand; }\n.b { margin: 0 auto; }\n",
    )
    task = create_compile_sass("styles/main.scss", "dist", **recorder.sinks())

    result = task()

    assert result.ok
    out = project / "dist" / "bundle.css"
    css = out.read_text(encoding="utf-8")
    assert css.strip() == ".a{color:red}.b{margin:0 auto}"
    assert [f.path for f in result.files] == [out]
    assert recorder.types() == ["start", "end"]


def test_nested_output_matches_compressed_after_whitespace(
    project: Path, recorder: EventRecorder
) -> None:
    write(
        project / "main.scss",
        ".nav {\n  ul { margin: 0; padding: 0; }\n  a { color: blue; }\n}\n",
    )
    create_compile_sass("main.scss", "min", **recorder.sinks())()
    create_compile_sass("main.scss", "full", minified=False, **recorder.sinks())()

    compressed = (project / "min" / "bundle.css").read_text()
    nested = (project / "full" / "bundle.css").read_text()

    assert "\n  " in nested
    assert nested != compressed
    assert _squash(nested) == _squash(compressed)


def test_url_resource_is_inlined_as_base64(
    project: Path, recorder: EventRecorder
) -> None:
    write(project / "img" / "logo.png", PNG_BYTES)
    write(
        project / "styles" / "site" / "main.scss",
        '.logo { background: url("img/logo.png") no-repeat; }\n'
        '.ext { background: url("https://example.com/a.png"); }\n',
    )

    result = create_compile_sass(
        "styles/site/main.scss", "dist", **recorder.sinks()
    )()

    assert result.ok
    css = (project / "dist" / "bundle.css").read_text()
    m = re.search(r'url\("data:image/png;base64,([A-Za-z0-9+/=]+)"\)', css)
    assert m is not None
    assert base64.b64decode(m.group(1)) == PNG_BYTES
    assert "img/logo.png" not in css
    assert 'url("https://example.com/a.png")' in css


def test_commented_url_survives_nested_output(
    project: Path, recorder: EventRecorder
) -> None:
    write(project / "main.scss", "/* old: url(gone.png) */\n.a { color: red; }\n")

    result = create_compile_sass(
        "main.scss", "dist", minified=False, **recorder.sinks()
    )()

    assert result.ok, result.error
    assert recorder.types() == ["start", "end"]
    assert "url(gone.png)" in (project / "dist" / "bundle.css").read_text()


def test_compile_error_is_reported_not_raised(
    project: Path, recorder: EventRecorder
) -> None:
    write(project / "main.scss", ".a { color: red;\n")

    result = create_compile_sass("main.scss", "dist", **recorder.sinks())()

    assert not result.ok
    errors = recorder.of(EventType.ERROR)
    assert len(errors) == 1
    assert errors[0].message == "Sass: error"
    assert isinstance(errors[0].err, CompileError)
    assert errors[0].err.stage == "compile"
    assert recorder.of(EventType.END) == []
    assert result.error is not None and result.error.exc_type == "CompileError"
    assert not (project / "dist").exists()


def test_missing_resource_aborts_run(project: Path, recorder: EventRecorder) -> None:
    write(project / "main.scss", '.a { background: url("img/missing.png"); }\n')

    result = create_compile_sass("main.scss", "dist", **recorder.sinks())()

    assert not result.ok
    [err] = recorder.of(EventType.ERROR)
    assert isinstance(err.err, InlineError)
    assert not (project / "dist" / "bundle.css").exists()


def test_missing_singular_input_is_reported(
    project: Path, recorder: EventRecorder
) -> None:
    result = create_compile_sass("nope.scss", "dist", **recorder.sinks())()

    assert not result.ok
    assert recorder.types() == ["start", "error"]
    assert isinstance(recorder.events[1].err, SourceError)


def test_write_failure_is_reported(project: Path, recorder: EventRecorder) -> None:
    write(project / "main.scss", ".a { color: red; }\n")
    write(project / "dist", "not a directory")

    result = create_compile_sass("main.scss", "dist", **recorder.sinks())()

    assert not result.ok
    [err] = recorder.of(EventType.ERROR)
    assert isinstance(err.err, WriteError)


def test_unmatched_glob_is_an_empty_successful_run(
    project: Path, recorder: EventRecorder
) -> None:
    result = create_compile_sass("styles/**/*.scss", "dist", **recorder.sinks())()

    assert result.ok
    assert result.files == []
    assert recorder.types() == ["start"]


def test_sequential_runs_pair_start_and_end(
    project: Path, recorder: EventRecorder
) -> None:
    write(project / "main.scss", ".a { color: red; }\n")
    task = create_compile_sass("main.scss", "dist", **recorder.sinks())

    task()
    task()

    assert recorder.types() == ["start", "end", "start", "end"]
    first_start, first_end, second_start, second_end = recorder.events
    assert first_end.start_time == first_start.time_stamp
    assert second_end.start_time == second_start.time_stamp
    assert second_start.time_stamp > first_start.time_stamp
    assert first_end.time_stamp >= first_start.time_stamp


def test_bundle_name_overrides_source_name(
    project: Path, recorder: EventRecorder
) -> None:
    write(project / "styles" / "theme.scss", ".a { color: red; }\n")

    create_compile_sass(
        "styles/theme.scss", "dist", bundle_name="app.min.css", **recorder.sinks()
    )()

    assert sorted(p.name for p in (project / "dist").iterdir()) == ["app.min.css"]


def test_partials_are_skipped_and_imported(
    project: Path, recorder: EventRecorder
) -> None:
    write(project / "styles" / "_vars.scss", "$c: green;\n")
    write(project / "styles" / "main.scss", '@import "vars";\n.a { color: $c; }\n')

    result = create_compile_sass("styles/*.scss", "dist", **recorder.sinks())()

    assert result.ok
    assert len(result.files) == 1
    assert (project / "dist" / "bundle.css").read_text().strip() == ".a{color:green}"
    assert len(recorder.of(EventType.END)) == 1


def test_on_end_receives_written_files(project: Path, recorder: EventRecorder) -> None:
    write(project / "main.scss", ".a { color: red; }\n")
    seen: list[Path] = []

    def on_end(stream):
        for item in stream:
            seen.append(item.path)
            yield item

    result = create_compile_sass(
        "main.scss", "dist", on_end=on_end, **recorder.sinks()
    )()

    assert result.ok
    assert seen == [project / "dist" / "bundle.css"]


def test_on_end_failure_goes_through_error_sink(
    project: Path, recorder: EventRecorder
) -> None:
    write(project / "main.scss", ".a { color: red; }\n")

    def on_end(stream):
        for _ in stream:
            raise RuntimeError("reload failed")
        yield from ()

    result = create_compile_sass(
        "main.scss", "dist", on_end=on_end, **recorder.sinks()
    )()

    assert not result.ok
    assert recorder.types() == ["start", "end", "error"]
    assert str(recorder.events[-1].err) == "reload failed"


def test_run_async(project: Path, recorder: EventRecorder) -> None:
    write(project / "main.scss", ".a { color: red; }\n")
    task = create_compile_sass("main.scss", "dist", **recorder.sinks())

    result = asyncio.run(task.run_async())

    assert result.ok
    assert (project / "dist" / "bundle.css").is_file()
