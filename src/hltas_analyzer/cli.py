from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import typer

from .analyzer import AnalyzerError, AnalyzerResult, analyze_hltas
from .config import AnalyzerConfig, AnalyzerConfigError, parse_decimal, resolve_analyzer_config
from .debug_log import close_debug_log, debug_log, init_debug_log, resolve_debug_log_path
from .render import format_analysis
from .report import dump_result_json
from .script import HLTAS, HltasParseError, ScriptCodecError, load_hltas_file, parse_hltas_or_fragment

app = typer.Typer(add_completion=False, help="Estimate playback time and frame statistics of HLTAS scripts.")

_STDIN_PATH = "-"


def _decimal_option(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        parsed = parse_decimal(value)
    except ValueError as exc:
        raise typer.BadParameter(f"not a decimal: {value!r}") from exc
    if parsed < 0:
        raise typer.BadParameter(f"must not be negative: {value!r}")
    return value


def _build_config(fall_duration: str | None) -> AnalyzerConfig:
    try:
        config = resolve_analyzer_config()
        if fall_duration is not None:
            config = replace(config, fall_duration=parse_decimal(fall_duration))
    except AnalyzerConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    return config


def _load_script(script: Path) -> HLTAS:
    if str(script) == _STDIN_PATH:
        try:
            text = sys.stdin.read()
        except UnicodeDecodeError as exc:
            raise ScriptCodecError(f"stdin is not valid text: {exc.reason}") from exc
        return parse_hltas_or_fragment(text)
    if not script.is_file():
        typer.echo(f"script not found: {script}", err=True)
        raise typer.Exit(code=1)
    return load_hltas_file(script)


def _analyze(hltas: HLTAS, *, config: AnalyzerConfig, zero_ms_frametime: str | None) -> AnalyzerResult:
    override = parse_decimal(zero_ms_frametime) if zero_ms_frametime is not None else None
    debug_log("analysis_begin", lines=len(hltas.lines), fall_duration=config.fall_duration)
    result = analyze_hltas(hltas, zero_ms_frametime=override, config=config)
    debug_log(
        "analysis_done",
        frame_bulks=result.frame_bulk_count,
        total_frames=result.total_frame_count,
        final_start=result.final_time.start,
        final_end=result.final_time.end,
        estimated=result.estimated_time,
    )
    return result


def _emit(result: AnalyzerResult, *, json_output: bool, color: bool | None) -> None:
    if json_output:
        typer.echo(dump_result_json(result))
        return
    use_color = sys.stdout.isatty() if color is None else bool(color)
    typer.echo(format_analysis(result, color=use_color))


@app.command("analyze")
def cmd_analyze(
    script: Path = typer.Argument(..., help="script path (.hltas text, or .json typed lines); '-' reads stdin"),
    json_output: bool = typer.Option(False, "--json", help="print the analysis as JSON"),
    color: bool | None = typer.Option(None, "--color/--no-color", help="colour labels (default: when stdout is a tty)"),
    fall_duration: str | None = typer.Option(
        None,
        "--fall-duration",
        callback=_decimal_option,
        help="seconds airborne before a zero-ms duck-tap lands (default: 0.201, or HLTAS_ANALYZER_FALL_DURATION)",
    ),
    zero_ms_frametime: str | None = typer.Option(
        None,
        "--zero-ms-frametime",
        callback=_decimal_option,
        help="frametime of a zero-ms frame; overrides the script's frametime0ms property",
    ),
    trace_log: Path | None = typer.Option(
        None,
        "--trace-log",
        help="append trace events to this file (default: HLTAS_ANALYZER_TRACE_LOG)",
    ),
) -> None:
    """Analyze one script and print its time estimate and statistics."""
    config = _build_config(fall_duration)
    log_path = resolve_debug_log_path(trace_log)
    if log_path is not None:
        init_debug_log(log_path, command="analyze")
    try:
        debug_log("script_load", path=script)
        try:
            hltas = _load_script(script)
            result = _analyze(hltas, config=config, zero_ms_frametime=zero_ms_frametime)
        except (HltasParseError, ScriptCodecError, AnalyzerError) as exc:
            debug_log("analysis_failed", error=type(exc).__name__, message=exc)
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
        _emit(result, json_output=json_output, color=color)
    finally:
        close_debug_log()


@app.command("repl")
def cmd_repl(
    json_output: bool = typer.Option(False, "--json", help="print each analysis as JSON"),
    color: bool | None = typer.Option(None, "--color/--no-color", help="colour labels (default: when stdout is a tty)"),
    fall_duration: str | None = typer.Option(
        None,
        "--fall-duration",
        callback=_decimal_option,
        help="seconds airborne before a zero-ms duck-tap lands (default: 0.201, or HLTAS_ANALYZER_FALL_DURATION)",
    ),
    zero_ms_frametime: str | None = typer.Option(
        None,
        "--zero-ms-frametime",
        callback=_decimal_option,
        help="frametime of a zero-ms frame; overrides the script's frametime0ms property",
    ),
    trace_log: Path | None = typer.Option(
        None,
        "--trace-log",
        help="append trace events to this file (default: HLTAS_ANALYZER_TRACE_LOG)",
    ),
) -> None:
    """Paste a script (or bare frame bulks), end it with EOF, get the analysis; repeat.

    EOF is ctrl+D on Linux/macOS and ctrl+Z on Windows. Errors are printed and
    the loop waits for the next script. An empty read ends the session.
    """
    config = _build_config(fall_duration)
    log_path = resolve_debug_log_path(trace_log)
    if log_path is not None:
        init_debug_log(log_path, command="repl")
    try:
        while True:
            chunk = sys.stdin.read()
            if not chunk:
                break
            if not chunk.strip():
                continue
            try:
                hltas = parse_hltas_or_fragment(chunk)
                result = _analyze(hltas, config=config, zero_ms_frametime=zero_ms_frametime)
            except (HltasParseError, AnalyzerError) as exc:
                debug_log("analysis_failed", error=type(exc).__name__, message=exc)
                typer.echo(str(exc), err=True)
                continue
            _emit(result, json_output=json_output, color=color)
            typer.echo("")
    finally:
        close_debug_log()


def main(argv: list[str] | None = None) -> None:
    app(prog_name="hltas-analyzer", args=argv)


if __name__ == "__main__":
    main()
