from __future__ import annotations

from decimal import Decimal, localcontext

import typer

from .analyzer import EXACT_CONTEXT, AnalyzerResult

_SECONDS_PER_MINUTE = Decimal(60)
_SUB_SECOND_PLACES = Decimal("0.001")

# Label colours: ANSI names, 256-colour indices and RGB triples (passed to `typer.style`).
_FINAL_TIME_FG = "red"
_ESTIMATED_TIME_FG = "blue"
_FINAL_SECS_FG = (0xFF, 0x5F, 0x1F)
_ESTIMATED_SECS_FG = (0x29, 0xB6, 0xF6)
_FRAMETIME_STATS_FG = "green"
_COUNT_LABELS: tuple[tuple[str, str, int], ...] = (
    ("save_count", "Save count", 93),
    ("shared_seed_set_count", "Shared seed set count", 99),
    ("button_set_count", "Button set count", 105),
    ("lgagst_min_speed_set_count", "LGAGST min speed set count", 111),
    ("reset_count", "Reset count", 117),
    ("comment_count", "Comment count", 123),
    ("change_angle_count", "Change angle count", 129),
    ("target_yaw_override_count", "Target yaw override count", 135),
)


def _plain(value: Decimal) -> str:
    return format(value, "f")


def split_minutes(seconds: Decimal) -> tuple[int, Decimal]:
    """Return `(whole minutes, remaining seconds rounded to milliseconds)`."""

    with localcontext(EXACT_CONTEXT):
        minutes, rest = divmod(seconds, _SECONDS_PER_MINUTE)
        # Only round down to milliseconds; "12" stays "12", not "12.000".
        if rest.as_tuple().exponent < -3:  # type: ignore[operator]
            rest = rest.quantize(_SUB_SECOND_PLACES)
    return int(minutes), rest


def format_duration(seconds: Decimal) -> str:
    minutes, rest = split_minutes(seconds)
    if minutes == 0:
        return f"{_plain(rest)}s"
    return f"{minutes}m {_plain(rest)}s"


def _label(text: str, fg: str | int | tuple[int, int, int], color: bool) -> str:
    if not color:
        return text
    return typer.style(text, fg=fg)


def format_analysis(result: AnalyzerResult, *, color: bool = False) -> str:
    final = result.final_time
    lines = [
        f"{_label('Final time', _FINAL_TIME_FG, color)}: "
        f"{format_duration(final.start)} ~ {format_duration(final.end)}",
        f"{_label('Estimated time', _ESTIMATED_TIME_FG, color)}: {format_duration(result.estimated_time)}",
        "",
        f"{_label('Final time secs', _FINAL_SECS_FG, color)}: {_plain(final.start)}s ~ {_plain(final.end)}s",
        f"{_label('Estimated secs', _ESTIMATED_SECS_FG, color)}: {_plain(result.estimated_time)}s",
        "",
        _label("Frametime stats", _FRAMETIME_STATS_FG, color),
    ]
    lines.extend(f"    {stats}" for stats in result.frametime_stats)
    lines.append("")
    for attr, title, fg in _COUNT_LABELS:
        lines.append(f"{_label(title, fg, color)}: {getattr(result, attr)}")
    return "\n".join(lines)
