"""Frame bulk analysis of HLTAS scripts.

A single forward pass over the typed script lines produces:

  - the final time range: `start` assumes every zero-ms duck-tap frame bulk
    costs nothing, `end` assumes none of them save any time;
  - an estimated time, simulating zero-ms duck-taps on flat ground;
  - a frametime histogram;
  - per-directive line counts.

All time arithmetic is exact decimal arithmetic. The pass does no I/O.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, localcontext
from typing import assert_never

from .config import AnalyzerConfig, parse_decimal
from .script.types import (
    HLTAS,
    Buttons,
    Change,
    Comment,
    FrameBulk,
    LGAGSTMinSpeed,
    Line,
    Reset,
    Save,
    SharedSeed,
    TargetYawOverride,
    VectorialStrafing,
    VectorialStrafingConstraints,
)

# Additions and integer multiplications never round at this precision.
EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)

_ZERO = Decimal(0)


class AnalyzerError(ValueError):
    pass


class FrametimeParseError(AnalyzerError):
    def __init__(self, text: str, *, line_index: int | None = None) -> None:
        self.text = text
        self.line_index = line_index
        where = f" at line index {line_index}" if line_index is not None else ""
        super().__init__(f"failed to parse frametime {text!r} as a decimal{where}")


class ZeroMsFrametimeParseError(AnalyzerError):
    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"failed to parse 0ms frametime {text!r} as a decimal")


@dataclass(frozen=True, slots=True)
class FinalTime:
    start: Decimal
    end: Decimal


@dataclass(frozen=True, slots=True)
class FrametimeStats:
    frametime: Decimal
    frame_count: int

    def __str__(self) -> str:
        return f"{self.frametime:f}s for {self.frame_count} frames"


@dataclass(frozen=True, slots=True)
class AnalyzerResult:
    final_time: FinalTime
    # Assumes zero-ms duck-tap frame bulks land on flat ground with default gravity.
    estimated_time: Decimal
    # Sorted ascending by frametime.
    frametime_stats: tuple[FrametimeStats, ...]
    save_count: int = 0
    shared_seed_set_count: int = 0
    # Includes button mapping resets.
    button_set_count: int = 0
    lgagst_min_speed_set_count: int = 0
    reset_count: int = 0
    comment_count: int = 0
    change_angle_count: int = 0
    target_yaw_override_count: int = 0
    frame_bulk_count: int = 0

    @property
    def total_frame_count(self) -> int:
        return sum(stats.frame_count for stats in self.frametime_stats)

    def __str__(self) -> str:
        from .render import format_analysis

        return format_analysis(self)


def _canonical_frametime(value: Decimal) -> Decimal:
    # "0.0030" and "0.003" must key (and print) the same.
    if not value:
        return _ZERO
    if value == value.to_integral_value():
        return value.quantize(Decimal(1))
    return value.normalize()


def parse_frametime(text: str, *, line_index: int | None = None) -> Decimal:
    try:
        value = parse_decimal(text)
    except ValueError as exc:
        raise FrametimeParseError(text, line_index=line_index) from exc
    if value < 0:
        raise FrametimeParseError(text, line_index=line_index)
    return value


def resolve_zero_ms_frametime(
    frametime_0ms: str | None,
    *,
    override: Decimal | None = None,
    config: AnalyzerConfig,
) -> Decimal:
    """Pick the frametime of a zero-ms frame.

    An explicit `override` wins, then the script's `frametime0ms` property,
    then the configured default.
    """

    if override is not None:
        return override
    if frametime_0ms is None:
        return config.default_zero_ms_frametime
    try:
        value = parse_decimal(frametime_0ms)
    except ValueError as exc:
        raise ZeroMsFrametimeParseError(frametime_0ms) from exc
    if value < 0:
        raise ZeroMsFrametimeParseError(frametime_0ms)
    return value


def simulate_zero_ms_ducktap(
    frame_time: Decimal,
    frame_count: int,
    counter: Decimal,
    *,
    zero_ms_frametime: Decimal,
    fall_duration: Decimal,
) -> tuple[Decimal, Decimal]:
    """Time one zero-ms duck-tap frame bulk, frame by frame.

    `counter` is the airborne time carried over from earlier duck-tap frames.
    Once it exceeds `fall_duration` the player has landed, so that frame costs
    `zero_ms_frametime` and the counter restarts.

    Returns `(bulk_time, counter)`.
    """

    bulk_time = _ZERO
    with localcontext(EXACT_CONTEXT):
        for _ in range(int(frame_count)):
            counter += frame_time
            if counter > fall_duration:
                counter = _ZERO
                bulk_time += zero_ms_frametime
            else:
                bulk_time += frame_time
    return bulk_time, counter


def analyze_lines(
    lines: Iterable[Line],
    *,
    frametime_0ms: str | None = None,
    zero_ms_frametime: Decimal | None = None,
    config: AnalyzerConfig | None = None,
) -> AnalyzerResult:
    if config is None:
        config = AnalyzerConfig()
    zero_ms = resolve_zero_ms_frametime(frametime_0ms, override=zero_ms_frametime, config=config)

    start = _ZERO
    end = _ZERO
    estimated = _ZERO
    zero_ms_counter = _ZERO
    histogram: dict[Decimal, int] = {}
    counts: Counter[str] = Counter()

    with localcontext(EXACT_CONTEXT):
        for line_index, line in enumerate(lines):
            match line:
                case FrameBulk():
                    frame_time = parse_frametime(line.frame_time, line_index=line_index)
                    frame_count = int(line.frame_count)
                    fb_time = frame_time * frame_count

                    key = _canonical_frametime(frame_time)
                    histogram[key] = histogram.get(key, 0) + frame_count

                    zero_ms_ducktap = line.is_zero_ms_ducktap
                    if not zero_ms_ducktap:
                        start += fb_time
                    end += fb_time

                    if zero_ms_ducktap:
                        bulk_time, zero_ms_counter = simulate_zero_ms_ducktap(
                            frame_time,
                            frame_count,
                            zero_ms_counter,
                            zero_ms_frametime=zero_ms,
                            fall_duration=config.fall_duration,
                        )
                        estimated += bulk_time
                    else:
                        estimated += fb_time
                    counts["frame_bulk"] += 1
                case Save():
                    counts["save"] += 1
                case SharedSeed():
                    counts["shared_seed_set"] += 1
                case Buttons():
                    counts["button_set"] += 1
                case LGAGSTMinSpeed():
                    counts["lgagst_min_speed_set"] += 1
                case Reset():
                    counts["reset"] += 1
                case Comment():
                    counts["comment"] += 1
                case Change():
                    counts["change_angle"] += 1
                case TargetYawOverride():
                    counts["target_yaw_override"] += 1
                case VectorialStrafing() | VectorialStrafingConstraints():
                    pass
                case _:
                    assert_never(line)

    frametime_stats = tuple(
        FrametimeStats(frametime=frametime, frame_count=frame_count)
        for frametime, frame_count in sorted(histogram.items())
    )
    return AnalyzerResult(
        final_time=FinalTime(start=start, end=end),
        estimated_time=estimated,
        frametime_stats=frametime_stats,
        save_count=counts["save"],
        shared_seed_set_count=counts["shared_seed_set"],
        button_set_count=counts["button_set"],
        lgagst_min_speed_set_count=counts["lgagst_min_speed_set"],
        reset_count=counts["reset"],
        comment_count=counts["comment"],
        change_angle_count=counts["change_angle"],
        target_yaw_override_count=counts["target_yaw_override"],
        frame_bulk_count=counts["frame_bulk"],
    )


def analyze_hltas(
    hltas: HLTAS,
    *,
    zero_ms_frametime: Decimal | None = None,
    config: AnalyzerConfig | None = None,
) -> AnalyzerResult:
    """Analyze a whole script.

    Raises `ZeroMsFrametimeParseError` before the pass if the `frametime0ms`
    property is not a decimal, and `FrametimeParseError` on the first frame
    bulk whose frametime is not one. No partial result is returned.
    """

    return analyze_lines(
        hltas.lines,
        frametime_0ms=hltas.properties.frametime_0ms,
        zero_ms_frametime=zero_ms_frametime,
        config=config,
    )
