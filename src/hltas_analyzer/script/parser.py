"""Reader for the HLTAS v1 text layout.

    version 1
    frametime0ms 0.0000000001
    frames
    s03lj-----|f-----|------|0.001|-|-|100
    save route_a
    s03--D0---|f-----|------|0.004|-|-|50|echo hi

Frame bulks are `auto|movement|action|frametime|yaw|pitch|count[|command]`.
Frametimes are kept as text; whether they are valid decimals is decided by
the analyzer.
"""

from __future__ import annotations

import re

from .types import (
    HLTAS,
    AutoActions,
    Buttons,
    Change,
    Comment,
    DuckTap,
    FrameBulk,
    Jump,
    LeaveGroundAction,
    LGAGSTMinSpeed,
    Line,
    Properties,
    Reset,
    Save,
    Seeds,
    SharedSeed,
    Strafe,
    TargetYawOverride,
    VectorialStrafing,
    VectorialStrafingConstraints,
)

SUPPORTED_VERSION = 1
DEFAULT_HEADER = f"version {SUPPORTED_VERSION}\nframes\n"

_FRAMES_MARKER = "frames"
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_ASCII_DIGITS = "0123456789"
_FRAME_BULK_MIN_FIELDS = 7
_AUTO_FLAGS = {
    "b": "jump_bug",
    "c": "duck_before_collision",
    "g": "duck_before_ground",
    "w": "duck_when_jump",
}


class HltasParseError(ValueError):
    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def _parse_int(text: str, *, what: str, line_number: int) -> int:
    if _INT_RE.fullmatch(text) is None:
        raise HltasParseError(f"{what} must be an integer, got {text!r}", line_number=line_number)
    return int(text)


def _take_repeat_count(field: str, idx: int, *, line_number: int) -> tuple[int | None, int]:
    end = idx
    while end < len(field) and field[end] in _ASCII_DIGITS:
        end += 1
    if end == idx:
        return None, idx
    times = int(field[idx:end])
    if times < 1:
        raise HltasParseError(f"leave-ground repeat count must be positive: {field!r}", line_number=line_number)
    return times, end


def _parse_auto_actions(field: str, *, line_number: int) -> AutoActions:
    strafe: Strafe | None = None
    lgagst = False
    leave_ground: LeaveGroundAction | None = None
    flags: dict[str, bool] = {}

    idx = 0
    while idx < len(field):
        ch = field[idx]
        idx += 1
        if ch == "-":
            continue
        if ch == "s":
            digits = field[idx : idx + 2]
            if len(digits) != 2 or not all(digit in _ASCII_DIGITS for digit in digits):
                raise HltasParseError(f"strafe needs a type and a direction digit: {field!r}", line_number=line_number)
            strafe = Strafe(type=int(digits[0]), dir=int(digits[1]))
            idx += 2
        elif ch in "lL":
            lgagst = True
        elif ch in "jJdD":
            if leave_ground is not None:
                raise HltasParseError(f"more than one leave-ground action: {field!r}", line_number=line_number)
            speed = "optimal" if ch.isupper() else "any"
            if ch in "jJ":
                action: Jump | DuckTap = Jump()
            else:
                # A leading "0" marks a zero-ms duck-tap, so repeat counts never start with 0.
                zero_ms = field[idx : idx + 1] == "0"
                if zero_ms:
                    idx += 1
                action = DuckTap(zero_ms=zero_ms)
            times, idx = _take_repeat_count(field, idx, line_number=line_number)
            leave_ground = LeaveGroundAction(action=action, speed=speed, times=times)
        elif ch.lower() in _AUTO_FLAGS:
            flags[_AUTO_FLAGS[ch.lower()]] = True
        else:
            raise HltasParseError(f"unknown auto action {ch!r} in {field!r}", line_number=line_number)

    return AutoActions(strafe=strafe, lgagst=lgagst, leave_ground_action=leave_ground, **flags)


def _optional(field: str) -> str | None:
    field = field.strip()
    if not field or field == "-":
        return None
    return field


def parse_frame_bulk(text: str, *, line_number: int = 0) -> FrameBulk:
    fields = text.split("|")
    if len(fields) < _FRAME_BULK_MIN_FIELDS:
        raise HltasParseError(
            f"frame bulk needs {_FRAME_BULK_MIN_FIELDS} '|'-separated fields, got {len(fields)}",
            line_number=line_number,
        )
    auto, movement, action, frame_time, yaw, pitch, count = (field.strip() for field in fields[:7])
    command = "|".join(fields[7:]) if len(fields) > _FRAME_BULK_MIN_FIELDS else None

    if not frame_time:
        raise HltasParseError("frame bulk is missing its frametime", line_number=line_number)
    frame_count = _parse_int(count, what="frame count", line_number=line_number)
    if frame_count < 1:
        raise HltasParseError(f"frame count must be positive, got {frame_count}", line_number=line_number)

    return FrameBulk(
        frame_time=frame_time,
        frame_count=frame_count,
        auto_actions=_parse_auto_actions(auto, line_number=line_number),
        movement_keys=movement.replace("-", ""),
        action_keys=action.replace("-", ""),
        yaw=_optional(yaw),
        pitch=_optional(pitch),
        console_command=command.strip() if command is not None and command.strip() else None,
    )


def _parse_change(args: list[str], *, line_number: int) -> Change:
    # change <target> to <value> over <seconds> s
    if len(args) != 6 or args[1] != "to" or args[3] != "over" or args[5] != "s":
        raise HltasParseError(
            "expected 'change <target> to <value> over <seconds> s'",
            line_number=line_number,
        )
    return Change(target=args[0], final_value=args[2], over=args[4])


def parse_line(text: str, *, line_number: int = 0) -> Line:
    stripped = text.strip()
    if stripped.startswith("//"):
        return Comment(text=stripped[2:])
    if "|" in stripped:
        return parse_frame_bulk(stripped, line_number=line_number)

    keyword, _, rest = stripped.partition(" ")
    args = rest.split()
    if keyword == "save":
        return Save(name=rest.strip())
    if keyword == "seed":
        if len(args) != 1:
            raise HltasParseError("expected 'seed <shared seed>'", line_number=line_number)
        return SharedSeed(seed=_parse_int(args[0], what="seed", line_number=line_number))
    if keyword == "buttons":
        if not args:
            return Buttons(buttons=None)
        if len(args) != 4:
            raise HltasParseError("expected 'buttons' or 'buttons <a> <b> <c> <d>'", line_number=line_number)
        a, b, c, d = (_parse_int(arg, what="button", line_number=line_number) for arg in args)
        return Buttons(buttons=(a, b, c, d))
    if keyword == "lgagstminspeed":
        if len(args) != 1:
            raise HltasParseError("expected 'lgagstminspeed <speed>'", line_number=line_number)
        return LGAGSTMinSpeed(speed=args[0])
    if keyword == "reset":
        if len(args) != 1:
            raise HltasParseError("expected 'reset <non-shared seed>'", line_number=line_number)
        return Reset(non_shared_seed=_parse_int(args[0], what="seed", line_number=line_number))
    if keyword == "vectorial_strafing":
        if args not in (["on"], ["off"]):
            raise HltasParseError("expected 'vectorial_strafing on|off'", line_number=line_number)
        return VectorialStrafing(enabled=args[0] == "on")
    if keyword == "vectorial_strafing_constraints":
        return VectorialStrafingConstraints(constraints=rest.strip())
    if keyword == "change":
        return _parse_change(args, line_number=line_number)
    if keyword == "target_yaw_override":
        if not args:
            raise HltasParseError("target_yaw_override needs at least one yaw", line_number=line_number)
        return TargetYawOverride(yaws=tuple(args))
    raise HltasParseError(f"unknown line {stripped!r}", line_number=line_number)


def _parse_properties(entries: list[tuple[int, str]]) -> Properties:
    values: dict[str, object] = {}
    for line_number, text in entries:
        key, _, value = text.partition(" ")
        value = value.strip()
        if key == "demo":
            values["demo"] = value
        elif key == "frametime0ms":
            values["frametime_0ms"] = value
        elif key == "seeds":
            parts = value.split()
            if len(parts) != 2:
                raise HltasParseError("expected 'seeds <shared> <non-shared>'", line_number=line_number)
            shared, non_shared = (_parse_int(part, what="seed", line_number=line_number) for part in parts)
            values["seeds"] = Seeds(shared=shared, non_shared=non_shared)
        elif key == "hlstrafe_version":
            values["hlstrafe_version"] = _parse_int(value, what="hlstrafe_version", line_number=line_number)
        elif key == "load_command":
            values["load_command"] = value
        else:
            raise HltasParseError(f"unknown property {key!r}", line_number=line_number)
    return Properties(**values)  # type: ignore[arg-type]


def _numbered_rows(text: str) -> list[tuple[int, str]]:
    rows = [(idx + 1, raw.strip()) for idx, raw in enumerate(text.splitlines())]
    return [(line_number, row) for line_number, row in rows if row]


def parse_lines(text: str) -> list[Line]:
    """Parse a headerless list of script lines (frame bulks and directives)."""

    return [parse_line(row, line_number=line_number) for line_number, row in _numbered_rows(text)]


def parse_hltas(text: str) -> HLTAS:
    rows = _numbered_rows(text)
    if not rows:
        raise HltasParseError("empty script")

    first_number, first = rows[0]
    keyword, _, version = first.partition(" ")
    if keyword != "version":
        raise HltasParseError("script must start with 'version <n>'", line_number=first_number)
    if _parse_int(version.strip(), what="version", line_number=first_number) != SUPPORTED_VERSION:
        raise HltasParseError(f"unsupported version {version.strip()!r}", line_number=first_number)

    header: list[tuple[int, str]] = []
    body_start: int | None = None
    for idx, (line_number, row) in enumerate(rows[1:], start=1):
        if row == _FRAMES_MARKER:
            body_start = idx + 1
            break
        header.append((line_number, row))
    if body_start is None:
        raise HltasParseError(f"missing '{_FRAMES_MARKER}' section")

    properties = _parse_properties(header)
    lines = [parse_line(row, line_number=line_number) for line_number, row in rows[body_start:]]
    return HLTAS(properties=properties, lines=lines)


def hltas_with_default_header(fragment: str) -> str:
    """Turn a bare list of script lines into a full script."""

    return DEFAULT_HEADER + fragment


def parse_hltas_or_fragment(text: str) -> HLTAS:
    """Parse a full script, or a bare list of lines under the default header.

    Text that starts with a `version` line is always treated as a full script.
    """

    rows = _numbered_rows(text)
    if rows and rows[0][1].partition(" ")[0] == "version":
        return parse_hltas(text)
    return HLTAS(lines=parse_lines(text))
