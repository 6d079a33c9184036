from __future__ import annotations

from .codec import ScriptCodecError, decode_hltas, dump_hltas_file, encode_hltas, load_hltas_file
from .parser import (
    DEFAULT_HEADER,
    HltasParseError,
    hltas_with_default_header,
    parse_frame_bulk,
    parse_hltas,
    parse_hltas_or_fragment,
    parse_line,
    parse_lines,
)
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

__all__ = [
    "DEFAULT_HEADER",
    "HLTAS",
    "AutoActions",
    "Buttons",
    "Change",
    "Comment",
    "DuckTap",
    "FrameBulk",
    "HltasParseError",
    "Jump",
    "LGAGSTMinSpeed",
    "LeaveGroundAction",
    "Line",
    "Properties",
    "Reset",
    "Save",
    "ScriptCodecError",
    "Seeds",
    "SharedSeed",
    "Strafe",
    "TargetYawOverride",
    "VectorialStrafing",
    "VectorialStrafingConstraints",
    "decode_hltas",
    "dump_hltas_file",
    "encode_hltas",
    "hltas_with_default_header",
    "load_hltas_file",
    "parse_frame_bulk",
    "parse_hltas",
    "parse_hltas_or_fragment",
    "parse_line",
    "parse_lines",
]
