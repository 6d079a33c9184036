from __future__ import annotations

from pathlib import Path

import msgspec

from .parser import parse_hltas_or_fragment
from .types import HLTAS

_HLTAS_DECODER = msgspec.json.Decoder(type=HLTAS)
_JSON_SUFFIXES = (".json",)


class ScriptCodecError(ValueError):
    pass


def encode_hltas(hltas: HLTAS) -> bytes:
    return msgspec.json.encode(hltas)


def decode_hltas(data: bytes | str) -> HLTAS:
    """Decode the JSON form of a typed script.

    Lines are objects tagged by `kind`, e.g.
    `{"kind": "frame_bulk", "frame_time": "0.001", "frame_count": 10}`.
    """

    try:
        return _HLTAS_DECODER.decode(data)
    except msgspec.DecodeError as exc:
        raise ScriptCodecError(f"invalid script JSON: {exc}") from exc


def load_hltas_file(path: Path) -> HLTAS:
    """Load a script from disk: `.json` via the typed codec, anything else as HLTAS text."""

    path = Path(path)
    try:
        if path.suffix.lower() in _JSON_SUFFIXES:
            return decode_hltas(path.read_bytes())
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ScriptCodecError(f"script is not valid UTF-8: {path} (byte offset {exc.start})") from exc
    except OSError as exc:
        raise ScriptCodecError(f"cannot read script {path}: {exc.strerror or exc}") from exc
    return parse_hltas_or_fragment(text)


def dump_hltas_file(path: Path, hltas: HLTAS) -> None:
    path = Path(path)
    path.write_bytes(encode_hltas(hltas))
