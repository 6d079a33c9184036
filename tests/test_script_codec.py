from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from hltas_analyzer import analyze_hltas
from hltas_analyzer.script import (
    HLTAS,
    AutoActions,
    DuckTap,
    FrameBulk,
    LeaveGroundAction,
    Properties,
    Save,
    ScriptCodecError,
    decode_hltas,
    dump_hltas_file,
    encode_hltas,
    load_hltas_file,
)


def test_decode_tagged_lines() -> None:
    obj = {
        "properties": {"frametime_0ms": "0.0001"},
        "lines": [
            {"kind": "save", "name": "a"},
            {
                "kind": "frame_bulk",
                "frame_time": "0.3",
                "frame_count": 2,
                "auto_actions": {
                    "leave_ground_action": {"action": {"type": "ducktap", "zero_ms": True}, "speed": "any"},
                },
            },
            {"kind": "vectorial_strafing", "enabled": False},
        ],
    }

    hltas = decode_hltas(json.dumps(obj))

    assert hltas.properties == Properties(frametime_0ms="0.0001")
    assert hltas.lines[0] == Save(name="a")
    bulk = hltas.lines[1]
    assert isinstance(bulk, FrameBulk)
    assert bulk.is_zero_ms_ducktap is True
    assert analyze_hltas(hltas).estimated_time == Decimal("0.0002")


def test_encoded_script_carries_kind_tags() -> None:
    hltas = HLTAS(
        lines=[
            FrameBulk(
                frame_time="0.004",
                frame_count=3,
                auto_actions=AutoActions(leave_ground_action=LeaveGroundAction(action=DuckTap(zero_ms=True))),
            ),
        ]
    )

    obj = json.loads(encode_hltas(hltas))

    line = obj["lines"][0]
    assert line["kind"] == "frame_bulk"
    assert line["auto_actions"]["leave_ground_action"]["action"] == {"type": "ducktap", "zero_ms": True}
    assert decode_hltas(encode_hltas(hltas)) == hltas


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b'{"lines": [{"kind": "frame_bulk", "frame_time": "0.001", "frame_count": 0}]}',
        b'{"lines": [{"kind": "teleport"}]}',
        b'{"lines": [{"kind": "save", "name": "a", "extra": 1}]}',
        b'{"lines": [{"kind": "frame_bulk", "frame_time": "0.1", "frame_count": 1, "auto_actions": '
        b'{"leave_ground_action": {"action": {"type": "jump"}, "times": 0}}}]}',
    ],
)
def test_decode_rejects_bad_payloads(payload: bytes) -> None:
    with pytest.raises(ScriptCodecError):
        decode_hltas(payload)


def test_load_hltas_file_picks_format_by_suffix(tmp_path: Path) -> None:
    text_path = tmp_path / "run.hltas"
    text_path.write_text("version 1\nframes\n----------|------|------|0.001|-|-|10\nsave a\n", encoding="utf-8")
    json_path = tmp_path / "run.json"

    from_text = load_hltas_file(text_path)
    dump_hltas_file(json_path, from_text)
    from_json = load_hltas_file(json_path)

    assert from_json == from_text
    assert analyze_hltas(from_json).final_time.end == Decimal("0.01")


def test_load_hltas_file_accepts_bare_frame_bulks(tmp_path: Path) -> None:
    path = tmp_path / "bulks.txt"
    path.write_text("----------|------|------|0.002|-|-|5\n", encoding="utf-8")

    hltas = load_hltas_file(path)

    assert hltas.properties == Properties()
    assert analyze_hltas(hltas).final_time.end == Decimal("0.010")


def test_load_hltas_file_rejects_non_utf8_text(tmp_path: Path) -> None:
    path = tmp_path / "broken.hltas"
    path.write_bytes(b"\xff\xfe")

    with pytest.raises(ScriptCodecError, match="not valid UTF-8"):
        load_hltas_file(path)


def test_load_hltas_file_wraps_read_errors(tmp_path: Path) -> None:
    with pytest.raises(ScriptCodecError, match="cannot read script"):
        load_hltas_file(tmp_path)
