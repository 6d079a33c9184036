from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from .analyzer import AnalyzerResult

REPORT_VERSION = 1


def _decimal_str(value: Decimal) -> str:
    return format(value, "f")


def result_to_obj(result: AnalyzerResult) -> dict[str, Any]:
    # Decimals go out as plain-notation strings; JSON numbers would round-trip through floats.
    return {
        "v": REPORT_VERSION,
        "final_time": {
            "start": _decimal_str(result.final_time.start),
            "end": _decimal_str(result.final_time.end),
        },
        "estimated_time": _decimal_str(result.estimated_time),
        "frametime_stats": [
            {"frametime": _decimal_str(stats.frametime), "frame_count": int(stats.frame_count)}
            for stats in result.frametime_stats
        ],
        "counts": {
            "save": int(result.save_count),
            "shared_seed_set": int(result.shared_seed_set_count),
            "button_set": int(result.button_set_count),
            "lgagst_min_speed_set": int(result.lgagst_min_speed_set_count),
            "reset": int(result.reset_count),
            "comment": int(result.comment_count),
            "change_angle": int(result.change_angle_count),
            "target_yaw_override": int(result.target_yaw_override_count),
        },
        "frame_bulk_count": int(result.frame_bulk_count),
        "total_frame_count": int(result.total_frame_count),
    }


def dump_result_json(result: AnalyzerResult, *, indent: int | None = 2) -> str:
    obj = result_to_obj(result)
    if indent is None:
        return json.dumps(obj, separators=(",", ":"), sort_keys=True)
    return json.dumps(obj, indent=indent, sort_keys=True)
