from __future__ import annotations

from typing import Annotated, Literal, TypeAlias

import msgspec

LeaveGroundSpeed: TypeAlias = Literal["any", "optimal"]
FrameCount: TypeAlias = Annotated[int, msgspec.Meta(ge=1)]
RepeatCount: TypeAlias = Annotated[int, msgspec.Meta(ge=1)]


class Seeds(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    shared: int
    non_shared: int


class Properties(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    demo: str | None = None
    # Kept as text; the analyzer parses it so a bad value surfaces as an analysis error.
    frametime_0ms: str | None = None
    seeds: Seeds | None = None
    hlstrafe_version: int | None = None
    load_command: str | None = None


class Jump(msgspec.Struct, frozen=True, tag_field="type", tag="jump", forbid_unknown_fields=True):
    pass


class DuckTap(msgspec.Struct, frozen=True, tag_field="type", tag="ducktap", forbid_unknown_fields=True):
    zero_ms: bool = False


LeaveGroundActionType: TypeAlias = Jump | DuckTap


class LeaveGroundAction(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    action: LeaveGroundActionType
    speed: LeaveGroundSpeed = "any"
    # None: repeat for as long as the frame bulk lasts.
    times: RepeatCount | None = None


class Strafe(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    type: int
    dir: int


class AutoActions(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    strafe: Strafe | None = None
    lgagst: bool = False
    leave_ground_action: LeaveGroundAction | None = None
    jump_bug: bool = False
    duck_before_collision: bool = False
    duck_before_ground: bool = False
    duck_when_jump: bool = False


class FrameBulk(msgspec.Struct, frozen=True, tag_field="kind", tag="frame_bulk", forbid_unknown_fields=True):
    frame_time: str
    frame_count: FrameCount
    auto_actions: AutoActions = msgspec.field(default_factory=AutoActions)
    movement_keys: str = ""
    action_keys: str = ""
    yaw: str | None = None
    pitch: str | None = None
    console_command: str | None = None

    @property
    def is_zero_ms_ducktap(self) -> bool:
        action = self.auto_actions.leave_ground_action
        if action is None:
            return False
        if not isinstance(action.action, DuckTap):
            return False
        return bool(action.action.zero_ms)


class Save(msgspec.Struct, frozen=True, tag_field="kind", tag="save", forbid_unknown_fields=True):
    name: str = ""


class SharedSeed(msgspec.Struct, frozen=True, tag_field="kind", tag="shared_seed", forbid_unknown_fields=True):
    seed: int = 0


class Buttons(msgspec.Struct, frozen=True, tag_field="kind", tag="buttons", forbid_unknown_fields=True):
    # None resets the strafing button mapping.
    buttons: tuple[int, int, int, int] | None = None


class LGAGSTMinSpeed(msgspec.Struct, frozen=True, tag_field="kind", tag="lgagst_min_speed", forbid_unknown_fields=True):
    speed: str = "0"


class Reset(msgspec.Struct, frozen=True, tag_field="kind", tag="reset", forbid_unknown_fields=True):
    non_shared_seed: int = 0


class Comment(msgspec.Struct, frozen=True, tag_field="kind", tag="comment", forbid_unknown_fields=True):
    text: str = ""


class VectorialStrafing(msgspec.Struct, frozen=True, tag_field="kind", tag="vectorial_strafing", forbid_unknown_fields=True):
    enabled: bool = True


class VectorialStrafingConstraints(
    msgspec.Struct,
    frozen=True,
    tag_field="kind",
    tag="vectorial_strafing_constraints",
    forbid_unknown_fields=True,
):
    constraints: str = ""


class Change(msgspec.Struct, frozen=True, tag_field="kind", tag="change", forbid_unknown_fields=True):
    target: str
    final_value: str
    over: str


class TargetYawOverride(msgspec.Struct, frozen=True, tag_field="kind", tag="target_yaw_override", forbid_unknown_fields=True):
    yaws: tuple[str, ...] = ()


Line: TypeAlias = (
    FrameBulk
    | Save
    | SharedSeed
    | Buttons
    | LGAGSTMinSpeed
    | Reset
    | Comment
    | VectorialStrafing
    | VectorialStrafingConstraints
    | Change
    | TargetYawOverride
)


class HLTAS(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    properties: Properties = msgspec.field(default_factory=Properties)
    lines: list[Line] = msgspec.field(default_factory=list)
