from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal

FALL_DURATION_ENV = "HLTAS_ANALYZER_FALL_DURATION"
ZERO_MS_FRAMETIME_ENV = "HLTAS_ANALYZER_ZERO_MS_FRAMETIME"

# Time to fall back onto flat ground after a duck-tap, under default gravity.
DEFAULT_FALL_DURATION = Decimal("0.201")
DEFAULT_ZERO_MS_FRAMETIME = Decimal("0.0000000001")

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)


class AnalyzerConfigError(ValueError):
    pass


def parse_decimal(text: str) -> Decimal:
    """Parse plain decimal notation exactly.

    Rejects exponents, `NaN`/`Infinity`, digit separators and surrounding
    whitespace, all of which `Decimal()` would otherwise accept.
    Raises `ValueError` on anything else.
    """

    if not isinstance(text, str) or _DECIMAL_RE.fullmatch(text) is None:
        raise ValueError(f"invalid decimal literal: {text!r}")
    return Decimal(text)


@dataclass(frozen=True, slots=True)
class AnalyzerConfig:
    fall_duration: Decimal = DEFAULT_FALL_DURATION
    default_zero_ms_frametime: Decimal = DEFAULT_ZERO_MS_FRAMETIME

    def __post_init__(self) -> None:
        if self.fall_duration < 0:
            raise AnalyzerConfigError(f"fall_duration must be non-negative, got {self.fall_duration}")
        if self.default_zero_ms_frametime < 0:
            raise AnalyzerConfigError(
                f"default_zero_ms_frametime must be non-negative, got {self.default_zero_ms_frametime}"
            )


def _env_decimal(environ: Mapping[str, str], name: str) -> Decimal | None:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return parse_decimal(raw.strip())
    except ValueError as exc:
        raise AnalyzerConfigError(f"{name} must be a decimal, got {raw!r}") from exc


def resolve_analyzer_config(
    environ: Mapping[str, str] | None = None,
    *,
    base: AnalyzerConfig | None = None,
) -> AnalyzerConfig:
    """Overlay environment overrides on `base` (default: built-in constants)."""

    env = os.environ if environ is None else environ
    config = base if base is not None else AnalyzerConfig()

    fall_duration = _env_decimal(env, FALL_DURATION_ENV)
    if fall_duration is not None:
        config = replace(config, fall_duration=fall_duration)
    zero_ms_frametime = _env_decimal(env, ZERO_MS_FRAMETIME_ENV)
    if zero_ms_frametime is not None:
        config = replace(config, default_zero_ms_frametime=zero_ms_frametime)
    return config
