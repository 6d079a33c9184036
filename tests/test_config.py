from __future__ import annotations

from decimal import Decimal

import pytest

from hltas_analyzer.config import (
    DEFAULT_FALL_DURATION,
    DEFAULT_ZERO_MS_FRAMETIME,
    FALL_DURATION_ENV,
    ZERO_MS_FRAMETIME_ENV,
    AnalyzerConfig,
    AnalyzerConfigError,
    parse_decimal,
    resolve_analyzer_config,
)


def test_defaults() -> None:
    config = AnalyzerConfig()

    assert config.fall_duration == DEFAULT_FALL_DURATION == Decimal("0.201")
    assert config.default_zero_ms_frametime == DEFAULT_ZERO_MS_FRAMETIME == Decimal("1E-10")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("0.001", Decimal("0.001")),
        ("10", Decimal(10)),
        (".5", Decimal("0.5")),
        ("5.", Decimal(5)),
        ("+0.25", Decimal("0.25")),
        ("-1.5", Decimal("-1.5")),
    ],
)
def test_parse_decimal_accepts_plain_notation(text: str, expected: Decimal) -> None:
    assert parse_decimal(text) == expected


@pytest.mark.parametrize("text", ["", ".", "1e3", "NaN", "Infinity", "1_0", " 1", "1 ", "0x10", "١"])
def test_parse_decimal_rejects(text: str) -> None:
    with pytest.raises(ValueError):
        parse_decimal(text)


def test_resolve_reads_environment() -> None:
    config = resolve_analyzer_config({FALL_DURATION_ENV: "0.25", ZERO_MS_FRAMETIME_ENV: " 0.001 "})

    assert config == AnalyzerConfig(fall_duration=Decimal("0.25"), default_zero_ms_frametime=Decimal("0.001"))


def test_resolve_ignores_blank_values() -> None:
    assert resolve_analyzer_config({FALL_DURATION_ENV: "  "}) == AnalyzerConfig()


def test_resolve_keeps_base_when_unset() -> None:
    base = AnalyzerConfig(fall_duration=Decimal("1"))

    assert resolve_analyzer_config({}, base=base) is base


def test_resolve_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(FALL_DURATION_ENV, "0.5")
    monkeypatch.delenv(ZERO_MS_FRAMETIME_ENV, raising=False)

    assert resolve_analyzer_config().fall_duration == Decimal("0.5")


def test_resolve_rejects_bad_environment() -> None:
    with pytest.raises(AnalyzerConfigError, match=FALL_DURATION_ENV):
        resolve_analyzer_config({FALL_DURATION_ENV: "soon"})


def test_config_rejects_negative_values() -> None:
    with pytest.raises(AnalyzerConfigError, match="fall_duration"):
        AnalyzerConfig(fall_duration=Decimal("-0.1"))
    with pytest.raises(AnalyzerConfigError, match="default_zero_ms_frametime"):
        resolve_analyzer_config({ZERO_MS_FRAMETIME_ENV: "-1"})
