from __future__ import annotations

import pytest

from nightscout_skill.model import GlucoseUnit, RangeStatus, UnitConfig
from nightscout_skill.units import (
    MMOL_FACTOR,
    classify_range,
    format_value,
    target_range_text,
    to_display,
)

MG = UnitConfig.for_unit(GlucoseUnit.MG_DL)
MMOL = UnitConfig.for_unit(GlucoseUnit.MMOL_L)


def test_to_display_native_keeps_integer() -> None:
    assert to_display(110, GlucoseUnit.MG_DL) == 110
    assert format_value(110, GlucoseUnit.MG_DL) == "110"


def test_to_display_converted_divides_by_18() -> None:
    assert to_display(90, GlucoseUnit.MMOL_L) == 5.0
    assert format_value(5.0, GlucoseUnit.MMOL_L, with_label=True) == "5.0 mmol/L"


def test_format_value_with_native_label() -> None:
    assert format_value(110, GlucoseUnit.MG_DL, with_label=True) == "110 mg/dL"


@pytest.mark.parametrize("sgv", [39, 90, 101, 145, 400])
def test_converted_value_tracks_native_within_rounding(sgv: int) -> None:
    display = to_display(sgv, GlucoseUnit.MMOL_L)
    assert abs(display * MMOL_FACTOR - sgv) / MMOL_FACTOR <= 0.05 + 1e-9


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (79, RangeStatus.LOW),
        (80, RangeStatus.NORMAL),
        (120, RangeStatus.NORMAL),
        (180, RangeStatus.NORMAL),
        (181, RangeStatus.HIGH),
    ],
)
def test_classify_range_native_bounds_are_normal(
    value: int, expected: RangeStatus
) -> None:
    assert classify_range(value, MG) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3.9, RangeStatus.LOW),
        (4.0, RangeStatus.NORMAL),
        (10.0, RangeStatus.NORMAL),
        (10.1, RangeStatus.HIGH),
    ],
)
def test_classify_range_converted_bounds_are_normal(
    value: float, expected: RangeStatus
) -> None:
    assert classify_range(value, MMOL) is expected


def test_target_range_text() -> None:
    assert target_range_text(MG) == "80-180 mg/dL"
    assert target_range_text(MMOL) == "4.0-10.0 mmol/L"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, GlucoseUnit.MG_DL),
        ("", GlucoseUnit.MG_DL),
        ("mg/dl", GlucoseUnit.MG_DL),
        ("mmol", GlucoseUnit.MMOL_L),
        (" MMOL/L ", GlucoseUnit.MMOL_L),
    ],
)
def test_unit_parse(raw: str | None, expected: GlucoseUnit) -> None:
    assert GlucoseUnit.parse(raw) is expected


def test_unit_config_constants_are_fixed_per_unit() -> None:
    assert (MG.target_low, MG.target_high) == (80, 180)
    assert (MG.trend_threshold, MG.row_threshold) == (5, 4)
    assert (MMOL.target_low, MMOL.target_high) == (4.0, 10.0)
    assert (MMOL.trend_threshold, MMOL.row_threshold) == (0.3, 0.2)
