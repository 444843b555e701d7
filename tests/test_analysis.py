from __future__ import annotations

from dataclasses import fields
from datetime import datetime, timedelta

import pytest
from dateutil import tz

from nightscout_skill.analysis import (
    INSUFFICIENT_DATA_TEXT,
    analyze_series,
    elapsed_hours,
    readings_to_frame,
)
from nightscout_skill.model import (
    EmptySeries,
    GlucoseUnit,
    Measurement,
    NormalDisplay,
    RangeStatus,
    Trend,
    UnitConfig,
)

MG = UnitConfig.for_unit(GlucoseUnit.MG_DL)
MMOL = UnitConfig.for_unit(GlucoseUnit.MMOL_L)
NEW_YORK = tz.gettz("America/New_York")
START = datetime(2025, 1, 15, 17, 0, tzinfo=tz.UTC)


def _series(values: list[int], step_minutes: int = 5) -> list[Measurement]:
    return [
        Measurement(
            sgv=value,
            timestamp=START + timedelta(minutes=step_minutes * i),
            direction="Flat",
        )
        for i, value in enumerate(values)
    ]


def _analyze(values: list[int], unit: UnitConfig = MG, **kwargs: int) -> NormalDisplay:
    result = analyze_series(_series(values), unit, NEW_YORK, **kwargs)
    assert isinstance(result, NormalDisplay)
    return result


def test_empty_series_is_terminal() -> None:
    assert analyze_series([], MG, NEW_YORK) == EmptySeries()


def test_readings_to_frame_empty() -> None:
    df = readings_to_frame([], MG)
    assert df.empty
    assert list(df.columns) == ["datetime", "sgv", "value", "direction", "delta"]


def test_readings_to_frame_orders_and_computes_delta() -> None:
    series = _series([100, 110, 105])
    df = readings_to_frame(list(reversed(series)), MG)
    assert list(df["sgv"]) == [100, 110, 105]
    assert df["delta"].isna().iloc[0]
    assert list(df["delta"].iloc[1:]) == [10, -5]


def test_summary_for_two_rising_readings() -> None:
    result = _analyze([100, 110])
    summary = result.summary
    assert summary.latest_value_text == "110 mg/dL"
    assert summary.trend_text == Trend.RISING.text
    assert summary.trend_icon == Trend.RISING.icon
    assert summary.last_updated_text == "12:05 PM EST"
    assert summary.elapsed_hours_text == "0h"
    assert summary.target_range_text == "80-180 mg/dL"
    assert summary.device_trend_text == "steady"


def test_converted_unit_summary() -> None:
    result = _analyze([90], unit=MMOL)
    assert result.summary.latest_value_text == "5.0 mmol/L"
    assert result.summary.target_range_text == "4.0-10.0 mmol/L"
    assert result.points[0].value == 5.0


def test_single_reading_gives_insufficient_data_row() -> None:
    result = _analyze([120])
    assert result.summary.trend_text == Trend.SINGLE_READING.text
    assert len(result.rows) == 1
    assert result.rows[0].value_text == INSUFFICIENT_DATA_TEXT
    assert result.rows[0].trend_arrow_text == ""
    assert result.rows[0].time_text == "12:00 PM EST"


def test_rows_are_most_recent_first_and_windowed() -> None:
    result = _analyze(list(range(100, 148)))
    assert len(result.rows) == 6
    assert [r.value_text for r in result.rows] == [
        "147",
        "146",
        "145",
        "144",
        "143",
        "142",
    ]
    assert result.rows[0].time_text == "3:55 PM EST"
    assert len(result.points) == 48


def test_row_trend_uses_full_series_predecessor() -> None:
    # A..G; the window shows E, F, G and E must compare against D.
    result = _analyze([100, 100, 100, 100, 110, 111, 120], window=3)
    assert [r.value_text for r in result.rows] == ["120", "111", "110"]
    assert [r.trend_arrow_text for r in result.rows] == [
        Trend.RISING.icon,
        Trend.STABLE.icon,
        Trend.RISING.icon,
    ]


def test_first_chronological_row_has_no_arrow() -> None:
    result = _analyze([100, 130, 90])
    assert result.rows[-1].value_text == "100"
    assert result.rows[-1].trend_arrow_text == ""
    assert result.rows[0].trend_arrow_text == Trend.FALLING.icon


def test_row_status_icons() -> None:
    result = _analyze([79, 80, 180, 181])
    assert [r.status_icon for r in result.rows] == [
        RangeStatus.HIGH.icon,
        RangeStatus.NORMAL.icon,
        RangeStatus.NORMAL.icon,
        RangeStatus.LOW.icon,
    ]


def test_elapsed_span_for_four_hours_of_readings() -> None:
    result = _analyze([120] * 48)
    assert result.summary.elapsed_hours_text == "4h"


def test_elapsed_hours_rounds_half_up() -> None:
    assert elapsed_hours(START, START + timedelta(minutes=90)) == 2
    assert elapsed_hours(START, START + timedelta(minutes=150)) == 3
    assert elapsed_hours(START, START + timedelta(minutes=29)) == 0


@pytest.mark.parametrize(
    "values",
    [[40], [400, 39], [100, 100, 100], list(range(60, 300, 7))],
)
@pytest.mark.parametrize("unit", [MG, MMOL])
def test_summary_fields_are_always_strings(values: list[int], unit: UnitConfig) -> None:
    result = _analyze(values, unit=unit)
    for field in fields(result.summary):
        assert isinstance(getattr(result.summary, field.name), str)
    for row in result.rows:
        for field in fields(row):
            assert isinstance(getattr(row, field.name), str)
