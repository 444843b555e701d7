"""Análisis de la serie de lecturas: resumen, filas y puntos del gráfico."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, tzinfo
from functools import partial

import pandas as pd

from nightscout_skill.model import (
    ChartPoint,
    EmptySeries,
    Measurement,
    NormalDisplay,
    PresentationSummary,
    RowRecord,
    UnitConfig,
)
from nightscout_skill.timefmt import format_clock
from nightscout_skill.trend import describe_direction, row_trend, summary_trend
from nightscout_skill.units import (
    classify_range,
    format_value,
    target_range_text,
    to_display,
)

DEFAULT_WINDOW = 6

INSUFFICIENT_DATA_TEXT = "Insufficient data"

_FRAME_COLUMNS = ["datetime", "sgv", "value", "direction", "delta"]


def readings_to_frame(
    measurements: Sequence[Measurement], unit_config: UnitConfig
) -> pd.DataFrame:
    """Convert measurements to a chronological DataFrame.

    Columns: datetime, sgv, value (display units), direction, delta. ``delta``
    is the display-unit difference against the previous reading of the whole
    series, so any later slicing keeps the true predecessor.
    """
    rows = [
        {
            "datetime": m.timestamp,
            "sgv": m.sgv,
            "direction": m.direction,
        }
        for m in measurements
    ]
    df = pd.DataFrame(rows)
    if df.empty:
        return pd.DataFrame(columns=_FRAME_COLUMNS)
    df = df.sort_values("datetime", kind="stable").reset_index(drop=True)
    df["value"] = df["sgv"].map(partial(to_display, unit=unit_config.unit))
    df["delta"] = df["value"].diff()
    return df[_FRAME_COLUMNS]


def elapsed_hours(first: datetime, last: datetime) -> int:
    """Whole hours between two instants, rounded half up."""
    hours = (last - first).total_seconds() / 3600
    return int(math.floor(hours + 0.5))


def build_summary(
    frame: pd.DataFrame, unit_config: UnitConfig, zone: tzinfo
) -> PresentationSummary:
    """Build the header fields from a non-empty frame.

    Args:
        frame: Output of :func:`readings_to_frame` with at least one row.
        unit_config: Unit constants.
        zone: Timezone used for the last-updated text.

    Returns:
        Summary with every field populated.
    """
    latest = frame.iloc[-1]
    trend = summary_trend(frame["value"].tolist(), unit_config)
    direction = latest["direction"]
    hours = elapsed_hours(frame["datetime"].iloc[0], latest["datetime"])
    return PresentationSummary(
        latest_value_text=format_value(
            latest["value"], unit_config.unit, with_label=True
        ),
        trend_icon=trend.icon,
        trend_text=trend.text,
        last_updated_text=format_clock(latest["datetime"], zone),
        elapsed_hours_text=f"{hours}h",
        target_range_text=target_range_text(unit_config),
        device_trend_text=describe_direction(
            direction if isinstance(direction, str) else None
        ),
    )


def build_rows(
    frame: pd.DataFrame,
    unit_config: UnitConfig,
    zone: tzinfo,
    window: int = DEFAULT_WINDOW,
) -> tuple[RowRecord, ...]:
    """Build display rows for the trailing ``window`` readings.

    Rows are most recent first. A frame with fewer than two readings gives a
    single "Insufficient data" row instead of trends.
    """
    if len(frame) < 2:
        only = frame.iloc[-1]
        return (
            RowRecord(
                time_text=format_clock(only["datetime"], zone),
                status_icon="",
                value_text=INSUFFICIENT_DATA_TEXT,
                trend_arrow_text="",
            ),
        )

    rows: list[RowRecord] = []
    for _, entry in frame.tail(window).iloc[::-1].iterrows():
        trend = row_trend(entry["delta"], unit_config)
        rows.append(
            RowRecord(
                time_text=format_clock(entry["datetime"], zone),
                status_icon=classify_range(entry["value"], unit_config).icon,
                value_text=format_value(entry["value"], unit_config.unit),
                trend_arrow_text=trend.icon if trend is not None else "",
            )
        )
    return tuple(rows)


def chart_points(frame: pd.DataFrame) -> tuple[ChartPoint, ...]:
    """Serie completa en unidades de visualización, en orden cronológico."""
    return tuple(
        ChartPoint(timestamp=ts, value=float(value))
        for ts, value in zip(frame["datetime"], frame["value"])
    )


def analyze_series(
    measurements: Sequence[Measurement],
    unit_config: UnitConfig,
    zone: tzinfo,
    *,
    window: int = DEFAULT_WINDOW,
) -> NormalDisplay | EmptySeries:
    """Derive summary, rows and chart points from a chronological series.

    Args:
        measurements: Readings in ascending time order.
        unit_config: Unit constants.
        zone: Timezone for the rendered times.
        window: How many recent readings get a row.

    Returns:
        EmptySeries when there are no readings, otherwise NormalDisplay.
    """
    if not measurements:
        return EmptySeries()
    frame = readings_to_frame(measurements, unit_config)
    return NormalDisplay(
        summary=build_summary(frame, unit_config, zone),
        rows=build_rows(frame, unit_config, zone, window),
        points=chart_points(frame),
        unit_config=unit_config,
    )
