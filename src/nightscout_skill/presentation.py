"""Generación de la respuesta hablada y del layout APL para cada resultado."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import tzinfo
from typing import Any
from urllib.parse import urlencode

from nightscout_skill.config import ENV_SECRET, ENV_URL
from nightscout_skill.model import (
    ChartPoint,
    ConfigMissing,
    EmptySeries,
    FetchFailed,
    NormalDisplay,
    PresentationResult,
    Trend,
    UnitConfig,
)
from nightscout_skill.templates import CHART_DOCUMENT, ROWS_DOCUMENT
from nightscout_skill.timefmt import format_clock
from nightscout_skill.units import format_value, target_range_text

CHART_ENDPOINT = "https://image-charts.com/chart"
CHART_LABEL_EVERY = 6
NO_DATA_TEXT = "NO DATA AVAILABLE"
EMPTY_FIELD = "--"

_SETTING_NAMES: dict[str, str] = {
    ENV_URL: "your Nightscout URL",
    ENV_SECRET: "your Nightscout API secret",
}

_TREND_PHRASES: dict[str, str] = {
    Trend.RISING.text: "and rising",
    Trend.FALLING.text: "and falling",
    Trend.STABLE.text: "and stable",
    Trend.SINGLE_READING.text: "and that is the only recent reading",
}


@dataclass(frozen=True)
class Presentation:
    """Speech plus an optional APL document and its datasources."""

    speech: str
    document: dict[str, Any] | None = None
    datasources: dict[str, Any] | None = None


@dataclass(frozen=True)
class _Placeholder:
    """Texto fijo para resultados sin lecturas."""

    title: str
    subtitle: str


def _placeholder(result: PresentationResult) -> _Placeholder:
    if isinstance(result, ConfigMissing):
        return _Placeholder("Configuration Error", "Check the skill settings")
    if isinstance(result, FetchFailed):
        return _Placeholder("Connection Failed", "Check your Nightscout site")
    if isinstance(result, EmptySeries):
        return _Placeholder(NO_DATA_TEXT, "No Readings")
    return _Placeholder("Something Went Wrong", "Please try again")


def speech_for(result: PresentationResult) -> str:
    """Return the spoken text for any result variant."""
    if isinstance(result, NormalDisplay):
        return _normal_speech(result)
    if isinstance(result, ConfigMissing):
        names = [_SETTING_NAMES.get(name, name) for name in result.missing]
        return (
            "Your Nightscout skill is not configured yet. "
            f"Please set {' and '.join(names)} in the skill settings."
        )
    if isinstance(result, FetchFailed):
        return (
            "Sorry, I had trouble connecting to your Nightscout site. "
            "Please check that the site is online and that the API secret is correct."
        )
    if isinstance(result, EmptySeries):
        return "No recent readings were found on your Nightscout site."
    return "Sorry, I encountered an error. Please try again."


def _normal_speech(result: NormalDisplay) -> str:
    unit_config = result.unit_config
    summary = result.summary
    latest = format_value(result.points[-1].value, unit_config.unit)
    speech = (
        f"Your latest reading is {latest} {unit_config.spoken_label} "
        f"{_TREND_PHRASES.get(summary.trend_text, '')}. "
        f"It was taken at {summary.last_updated_text}."
    )
    if summary.device_trend_text:
        speech += f" Your sensor reports it as {summary.device_trend_text}."
    return speech


def chart_url(
    points: Sequence[ChartPoint], unit_config: UnitConfig, zone: tzinfo
) -> str:
    """Build an image-charts.com line chart URL for the series.

    Args:
        points: Chronological readings in display units.
        unit_config: Unit constants (axis range and target bounds).
        zone: Timezone for the x-axis labels.

    Returns:
        Fully encoded chart URL.
    """
    values = ",".join(format_value(p.value, unit_config.unit) for p in points)
    labels = [
        format_clock(p.timestamp, zone, with_zone=False)
        if index % CHART_LABEL_EVERY == 0
        else ""
        for index, p in enumerate(points)
    ]
    # Widen the unit axis so readings outside it are not clipped.
    low = min([unit_config.axis_min, *(p.value for p in points)])
    high = max([unit_config.axis_max, *(p.value for p in points)])
    markers = [
        "o,3498DB,0,-1,5",
        _range_marker("FF0000", unit_config.target_high, low, high),
        _range_marker("FF9900", unit_config.target_low, low, high),
    ]
    params = {
        "cht": "lc",
        "chs": "800x450",
        "chd": f"t:{values}",
        "chds": f"{low:g},{high:g}",
        "chxt": "x,y",
        "chxl": f"0:|{'|'.join(labels)}",
        "chxr": f"1,{low:g},{high:g}",
        "chg": "0,12.5,1,4",
        "chco": "3498DB",
        "chls": "3",
        "chm": "|".join(markers),
    }
    return f"{CHART_ENDPOINT}?{urlencode(params)}"


def _range_marker(color: str, bound: float, low: float, high: float) -> str:
    """Marcador horizontal fino en la posición relativa del límite sobre el eje."""
    position = (bound - low) / (high - low)
    return f"r,{color},0,{position - 0.005:.3f},{position + 0.005:.3f}"


class LayoutStrategy(ABC):
    """One way of filling the screen; every result variant must be renderable."""

    document: dict[str, Any]

    def __init__(self, unit_config: UnitConfig, zone: tzinfo) -> None:
        self._unit_config = unit_config
        self._zone = zone

    @abstractmethod
    def payload_for(self, result: PresentationResult) -> dict[str, Any]:
        """Return the ``payload`` datasource for ``result``."""

    def datasources_for(self, result: PresentationResult) -> dict[str, Any]:
        return {"payload": self.payload_for(result)}


class RowsLayout(LayoutStrategy):
    """Summary header plus a list of recent readings."""

    document = ROWS_DOCUMENT

    def payload_for(self, result: PresentationResult) -> dict[str, Any]:
        if isinstance(result, NormalDisplay):
            summary = result.summary
            return {
                "summary": {
                    "latestValue": summary.latest_value_text,
                    "trendIcon": summary.trend_icon,
                    "trendText": summary.trend_text,
                    "lastUpdated": summary.last_updated_text,
                    "elapsedHours": summary.elapsed_hours_text,
                    "targetRange": summary.target_range_text,
                    "deviceTrend": summary.device_trend_text,
                },
                "rows": [
                    {
                        "time": row.time_text,
                        "status": row.status_icon,
                        "value": row.value_text,
                        "trend": row.trend_arrow_text,
                    }
                    for row in result.rows
                ],
            }

        placeholder = _placeholder(result)
        rows: list[dict[str, str]] = []
        if isinstance(result, ConfigMissing):
            rows = [
                {"time": "", "status": "✗", "value": name, "trend": ""}
                for name in result.missing
            ]
        return {
            "summary": {
                "latestValue": placeholder.title,
                "trendIcon": "",
                "trendText": placeholder.subtitle,
                "lastUpdated": EMPTY_FIELD,
                "elapsedHours": EMPTY_FIELD,
                "targetRange": target_range_text(self._unit_config),
                "deviceTrend": "",
            },
            "rows": rows,
        }


class ChartLayout(LayoutStrategy):
    """A remote chart image with the last-updated time."""

    document = CHART_DOCUMENT

    def payload_for(self, result: PresentationResult) -> dict[str, Any]:
        if isinstance(result, NormalDisplay):
            return {
                "graphUrl": chart_url(result.points, result.unit_config, self._zone),
                "timestamp": result.summary.last_updated_text,
                "message": "",
            }
        return {
            "graphUrl": "",
            "timestamp": EMPTY_FIELD,
            "message": _placeholder(result).title,
        }


def select_layout(
    supports_apl: bool,
    display_mode: str,
    unit_config: UnitConfig,
    zone: tzinfo,
) -> LayoutStrategy | None:
    """Pick the layout for the client; ``None`` means speech only."""
    if not supports_apl:
        return None
    if display_mode == "chart":
        return ChartLayout(unit_config, zone)
    return RowsLayout(unit_config, zone)


class PresentationBuilder:
    """Render any result into speech and, when a layout is set, an APL payload."""

    def __init__(self, layout: LayoutStrategy | None) -> None:
        self._layout = layout

    def build(self, result: PresentationResult) -> Presentation:
        """Render ``result``.

        Args:
            result: Any result variant.

        Returns:
            Presentation with speech always set and document/datasources set
            when the builder has a layout.
        """
        speech = speech_for(result)
        if self._layout is None:
            return Presentation(speech=speech)
        return Presentation(
            speech=speech,
            document=copy.deepcopy(self._layout.document),
            datasources=self._layout.datasources_for(result),
        )
