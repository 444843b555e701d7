"""Modelos tipados para lecturas de Nightscout y resultados de presentación."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class GlucoseUnit(str, Enum):
    """Display unit for glucose values."""

    MG_DL = "mg/dl"
    MMOL_L = "mmol"

    @classmethod
    def parse(cls, raw: str | None) -> GlucoseUnit:
        """Parse loose configuration text ("mmol", "mmol/L", "mg/dl").

        Empty or unrecognised text means mg/dL, the Nightscout native unit.
        """
        text = (raw or "").strip().lower()
        if text.startswith("mmol"):
            return cls.MMOL_L
        return cls.MG_DL


@dataclass(frozen=True)
class Measurement:
    """One sensor glucose value from the Nightscout feed."""

    sgv: int
    timestamp: datetime
    direction: str | None = None


@dataclass(frozen=True)
class UnitConfig:
    """Unit-specific constants: target band, trend thresholds and chart axis."""

    unit: GlucoseUnit
    target_low: float
    target_high: float
    trend_threshold: float
    row_threshold: float
    label: str
    spoken_label: str
    axis_min: float
    axis_max: float

    @classmethod
    def for_unit(cls, unit: GlucoseUnit) -> UnitConfig:
        """Return the fixed constants for ``unit``."""
        if unit is GlucoseUnit.MMOL_L:
            return cls(
                unit=unit,
                target_low=4.0,
                target_high=10.0,
                trend_threshold=0.3,
                row_threshold=0.2,
                label="mmol/L",
                spoken_label="millimoles per liter",
                axis_min=2.0,
                axis_max=22.0,
            )
        return cls(
            unit=GlucoseUnit.MG_DL,
            target_low=80,
            target_high=180,
            trend_threshold=5,
            row_threshold=4,
            label="mg/dL",
            spoken_label="milligrams per deciliter",
            axis_min=40,
            axis_max=400,
        )


class Trend(Enum):
    """Direction derived from consecutive readings."""

    RISING = ("↑", "Rising")
    FALLING = ("↓", "Falling")
    STABLE = ("→", "Stable")
    SINGLE_READING = ("•", "Single reading")

    @property
    def icon(self) -> str:
        return self.value[0]

    @property
    def text(self) -> str:
        return self.value[1]


class RangeStatus(Enum):
    """Position of a value relative to the target band."""

    LOW = "▼"
    NORMAL = "●"
    HIGH = "▲"

    @property
    def icon(self) -> str:
        return self.value


@dataclass(frozen=True)
class PresentationSummary:
    """Header fields shown above the rows (all plain strings)."""

    latest_value_text: str
    trend_icon: str
    trend_text: str
    last_updated_text: str
    elapsed_hours_text: str
    target_range_text: str
    device_trend_text: str = ""


@dataclass(frozen=True)
class RowRecord:
    """One displayed reading."""

    time_text: str
    status_icon: str
    value_text: str
    trend_arrow_text: str


@dataclass(frozen=True)
class ChartPoint:
    """A reading in display units, kept for the chart strategy."""

    timestamp: datetime
    value: float


@dataclass(frozen=True)
class NormalDisplay:
    """Readings were fetched and analysed."""

    summary: PresentationSummary
    rows: tuple[RowRecord, ...]
    points: tuple[ChartPoint, ...]
    unit_config: UnitConfig


@dataclass(frozen=True)
class ConfigMissing:
    """Required connection settings are absent."""

    missing: tuple[str, ...]


@dataclass(frozen=True)
class FetchFailed:
    """The Nightscout site could not be read."""

    detail: str


@dataclass(frozen=True)
class EmptySeries:
    """The feed answered with no readings."""


@dataclass(frozen=True)
class InternalFailure:
    """Something unexpected went wrong while handling the request."""


PresentationResult = (
    NormalDisplay | ConfigMissing | FetchFailed | EmptySeries | InternalFailure
)
