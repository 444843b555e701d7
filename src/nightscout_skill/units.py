"""Conversión de unidades y clasificación contra el rango objetivo."""

from __future__ import annotations

from nightscout_skill.model import GlucoseUnit, RangeStatus, UnitConfig

MMOL_FACTOR = 18


def to_display(sgv: int, unit: GlucoseUnit) -> float:
    """Convert a native mg/dL reading into the display unit.

    Args:
        sgv: Sensor glucose value as delivered by Nightscout (mg/dL).
        unit: Display unit.

    Returns:
        The integer itself for mg/dL, or mmol/L rounded to one decimal.
    """
    if unit is GlucoseUnit.MMOL_L:
        return round(sgv / MMOL_FACTOR, 1)
    return int(sgv)


def format_value(value: float, unit: GlucoseUnit, *, with_label: bool = False) -> str:
    """Render a display value ("110", "5.0", or with its unit label)."""
    if unit is GlucoseUnit.MMOL_L:
        text = f"{value:.1f}"
        label = "mmol/L"
    else:
        text = f"{int(round(value))}"
        label = "mg/dL"
    return f"{text} {label}" if with_label else text


def classify_range(value: float, unit_config: UnitConfig) -> RangeStatus:
    """Classify a display value against the target band.

    Both bounds belong to the normal range.
    """
    if value < unit_config.target_low:
        return RangeStatus.LOW
    if value > unit_config.target_high:
        return RangeStatus.HIGH
    return RangeStatus.NORMAL


def target_range_text(unit_config: UnitConfig) -> str:
    """Return the target band as text, e.g. "80-180 mg/dL"."""
    low = format_value(unit_config.target_low, unit_config.unit)
    high = format_value(unit_config.target_high, unit_config.unit)
    return f"{low}-{high} {unit_config.label}"
