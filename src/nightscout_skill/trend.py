"""Clasificación de tendencia entre lecturas consecutivas."""

from __future__ import annotations

import math
from collections.abc import Sequence

from nightscout_skill.model import Trend, UnitConfig

_DIRECTION_WORDS: dict[str, str] = {
    "DoubleUp": "rising quickly",
    "SingleUp": "rising",
    "FortyFiveUp": "rising slowly",
    "Flat": "steady",
    "FortyFiveDown": "falling slowly",
    "SingleDown": "falling",
    "DoubleDown": "falling quickly",
    "NOT COMPUTABLE": "not computable",
    "RATE OUT OF RANGE": "changing too fast to measure",
}


def classify_delta(diff: float, threshold: float) -> Trend:
    """Classify a signed display-unit difference.

    Args:
        diff: ``current - previous`` in display units.
        threshold: Absolute difference that counts as movement.

    Returns:
        RISING above ``+threshold``, FALLING below ``-threshold``, else STABLE.
    """
    # mmol/L values carry one decimal; drop float noise such as 0.30000000000000027.
    diff = round(diff, 6)
    if diff > threshold:
        return Trend.RISING
    if diff < -threshold:
        return Trend.FALLING
    return Trend.STABLE


def summary_trend(values: Sequence[float], unit_config: UnitConfig) -> Trend:
    """Overall trend from the last two display values of the series."""
    if len(values) < 2:
        return Trend.SINGLE_READING
    diff = values[-1] - values[-2]
    return classify_delta(diff, unit_config.trend_threshold)


def row_trend(diff: float | None, unit_config: UnitConfig) -> Trend | None:
    """Row-to-row trend using the tighter row threshold.

    ``diff`` is the delta against the row's predecessor in the full series;
    ``None`` or NaN means the row has no predecessor.
    """
    if diff is None or math.isnan(diff):
        return None
    return classify_delta(diff, unit_config.row_threshold)


def describe_direction(direction: str | None) -> str:
    """Traduce el indicador de dirección del sensor a palabras ("" si no se conoce)."""
    if not direction:
        return ""
    return _DIRECTION_WORDS.get(direction.strip(), "")
