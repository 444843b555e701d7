"""Formato de horas cortas con zona horaria (12 h, inglés)."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo

from dateutil import parser, tz

log = logging.getLogger(__name__)

UNKNOWN_TIME = "Unknown"


def resolve_zone(name: str | None) -> tzinfo:
    """Return the tzinfo for an IANA zone name, falling back to UTC.

    Args:
        name: Zone identifier such as "America/New_York".

    Returns:
        A dateutil tzinfo; UTC when the name is empty or unknown.
    """
    if name and name.strip():
        try:
            zone = tz.gettz(name.strip())
        except (ValueError, OSError):
            # gettz opens absolute paths as tz files
            zone = None
        if zone is not None:
            return zone
        log.warning("Unknown timezone %r, using UTC", name)
    return tz.UTC


def to_datetime(moment: object) -> datetime | None:
    """Normaliza datetime, epoch en milisegundos o texto ISO a datetime con zona."""
    if isinstance(moment, bool):
        return None
    if isinstance(moment, datetime):
        dt = moment
    elif isinstance(moment, int | float):
        try:
            dt = datetime.fromtimestamp(moment / 1000, tz=tz.UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(moment, str) and moment.strip():
        try:
            dt = parser.isoparse(moment.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz.UTC)
    return dt


def format_clock(moment: object, zone: tzinfo, *, with_zone: bool = True) -> str:
    """Render a moment as "H:MM AM/PM TZ" in ``zone``.

    The abbreviation is taken at the instant itself, so the same zone gives
    "EST" in winter and "EDT" in summer.

    Args:
        moment: datetime, epoch milliseconds or ISO-8601 text.
        zone: Target timezone.
        with_zone: Append the zone abbreviation.

    Returns:
        The formatted time, or "Unknown" when ``moment`` cannot be read.
    """
    dt = to_datetime(moment)
    if dt is None:
        return UNKNOWN_TIME
    try:
        local = dt.astimezone(zone)
    except (OverflowError, ValueError):
        return UNKNOWN_TIME
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    text = f"{hour}:{local.minute:02d} {meridiem}"
    if with_zone:
        abbrev = local.tzname()
        if abbrev:
            text = f"{text} {abbrev}"
    return text
