"""Configuración del skill leída una vez por invocación desde el entorno."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from nightscout_skill.model import GlucoseUnit, UnitConfig

log = logging.getLogger(__name__)

ENV_URL = "NIGHTSCOUT_URL"
ENV_SECRET = "NIGHTSCOUT_API_SECRET"
ENV_UNITS = "NIGHTSCOUT_UNITS"
ENV_TIMEZONE = "NIGHTSCOUT_TIMEZONE"
ENV_ENTRY_COUNT = "NIGHTSCOUT_ENTRY_COUNT"
ENV_DISPLAY_MODE = "NIGHTSCOUT_DISPLAY_MODE"
ENV_CA_BUNDLE = "NIGHTSCOUT_CA_BUNDLE"

DEFAULT_ENTRY_COUNT = 48
DEFAULT_TIMEOUT = 10.0
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class SkillConfig:
    """Connection and display settings for one request."""

    nightscout_url: str
    api_secret: str
    units: GlucoseUnit = GlucoseUnit.MG_DL
    timezone: str = DEFAULT_TIMEZONE
    entry_count: int = DEFAULT_ENTRY_COUNT
    display_mode: str = "rows"
    ca_bundle: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SkillConfig:
        """Build the config from environment variables.

        Missing URL or secret are kept as empty strings; callers check
        :meth:`missing_settings` before talking to Nightscout.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``).

        Returns:
            Parsed configuration.
        """
        env = os.environ if environ is None else environ
        return cls(
            nightscout_url=env.get(ENV_URL, "").strip().rstrip("/"),
            api_secret=env.get(ENV_SECRET, "").strip(),
            units=GlucoseUnit.parse(env.get(ENV_UNITS)),
            timezone=env.get(ENV_TIMEZONE, "").strip() or DEFAULT_TIMEZONE,
            entry_count=_parse_count(env.get(ENV_ENTRY_COUNT)),
            display_mode=env.get(ENV_DISPLAY_MODE, "").strip().lower() or "rows",
            ca_bundle=env.get(ENV_CA_BUNDLE, "").strip() or None,
        )

    def missing_settings(self) -> tuple[str, ...]:
        """Return the environment names of absent required settings."""
        missing = []
        if not self.nightscout_url:
            missing.append(ENV_URL)
        if not self.api_secret:
            missing.append(ENV_SECRET)
        return tuple(missing)

    @property
    def unit_config(self) -> UnitConfig:
        return UnitConfig.for_unit(self.units)


def _parse_count(raw: str | None) -> int:
    """Cantidad de entradas a pedir; valores inválidos usan el default."""
    if raw is None or not raw.strip():
        return DEFAULT_ENTRY_COUNT
    try:
        count = int(raw)
    except ValueError:
        log.warning("Invalid %s=%r, using %d", ENV_ENTRY_COUNT, raw, DEFAULT_ENTRY_COUNT)
        return DEFAULT_ENTRY_COUNT
    if count <= 0:
        log.warning("Invalid %s=%r, using %d", ENV_ENTRY_COUNT, raw, DEFAULT_ENTRY_COUNT)
        return DEFAULT_ENTRY_COUNT
    return count
