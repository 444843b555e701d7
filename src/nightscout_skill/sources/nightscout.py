"""Lectura de entradas de glucosa desde la API de Nightscout."""

from __future__ import annotations

import logging
from hashlib import sha1
from typing import Any

import requests

from nightscout_skill.model import Measurement
from nightscout_skill.sources.base import (
    DataSource,
    MissingSettingsError,
    SourceSettings,
)
from nightscout_skill.timefmt import to_datetime

log = logging.getLogger(__name__)

ENTRIES_PATH = "/api/v1/entries.json"


class NightscoutFetchError(RuntimeError):
    """The Nightscout site could not be read (network, timeout, HTTP status, body)."""


class NightscoutSource(DataSource):
    """Nightscout entries API reader."""

    def validate(self) -> None:
        """Check that URL and API secret are configured."""
        missing = []
        if not self._settings.base_url:
            missing.append("url")
        if not self._settings.secret:
            missing.append("api_secret")
        if missing:
            raise MissingSettingsError(tuple(missing))

    def fetch_entries(self, count: int) -> list[Any]:
        """GET the newest ``count`` entries.

        There is one attempt with a fixed timeout. Certificates are always
        verified; a self-signed site is trusted by pointing ``ca_bundle`` at
        its certificate.

        Args:
            count: Number of entries to request.

        Returns:
            Decoded JSON array, newest first as Nightscout sends it.

        Raises:
            NightscoutFetchError: On any transport, status or body problem.
        """
        url = f"{self._settings.base_url.rstrip('/')}{ENTRIES_PATH}"
        headers = {
            "api-secret": hash_secret(self._settings.secret),
            "Accept": "application/json",
        }
        verify: bool | str = self._settings.ca_bundle or True
        log.debug("Fetching %d entries from %s", count, url)
        try:
            resp = requests.get(
                url,
                params={"count": count},
                headers=headers,
                timeout=self._settings.timeout,
                verify=verify,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise NightscoutFetchError(f"Request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise NightscoutFetchError(f"Invalid JSON from {url}") from exc

        if not isinstance(data, list):
            raise NightscoutFetchError("Nightscout entries response must be a list")
        return data

    def load_measurements(self, entries: list[Any]) -> list[Measurement]:
        """Parse feed entries into chronological measurements.

        Args:
            entries: JSON array as returned by :meth:`fetch_entries`.

        Returns:
            Measurements in ascending time order.
        """
        out: list[Measurement] = []
        for item in reversed(entries):
            measurement = _item_to_measurement(item)
            if measurement is not None:
                out.append(measurement)
        out.sort(key=lambda m: m.timestamp)
        return out

    def fetch_measurements(self, count: int) -> list[Measurement]:
        """Validate, fetch and parse in one call."""
        self.validate()
        return self.load_measurements(self.fetch_entries(count))


def hash_secret(secret: str) -> str:
    """Nightscout espera el SHA-1 en hexadecimal del API secret."""
    return sha1(secret.encode("utf-8")).hexdigest()


def _item_to_measurement(item: Any) -> Measurement | None:
    """Convierte un ítem en Measurement; None si no es una lectura sgv utilizable."""
    if not isinstance(item, dict):
        return None
    sgv = item.get("sgv")
    if sgv is None or isinstance(sgv, bool):
        return None
    try:
        value = int(float(sgv))
    except (TypeError, ValueError):
        return None

    timestamp = to_datetime(item.get("date"))
    if timestamp is None:
        timestamp = to_datetime(item.get("dateString"))
    if timestamp is None:
        log.debug("Skipping entry without a usable timestamp: %r", item)
        return None

    direction = item.get("direction")
    return Measurement(
        sgv=value,
        timestamp=timestamp,
        direction=str(direction) if direction else None,
    )
