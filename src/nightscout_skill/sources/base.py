"""Clases base para fuentes de datos."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class MissingSettingsError(ValueError):
    """Required connection settings are absent."""

    def __init__(self, missing: tuple[str, ...]) -> None:
        super().__init__(f"Missing required settings: {', '.join(missing)}")
        self.missing = missing


@dataclass(frozen=True)
class SourceSettings:
    """Connection settings for a remote source."""

    base_url: str
    secret: str
    timeout: float = 10.0
    ca_bundle: str | None = None


class DataSource(ABC):
    """Abstract data source."""

    def __init__(self, settings: SourceSettings) -> None:
        """Create a data source.

        Args:
            settings: Source connection settings.
        """
        self._settings = settings

    @abstractmethod
    def validate(self) -> None:
        """Validate that required settings are present.

        Raises:
            MissingSettingsError: If required settings are missing.
        """
