"""Orquestación de una invocación: config, fetch, análisis y presentación."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from nightscout_skill.analysis import analyze_series
from nightscout_skill.config import SkillConfig
from nightscout_skill.model import (
    ConfigMissing,
    EmptySeries,
    FetchFailed,
    InternalFailure,
    PresentationResult,
)
from nightscout_skill.presentation import (
    Presentation,
    PresentationBuilder,
    select_layout,
)
from nightscout_skill.sources.base import SourceSettings
from nightscout_skill.sources.nightscout import NightscoutFetchError, NightscoutSource
from nightscout_skill.timefmt import resolve_zone

log = logging.getLogger(__name__)

GLUCOSE_INTENTS = frozenset({"LaunchRequest", "DisplayGraphIntent", "GlucoseIntent"})
HELP_INTENT = "AMAZON.HelpIntent"
STOP_INTENTS = frozenset({"AMAZON.CancelIntent", "AMAZON.StopIntent"})

HELP_TEXT = "You can ask me to show your graph. For example, say 'show my graph'."
FALLBACK_TEXT = "Sorry, I didn't get that. " + HELP_TEXT
GOODBYE_TEXT = "Goodbye!"

RENDER_DOCUMENT = "Alexa.Presentation.APL.RenderDocument"
DOCUMENT_TOKEN = "nightscoutGlance"


class Stage(Enum):
    """Pipeline states, logged as the request moves through them."""

    IDLE = "idle"
    CONFIG_VALIDATED = "config_validated"
    DATA_FETCHED = "data_fetched"
    ANALYZED = "analyzed"
    PRESENTED = "presented"
    RESPONDED = "responded"
    FAILED = "failed"


@dataclass(frozen=True)
class ClientCapabilities:
    """What the requesting device can show."""

    supports_apl: bool = False


@dataclass(frozen=True)
class SkillResponse:
    """Framework-neutral response."""

    speech: str
    directive: dict[str, Any] | None = None
    keep_session_open: bool = False
    reprompt: str | None = None


SourceFactory = Callable[[SourceSettings], NightscoutSource]


class RequestPipeline:
    """Run one request from config to a renderable response.

    The pipeline never raises: every failure becomes a result variant that
    the presentation layer can render.
    """

    def __init__(
        self,
        config: SkillConfig,
        source_factory: SourceFactory = NightscoutSource,
    ) -> None:
        self._config = config
        self._source_factory = source_factory
        self._zone = resolve_zone(config.timezone)
        self._stage = Stage.IDLE

    @property
    def stage(self) -> Stage:
        return self._stage

    def _enter(self, stage: Stage) -> None:
        log.debug("Pipeline %s -> %s", self._stage.value, stage.value)
        self._stage = stage

    def respond(
        self, intent: str, capabilities: ClientCapabilities
    ) -> SkillResponse:
        """Answer a request.

        Args:
            intent: Request type or intent name (e.g. "LaunchRequest",
                "DisplayGraphIntent", "AMAZON.HelpIntent").
            capabilities: Device capabilities.

        Returns:
            Speech, optional APL directive and whether to keep the session open.
        """
        if intent in GLUCOSE_INTENTS:
            return self._glucose_response(capabilities)
        if intent == HELP_INTENT:
            return SkillResponse(HELP_TEXT, keep_session_open=True, reprompt=HELP_TEXT)
        if intent in STOP_INTENTS:
            return SkillResponse(GOODBYE_TEXT)
        log.info("Unhandled intent %s", intent)
        return SkillResponse(FALLBACK_TEXT, keep_session_open=True, reprompt=HELP_TEXT)

    def run(self) -> PresentationResult:
        """Validate config, fetch and analyse; return a result variant."""
        self._stage = Stage.IDLE
        try:
            return self._run()
        except Exception:
            log.exception("Unexpected error at stage %s", self._stage.value)
            self._enter(Stage.FAILED)
            return InternalFailure()

    def _run(self) -> PresentationResult:
        missing = self._config.missing_settings()
        if missing:
            log.warning("Missing settings: %s", ", ".join(missing))
            self._enter(Stage.FAILED)
            return ConfigMissing(missing=missing)
        self._enter(Stage.CONFIG_VALIDATED)

        source = self._source_factory(
            SourceSettings(
                base_url=self._config.nightscout_url,
                secret=self._config.api_secret,
                timeout=self._config.timeout,
                ca_bundle=self._config.ca_bundle,
            )
        )
        try:
            measurements = source.fetch_measurements(self._config.entry_count)
        except NightscoutFetchError as exc:
            log.error("Nightscout fetch failed: %s", exc)
            self._enter(Stage.FAILED)
            return FetchFailed(detail=str(exc))
        self._enter(Stage.DATA_FETCHED)

        result = analyze_series(measurements, self._config.unit_config, self._zone)
        if isinstance(result, EmptySeries):
            log.info("Nightscout returned no readings")
        self._enter(Stage.ANALYZED)
        return result

    def present(
        self, result: PresentationResult, capabilities: ClientCapabilities
    ) -> Presentation:
        """Render a result for the given device."""
        layout = select_layout(
            capabilities.supports_apl,
            self._config.display_mode,
            self._config.unit_config,
            self._zone,
        )
        return PresentationBuilder(layout).build(result)

    def _glucose_response(self, capabilities: ClientCapabilities) -> SkillResponse:
        result = self.run()
        try:
            presentation = self.present(result, capabilities)
        except Exception:
            log.exception("Could not render %s", type(result).__name__)
            self._enter(Stage.FAILED)
            presentation = self.present(InternalFailure(), capabilities)
        else:
            if self._stage is not Stage.FAILED:
                self._enter(Stage.PRESENTED)

        directive = None
        if presentation.document is not None:
            directive = {
                "type": RENDER_DOCUMENT,
                "token": DOCUMENT_TOKEN,
                "document": presentation.document,
                "datasources": presentation.datasources,
            }
        if self._stage is not Stage.FAILED:
            self._enter(Stage.RESPONDED)
        return SkillResponse(speech=presentation.speech, directive=directive)
