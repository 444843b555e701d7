"""Adaptador ask-sdk: handlers de Alexa y punto de entrada de AWS Lambda."""

from __future__ import annotations

import logging

from ask_sdk_core.dispatch_components import (
    AbstractExceptionHandler,
    AbstractRequestHandler,
)
from ask_sdk_core.handler_input import HandlerInput
from ask_sdk_core.skill_builder import SkillBuilder
from ask_sdk_core.utils import (
    get_intent_name,
    get_request_type,
    get_supported_interfaces,
    is_intent_name,
    is_request_type,
)
from ask_sdk_model import Response
from ask_sdk_model.interfaces.alexa.presentation.apl import RenderDocumentDirective

from nightscout_skill.config import SkillConfig
from nightscout_skill.pipeline import (
    GLUCOSE_INTENTS,
    HELP_INTENT,
    STOP_INTENTS,
    ClientCapabilities,
    RequestPipeline,
    SkillResponse,
)

log = logging.getLogger(__name__)
log.setLevel(logging.INFO)

ERROR_TEXT = "Sorry, I encountered an error. Please try again."


def capabilities_for(handler_input: HandlerInput) -> ClientCapabilities:
    """Read APL support from the request envelope."""
    interfaces = get_supported_interfaces(handler_input)
    apl = getattr(interfaces, "alexa_presentation_apl", None) if interfaces else None
    return ClientCapabilities(supports_apl=apl is not None)


def to_response(handler_input: HandlerInput, reply: SkillResponse) -> Response:
    """Convert a :class:`SkillResponse` into an ask-sdk Response."""
    builder = handler_input.response_builder.speak(reply.speech)
    if reply.directive is not None:
        builder.add_directive(
            RenderDocumentDirective(
                token=reply.directive["token"],
                document=reply.directive["document"],
                datasources=reply.directive["datasources"],
            )
        )
    if reply.reprompt:
        builder.ask(reply.reprompt)
    builder.set_should_end_session(not reply.keep_session_open)
    return builder.response


def _respond(handler_input: HandlerInput, intent: str) -> Response:
    pipeline = RequestPipeline(SkillConfig.from_env())
    reply = pipeline.respond(intent, capabilities_for(handler_input))
    return to_response(handler_input, reply)


class GlucoseRequestHandler(AbstractRequestHandler):
    """Launch and graph intents: fetch readings and show them."""

    def can_handle(self, handler_input: HandlerInput) -> bool:
        if is_request_type("LaunchRequest")(handler_input):
            return True
        return is_request_type("IntentRequest")(handler_input) and (
            get_intent_name(handler_input) in GLUCOSE_INTENTS
        )

    def handle(self, handler_input: HandlerInput) -> Response:
        intent = get_request_type(handler_input)
        if intent == "IntentRequest":
            intent = get_intent_name(handler_input)
        return _respond(handler_input, intent)


class HelpIntentHandler(AbstractRequestHandler):
    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_intent_name(HELP_INTENT)(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        return _respond(handler_input, HELP_INTENT)


class CancelOrStopIntentHandler(AbstractRequestHandler):
    def can_handle(self, handler_input: HandlerInput) -> bool:
        return any(is_intent_name(name)(handler_input) for name in STOP_INTENTS)

    def handle(self, handler_input: HandlerInput) -> Response:
        return _respond(handler_input, get_intent_name(handler_input))


class FallbackIntentHandler(AbstractRequestHandler):
    """Any other intent, including AMAZON.FallbackIntent."""

    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_request_type("IntentRequest")(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        return _respond(handler_input, get_intent_name(handler_input))


class SessionEndedRequestHandler(AbstractRequestHandler):
    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_request_type("SessionEndedRequest")(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        reason = getattr(handler_input.request_envelope.request, "reason", None)
        log.info("Session ended with reason: %s", reason)
        return handler_input.response_builder.response


class CatchAllExceptionHandler(AbstractExceptionHandler):
    def can_handle(self, handler_input: HandlerInput, exception: Exception) -> bool:
        return True

    def handle(self, handler_input: HandlerInput, exception: Exception) -> Response:
        log.error("Error handled: %s", exception, exc_info=exception)
        return (
            handler_input.response_builder.speak(ERROR_TEXT)
            .ask(ERROR_TEXT)
            .response
        )


def build_skill_builder() -> SkillBuilder:
    """Register handlers in dispatch order (fallback last)."""
    sb = SkillBuilder()
    sb.add_request_handler(GlucoseRequestHandler())
    sb.add_request_handler(HelpIntentHandler())
    sb.add_request_handler(CancelOrStopIntentHandler())
    sb.add_request_handler(SessionEndedRequestHandler())
    sb.add_request_handler(FallbackIntentHandler())
    sb.add_exception_handler(CatchAllExceptionHandler())
    return sb


lambda_handler = build_skill_builder().lambda_handler()
