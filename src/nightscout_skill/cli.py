"""CLI para previsualizar localmente la respuesta del skill."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace

from nightscout_skill.config import SkillConfig
from nightscout_skill.model import GlucoseUnit, NormalDisplay
from nightscout_skill.pipeline import (
    GLUCOSE_INTENTS,
    ClientCapabilities,
    RequestPipeline,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description=(
            "Preview the Nightscout skill response using NIGHTSCOUT_* "
            "environment variables."
        )
    )
    parser.add_argument(
        "--intent",
        default="DisplayGraphIntent",
        help="Request type or intent name (default: DisplayGraphIntent).",
    )
    parser.add_argument(
        "--no-display",
        action="store_true",
        help="Simulate a device without APL support (speech only).",
    )
    parser.add_argument(
        "--units",
        choices=["mg/dl", "mmol"],
        help="Override NIGHTSCOUT_UNITS.",
    )
    parser.add_argument("--timezone", help="Override NIGHTSCOUT_TIMEZONE.")
    parser.add_argument(
        "--display-mode",
        choices=["rows", "chart"],
        help="Override NIGHTSCOUT_DISPLAY_MODE.",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def build_config(ns: argparse.Namespace) -> SkillConfig:
    """Config del entorno con los overrides de la línea de comandos."""
    config = SkillConfig.from_env()
    if ns.units:
        config = replace(config, units=GlucoseUnit.parse(ns.units))
    if ns.timezone:
        config = replace(config, timezone=ns.timezone)
    if ns.display_mode:
        config = replace(config, display_mode=ns.display_mode)
    return config


def main(argv: list[str] | None = None) -> int:
    """Run the preview CLI.

    Returns:
        Exit code (0 when readings were shown).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    pipeline = RequestPipeline(build_config(ns))
    capabilities = ClientCapabilities(supports_apl=not ns.no_display)

    if ns.intent not in GLUCOSE_INTENTS:
        reply = pipeline.respond(ns.intent, capabilities)
        print(reply.speech)
        return 0

    result = pipeline.run()
    presentation = pipeline.present(result, capabilities)
    print(presentation.speech)
    if presentation.datasources is not None:
        print(json.dumps(presentation.datasources, indent=2, ensure_ascii=False))
    return 0 if isinstance(result, NormalDisplay) else 1
