"""Documentos APL estáticos; los datos llegan por ``datasources.payload``."""

from __future__ import annotations

from typing import Any

APL_VERSION = "2024.2"

ROWS_DOCUMENT: dict[str, Any] = {
    "type": "APL",
    "version": APL_VERSION,
    "mainTemplate": {
        "parameters": ["payload"],
        "items": [
            {
                "type": "Container",
                "width": "100vw",
                "height": "100vh",
                "paddingLeft": "32dp",
                "paddingRight": "32dp",
                "paddingTop": "24dp",
                "items": [
                    {
                        "type": "Container",
                        "direction": "row",
                        "alignItems": "center",
                        "items": [
                            {
                                "type": "Text",
                                "text": "${payload.summary.latestValue}",
                                "fontSize": "72dp",
                                "fontWeight": "bold",
                            },
                            {
                                "type": "Text",
                                "text": "${payload.summary.trendIcon}",
                                "fontSize": "64dp",
                                "paddingLeft": "16dp",
                            },
                            {
                                "type": "Text",
                                "text": "${payload.summary.trendText}",
                                "fontSize": "32dp",
                                "paddingLeft": "16dp",
                            },
                        ],
                    },
                    {
                        "type": "Text",
                        "text": (
                            "Last updated: ${payload.summary.lastUpdated}"
                            " · Span: ${payload.summary.elapsedHours}"
                            " · Target: ${payload.summary.targetRange}"
                        ),
                        "fontSize": "22dp",
                        "color": "gray",
                    },
                    {
                        "type": "Sequence",
                        "data": "${payload.rows}",
                        "grow": 1,
                        "paddingTop": "16dp",
                        "item": {
                            "type": "Container",
                            "direction": "row",
                            "paddingBottom": "8dp",
                            "items": [
                                {
                                    "type": "Text",
                                    "text": "${data.time}",
                                    "width": "35%",
                                    "fontSize": "28dp",
                                },
                                {
                                    "type": "Text",
                                    "text": "${data.status}",
                                    "width": "10%",
                                    "fontSize": "28dp",
                                },
                                {
                                    "type": "Text",
                                    "text": "${data.value}",
                                    "width": "35%",
                                    "fontSize": "28dp",
                                },
                                {
                                    "type": "Text",
                                    "text": "${data.trend}",
                                    "width": "20%",
                                    "fontSize": "28dp",
                                },
                            ],
                        },
                    },
                ],
            }
        ],
    },
}

CHART_DOCUMENT: dict[str, Any] = {
    "type": "APL",
    "version": APL_VERSION,
    "mainTemplate": {
        "parameters": ["payload"],
        "items": [
            {
                "type": "Container",
                "width": "100vw",
                "height": "100vh",
                "alignItems": "center",
                "justifyContent": "center",
                "items": [
                    {
                        "type": "Image",
                        "when": "${payload.graphUrl != ''}",
                        "source": "${payload.graphUrl}",
                        "scale": "best-fit",
                        "width": "95vw",
                        "height": "95vh",
                        "align": "center",
                    },
                    {
                        "type": "Text",
                        "when": "${payload.graphUrl == ''}",
                        "text": "${payload.message}",
                        "fontSize": "48dp",
                        "textAlign": "center",
                    },
                    {
                        "type": "Text",
                        "text": "Last updated: ${payload.timestamp}",
                        "position": "absolute",
                        "bottom": "8px",
                        "right": "24px",
                        "color": "gray",
                        "fontSize": "24px",
                    },
                ],
            }
        ],
    },
}
