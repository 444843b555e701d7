"""Punto de entrada de ``python -m nightscout_skill``."""

from __future__ import annotations

from nightscout_skill.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
