"""Slide renderer - resolves a grid-based JSON slide specification.

Builds one slide through the tiered renderer chain (precision, heuristic,
minimal) and writes it as a .pptx, plus an optional PNG layout preview that
uses the same geometry.
"""

from __future__ import annotations

from slidegrid.cli import run_cli


def main() -> None:
    run_cli()


if __name__ == "__main__":
    main()
