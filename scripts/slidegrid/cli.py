"""CLI orchestration for the slide builder."""

from __future__ import annotations

import argparse
import logging
import os
import traceback
from pathlib import Path
from typing import Optional, Sequence

from .api import build_slide, render_preview_file
from .errors import StructuralError
from .model import load_spec_file
from .observability import setup_logging
from .strategies import STRATEGY_REGISTRY, strategies_from_names
from .validation import validate_spec

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve a slide specification into a PPTX slide and/or a PNG preview")
    parser.add_argument("--spec", required=True, help="Path to JSON slide specification")
    parser.add_argument("--output", default=None, help="Output PPTX file path")
    parser.add_argument("--preview", default=None, help="Optional output path for a PNG layout preview")
    parser.add_argument("--preview-scale", type=float, default=1.0, help="Preview scale factor (default: 1.0 = 96 dpi)")
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate the specification, print the report and exit",
    )
    parser.add_argument(
        "--strategies",
        default=None,
        help=f"Comma-separated renderer chain (default: {','.join(STRATEGY_REGISTRY)}); the last must be total",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("SLIDEGRID_LOG_LEVEL", "WARNING"),
        help="Logging level (default: $SLIDEGRID_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--log-format", default="text", choices=["text", "json"], help="Log record format")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show full traceback for unexpected errors",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_format)

    try:
        spec = load_spec_file(Path(args.spec).resolve())

        if args.validate_only:
            report = validate_spec(spec)
            print(report.summary())
            report.raise_for_errors()
            return

        if not args.output and not args.preview:
            raise SystemExit("Nothing to do: pass --output and/or --preview, or --validate-only")

        strategies = strategies_from_names(args.strategies.split(",")) if args.strategies else None
        stage = None

        if args.output:
            result = build_slide(spec, strategies=strategies)
            result.raise_for_failure()
            saved = result.artifact.save(Path(args.output))
            print(f"Saved {saved} (stage: {result.stage_name})")
            stage = result.stage_name

        if args.preview:
            preview = render_preview_file(spec, Path(args.preview), scale=args.preview_scale, stage=stage)
            print(f"Preview {preview}")
    except StructuralError as e:
        raise SystemExit(str(e)) from e
    except Exception as e:
        logger.debug("build failed", exc_info=True)
        if args.debug:
            traceback.print_exc()
        raise SystemExit(f"Slide generation failed: {e}\nPlease retry; run with --debug for details.") from e


def main() -> None:
    run_cli()
