"""
DeviceRank CLI — Read-Only Interface for Device Ranking.

Commands:
    devicerank presets                      — List weight presets
    devicerank rank <catalog.json>          — Show ranked devices
    devicerank explain <catalog.json> <id>  — Show explanation for a device

This CLI is READ-ONLY. It cannot:
    - Modify the catalog
    - Change scoring rules
    - Persist rankings
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from typing import Optional

from ..domain import CATEGORIES, DeviceRankError, RankedResult
from ..ranking.scorer import generate_explanation, generate_short_explanation
from ..validation import load_catalog
from ..weighting.presets import default_registry
from ..weighting.resolver import WeightRequest, parse_weight_value
from .pipeline import RankingRun, run_ranking

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_result_row(result: RankedResult) -> str:
    """Format a single ranked device for display."""
    device = result.device
    brand = f"{device.brand} " if device.brand else ""
    return (
        f"#{result.rank:<3} | Score: {result.total_score:>6.2f} | "
        f"{brand}{device.name} | ID: {device.id}"
    )


def format_weights(weights: dict[str, float]) -> str:
    return ", ".join(f"{name}={weights[name]:.3f}" for name in CATEGORIES)


def print_warnings(run: RankingRun) -> None:
    for warning in run.resolution.warnings:
        print(f"WARNING: {warning}")


# =============================================================================
# ARGUMENT PARSING HELPERS
# =============================================================================

def parse_weight_overrides(pairs: Optional[list[str]]) -> dict[str, Optional[float]]:
    """
    Parse repeated --weight name=value options.

    Values that do not parse as numbers are passed on as None so the
    resolver treats them as "not supplied".
    """
    overrides: dict[str, Optional[float]] = {}
    for pair in pairs or []:
        name, sep, raw = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"expected name=value, got '{pair}'")
        overrides[name.strip()] = parse_weight_value(raw)
    return overrides


def build_request(args: argparse.Namespace) -> WeightRequest:
    return WeightRequest(
        preset=args.preset,
        overrides=parse_weight_overrides(args.weight),
    )


def _parse_reference_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")


def _execute(args: argparse.Namespace) -> RankingRun:
    devices = load_catalog(args.catalog)
    return run_ranking(
        devices,
        request=build_request(args),
        reference_date=args.as_of,
        max_workers=args.workers,
    )


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_presets(args: argparse.Namespace) -> int:
    """List the available weight presets."""
    registry = default_registry()

    print("DeviceRank — Weight Presets")
    print("=" * 50)
    for name in registry.names():
        marker = " (default)" if name == registry.default_name else ""
        print(f"{name}{marker}")
        print(f"  {format_weights(registry[name].as_dict())}")
    return 0


def cmd_rank(args: argparse.Namespace) -> int:
    """Rank a catalog and show the requested page."""
    try:
        run = _execute(args)
    except (DeviceRankError, OSError) as e:
        print("ERROR: Ranking failed")
        print(f"Reason: {e}")
        return 1

    page = run.page(args.offset, args.limit)

    if args.json:
        payload = {
            "weights": run.weights.as_dict(),
            "source": run.resolution.source,
            "preset": run.resolution.preset_name,
            "warnings": list(run.resolution.warnings),
            "total": len(run.results),
            "rankings": [result.to_dict() for result in page],
        }
        print(json.dumps(payload, indent=2))
        return 0

    print("DeviceRank — Ranked Devices")
    print("=" * 70)
    print_warnings(run)
    print(f"Weights ({run.resolution.source}): {format_weights(run.weights.as_dict())}")
    print()

    if not page:
        print("No devices found.")
        return 0

    for result in page:
        print(format_result_row(result))
        print(f"      {generate_short_explanation(result, run.weights)}")

    print()
    print(f"Showing {len(page)} of {len(run.results)} devices")
    print()
    print("Use 'devicerank explain <catalog> <id>' for a detailed explanation.")
    return 0


def cmd_explain(args: argparse.Namespace) -> int:
    """Show the explanation for one device."""
    try:
        run = _execute(args)
    except (DeviceRankError, OSError) as e:
        print("ERROR: Ranking failed")
        print(f"Reason: {e}")
        return 1

    result = run.get_result_by_id(args.device_id)
    if result is None:
        print(f"Device not found: {args.device_id}")
        print()
        print("Available devices:")
        for r in run.results:
            print(f"  {r.device_id} — {r.device.name}")
        return 1

    print("DeviceRank — Device Explanation")
    print("=" * 50)
    print_warnings(run)
    print()
    print(generate_explanation(result, run.weights, run.engine))
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def _add_ranking_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("catalog", help="Path to a JSON device catalog")
    parser.add_argument("--preset", help="Weight preset name (default: balanced)")
    parser.add_argument(
        "--weight",
        action="append",
        metavar="NAME=VALUE",
        help="Custom weight override, repeatable (overrides win over --preset)",
    )
    parser.add_argument(
        "--as-of",
        type=_parse_reference_date,
        default=None,
        help="Reference date for recency scoring (YYYY-MM-DD, default: today)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Score devices on this many threads",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="devicerank",
        description="DeviceRank Engine — Explainable Multi-Criteria Device Ranking",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Presets command
    presets_parser = subparsers.add_parser(
        "presets",
        help="List weight presets",
    )
    presets_parser.set_defaults(func=cmd_presets)

    # Rank command
    rank_parser = subparsers.add_parser(
        "rank",
        help="Rank devices in a catalog",
    )
    _add_ranking_options(rank_parser)
    rank_parser.add_argument("--offset", type=int, default=0, help="Skip this many results")
    rank_parser.add_argument("--limit", type=int, default=50, help="Show at most this many results")
    rank_parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    rank_parser.set_defaults(func=cmd_rank)

    # Explain command
    explain_parser = subparsers.add_parser(
        "explain",
        help="Show explanation for a device",
    )
    _add_ranking_options(explain_parser)
    explain_parser.add_argument("device_id", help="Device ID to explain")
    explain_parser.set_defaults(func=cmd_explain)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))


if __name__ == "__main__":
    sys.exit(main())
