# src/main.py — v2
"""CLI entry point — analyze, batch, health commands.

Usage:
    mpfscore analyze <city> <sector>
    mpfscore batch <file>
    mpfscore health
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from mpfscore.core.errors import MarketScoreError
from mpfscore.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except MarketScoreError as exc:
        print(f"error [{exc.code.value}]: {exc.message}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="mpfscore",
        description=f"mpfscore v{__version__} — Market potential scoring for city localities",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- analyze ---
    p_analyze = subparsers.add_parser(
        "analyze", help="Score a single city/locality pair",
    )
    p_analyze.add_argument("city", help="City name, e.g. Noida")
    p_analyze.add_argument("sector", help="Locality or sector, e.g. 'Sector 62'")
    p_analyze.set_defaults(func=_cmd_analyze)

    # --- batch ---
    p_batch = subparsers.add_parser(
        "batch", help="Score every 'city,sector' line of a file",
    )
    p_batch.add_argument("file", type=Path, help="Input file, one 'city,sector' per line")
    p_batch.set_defaults(func=_cmd_batch)

    # --- health ---
    p_health = subparsers.add_parser("health", help="Show service status")
    p_health.set_defaults(func=_cmd_health)

    return parser


async def _cmd_analyze(args: argparse.Namespace) -> int:
    """Submit one pair and print the resolved record."""
    service = _create_service(args.verbose)
    try:
        submitted = service.submit(args.city, args.sector)
        response = await service.fetch(submitted.id)
    finally:
        await service.aclose()

    print(response.model_dump_json(by_alias=True, indent=2))
    return 0


async def _cmd_batch(args: argparse.Namespace) -> int:
    """Process a file of pairs; repeated inputs resolve to the same id."""
    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1

    pairs = _read_pairs(file_path)
    service = _create_service(args.verbose)
    errors = 0
    ids: list[str] = []
    try:
        for line_no, city, sector in pairs:
            try:
                submitted = service.submit(city, sector)
            except MarketScoreError as exc:
                errors += 1
                print(json.dumps({
                    "line": line_no,
                    "errorCode": exc.code.value,
                    "error": exc.message,
                }))
                continue
            response = await service.fetch(submitted.id)
            ids.append(submitted.id)
            print(json.dumps({
                "line": line_no,
                **response.model_dump(mode="json", by_alias=True),
            }))
    finally:
        await service.aclose()

    print("\nBatch complete:", file=sys.stderr)
    print(f"  Lines:      {len(pairs)}", file=sys.stderr)
    print(f"  Requests:   {len(set(ids))}", file=sys.stderr)
    print(f"  Rejected:   {errors}", file=sys.stderr)
    return 0


async def _cmd_health(args: argparse.Namespace) -> int:
    service = _create_service(args.verbose)
    try:
        health = service.health()
    finally:
        await service.aclose()
    print(health.model_dump_json(by_alias=True, indent=2))
    return 0


def _read_pairs(path: Path) -> list[tuple[int, str, str]]:
    """Parse 'city,sector' lines; blank lines and '#' comments are skipped."""
    pairs: list[tuple[int, str, str]] = []
    for line_no, line in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        city, _, sector = text.partition(",")
        pairs.append((line_no, city.strip(), sector.strip()))
    return pairs


def _create_service(verbose: bool):
    """Load settings, configure logging and build the service."""
    from mpfscore.api.facade import create_service
    from mpfscore.config.settings import load_settings
    from mpfscore.logging.logger import setup_logging

    overrides = {"log_level": "DEBUG"} if verbose else {}
    settings = load_settings(**overrides)
    setup_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    return create_service(settings)


if __name__ == "__main__":
    sys.exit(main())
