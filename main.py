"""Command-line entry point: validate sheet exports and write the verdicts."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from config import load_config
from core import get_logger, setup_logger
from core.exceptions import ConfigurationError
from services.validation_runner import run_validation_async
from utils.csv_parser import parse_entries_csv, parse_recharges_csv, write_verdicts_csv

logger = get_logger("main")

EXIT_CONFIGURATION_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate lottery tickets against player recharges")
    parser.add_argument("entries", type=Path, help="Entries sheet CSV export")
    parser.add_argument(
        "recharges",
        type=Path,
        nargs="?",
        help="Recharge sheet CSV export (omit when no recharge data is available)",
    )
    parser.add_argument("-o", "--output", type=Path, help="Write verdict CSV here instead of stdout")
    parser.add_argument("--batch-size", type=int, help="Verdicts between cooperative yields")
    parser.add_argument("--json", action="store_true", help="Print the summary report as JSON")
    return parser


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR

    setup_logger(name="", level=config.log_level, log_file=config.log_file)

    entries = parse_entries_csv(args.entries.read_text(encoding="utf-8-sig"))
    recharges = None
    if args.recharges is not None:
        recharges = parse_recharges_csv(args.recharges.read_text(encoding="utf-8-sig"))
    logger.info(f"Loaded {len(entries)} entries and {len(recharges or [])} recharges")

    try:
        result = await run_validation_async(
            entries, recharges, config=config, batch_size=args.batch_size
        )
    except ConfigurationError as e:
        logger.error(f"Validation aborted: {e}")
        return EXIT_CONFIGURATION_ERROR

    export = write_verdicts_csv(result.verdicts)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(export, encoding="utf-8")
    else:
        sys.stdout.write(export)

    if args.json:
        # stdout carries the CSV unless it went to a file
        stream = sys.stdout if args.output else sys.stderr
        print(json.dumps(result.report.to_dict(), indent=2), file=stream)
    return 0


def cli() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Validation stopped by user")


if __name__ == "__main__":
    cli()
