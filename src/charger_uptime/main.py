import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

import requests

from .config import load_settings
from .data import FormatError, load_station_reports
from .logging_utils import setup_logging
from .render import OUTPUT_FORMATS, render
from .uptime import station_uptimes

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Raised instead of exiting when the command line is invalid."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _fail(message: str) -> int:
    print("ERROR")
    logger.error("%s", message)
    return 1


def run(
    source: str,
    output: Optional[Path] = None,
    output_format: str = "text",
    workers: int = 1,
) -> int:
    """Compute station uptimes for ``source`` and write the report."""
    start = time.monotonic()
    try:
        station_reports = load_station_reports(source)
    except FormatError as exc:
        return _fail(str(exc))
    except FileNotFoundError:
        return _fail(f"Input file {source} not found.")
    except (IsADirectoryError, PermissionError, UnicodeDecodeError) as exc:
        return _fail(f"Input file {source} cannot be read: {exc}")
    except requests.RequestException as exc:
        return _fail(f"Fetching {source} failed: {exc}")

    uptimes = station_uptimes(station_reports, workers=workers)
    text = render(uptimes, output_format)
    if output is None:
        sys.stdout.write(text)
    else:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(text, encoding="utf-8")
        except OSError as exc:
            return _fail(f"Output file {output} cannot be written: {exc}")
        logger.info("Wrote report to %s", output)
    logger.info(
        "Computed uptime for %d stations in %.3f s",
        len(uptimes),
        time.monotonic() - start,
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = load_settings()
    except ValueError as exc:
        setup_logging()
        return _fail(str(exc))

    parser = _ArgumentParser(
        description="Compute the uptime percentage of each charging station"
    )
    parser.add_argument(
        "input",
        help="Input file path, '-' for stdin, or an http(s) URL",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the report to this file instead of stdout",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default=settings.output_format,
        help="Report format (default: %(default)s)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.workers,
        help="Threads used to compute stations concurrently (default: %(default)s)",
    )
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=settings.debug,
        help="Enable debug logging",
    )
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        setup_logging(settings.debug)
        return _fail(f"Invalid arguments: {exc}")

    setup_logging(args.debug)

    if args.workers < 1:
        return _fail("--workers must be at least 1")

    return run(args.input, args.output, args.output_format, args.workers)


if __name__ == "__main__":
    sys.exit(main())
