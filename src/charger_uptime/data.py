import logging
import re
import sys
from pathlib import Path
from typing import Dict, Iterator, List, Set, Tuple

import requests

from .uptime import U32_MAX, U64_MAX, Report

logger = logging.getLogger(__name__)

STATIONS_HEADER = "[Stations]"
REPORTS_HEADER = "[Charger Availability Reports]"

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")

_STATION_ID_ERROR = "Station and charger IDs must be unsigned 32-bit integers."
_CHARGER_ID_ERROR = "Charger IDs must be unsigned 32-bit integers."
_TIME_ERROR = "Start and end times must be unsigned 64-bit integers."


class FormatError(ValueError):
    """Raised when an input document does not follow the expected layout."""


def fetch_input(source: str) -> str:
    """Read the input document from stdin, a URL or a local file."""
    if source == "-":
        logger.debug("Reading input from stdin")
        return sys.stdin.read()
    if source.startswith(("http://", "https://")):
        logger.debug("Fetching input from %s", source)
        resp = requests.get(source, timeout=30)
        resp.raise_for_status()
        logger.debug("Fetched %d bytes from remote", len(resp.content))
        return resp.text
    path = Path(source)
    logger.debug("Loading input from %s", path)
    return path.read_text(encoding="utf-8")


def _parse_unsigned(token: str, maximum: int, message: str) -> int:
    if not _UNSIGNED_RE.fullmatch(token):
        raise FormatError(message)
    value = int(token)
    if value > maximum:
        raise FormatError(message)
    return value


def _parse_bool(token: str) -> bool:
    return token.lower() == "true"


def parse_stations(lines: Iterator[str]) -> Tuple[Dict[int, int], List[int]]:
    """Consume the stations section.

    Returns a mapping of charger id -> station id and the station ids in the
    order they were listed. Reading stops after the blank separator line.
    """
    header = next(lines, None)
    if header is None or header.rstrip("\r\n") != STATIONS_HEADER:
        raise FormatError("Input file is formatted incorrectly.")

    chargers: Dict[int, int] = {}
    stations: List[int] = []
    seen: Set[int] = set()
    for line in lines:
        if not line.strip():
            break
        tokens = line.split()
        station_id = _parse_unsigned(tokens[0], U32_MAX, _STATION_ID_ERROR)
        charger_ids = [_parse_unsigned(t, U32_MAX, _STATION_ID_ERROR) for t in tokens[1:]]
        if station_id not in seen:
            seen.add(station_id)
            stations.append(station_id)
        for charger_id in charger_ids:
            owner = chargers.setdefault(charger_id, station_id)
            if owner != station_id:
                raise FormatError(
                    f"Charger {charger_id} is listed under stations {owner} and {station_id}."
                )
    else:
        raise FormatError("Stations section must be followed by a blank line.")

    logger.debug("Parsed %d stations with %d chargers", len(stations), len(chargers))
    return chargers, stations


def parse_reports(
    lines: Iterator[str],
    chargers: Dict[int, int],
    stations: List[int],
) -> Dict[int, List[Report]]:
    """Consume the availability reports section, grouping reports by station.

    Every known station is present in the result, with an empty list when
    none of its chargers reported.
    """
    header = next(lines, None)
    if header is None or header.rstrip("\r\n") != REPORTS_HEADER:
        raise FormatError("Input file is formatted incorrectly.")

    result: Dict[int, List[Report]] = {station_id: [] for station_id in stations}
    count = 0
    for line in lines:
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) < 4:
            raise FormatError(
                "Availability reports must contain a charger ID, start time, end time and up flag."
            )
        charger_id = _parse_unsigned(tokens[0], U32_MAX, _CHARGER_ID_ERROR)
        station_id = chargers.get(charger_id)
        if station_id is None:
            raise FormatError("Each charger must be present at a station.")
        start = _parse_unsigned(tokens[1], U64_MAX, _TIME_ERROR)
        end = _parse_unsigned(tokens[2], U64_MAX, _TIME_ERROR)
        if end <= start:
            raise FormatError(
                f"Report for charger {charger_id} ends at or before its start."
            )
        result[station_id].append(Report(start, end, _parse_bool(tokens[3])))
        count += 1

    logger.debug("Parsed %d availability reports", count)
    return result


def parse_input(text: str) -> Dict[int, List[Report]]:
    """Parse a full input document into station id -> reports."""
    lines = iter(text.splitlines())
    chargers, stations = parse_stations(lines)
    return parse_reports(lines, chargers, stations)


def load_station_reports(source: str) -> Dict[int, List[Report]]:
    """Fetch and parse the input document at ``source``."""
    return parse_input(fetch_input(source))
