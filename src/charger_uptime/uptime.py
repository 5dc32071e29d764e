"""Interval consolidation and uptime percentages for charging stations."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

logger = logging.getLogger(__name__)

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1

StationUptime = Tuple[int, int]


@dataclass(frozen=True)
class Report:
    """One interval of uptime or downtime reported by a charger.

    Times are unsigned 64-bit nanosecond timestamps and ``end_time`` is
    expected to be strictly greater than ``start_time``.
    """

    start_time: int
    end_time: int
    up: bool


def observed_span(reports: Iterable[Report]) -> Tuple[int, int] | None:
    """Return ``(earliest start, latest end)`` over all reports."""
    start: int | None = None
    end: int | None = None
    for r in reports:
        if start is None or r.start_time < start:
            start = r.start_time
        if end is None or r.end_time > end:
            end = r.end_time
    if start is None or end is None:
        return None
    return start, end


def merge_uptime(reports: Iterable[Report]) -> List[Tuple[int, int]]:
    """Return the union of the uptime reports as sorted disjoint intervals."""
    ordered = sorted(
        (r for r in reports if r.up),
        key=lambda r: (r.start_time, r.end_time),
    )
    if not ordered:
        return []

    merged: List[Tuple[int, int]] = []
    m_start, m_end = ordered[0].start_time, ordered[0].end_time
    for r in ordered[1:]:
        # Sorted by start, so only the end decides containment.
        if r.end_time < m_end:
            continue
        if r.start_time <= m_end:
            m_end = r.end_time
        else:
            merged.append((m_start, m_end))
            m_start, m_end = r.start_time, r.end_time
    merged.append((m_start, m_end))
    return merged


def compute_uptime(reports: Sequence[Report]) -> int:
    """Return the truncated uptime percentage of a single station.

    The denominator is the observed span from the earliest start to the
    latest end across all reports; time not covered by an uptime report
    inside that span counts as downtime. A station with no reports, or
    only downtime reports, yields 0.
    """
    span = observed_span(reports)
    if span is None:
        return 0
    total = span[1] - span[0]
    if total <= 0:
        logger.debug("Observed span of %d reports is empty", len(reports))
        return 0

    uptime = sum(end - start for start, end in merge_uptime(reports))
    # Python ints are unbounded so 100 * uptime cannot overflow.
    return (uptime * 100) // total


def compute_all_uptimes(
    station_reports: Dict[int, Sequence[Report]],
    workers: int = 1,
) -> List[StationUptime]:
    """Compute ``(station_id, percentage)`` for every station in the mapping.

    Stations with an empty report list are included with 0. The order of
    the result follows the mapping; use :func:`sort_uptimes` to order it.

    With ``workers > 1`` stations are computed concurrently on a thread
    pool. The work is CPU-bound and holds the GIL, so this does not run
    stations in parallel or make the computation faster.
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    stations = list(station_reports.items())
    logger.debug("Computing uptime for %d stations with %d workers", len(stations), workers)

    if workers == 1 or len(stations) < 2:
        return [(station_id, compute_uptime(reports)) for station_id, reports in stations]

    results: List[StationUptime] = [(0, 0)] * len(stations)

    def _compute(index: int) -> None:
        station_id, reports = stations[index]
        results[index] = (station_id, compute_uptime(reports))

    with ThreadPoolExecutor(max_workers=workers) as pool:
        # list() re-raises any exception from a worker
        list(pool.map(_compute, range(len(stations))))
    return results


def sort_uptimes(results: Iterable[StationUptime]) -> List[StationUptime]:
    """Order results by station id compared as unsigned 32-bit integers."""
    return sorted(results, key=lambda item: item[0] & U32_MAX)


def station_uptimes(
    station_reports: Dict[int, Sequence[Report]],
    workers: int = 1,
) -> List[StationUptime]:
    """Compute and sort the uptime of every station."""
    return sort_uptimes(compute_all_uptimes(station_reports, workers=workers))
