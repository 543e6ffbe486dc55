"""
Residency and Employment Gap Detection.

Commercial driver applicants must account for the last 3 years of both
residence and employment. This module checks a submitted history for:

1. Gaps: uncovered spans of more than one month between consecutive
   intervals (or between the oldest interval and the window start)
2. Overlaps: date ranges claimed by two adjacent intervals at once
3. Coverage: for employment, the summed duration of all jobs

Intervals are walked newest-first, starting from an anchor (the start of
the current address, or "now" for employment). The caller supplies
"now"; nothing here reads the system clock.

Example:
    Job A: 01/2020 - 01/2023
    Job B: 05/2023 - 05/2025
    now:   06/2025

    Gap: 02/2023 - 04/2023
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from app.schemas.history import (
    Address,
    GapDetectionResult,
    GapPeriod,
    HistoryInterval,
    Job,
    PeriodType,
)
from app.services.history.dates import (
    COVERAGE_MONTHS,
    add_months,
    end_of_month,
    format_month_year,
    months_between,
    start_of_month,
    three_years_before,
)

logger = logging.getLogger(__name__)


@dataclass
class Span:
    """Interval normalised to month boundaries."""

    start: datetime
    end: datetime

    @classmethod
    def from_interval(cls, interval: HistoryInterval) -> "Span":
        return cls(
            start=start_of_month(interval.from_year, interval.from_month),
            end=end_of_month(interval.to_year, interval.to_month),
        )

    def overlap(self, other: "Span") -> Optional["Span"]:
        """Intersection with another span, or None if they don't overlap."""
        if self.start < other.end and self.end > other.start:
            return Span(start=max(self.start, other.start), end=min(self.end, other.end))
        return None


def is_residency_over_3_years(
    from_month: Optional[int],
    from_year: Optional[int],
    now: datetime,
) -> bool:
    """
    Check whether the current address alone covers the residency window.

    Args:
        from_month: Month (1-12) the applicant moved into the current address
        from_year: Year the applicant moved into the current address
        now: Current time

    Returns:
        True if the move-in month starts strictly before now minus 3 years.
        False when the move-in date has not been filled in yet.
    """
    if not from_month or not from_year:
        return False

    return start_of_month(from_year, from_month) < three_years_before(now)


def check_for_residency_gaps(
    addresses: Sequence[Address],
    current_from_month: int,
    current_from_year: int,
    now: datetime,
) -> GapDetectionResult:
    """
    Find gaps and overlaps in the previous-address history.

    Only complete addresses (street, city, state and zip filled in) are
    analysed. The walk starts at the current address move-in date and
    must reach back to the 3-year threshold; any remainder is reported
    as a trailing gap.

    Args:
        addresses: Previous addresses, in any order
        current_from_month: Current address move-in month
        current_from_year: Current address move-in year
        now: Current time

    Returns:
        GapDetectionResult without total_months
    """
    anchor = start_of_month(current_from_year, current_from_month)
    threshold = three_years_before(now)

    if anchor < threshold:
        return GapDetectionResult(gap_detected=False, periods=[])

    complete = [a for a in addresses if a.is_complete]
    spans = _sorted_spans(complete)

    gaps, last_to = _walk_gaps(spans, anchor)

    # Oldest address still doesn't reach the window start
    if last_to > threshold:
        gaps.append(Span(start=threshold, end=add_months(last_to, -1)))

    overlaps = _adjacent_overlaps(spans)

    logger.debug(
        f"Residency check: {len(complete)}/{len(addresses)} complete, "
        f"{len(gaps)} gaps, {len(overlaps)} overlaps"
    )

    return GapDetectionResult(
        gap_detected=bool(gaps or overlaps),
        periods=_to_periods(gaps, overlaps),
    )


def check_for_employment_gaps(
    jobs: Sequence[Job],
    now: datetime,
) -> GapDetectionResult:
    """
    Find gaps and overlaps in the employment history.

    The walk starts at `now`. There is no trailing gap check; instead the
    history is flagged when the summed duration is under 36 months. An
    empty (or entirely incomplete) history is itself flagged.

    Args:
        jobs: Employment rows, in any order
        now: Current time

    Returns:
        GapDetectionResult including total_months
    """
    complete = [j for j in jobs if j.is_complete]

    if not complete:
        return GapDetectionResult(gap_detected=True, periods=[], total_months=0)

    spans = _sorted_spans(complete)
    gaps, _ = _walk_gaps(spans, now)
    overlaps = _adjacent_overlaps(spans)
    total_months = calculate_job_duration(complete)

    logger.debug(
        f"Employment check: {len(complete)}/{len(jobs)} complete, "
        f"{len(gaps)} gaps, {len(overlaps)} overlaps, {total_months} months"
    )

    return GapDetectionResult(
        gap_detected=bool(gaps or overlaps) or total_months < COVERAGE_MONTHS,
        periods=_to_periods(gaps, overlaps),
        total_months=total_months,
    )


def calculate_job_duration(jobs: Sequence[HistoryInterval]) -> int:
    """
    Sum job durations in months, counting both end months.

    Jan-Jan is 1 month. Jobs are not merged first, so concurrent jobs
    are counted twice; overlaps are reported separately by
    check_for_employment_gaps. Callers must drop incomplete jobs.
    """
    total_months = 0
    for job in jobs:
        span = Span.from_interval(job)
        total_months += months_between(span.end, span.start) + 1
    return total_months


def _sorted_spans(intervals: Sequence[HistoryInterval]) -> List[Span]:
    """Spans ordered by end date, most recent first. Ties keep input order."""
    spans = [Span.from_interval(i) for i in intervals]
    return sorted(spans, key=lambda s: s.end, reverse=True)


def _walk_gaps(spans: List[Span], anchor: datetime) -> Tuple[List[Span], datetime]:
    """
    Walk newest-first spans back from the anchor, collecting gaps.

    Returns the gaps and the start of the last span visited (the anchor
    if there were none).
    """
    gaps: List[Span] = []
    last_to = anchor

    for span in spans:
        # A single missing month or touching months are not a gap
        if months_between(last_to, span.end) > 1:
            gaps.append(Span(start=add_months(span.end, 1), end=add_months(last_to, -1)))
        last_to = span.start

    return gaps, last_to


def _adjacent_overlaps(spans: List[Span]) -> List[Span]:
    overlaps = []
    for current, following in zip(spans, spans[1:]):
        shared = current.overlap(following)
        if shared is not None:
            overlaps.append(shared)
    return overlaps


def _to_periods(gaps: List[Span], overlaps: List[Span]) -> List[GapPeriod]:
    return [
        GapPeriod(from_=format_month_year(s.start), to=format_month_year(s.end), type=kind)
        for spans, kind in ((gaps, PeriodType.GAP), (overlaps, PeriodType.OVERLAP))
        for s in spans
    ]
