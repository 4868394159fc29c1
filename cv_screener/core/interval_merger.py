"""
Interval merging and employment gap detection.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from cv_screener.core.periods import (
    CandidatePeriod,
    EmploymentGap,
    GapSeverity,
    MergedPeriod,
    years_between,
)

logger = logging.getLogger(__name__)

MIN_GAP_YEARS = 0.08  # ~29 days
MINOR_GAP_LIMIT = 0.5
MODERATE_GAP_LIMIT = 2.0

Interval = Union[CandidatePeriod, MergedPeriod]


@dataclass(frozen=True)
class ExperienceTimeline:
    total_years: float = 0.0
    merged_periods: List[MergedPeriod] = field(default_factory=list)
    gaps: List[EmploymentGap] = field(default_factory=list)


def merge_periods(periods: Sequence[Interval]) -> List[MergedPeriod]:
    """
    Collapse overlapping or touching periods, sorted by start date.

    A period starting on or before the running period's end extends it.
    Merging an already merged list returns an equal list.
    """
    if not periods:
        return []

    ordered = sorted(periods, key=lambda p: p.start_date)
    merged: List[MergedPeriod] = []

    current_start = ordered[0].start_date
    current_end = ordered[0].end_date
    current_sources = list(ordered[0].sources)

    for nxt in ordered[1:]:
        if nxt.start_date <= current_end:
            current_end = max(current_end, nxt.end_date)
            current_sources.extend(nxt.sources)
            logger.debug("Merged overlapping period %s into %s..%s", nxt.sources, current_start, current_end)
        else:
            merged.append(MergedPeriod(current_start, current_end, tuple(current_sources)))
            current_start, current_end = nxt.start_date, nxt.end_date
            current_sources = list(nxt.sources)

    merged.append(MergedPeriod(current_start, current_end, tuple(current_sources)))
    return merged


def gap_severity(gap_years: float) -> GapSeverity:
    if gap_years < MINOR_GAP_LIMIT:
        return GapSeverity.MINOR
    if gap_years < MODERATE_GAP_LIMIT:
        return GapSeverity.MODERATE
    return GapSeverity.SIGNIFICANT


def detect_gaps(merged: Sequence[MergedPeriod]) -> List[EmploymentGap]:
    """Gaps longer than ~1 month between consecutive merged periods."""
    gaps: List[EmploymentGap] = []
    for prev, curr in zip(merged, merged[1:]):
        gap_years = years_between(prev.end_date, curr.start_date)
        if gap_years <= MIN_GAP_YEARS:
            continue
        severity = gap_severity(gap_years)
        gaps.append(EmploymentGap(prev.end_date, curr.start_date, gap_years, severity))
        logger.debug(
            "Employment gap detected: %.1f years (%s) between %s and %s",
            gap_years, severity.value, prev.end_date, curr.start_date,
        )
    return gaps


def calculate_total_years(work_periods: Sequence[Interval]) -> ExperienceTimeline:
    """Merge accepted work periods, sum their length and list the gaps between them."""
    merged = merge_periods(work_periods)
    total = sum(p.duration_years for p in merged)
    return ExperienceTimeline(total_years=total, merged_periods=merged, gaps=detect_gaps(merged))
