"""
Internal value types for the experience pipeline.

Candidate periods come out of the date extractor, get a classification, and
the accepted ones are collapsed into merged periods and gaps. All of them are
frozen so a later stage can never rewrite what an earlier one produced.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Tuple


DAYS_PER_YEAR = 365.25


def years_between(start: date, end: date) -> float:
    """Signed distance between two dates in years of 365.25 days."""
    return (end - start).days / DAYS_PER_YEAR


class DateRangeKind(str, Enum):
    """Which pattern family produced a candidate period."""
    MONTH_TO_PRESENT_PREP = "month_to_present_prep"
    YEAR_TO_PRESENT_PREP = "year_to_present_prep"
    YEAR_RANGE_PREP = "year_range_prep"
    MONTH_SPAN_PREP = "month_span_prep"
    SINGLE_YEAR = "single_year"
    YEAR_ONWARD = "year_onward"
    AFTER_YEAR = "after_year"
    MONTH_RANGE = "month_range"
    MONTH_TO_PRESENT = "month_to_present"
    NUMERIC_RANGE = "numeric_range"
    NUMERIC_TO_PRESENT = "numeric_to_present"
    YEAR_RANGE = "year_range"
    YEAR_TO_PRESENT = "year_to_present"


class PeriodCategory(str, Enum):
    WORK = "work"
    EDUCATION = "education"
    VOLUNTEER = "volunteer"


class GapSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


@dataclass(frozen=True)
class CandidatePeriod:
    """A raw date range found in the text, before classification."""
    matched_text: str
    start_date: date
    end_date: date
    context_window: str
    kind: DateRangeKind

    @property
    def duration_years(self) -> float:
        return years_between(self.start_date, self.end_date)

    @property
    def sources(self) -> Tuple[str, ...]:
        return (self.matched_text,)


@dataclass(frozen=True)
class PeriodClassification:
    category: PeriodCategory
    work_score: int
    volunteer_score: int
    education_score: int
    duration_years: float
    reason: str

    @property
    def is_work(self) -> bool:
        return self.category is PeriodCategory.WORK


@dataclass(frozen=True)
class MergedPeriod:
    """One or more work periods collapsed into a single covering interval."""
    start_date: date
    end_date: date
    sources: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def duration_years(self) -> float:
        return years_between(self.start_date, self.end_date)


@dataclass(frozen=True)
class EmploymentGap:
    start_date: date
    end_date: date
    duration_years: float
    severity: GapSeverity
