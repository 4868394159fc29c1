"""
End-to-end experience extraction for one CV.

Pipeline:
  1. filter education/volunteer sections out of the text
  2. extract candidate date ranges from the filtered text
  3. classify each range against the ORIGINAL text
  4. merge accepted work periods and detect gaps
  5. estimate how far the result can be trusted
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from cv_screener.core.confidence_calculator import ConfidenceCalculator
from cv_screener.core.date_extractor import extract_date_ranges
from cv_screener.core.interval_merger import calculate_total_years
from cv_screener.core.period_classifier import classify_period
from cv_screener.core.periods import CandidatePeriod, EmploymentGap, MergedPeriod, PeriodClassification
from cv_screener.core.schemas import ExperienceConfidence
from cv_screener.core.section_filter import filter_education_and_volunteer

logger = logging.getLogger(__name__)


@dataclass
class ExperienceResult:
    total_years: float
    merged_periods: List[MergedPeriod]
    gaps: List[EmploymentGap]
    confidence: ExperienceConfidence
    work_periods: List[Tuple[CandidatePeriod, PeriodClassification]] = field(default_factory=list)
    excluded_periods: List[Tuple[CandidatePeriod, PeriodClassification]] = field(default_factory=list)
    candidate_count: int = 0
    original_length: int = 0
    filtered_length: int = 0
    removed_sections: List[str] = field(default_factory=list)


def extract_experience(cv_text: str, today: Optional[date] = None) -> ExperienceResult:
    today = today or date.today()
    logger.debug("Starting experience extraction (%d characters)", len(cv_text))

    filtered_text, removed_sections = filter_education_and_volunteer(cv_text)
    candidates = extract_date_ranges(filtered_text, today=today)
    logger.debug("Filtered text: %d characters, %d candidate ranges", len(filtered_text), len(candidates))

    accepted: List[Tuple[CandidatePeriod, PeriodClassification]] = []
    excluded: List[Tuple[CandidatePeriod, PeriodClassification]] = []
    for period in candidates:
        classification = classify_period(period, cv_text)
        if classification.is_work:
            accepted.append((period, classification))
        else:
            excluded.append((period, classification))
            logger.debug("Excluded %r as %s", period.matched_text, classification.category.value)

    work_periods = [period for period, _ in accepted]
    timeline = calculate_total_years(work_periods)
    confidence = ConfidenceCalculator.experience(work_periods, timeline.merged_periods, timeline.gaps, cv_text)

    logger.info(
        "Experience extracted: %d work periods, %.1f years, %d gaps, confidence %d%%",
        len(work_periods), timeline.total_years, len(timeline.gaps), confidence.overall_confidence,
    )

    return ExperienceResult(
        total_years=timeline.total_years,
        merged_periods=timeline.merged_periods,
        gaps=timeline.gaps,
        confidence=confidence,
        work_periods=accepted,
        excluded_periods=excluded,
        candidate_count=len(candidates),
        original_length=len(cv_text),
        filtered_length=len(filtered_text),
        removed_sections=removed_sections,
    )
