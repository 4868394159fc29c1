"""
Confidence scoring for experience extraction.

The overall confidence tells downstream consumers how far to trust the
reconstructed timeline. It is a weighted blend of five independent factors,
each on a 0-100 scale:

  date_format_clarity   0.25   how specific the date notations are
  context_quality       0.20   how much job context surrounds each period
  education_filtering   0.20   how clean the work/education split looks
  gap_reliability       0.15   whether the gaps look like real gaps or missing data
  overall_consistency   0.20   chronological plausibility

Every factor method returns (score, detail). The detail strings are for audit
only and never feed back into a score.
"""

import re
from typing import List, Sequence, Tuple

from cv_screener.core.date_extractor import MONTH_NUMBERS
from cv_screener.core.periods import (
    CandidatePeriod,
    EmploymentGap,
    GapSeverity,
    MergedPeriod,
    years_between,
)
from cv_screener.core.schemas import ConfidenceFactors, ExperienceConfidence


FACTOR_WEIGHTS = {
    "date_format_clarity": 0.25,
    "context_quality": 0.20,
    "education_filtering": 0.20,
    "gap_reliability": 0.15,
    "overall_consistency": 0.20,
}

_MONTH_ALTERNATION = "|".join(sorted(MONTH_NUMBERS, key=len, reverse=True))
MONTH_YEAR_RE = re.compile(rf"\b(?:{_MONTH_ALTERNATION})\s+\d{{4}}", re.IGNORECASE)
YEAR_RE = re.compile(r"\b\d{4}\b")

ROLE_RE = re.compile(
    r"\b(manager|director|developer|engineer|analyst|consultant|specialist|coordinator"
    r"|responsabile|ingegnere|sviluppatore)\b",
    re.IGNORECASE,
)
ORGANIZATION_RE = re.compile(r"\b(azienda|società|company|corporation|firm|presso|at|per)\b", re.IGNORECASE)
ACTIVITY_RE = re.compile(
    r"\b(develop|manage|coordinate|implement|project|progetto|gestire|coordinare|sviluppare)\b",
    re.IGNORECASE,
)
EMPLOYMENT_RE = re.compile(
    r"\b(contract|stipendio|salary|employment|contratto|assunto|dipendente)\b", re.IGNORECASE
)

# An internship, research or teaching mention on the same line as a university.
AMBIGUOUS_OVERLAP_PATTERNS = (
    re.compile(r"\b(stage|tirocinio|internship).*\b(universit[aà]|university|college)\b"),
    re.compile(r"\b(ricerca|research).*\b(dottorato|phd|università)\b"),
    re.compile(r"\b(teaching|docenza|insegnamento).*\b(università|university)\b"),
)

OVERLAP_TOLERANCE_YEARS = 0.1  # ~1 month
MAX_PLAUSIBLE_CAREER_YEARS = 50


class ConfidenceCalculator:
    """Central place for all experience confidence logic."""

    @staticmethod
    def date_format_clarity(work_periods: Sequence[CandidatePeriod]) -> Tuple[float, str]:
        """
        Month+year notations count fully, year-only notations count 0.7,
        anything else counts nothing. Any year-only or vague period costs a
        further 20% of the aggregate.
        """
        if not work_periods:
            return 0.0, "Date format clarity: 0% (no work periods)"

        precise = 0.0
        imprecise = 0
        for period in work_periods:
            if MONTH_YEAR_RE.search(period.matched_text):
                precise += 1
            elif YEAR_RE.search(period.matched_text):
                precise += 0.7
                imprecise += 1
            else:
                imprecise += 1

        clarity = min(100.0, precise / len(work_periods) * 100)
        if imprecise:
            clarity *= 0.8

        return clarity, (
            f"Date format clarity: {clarity:.0f}% "
            f"({precise:.1f}/{len(work_periods)} periods with clear dates)"
        )

    @staticmethod
    def context_score(context: str) -> int:
        score = 30
        if ROLE_RE.search(context):
            score += 25
        if ORGANIZATION_RE.search(context):
            score += 20
        if ACTIVITY_RE.search(context):
            score += 15
        if EMPLOYMENT_RE.search(context):
            score += 10
        return min(100, score)

    @staticmethod
    def context_quality(work_periods: Sequence[CandidatePeriod]) -> Tuple[float, str]:
        if not work_periods:
            return 0.0, "Context quality: 0% (no work periods)"

        total = sum(ConfidenceCalculator.context_score(p.context_window) for p in work_periods)
        quality = min(100.0, total / len(work_periods))
        return quality, f"Context quality: {quality:.0f}% (average context richness across periods)"

    @staticmethod
    def education_filtering(original_text: str) -> Tuple[float, str]:
        lowered = original_text.lower()
        ambiguous = sum(len(p.findall(lowered)) for p in AMBIGUOUS_OVERLAP_PATTERNS)

        if ambiguous:
            score = max(60.0, 85.0 - ambiguous * 10)
            return score, f"Education filtering: {score:.0f}% ({ambiguous} potentially ambiguous cases detected)"
        return 85.0, "Education filtering: 85% (clear work/education separation)"

    @staticmethod
    def gap_reliability(gaps: Sequence[EmploymentGap]) -> Tuple[float, str]:
        if not gaps:
            return 90.0, "Gap reliability: 90% (continuous work history)"

        significant = sum(1 for g in gaps if g.severity is GapSeverity.SIGNIFICANT)
        moderate = sum(1 for g in gaps if g.severity is GapSeverity.MODERATE)

        score = 90.0
        if significant > 2:
            score -= 20
        elif significant > 0:
            score -= 10
        if moderate > 3:
            score -= 15

        return score, f"Gap reliability: {score:.0f}% ({len(gaps)} gaps detected, {significant} significant)"

    @staticmethod
    def overall_consistency(merged_periods: Sequence[MergedPeriod]) -> Tuple[float, str]:
        score = 80.0
        ordered = sorted(merged_periods, key=lambda p: p.start_date)

        overlaps = 0
        for prev, curr in zip(ordered, ordered[1:]):
            if curr.start_date < prev.end_date and years_between(curr.start_date, prev.end_date) > OVERLAP_TOLERANCE_YEARS:
                overlaps += 1
        if overlaps:
            score -= min(30, overlaps * 10)

        career_span = 0.0
        if ordered:
            career_span = years_between(
                min(p.start_date for p in ordered),
                max(p.end_date for p in ordered),
            )

        if career_span > MAX_PLAUSIBLE_CAREER_YEARS:
            score -= 20
            return score, f"Overall consistency: {score:.0f}% (unusually long career span: {career_span:.0f} years)"
        if overlaps:
            return score, f"Overall consistency: {score:.0f}% ({overlaps} chronological inconsistencies)"
        return score, f"Overall consistency: {score:.0f}% (chronologically consistent)"

    @staticmethod
    def experience(
        work_periods: Sequence[CandidatePeriod],
        merged_periods: Sequence[MergedPeriod],
        gaps: Sequence[EmploymentGap],
        original_text: str,
    ) -> ExperienceConfidence:
        """Combine the five factors into the overall confidence for one CV."""
        scores = {}
        details: List[str] = []

        for name, (score, detail) in (
            ("date_format_clarity", ConfidenceCalculator.date_format_clarity(work_periods)),
            ("context_quality", ConfidenceCalculator.context_quality(work_periods)),
            ("education_filtering", ConfidenceCalculator.education_filtering(original_text)),
            ("gap_reliability", ConfidenceCalculator.gap_reliability(gaps)),
            ("overall_consistency", ConfidenceCalculator.overall_consistency(merged_periods)),
        ):
            scores[name] = score
            details.append(detail)

        overall = round(sum(scores[name] * weight for name, weight in FACTOR_WEIGHTS.items()))
        overall = max(0, min(100, overall))

        return ExperienceConfidence(
            overall_confidence=overall,
            factors=ConfidenceFactors(**{name: round(score) for name, score in scores.items()}),
            details=details,
        )
