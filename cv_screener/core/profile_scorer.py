"""
Weighted candidate scoring against job requirements.

Three independent sub-scores (skills, experience, education), each 0-100, are
combined with the requirement weights after normalizing them to sum to 100.
Strengths, weaknesses and recommendations are derived from the same numbers.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from cv_screener.core.errors import AnalysisError
from cv_screener.core.experience_extractor import ExperienceResult, extract_experience
from cv_screener.core.metadata_extractor import extract_metadata
from cv_screener.core.periods import CandidatePeriod, EmploymentGap, GapSeverity, PeriodClassification
from cv_screener.core.schemas import (
    AnalysisTrace,
    CVAnalysisResult,
    EducationMatch,
    EmploymentGapInfo,
    ExperienceAnalysis,
    GapAnalysis,
    JobRequirements,
    MergedPeriodTrace,
    NormalizedWeights,
    PeriodTrace,
    RequirementWeights,
    ScoreBreakdown,
    SkillsMatch,
)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = RequirementWeights(skills=50, experience=30, education=20)

EXPERIENCE_BONUS_FACTOR = 1.5
BELOW_MINIMUM_CEILING = 80
STRONG_SCORE = 80
WEAK_SKILLS_SCORE = 50
UNKNOWN_EDUCATION_SCORE = 30

# Ordinal education scale; Italian titles share the rank of their English equivalent.
EDUCATION_LEVELS: Dict[str, int] = {
    "phd": 5,
    "doctorate": 5,
    "dottorato": 5,
    "specializzazione": 5,
    "master": 4,
    "magistrale": 4,
    "msc": 4,
    "laurea magistrale": 4,
    "diploma accademico di ii livello": 4,
    "diploma accademico di 2 livello": 4,
    "diploma accademico di secondo livello": 4,
    "bachelor": 3,
    "laurea": 3,
    "degree": 3,
    "diploma di perito": 3,
    "diploma its": 3,
    "diploma di its": 3,
    "diploma accademico di i livello": 3,
    "diploma accademico di 1 livello": 3,
    "diploma accademico di primo livello": 3,
    "diploma di tecnico superiore": 3,
    "diploma di istituto tecnico superiore": 3,
    "diploma": 2,
    "high school": 1,
    "scuola superiore": 1,
}


# ===== WEIGHTS =====

def normalize_weights(weights: Optional[RequirementWeights]) -> NormalizedWeights:
    """Scale the weights so they sum to 100. All-zero weights fall back to 50/30/20."""
    w = weights or DEFAULT_WEIGHTS
    total = w.skills + w.experience + w.education
    if total <= 0:
        w, total = DEFAULT_WEIGHTS, 100
    return NormalizedWeights(
        skills=w.skills / total * 100,
        experience=w.experience / total * 100,
        education=w.education / total * 100,
    )


# ===== SKILLS =====

def analyze_skills(cv_text: str, requirements: JobRequirements) -> SkillsMatch:
    lowered = cv_text.lower()

    required_matched = [s for s in requirements.required_skills if s.lower() in lowered]
    required_missing = [s for s in requirements.required_skills if s.lower() not in lowered]
    preferred_matched = [s for s in requirements.preferred_skills if s.lower() in lowered]

    if requirements.required_skills:
        score = round(len(required_matched) / len(requirements.required_skills) * 100)
    else:
        score = 100

    return SkillsMatch(
        matched=required_matched + preferred_matched,
        missing=required_missing,
        score=score,
        required_matched=required_matched,
        preferred_matched=preferred_matched,
        required_missing=required_missing,
    )


# ===== EXPERIENCE =====

def gap_penalty(gaps: Sequence[EmploymentGap]) -> float:
    significant = sum(1 for g in gaps if g.severity is GapSeverity.SIGNIFICANT)
    if significant:
        return min(15, significant * 10)
    total_gap_years = sum(g.duration_years for g in gaps)
    if total_gap_years > 1:
        return min(10, total_gap_years * 5)
    return 0


def experience_score(total_years: float, min_years: float, gaps: Sequence[EmploymentGap]) -> int:
    """
    100 when the minimum is met (a non-positive minimum is always met),
    otherwise up to 80 in proportion. Gaps then cost up to 15 points.
    """
    if min_years <= 0:
        return 100

    if total_years >= min_years:
        score = 100.0
        if total_years > min_years * EXPERIENCE_BONUS_FACTOR:
            score = min(100.0, score + 10)
    else:
        score = float(round(total_years / min_years * BELOW_MINIMUM_CEILING))

    score -= gap_penalty(gaps)
    return round(max(0.0, min(100.0, score)))


def _gap_info(gap: EmploymentGap) -> EmploymentGapInfo:
    return EmploymentGapInfo(
        start_date=gap.start_date,
        end_date=gap.end_date,
        duration_years=round(gap.duration_years, 2),
        severity=gap.severity.value,
        description=f"{gap.severity.value} gap ({gap.duration_years:.1f} years)",
    )


def analyze_experience(experience: ExperienceResult, requirements: JobRequirements) -> ExperienceAnalysis:
    years = experience.total_years
    gaps = experience.gaps
    return ExperienceAnalysis(
        estimated_years=round(years, 1),
        relevant_experience=years >= requirements.min_experience_years,
        score=experience_score(years, requirements.min_experience_years, gaps),
        employment_gaps=[_gap_info(g) for g in gaps],
        gap_analysis=GapAnalysis(
            total_gaps=len(gaps),
            total_gap_duration=round(sum(g.duration_years for g in gaps), 2),
            significant_gaps=sum(1 for g in gaps if g.severity is GapSeverity.SIGNIFICANT),
        ),
        confidence=experience.confidence,
    )


# ===== EDUCATION =====

def highest_education_level(text: str) -> Tuple[str, int]:
    """Highest-ranked education phrase contained in the text, or ("Unknown", 0)."""
    lowered = text.lower()
    best_level, best_rank = "Unknown", 0
    for level, rank in EDUCATION_LEVELS.items():
        if level in lowered and rank > best_rank:
            best_level, best_rank = level, rank
    return best_level, best_rank


def analyze_education(cv_text: str, requirements: JobRequirements) -> EducationMatch:
    detected_level, detected_rank = highest_education_level(cv_text)
    _, required_rank = highest_education_level(requirements.education_level)

    if detected_rank >= required_rank:
        score = 100
    elif detected_rank > 0:
        score = round(detected_rank / required_rank * 80)
    else:
        score = UNKNOWN_EDUCATION_SCORE

    return EducationMatch(level=detected_level, relevant=detected_rank >= required_rank, score=score)


# ===== NARRATIVE =====

def generate_recommendations(
    skills: SkillsMatch,
    experience: ExperienceAnalysis,
    education: EducationMatch,
    requirements: JobRequirements,
) -> List[str]:
    recommendations: List[str] = []

    if skills.required_missing:
        recommendations.append(
            f"Consider developing these missing required skills: {', '.join(skills.required_missing)}"
        )

    if not experience.relevant_experience:
        shortfall = requirements.min_experience_years - experience.estimated_years
        recommendations.append(f"Consider gaining {shortfall:.1f} more years of relevant experience")

    if not education.relevant:
        recommendations.append(f"Consider pursuing {requirements.education_level} to meet education requirements")

    if skills.score >= STRONG_SCORE and experience.score >= STRONG_SCORE:
        recommendations.append("Strong candidate with excellent skills and experience match")

    if not recommendations:
        recommendations.append("Well-qualified candidate that meets job requirements")

    return recommendations


def generate_strengths_weaknesses(
    skills: SkillsMatch,
    experience: ExperienceAnalysis,
    education: EducationMatch,
    requirements: JobRequirements,
) -> Tuple[List[str], List[str]]:
    strengths: List[str] = []
    weaknesses: List[str] = []

    if skills.score >= STRONG_SCORE:
        strengths.append(
            f"Strong skills match ({skills.score}%) with {len(skills.required_matched)} "
            f"of {len(requirements.required_skills)} required skills"
        )
    elif skills.score < WEAK_SKILLS_SCORE:
        weaknesses.append(f"Limited skills match ({skills.score}%) - missing key required skills")

    if experience.relevant_experience:
        if experience.estimated_years > requirements.min_experience_years * EXPERIENCE_BONUS_FACTOR:
            strengths.append(f"Extensive experience ({experience.estimated_years} years) exceeds requirements")
        else:
            strengths.append(f"Meets experience requirements with {experience.estimated_years} years")
    else:
        shortfall = requirements.min_experience_years - experience.estimated_years
        weaknesses.append(f"{shortfall:.1f} years below required experience level")

    gaps = experience.employment_gaps
    significant = sum(1 for g in gaps if g.severity == GapSeverity.SIGNIFICANT.value)
    moderate = sum(1 for g in gaps if g.severity == GapSeverity.MODERATE.value)
    if significant:
        plural = "s" if significant > 1 else ""
        weaknesses.append(f"{significant} significant employment gap{plural} (>2 years each)")
    elif moderate > 1:
        weaknesses.append(f"{moderate} moderate employment gaps (6 months - 2 years each)")
    elif len(gaps) > 2:
        weaknesses.append("Multiple employment gaps in work history")

    if education.relevant:
        strengths.append(f"Education level ({education.level}) meets requirements")
    elif education.level != "Unknown":
        weaknesses.append(f"Education level ({education.level}) below requirements")

    if skills.preferred_matched:
        strengths.append(f"Additional preferred skills: {', '.join(skills.preferred_matched)}")

    return strengths, weaknesses


# ===== TRACE =====

def _period_trace(period: CandidatePeriod, classification: PeriodClassification) -> PeriodTrace:
    return PeriodTrace(
        text=period.matched_text,
        start_date=period.start_date,
        end_date=period.end_date,
        duration_years=round(period.duration_years, 2),
        kind=period.kind.value,
        category=classification.category.value,
        reason=classification.reason,
        work_score=classification.work_score,
        volunteer_score=classification.volunteer_score,
        education_score=classification.education_score,
        context=period.context_window[:100],
    )


def build_trace(experience: ExperienceResult, breakdown: ScoreBreakdown) -> AnalysisTrace:
    return AnalysisTrace(
        original_length=experience.original_length,
        filtered_length=experience.filtered_length,
        removed_sections=[section[:100] for section in experience.removed_sections],
        found_ranges=experience.candidate_count,
        valid_work_periods=len(experience.work_periods),
        final_experience=experience.total_years,
        confidence=experience.confidence,
        parsed_work_periods=[_period_trace(p, c) for p, c in experience.work_periods],
        excluded_periods=[_period_trace(p, c) for p, c in experience.excluded_periods],
        merged_work_periods=[
            MergedPeriodTrace(
                start_date=m.start_date,
                end_date=m.end_date,
                duration_years=round(m.duration_years, 2),
                sources=list(m.sources),
            )
            for m in experience.merged_periods
        ],
        employment_gaps=[_gap_info(g) for g in experience.gaps],
        score_breakdown=breakdown,
    )


# ===== ENTRY POINT =====

def analyze_cv(
    cv_text: str,
    job_requirements: JobRequirements,
    today: Optional[date] = None,
    include_trace: bool = True,
) -> CVAnalysisResult:
    """
    Score one CV against one set of job requirements.

    "No experience found" is a valid zero result. Any other internal failure
    is logged and re-raised as a single AnalysisError.
    """
    try:
        experience = extract_experience(cv_text, today=today)

        skills = analyze_skills(cv_text, job_requirements)
        experience_analysis = analyze_experience(experience, job_requirements)
        education = analyze_education(cv_text, job_requirements)

        weights = normalize_weights(job_requirements.weights)
        overall = round(
            skills.score * weights.skills / 100
            + experience_analysis.score * weights.experience / 100
            + education.score * weights.education / 100
        )

        recommendations = generate_recommendations(skills, experience_analysis, education, job_requirements)
        strengths, weaknesses = generate_strengths_weaknesses(
            skills, experience_analysis, education, job_requirements
        )

        trace = None
        if include_trace:
            breakdown = ScoreBreakdown(
                skills=skills.score,
                experience=experience_analysis.score,
                education=education.score,
                weights=weights,
                final=overall,
            )
            trace = build_trace(experience, breakdown)

        return CVAnalysisResult(
            score=overall,
            strengths=strengths,
            weaknesses=weaknesses,
            skills_match=skills,
            experience_analysis=experience_analysis,
            education_match=education,
            recommendations=recommendations,
            metadata=extract_metadata(cv_text),
            debug=trace,
        )
    except Exception as exc:
        logger.exception("CV analysis failed for position %r", getattr(job_requirements, "position", ""))
        raise AnalysisError(f"CV analysis failed: {exc}") from exc
