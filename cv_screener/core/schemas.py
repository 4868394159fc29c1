from datetime import date
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


GapSeverityName = Literal["minor", "moderate", "significant"]
PeriodCategoryName = Literal["work", "education", "volunteer"]
Score = int  # 0 to 100


# ===== REQUEST =====

class RequirementWeights(BaseModel):
    """
    Relative weights for the three sub-scores, normalized to sum to 100 before use.

    A weight left out counts as 0. All-zero weights fall back to the 50/30/20 default.
    """
    skills: float = Field(default=0, ge=0)
    experience: float = Field(default=0, ge=0)
    education: float = Field(default=0, ge=0)


class JobRequirements(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    position: str = ""
    required_skills: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("required_skills", "requiredSkills"),
    )
    preferred_skills: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("preferred_skills", "preferredSkills"),
    )
    min_experience_years: float = Field(
        default=0,
        validation_alias=AliasChoices("min_experience_years", "minExperienceYears", "minExperience"),
    )
    education_level: str = Field(
        default="",
        validation_alias=AliasChoices("education_level", "educationLevel", "education"),
    )
    weights: Optional[RequirementWeights] = None


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cv_text: str = Field(..., validation_alias=AliasChoices("cv_text", "cvText"), description="Plain-text CV body")
    job_requirements: JobRequirements = Field(
        ..., validation_alias=AliasChoices("job_requirements", "jobRequirements")
    )
    include_trace: bool = Field(default=True, description="Attach the diagnostic trace under `debug`")


# ===== CONFIDENCE =====

class ConfidenceFactors(BaseModel):
    date_format_clarity: Score = Field(..., ge=0, le=100, description="How specific the date notations are")
    context_quality: Score = Field(..., ge=0, le=100, description="How much job context surrounds each period")
    education_filtering: Score = Field(..., ge=0, le=100, description="Confidence in the work/education split")
    gap_reliability: Score = Field(..., ge=0, le=100, description="How trustworthy the detected gaps are")
    overall_consistency: Score = Field(..., ge=0, le=100, description="Chronological plausibility of the timeline")


class ExperienceConfidence(BaseModel):
    overall_confidence: Score = Field(..., ge=0, le=100)
    factors: ConfidenceFactors
    details: List[str] = Field(default_factory=list, description="Human-readable rationale, one line per factor")


# ===== RESULT SECTIONS =====

class SkillsMatch(BaseModel):
    matched: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    score: Score = Field(..., ge=0, le=100)
    required_matched: List[str] = Field(default_factory=list)
    preferred_matched: List[str] = Field(default_factory=list)
    required_missing: List[str] = Field(default_factory=list)


class GapAnalysis(BaseModel):
    total_gaps: int = 0
    total_gap_duration: float = 0.0
    significant_gaps: int = 0


class EmploymentGapInfo(BaseModel):
    start_date: date
    end_date: date
    duration_years: float
    severity: GapSeverityName
    description: str


class ExperienceAnalysis(BaseModel):
    estimated_years: float
    relevant_experience: bool
    score: Score = Field(..., ge=0, le=100)
    employment_gaps: List[EmploymentGapInfo] = Field(default_factory=list)
    gap_analysis: GapAnalysis = Field(default_factory=GapAnalysis)
    confidence: ExperienceConfidence


class EducationMatch(BaseModel):
    level: str = "Unknown"
    relevant: bool
    score: Score = Field(..., ge=0, le=100)


class CandidateMetadata(BaseModel):
    soft_skills: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    positions: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)


# ===== DIAGNOSTIC TRACE =====

class PeriodTrace(BaseModel):
    text: str
    start_date: date
    end_date: date
    duration_years: float
    kind: str
    category: PeriodCategoryName
    reason: str
    work_score: int
    volunteer_score: int
    education_score: int
    context: str = Field(..., description="First 100 characters of the extraction context")


class MergedPeriodTrace(BaseModel):
    start_date: date
    end_date: date
    duration_years: float
    sources: List[str] = Field(default_factory=list)


class NormalizedWeights(BaseModel):
    skills: float
    experience: float
    education: float


class ScoreBreakdown(BaseModel):
    skills: Score
    experience: Score
    education: Score
    weights: NormalizedWeights
    final: Score


class AnalysisTrace(BaseModel):
    original_length: int
    filtered_length: int
    removed_sections: List[str] = Field(default_factory=list)
    found_ranges: int
    valid_work_periods: int
    final_experience: float
    confidence: ExperienceConfidence
    parsed_work_periods: List[PeriodTrace] = Field(default_factory=list)
    excluded_periods: List[PeriodTrace] = Field(default_factory=list)
    merged_work_periods: List[MergedPeriodTrace] = Field(default_factory=list)
    employment_gaps: List[EmploymentGapInfo] = Field(default_factory=list)
    score_breakdown: ScoreBreakdown


class CVAnalysisResult(BaseModel):
    score: Score = Field(..., ge=0, le=100, description="Weighted overall fitness score")
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    skills_match: SkillsMatch
    experience_analysis: ExperienceAnalysis
    education_match: EducationMatch
    recommendations: List[str] = Field(default_factory=list)
    metadata: CandidateMetadata
    debug: Optional[AnalysisTrace] = None
