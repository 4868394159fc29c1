"""
Tests for candidate scoring: sub-scores, weighting, narrative and the
analyze_cv entry point.
"""

from datetime import date

import pytest

from cv_screener.core import profile_scorer
from cv_screener.core.errors import AnalysisError
from cv_screener.core.periods import EmploymentGap, GapSeverity
from cv_screener.core.profile_scorer import (
    analyze_cv,
    analyze_education,
    analyze_skills,
    experience_score,
    highest_education_level,
    normalize_weights,
)
from cv_screener.core.schemas import JobRequirements, RequirementWeights

TODAY = date(2026, 10, 19)


def _requirements(**overrides) -> JobRequirements:
    data = {
        "position": "Backend Developer",
        "required_skills": ["Python"],
        "min_experience_years": 2,
        "education_level": "",
    }
    data.update(overrides)
    return JobRequirements(**data)


def _gap(severity: GapSeverity, years: float) -> EmploymentGap:
    return EmploymentGap(date(2015, 1, 1), date(2016, 1, 1), years, severity)


# ===== REQUIREMENTS PARSING =====

def test_job_requirements_accept_camel_case_keys():
    reqs = JobRequirements.model_validate(
        {
            "position": "Dev",
            "requiredSkills": ["React"],
            "preferredSkills": ["Docker"],
            "minExperience": 3,
            "education": "Laurea",
            "weights": {"skills": 5, "experience": 3, "education": 2},
        }
    )

    assert reqs.required_skills == ["React"]
    assert reqs.preferred_skills == ["Docker"]
    assert reqs.min_experience_years == 3
    assert reqs.education_level == "Laurea"
    assert reqs.weights.skills == 5


# ===== SKILLS =====

def test_skills_score_is_fraction_of_required_found():
    reqs = _requirements(required_skills=["React", "Node"])
    result = analyze_skills("Frontend work with REACT and Redux", reqs)

    assert result.score == 50
    assert result.required_matched == ["React"]
    assert result.required_missing == ["Node"]
    assert result.missing == ["Node"]


def test_no_required_skills_scores_100():
    result = analyze_skills("anything", _requirements(required_skills=[]))
    assert result.score == 100


def test_preferred_skills_never_change_the_score():
    reqs = _requirements(required_skills=["Python", "Go"], preferred_skills=["Docker", "Rust"])
    result = analyze_skills("Python and Docker", reqs)

    assert result.score == 50
    assert result.preferred_matched == ["Docker"]
    assert result.matched == ["Python", "Docker"]


# ===== EXPERIENCE =====

def test_zero_minimum_is_always_satisfied():
    gaps = [_gap(GapSeverity.SIGNIFICANT, 3)]
    assert experience_score(0.0, 0, gaps) == 100
    assert experience_score(12.0, 0, []) == 100
    assert experience_score(1.0, -2, gaps) == 100


def test_below_minimum_scales_to_80():
    assert experience_score(2.0, 4, []) == 40
    assert experience_score(3.9, 4, []) < 80


def test_meeting_minimum_scores_100():
    assert experience_score(4.0, 4, []) == 100
    assert experience_score(10.0, 4, []) == 100


def test_significant_gap_penalty_is_capped_at_15():
    assert experience_score(5.0, 3, [_gap(GapSeverity.SIGNIFICANT, 2.5)]) == 90
    assert experience_score(5.0, 3, [_gap(GapSeverity.SIGNIFICANT, 2.5)] * 3) == 85


def test_long_total_gap_time_penalty():
    assert experience_score(5.0, 3, [_gap(GapSeverity.MODERATE, 1.2)]) == 94
    assert experience_score(5.0, 3, [_gap(GapSeverity.MODERATE, 1.9)] * 2) == 90


def test_short_total_gap_time_is_free():
    assert experience_score(5.0, 3, [_gap(GapSeverity.MINOR, 0.3)] * 2) == 100


def test_gap_penalty_never_goes_negative():
    assert experience_score(0.1, 10, [_gap(GapSeverity.SIGNIFICANT, 5)]) == 0


# ===== EDUCATION =====

def test_highest_level_wins():
    assert highest_education_level("Diploma di maturità, Laurea magistrale in Ingegneria") == ("magistrale", 4)
    assert highest_education_level("Nothing relevant") == ("Unknown", 0)


def test_italian_second_level_academic_diploma_is_master_rank():
    level, rank = highest_education_level("Diploma accademico di II livello in Pianoforte")
    assert (level, rank) == ("diploma accademico di ii livello", 4)


def test_education_meets_requirement():
    result = analyze_education("Laurea magistrale in Ingegneria", _requirements(education_level="Bachelor's degree"))

    assert result.score == 100
    assert result.relevant is True


def test_education_below_requirement_scales():
    result = analyze_education("Bachelor in Economics", _requirements(education_level="PhD"))

    assert result.score == round(3 / 5 * 80)
    assert result.relevant is False
    assert result.level == "bachelor"


def test_undetected_education_gets_flat_30():
    result = analyze_education("Self-taught", _requirements(education_level="Master"))

    assert result.score == 30
    assert result.level == "Unknown"
    assert result.relevant is False


def test_unrecognised_requirement_is_met():
    result = analyze_education("Self-taught", _requirements(education_level="Any"))
    assert result.score == 100


# ===== WEIGHTS =====

def test_weights_normalize_regardless_of_scale():
    small = normalize_weights(RequirementWeights(skills=5, experience=3, education=2))
    large = normalize_weights(RequirementWeights(skills=50, experience=30, education=20))

    assert small.skills == pytest.approx(large.skills)
    assert small.experience == pytest.approx(large.experience)
    assert small.education == pytest.approx(large.education)
    assert small.skills + small.experience + small.education == pytest.approx(100)


def test_weights_left_out_count_as_zero():
    reqs = JobRequirements.model_validate({"weights": {"skills": 1}})
    weights = normalize_weights(reqs.weights)

    assert (weights.skills, weights.experience, weights.education) == pytest.approx((100, 0, 0))


def test_missing_or_zero_weights_use_defaults():
    assert normalize_weights(None).skills == pytest.approx(50)
    zero = normalize_weights(RequirementWeights(skills=0, experience=0, education=0))
    assert (zero.skills, zero.experience, zero.education) == pytest.approx((50, 30, 20))


# ===== END TO END =====

def test_single_italian_period_scenario():
    cv = "Gen 2021 – Apr 2023 Software Engineer presso Acme\nPython, Django"
    result = analyze_cv(cv, _requirements(), today=TODAY)

    trace = result.debug
    assert trace.valid_work_periods == 1
    assert trace.final_experience == pytest.approx(849 / 365.25)
    assert result.experience_analysis.estimated_years == 2.3
    assert result.experience_analysis.score == 100
    merged = trace.merged_work_periods[0]
    assert (merged.start_date, merged.end_date) == (date(2021, 1, 1), date(2023, 4, 30))
    assert result.score == 100


def test_volunteer_section_does_not_count():
    cv = (
        "MARIO ROSSI\n\n"
        "VOLONTARIATO\n"
        "2018 – 2020 Volontario presso Croce Rossa\n\n"
        "ESPERIENZA LAVORATIVA\n"
        "2020 – 2024 Developer presso Acme\n"
    )
    result = analyze_cv(cv, _requirements(), today=TODAY)

    trace = result.debug
    assert [p.text for p in trace.parsed_work_periods] == ["2020 – 2024"]
    assert len(trace.removed_sections) == 1
    assert trace.final_experience == pytest.approx(1826 / 365.25)


def test_volunteer_period_outside_a_section_is_excluded_by_classifier():
    cv = "2016 – 2017 Volontario Croce Rossa\n"
    result = analyze_cv(cv, _requirements(), today=TODAY)

    trace = result.debug
    assert trace.valid_work_periods == 0
    assert [p.category for p in trace.excluded_periods] == ["volunteer"]
    assert result.experience_analysis.estimated_years == 0


def test_significant_gap_becomes_weakness():
    cv = (
        "2010 - 2012 Software Engineer at Acme\n"
        "Built billing services\n"
        "2016 - 2020 Senior Developer at Beta\n"
    )
    result = analyze_cv(cv, _requirements(min_experience_years=3), today=TODAY)

    gaps = result.experience_analysis.employment_gaps
    assert len(gaps) == 1
    assert gaps[0].severity == "significant"
    assert "1 significant employment gap (>2 years each)" in result.weaknesses
    assert result.experience_analysis.score == 90


def test_extensive_experience_is_a_strength():
    cv = "2010 - 2020 Software Engineer at Acme, Python"
    result = analyze_cv(cv, _requirements(min_experience_years=3), today=TODAY)

    assert any(s.startswith("Extensive experience") for s in result.strengths)


def test_empty_cv_gives_degenerate_result():
    reqs = _requirements(required_skills=["Python"], min_experience_years=3, education_level="Master")
    result = analyze_cv("", reqs, today=TODAY)

    assert result.skills_match.score == 0
    assert result.experience_analysis.score == 0
    assert result.education_match.score == 30
    assert result.score == 6
    assert "Consider developing these missing required skills: Python" in result.recommendations
    assert "Consider gaining 3.0 more years of relevant experience" in result.recommendations
    assert "Consider pursuing Master to meet education requirements" in result.recommendations
    assert result.debug.found_ranges == 0


def test_weight_scale_does_not_change_score():
    cv = "2019 - 2021 Engineer at Acme, React"
    reqs_small = _requirements(required_skills=["React", "Node"], weights={"skills": 5, "experience": 3, "education": 2})
    reqs_large = _requirements(required_skills=["React", "Node"], weights={"skills": 50, "experience": 30, "education": 20})

    assert analyze_cv(cv, reqs_small, today=TODAY).score == analyze_cv(cv, reqs_large, today=TODAY).score


def test_trace_can_be_omitted():
    result = analyze_cv("2019 - 2021 Engineer", _requirements(), today=TODAY, include_trace=False)
    assert result.debug is None


def test_internal_failure_surfaces_as_analysis_error(monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("regex engine exploded")

    monkeypatch.setattr(profile_scorer, "extract_experience", _boom)

    with pytest.raises(AnalysisError):
        analyze_cv("2019 - 2021 Engineer", _requirements(), today=TODAY)


def test_requirements_of_the_wrong_type_still_raise_analysis_error():
    with pytest.raises(AnalysisError):
        analyze_cv("2019 - 2021 Engineer", {"requiredSkills": ["Python"]}, today=TODAY)
