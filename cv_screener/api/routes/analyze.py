from fastapi import APIRouter, HTTPException

from cv_screener.core.errors import AnalysisError
from cv_screener.core.profile_scorer import analyze_cv
from cv_screener.core.schemas import AnalyzeRequest, CVAnalysisResult

router = APIRouter(tags=["analyze"])


@router.post(
    "/analyze",
    response_model=CVAnalysisResult,
    response_model_exclude_none=True,
    summary="Analyze CV",
    description="Score a plain-text CV against job requirements. Returns skills, experience and education sub-scores, the weighted overall score, and an optional diagnostic trace.",
    responses={
        200: {
            "description": "Successfully analyzed CV",
            "content": {
                "application/json": {
                    "example": {
                        "score": 85,
                        "strengths": ["Meets experience requirements with 4.9 years"],
                        "weaknesses": [],
                        "skills_match": {
                            "matched": ["Python"],
                            "missing": [],
                            "score": 100,
                            "required_matched": ["Python"],
                            "preferred_matched": [],
                            "required_missing": []
                        },
                        "experience_analysis": {
                            "estimated_years": 4.9,
                            "relevant_experience": True,
                            "score": 100
                        },
                        "education_match": {"level": "laurea", "relevant": True, "score": 100},
                        "recommendations": ["Strong candidate with excellent skills and experience match"]
                    }
                }
            }
        },
        422: {"description": "Malformed request body"},
        500: {"description": "Analysis failed"}
    }
)
def analyze(request: AnalyzeRequest):
    """
    Analyze one CV.

    **Input:**
    - **cv_text**: CV body, already extracted to plain text
    - **job_requirements**: required/preferred skills, minimum years, education level, optional weights
    - **include_trace**: attach the `debug` trace (periods, merges, gaps, score breakdown)

    **Returns:**
    - **score**: weighted overall score (0-100)
    - **experience_analysis**: estimated years, gaps and extraction confidence
    - **strengths / weaknesses / recommendations**: derived from the sub-scores
    """
    try:
        return analyze_cv(request.cv_text, request.job_requirements, include_trace=request.include_trace)
    except AnalysisError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
