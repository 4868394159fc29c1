"""
Work / education / volunteer classification of candidate periods.

Classification is keyword scoring over the text surrounding the date range in
the ORIGINAL document (not the filtered one), so section titles that the
filter removed still count as evidence.

Decision order (first match wins):
  1. work_score >= 3                                         -> work
  2. volunteer_score >= 2 and work_score == 0                -> volunteer
  3. education_score >= 2 and work_score == 0 and 1-8 years  -> education
  4. anything else                                           -> work

Rule 4 means an unclassifiable period counts as employment.
"""

import logging
import re
from typing import Iterable, List, Tuple

from cv_screener.core.periods import CandidatePeriod, PeriodCategory, PeriodClassification

logger = logging.getLogger(__name__)

EXACT_CONTEXT_RADIUS = 300
YEAR_CONTEXT_RADIUS = 400

TEACHING_ROLE_WEIGHT = 6
TERM_WEIGHT = 2

WORK_THRESHOLD = 3
VOLUNTEER_THRESHOLD = 2
EDUCATION_THRESHOLD = 2
EDUCATION_MIN_YEARS = 1
EDUCATION_MAX_YEARS = 8

YEAR_TOKEN_RE = re.compile(r"\d{4}")

# ===== LEXICONS (lowercase, matched as substrings) =====

PROFESSIONAL_TEACHING_ROLES = (
    "docenza", "teacher", "docente", "professore", "professor", "insegnante", "istruttore", "formatore",
    "lecturer", "instructor", "tutor universitario", "docente universitario", "ricercatore universitario",
)

WORK_TERMS = (
    # Employment terms
    "salary", "wage", "paid", "contract", "employment", "hired", "employee", "stage", "stagista",
    "tirocinante", "apprendistato", "apprendista", "collaborazione", "collaboratore", "collabora",
    "stipendio", "retribuzione", "contratto", "assunto", "assunta", "dipendente",
    "servizio civile", "servizio civile ambientale", "servizio civile universale", "servizio",
    # Job titles
    "manager", "director", "coordinator", "supervisor", "consultant", "analyst", "analista",
    "engineer", "developer", "specialist", "lead", "senior", "junior", "ingegnere",
    "responsabile", "direttore", "direttrice", "coordinatore", "coordinatrice", "consulente", "assegnista",
    # Business context
    "company", "corporation", "firm", "business", "client", "project", "progetto", "lavoro", "cooperativa",
    "azienda", "società", "cliente", "consulenza", "progettista",
    # Professional activities
    "coordinate", "develop", "implement", "libera professione", "libera professionista", "libera attività",
    "professionista", "professional", "coach", "gestire", "coordinare", "sviluppare", "implementare",
    "prestazione", "libero profesionista", "creative director",
)

VOLUNTEER_TERMS = (
    "volunteer", "volunteering", "voluntary", "unpaid", "charity", "volontariato", "volontario",
    "beneficenza", "gratuito", "volontaria", "estate ragazzi", "non retribuito", "senza compenso",
    "attività benefica", "opera di volontariato", "servizio comunitario",
)

EDUCATION_TERMS = (
    # Student status
    "studying", "student", "enrolled", "studiando", "studente", "iscritto", "iscritta", "frequentante",
    # Credentials
    "degree", "bachelor", "master", "phd", "dottorato", "laurea", "diploma", "diploma accademico",
    # Academic context
    "corso", "facoltà", "corso di studi", "curricolare", "curriculare", "its", "tesi", "thesis",
    # Institutions
    "università", "university", "politecnico", "college", "institute", "istituto", "accademia", "academy",
    "conservatorio", "scuola superiore", "high school", "liceo", "istituto tecnico",
    # Academic activities
    "esami", "exam", "voto", "votazione", "crediti", "credits", "semestre", "semester", "anno accademico",
    "borsa di studio", "scholarship", "erasmus", "exchange student",
)


def find_context(matched_text: str, original_text: str) -> str:
    """
    Locate the best context for a date range in the original document.

    Exact match of the date text with a 300-char radius, else the first
    4-digit year of the date text with a 400-char radius, else the whole text.
    Returned lowercase.
    """
    haystack = original_text.lower()
    needle = matched_text.lower()

    idx = haystack.find(needle)
    if idx != -1:
        start = max(0, idx - EXACT_CONTEXT_RADIUS)
        end = min(len(haystack), idx + len(needle) + EXACT_CONTEXT_RADIUS)
        return haystack[start:end]

    year = YEAR_TOKEN_RE.search(needle)
    if year:
        year_idx = haystack.find(year.group(0))
        if year_idx != -1:
            return haystack[max(0, year_idx - YEAR_CONTEXT_RADIUS):min(len(haystack), year_idx + YEAR_CONTEXT_RADIUS)]

    return haystack


def score_terms(context: str, terms: Iterable[str], weight: int) -> Tuple[int, List[str]]:
    found = [term for term in terms if term in context]
    return len(found) * weight, found


def classify_period(period: CandidatePeriod, original_text: str) -> PeriodClassification:
    """Decide whether a candidate period is paid work, education or volunteering."""
    context = find_context(period.matched_text, original_text)

    teaching_score, teaching_found = score_terms(context, PROFESSIONAL_TEACHING_ROLES, TEACHING_ROLE_WEIGHT)
    general_score, work_found = score_terms(context, WORK_TERMS, TERM_WEIGHT)
    volunteer_score, volunteer_found = score_terms(context, VOLUNTEER_TERMS, TERM_WEIGHT)
    education_score, education_found = score_terms(context, EDUCATION_TERMS, TERM_WEIGHT)
    work_score = teaching_score + general_score

    duration = period.duration_years
    logger.debug(
        "Classifying %r: work=%d %s volunteer=%d %s education=%d %s duration=%.1fy",
        period.matched_text,
        work_score, teaching_found + work_found,
        volunteer_score, volunteer_found,
        education_score, education_found,
        duration,
    )

    if work_score >= WORK_THRESHOLD:
        category, reason = PeriodCategory.WORK, "strong_work_indicators"
    elif volunteer_score >= VOLUNTEER_THRESHOLD and work_score == 0:
        category, reason = PeriodCategory.VOLUNTEER, "volunteer_indicators"
    elif (
        education_score >= EDUCATION_THRESHOLD
        and work_score == 0
        and EDUCATION_MIN_YEARS <= duration <= EDUCATION_MAX_YEARS
    ):
        category, reason = PeriodCategory.EDUCATION, "student_period"
    else:
        category, reason = PeriodCategory.WORK, "default_work"

    return PeriodClassification(
        category=category,
        work_score=work_score,
        volunteer_score=volunteer_score,
        education_score=education_score,
        duration_years=duration,
        reason=reason,
    )
