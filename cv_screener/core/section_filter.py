"""
Coarse pre-filter that drops education and volunteer sections before date mining.

A section starts at one of the keywords below and runs until the next line that
looks like an all-caps heading (at least 4 characters), or to the end of the
text. The classifier makes the final call on every period, so a section this
filter misses is not an error.
"""

import logging
import re
from typing import List, Tuple

logger = logging.getLogger(__name__)

# The heading terminator is one case-sensitive line of at least 4 characters,
# even though the keywords are not case-sensitive.
_SECTION_END = r"[\s\S]*?(?=\n[ \t]*(?-i:[A-Z][A-Z \t]{3,})[ \t]*\n|$)"

# ===== EDUCATION SECTION KEYWORDS =====

EDUCATION_TITLE_RE = re.compile(
    r"\b(?:ISTRUZIONE|EDUCAZIONE|EDUCATION|FORMAZIONE|STUDIES|ACADEMIC)\b" + _SECTION_END,
    re.IGNORECASE,
)
INSTITUTION_RE = re.compile(
    r"\b(?:UNIVERSITÀ|UNIVERSITY|COLLEGE|INSTITUTE|POLITECNICO)\b" + _SECTION_END,
    re.IGNORECASE,
)
DEGREE_RE = re.compile(
    r"\b(?:LAUREA IN|LAUREA|DIPLOMA IN|DIPLOMA|DIPLOMA ACCADEMICO)\b" + _SECTION_END,
    re.IGNORECASE,
)

# ===== VOLUNTEER SECTION KEYWORDS =====

VOLUNTEER_TITLE_RE = re.compile(
    r"\b(?:VOLONTARIATO|VOLUNTEER|VOLUNTARY)\b" + _SECTION_END,
    re.IGNORECASE,
)

SECTION_PATTERNS = (EDUCATION_TITLE_RE, INSTITUTION_RE, DEGREE_RE, VOLUNTEER_TITLE_RE)


def filter_education_and_volunteer(cv_text: str) -> Tuple[str, List[str]]:
    """
    Remove education and volunteer spans from the CV text.

    Patterns run in order over the progressively filtered text.

    Returns:
        (filtered_text, removed_spans)
    """
    removed: List[str] = []

    def _drop(match: re.Match) -> str:
        span = match.group(0)
        if span:
            logger.debug("Removing section: %r", span[:50])
            removed.append(span)
        return ""

    filtered = cv_text
    for pattern in SECTION_PATTERNS:
        filtered = pattern.sub(_drop, filtered)

    return filtered, removed
