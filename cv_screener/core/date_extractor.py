"""
Date range extraction for Italian and English CVs.

Each pattern family is tagged with a DateRangeKind and uses named groups
(start_month, start_year, end_month, end_year, year). Resolution dispatches on
the kind, so adding a family never shifts the meaning of another one.

Families run independently over the same text, so one date range can be
reported by more than one family. Duplicates are collapsed later by interval
merging.
"""

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Pattern, Tuple

from cv_screener.core.periods import CandidatePeriod, DateRangeKind

logger = logging.getLogger(__name__)

MIN_YEAR = 1970
CONTEXT_BEFORE = 100
CONTEXT_AFTER = 300

# ===== MONTH TABLE (single source for both languages) =====

MONTH_NUMBERS = {
    # Italian
    "gennaio": 1, "febbraio": 2, "marzo": 3, "aprile": 4, "maggio": 5, "giugno": 6,
    "luglio": 7, "agosto": 8, "settembre": 9, "ottobre": 10, "novembre": 11, "dicembre": 12,
    "gen": 1, "feb": 2, "mar": 3, "apr": 4, "mag": 5, "giu": 6,
    "lug": 7, "ago": 8, "set": 9, "ott": 10, "nov": 11, "dic": 12,
    # English
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "jun": 6, "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "dec": 12,
}


def month_number(token: str) -> int:
    """Resolve a month name or abbreviation (either language) to 1-12."""
    try:
        return MONTH_NUMBERS[token.strip().lower()]
    except KeyError:
        raise ValueError(f"unrecognised month token {token!r}") from None


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


# ===== REGEX BUILDING BLOCKS =====

IT_MONTH = (
    r"(?:gennaio|febbraio|marzo|aprile|maggio|giugno|luglio|agosto|settembre|ottobre|novembre|dicembre"
    r"|gen|feb|mar|apr|mag|giu|lug|ago|set|ott|nov|dic)"
)
EN_MONTH = (
    r"(?:january|february|march|april|may|june|july|august|september|october|november|december"
    r"|jan|feb|mar|apr|may|jun|jul|aug|sept|sep|oct|nov|dec)"
)
DASH = r"\s*[–—-]\s*"

IT_ONGOING = r"(?:oggi|attualmente|presente|corrente|ora|attuale\s+occupazione|ancora\s+in\s+corso|in\s+poi)"
IT_OPEN_END = r"(?:in\s*corso|attuale\s+occupazione|ancora\s+in\s+corso|attuale|presente|corrente|in\s+poi)"
EN_OPEN_END = r"(?:current|ongoing|present|now)"
ANY_OPEN_END = (
    r"(?:current|ongoing|present|now|in\s*corso|attuale\s+occupazione|ancora\s+in\s+corso|attuale|in\s+poi)"
)


@dataclass(frozen=True)
class PatternFamily:
    kind: DateRangeKind
    regex: Pattern[str]
    description: str


def _family(kind: DateRangeKind, pattern: str, description: str, flags: int = re.IGNORECASE) -> PatternFamily:
    return PatternFamily(kind=kind, regex=re.compile(pattern, flags), description=description)


PATTERN_FAMILIES: Tuple[PatternFamily, ...] = (
    _family(
        DateRangeKind.MONTH_TO_PRESENT_PREP,
        rf"\b(?:da|dal)\s+(?P<start_month>{IT_MONTH})\s+(?P<start_year>\d{{4}})\s+(?:a|al|ad)\s+{IT_ONGOING}",
        "da gennaio 2021 ad oggi",
    ),
    _family(
        DateRangeKind.YEAR_TO_PRESENT_PREP,
        rf"\b(?:dal|da)\s+(?P<start_year>\d{{4}})\s+(?:a|al|ad)\s+{IT_ONGOING}",
        "dal 2019 a oggi",
    ),
    _family(
        DateRangeKind.YEAR_RANGE_PREP,
        r"\b(?:dal|da)\s+(?P<start_year>\d{4})\s+(?:al|a)\s+(?P<end_year>\d{4})",
        "dal 2007 al 2011",
    ),
    _family(
        DateRangeKind.MONTH_SPAN_PREP,
        rf"\b(?:da|dal)\s+(?P<start_month>{IT_MONTH})\s+(?:a|al)\s+(?P<end_month>{IT_MONTH})\s+(?P<year>\d{{4}})",
        "da ottobre a dicembre 2005",
    ),
    _family(
        DateRangeKind.SINGLE_YEAR,
        r"\b(?:anno|year|nel|in)\s+(?P<year>\d{4})",
        "anno 2008 / nel 2008",
    ),
    _family(
        DateRangeKind.YEAR_ONWARD,
        r"\b(?:dal|da)\s+(?P<start_year>\d{4})$",
        "dal 2022 (end of text)",
    ),
    _family(
        DateRangeKind.YEAR_ONWARD,
        r"\b(?:dal|da)\s+(?P<start_year>\d{4})\s+(?:in\s+poi)",
        "dal 2022 in poi",
    ),
    _family(
        DateRangeKind.AFTER_YEAR,
        r"\b(?:dopo\s+il)\s+(?P<year>\d{4})",
        "dopo il 2022",
    ),
    _family(
        DateRangeKind.MONTH_RANGE,
        rf"\b(?P<start_month>{IT_MONTH})\s*(?P<start_year>\d{{4}}){DASH}(?P<end_month>{IT_MONTH})\s*(?P<end_year>\d{{4}})",
        "Gen 2021 – Apr 2023",
    ),
    _family(
        DateRangeKind.MONTH_TO_PRESENT,
        rf"\b(?P<start_month>{IT_MONTH})\s*(?P<start_year>\d{{4}}){DASH}{IT_OPEN_END}",
        "Gen 2021 – in corso",
    ),
    _family(
        DateRangeKind.MONTH_RANGE,
        rf"\b(?P<start_month>{EN_MONTH})\s*(?P<start_year>\d{{4}}){DASH}(?P<end_month>{EN_MONTH})\s*(?P<end_year>\d{{4}})",
        "Jan 2021 – Apr 2023",
    ),
    _family(
        DateRangeKind.MONTH_TO_PRESENT,
        rf"\b(?P<start_month>{EN_MONTH})\s*(?P<start_year>\d{{4}}){DASH}{EN_OPEN_END}",
        "Jan 2021 – present",
    ),
    _family(
        DateRangeKind.NUMERIC_RANGE,
        rf"\b(?P<start_month>\d{{1,2}})/(?P<start_year>\d{{4}}){DASH}(?P<end_month>\d{{1,2}})/(?P<end_year>\d{{4}})",
        "01/2021 – 12/2023",
        flags=0,
    ),
    _family(
        DateRangeKind.NUMERIC_TO_PRESENT,
        rf"\b(?P<start_month>\d{{1,2}})/(?P<start_year>\d{{4}}){DASH}{ANY_OPEN_END}",
        "01/2021 – present",
    ),
    _family(
        DateRangeKind.YEAR_RANGE,
        rf"\b(?P<start_year>\d{{4}}){DASH}(?P<end_year>\d{{4}})",
        "2021 – 2023",
        flags=0,
    ),
    _family(
        DateRangeKind.YEAR_TO_PRESENT,
        rf"\b(?P<start_year>\d{{4}}){DASH}{ANY_OPEN_END}",
        "2021 – present",
    ),
)


def _numeric_month(token: str) -> int:
    value = int(token)
    if not 1 <= value <= 12:
        raise ValueError(f"month out of range: {token!r}")
    return value


def resolve_dates(kind: DateRangeKind, match: re.Match, today: date) -> Tuple[date, date]:
    """
    Turn one match into a concrete (start, end) pair.

    Raises ValueError for unknown month tokens or impossible calendar dates.
    """
    g = match.groupdict()

    if kind in (DateRangeKind.MONTH_TO_PRESENT_PREP, DateRangeKind.MONTH_TO_PRESENT):
        return date(int(g["start_year"]), month_number(g["start_month"]), 1), today

    if kind in (DateRangeKind.YEAR_TO_PRESENT_PREP, DateRangeKind.YEAR_ONWARD, DateRangeKind.YEAR_TO_PRESENT):
        return date(int(g["start_year"]), 1, 1), today

    if kind in (DateRangeKind.YEAR_RANGE_PREP, DateRangeKind.YEAR_RANGE):
        return date(int(g["start_year"]), 1, 1), date(int(g["end_year"]), 12, 31)

    if kind is DateRangeKind.MONTH_SPAN_PREP:
        year = int(g["year"])
        return date(year, month_number(g["start_month"]), 1), last_day_of_month(year, month_number(g["end_month"]))

    if kind is DateRangeKind.SINGLE_YEAR:
        year = int(g["year"])
        return date(year, 1, 1), date(year, 12, 31)

    if kind is DateRangeKind.AFTER_YEAR:
        return date(int(g["year"]) + 1, 1, 1), today

    if kind is DateRangeKind.MONTH_RANGE:
        start = date(int(g["start_year"]), month_number(g["start_month"]), 1)
        return start, last_day_of_month(int(g["end_year"]), month_number(g["end_month"]))

    if kind is DateRangeKind.NUMERIC_RANGE:
        start = date(int(g["start_year"]), _numeric_month(g["start_month"]), 1)
        return start, last_day_of_month(int(g["end_year"]), _numeric_month(g["end_month"]))

    if kind is DateRangeKind.NUMERIC_TO_PRESENT:
        return date(int(g["start_year"]), _numeric_month(g["start_month"]), 1), today

    raise ValueError(f"no resolver for pattern kind {kind}")


def is_valid_range(start: date, end: date, today: date) -> bool:
    """Start on or before end, both years between 1970 and next year."""
    latest_year = today.year + 1
    return start <= end and MIN_YEAR <= start.year <= latest_year and end.year <= latest_year


def context_window(text: str, match_start: int, match_end: int) -> str:
    return text[max(0, match_start - CONTEXT_BEFORE):min(len(text), match_end + CONTEXT_AFTER)]


def extract_date_ranges(text: str, today: Optional[date] = None) -> List[CandidatePeriod]:
    """
    Scan text with every pattern family, in order, and return the valid periods.

    A match that fails to resolve or lands outside the accepted year window is
    skipped without affecting the others.
    """
    today = today or date.today()
    ranges: List[CandidatePeriod] = []

    for family in PATTERN_FAMILIES:
        for match in family.regex.finditer(text):
            try:
                start, end = resolve_dates(family.kind, match, today)
            except ValueError as exc:
                logger.debug("Skipping %r (%s): %s", match.group(0), family.description, exc)
                continue

            if not is_valid_range(start, end, today):
                logger.debug("Invalid date range %r: %s to %s", match.group(0), start, end)
                continue

            ranges.append(
                CandidatePeriod(
                    matched_text=match.group(0),
                    start_date=start,
                    end_date=end,
                    context_window=context_window(text, match.start(), match.end()),
                    kind=family.kind,
                )
            )
            logger.debug("Valid date range %r (%s): %s to %s", match.group(0), family.kind.value, start, end)

    logger.debug("Total valid ranges found: %d", len(ranges))
    return ranges
