"""
Tests for date range extraction.

Every test passes a fixed evaluation date so "present" is reproducible.
"""

from datetime import date

import pytest

from cv_screener.core.date_extractor import (
    extract_date_ranges,
    last_day_of_month,
    month_number,
)
from cv_screener.core.periods import DateRangeKind

TODAY = date(2026, 10, 19)


# ===== MONTH TABLE =====

def test_month_number_covers_both_languages():
    assert month_number("Gen") == 1
    assert month_number("gennaio") == 1
    assert month_number("January") == 1
    assert month_number("MAG") == 5
    assert month_number("may") == 5
    assert month_number("sept") == 9
    assert month_number("set") == 9
    assert month_number("dic") == 12


def test_unknown_month_token_raises_value_error():
    with pytest.raises(ValueError):
        month_number("foo")


def test_last_day_of_month_handles_leap_years():
    assert last_day_of_month(2024, 2) == date(2024, 2, 29)
    assert last_day_of_month(2023, 2) == date(2023, 2, 28)
    assert last_day_of_month(2023, 4) == date(2023, 4, 30)


# ===== MONTH-NAME RANGES =====

def test_italian_month_range_resolves_to_last_day_of_end_month():
    """'Gen 2021 – Apr 2023' spans 2021-01-01 to 2023-04-30."""
    periods = extract_date_ranges("Gen 2021 – Apr 2023 Software Engineer", today=TODAY)

    assert len(periods) == 1
    period = periods[0]
    assert period.kind is DateRangeKind.MONTH_RANGE
    assert period.matched_text == "Gen 2021 – Apr 2023"
    assert period.start_date == date(2021, 1, 1)
    assert period.end_date == date(2023, 4, 30)


def test_english_month_range():
    periods = extract_date_ranges("January 2019 - March 2020 Analyst", today=TODAY)

    assert [(p.start_date, p.end_date) for p in periods] == [(date(2019, 1, 1), date(2020, 3, 31))]


def test_month_to_present_yields_overlapping_candidates():
    """A stricter and a laxer family can both report the same range."""
    periods = extract_date_ranges("Jan 2021 - present  Backend Developer", today=TODAY)

    kinds = {p.kind for p in periods}
    assert DateRangeKind.MONTH_TO_PRESENT in kinds
    assert DateRangeKind.YEAR_TO_PRESENT in kinds
    assert all(p.end_date == TODAY for p in periods)
    assert all(p.start_date == date(2021, 1, 1) for p in periods)


def test_italian_month_to_in_corso():
    periods = extract_date_ranges("Mag 2022 – in corso, Consulente", today=TODAY)

    month_periods = [p for p in periods if p.kind is DateRangeKind.MONTH_TO_PRESENT]
    assert len(month_periods) == 1
    assert month_periods[0].start_date == date(2022, 5, 1)
    assert month_periods[0].end_date == TODAY


# ===== ITALIAN PREPOSITION FAMILIES =====

def test_preposition_month_to_present():
    periods = extract_date_ranges("Lavoro da gennaio 2021 ad oggi come analista", today=TODAY)

    assert periods[0].kind is DateRangeKind.MONTH_TO_PRESENT_PREP
    assert periods[0].start_date == date(2021, 1, 1)
    assert periods[0].end_date == TODAY


def test_preposition_year_to_present():
    periods = extract_date_ranges("Impiegato dal 2019 a oggi", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.YEAR_TO_PRESENT_PREP
    assert periods[0].start_date == date(2019, 1, 1)
    assert periods[0].end_date == TODAY


def test_single_year_covers_the_whole_year():
    periods = extract_date_ranges("Stagista nel 2008 presso Acme", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.SINGLE_YEAR
    assert periods[0].start_date == date(2008, 1, 1)
    assert periods[0].end_date == date(2008, 12, 31)


def test_year_onward_at_end_of_text():
    periods = extract_date_ranges("Consulente freelance dal 2022", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.YEAR_ONWARD
    assert periods[0].start_date == date(2022, 1, 1)
    assert periods[0].end_date == TODAY


def test_preposition_year_range():
    periods = extract_date_ranges("dal 2007 al 2011 impiegato", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.YEAR_RANGE_PREP
    assert periods[0].start_date == date(2007, 1, 1)
    assert periods[0].end_date == date(2011, 12, 31)


def test_preposition_month_span_within_one_year():
    periods = extract_date_ranges("da ottobre a dicembre 2005 consulenza", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.MONTH_SPAN_PREP
    assert periods[0].start_date == date(2005, 10, 1)
    assert periods[0].end_date == date(2005, 12, 31)


def test_after_year_starts_january_first_of_next_year():
    periods = extract_date_ranges("dopo il 2022 libera professione", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.AFTER_YEAR
    assert periods[0].start_date == date(2023, 1, 1)
    assert periods[0].end_date == TODAY


def test_year_onward_with_in_poi():
    periods = extract_date_ranges("Collaboratore dal 2022 in poi", today=TODAY)

    onward = [p for p in periods if p.kind is DateRangeKind.YEAR_ONWARD]
    assert len(onward) == 1
    assert onward[0].start_date == date(2022, 1, 1)
    assert onward[0].end_date == TODAY


# ===== NUMERIC AND BARE YEARS =====

def test_numeric_range_ends_on_last_day_of_month():
    periods = extract_date_ranges("03/2019 - 02/2020 Data Engineer", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.NUMERIC_RANGE
    assert periods[0].start_date == date(2019, 3, 1)
    assert periods[0].end_date == date(2020, 2, 29)


def test_numeric_to_present():
    """The bare-year family also reports the same range."""
    periods = extract_date_ranges("03/2020 - present Analyst", today=TODAY)

    numeric = [p for p in periods if p.kind is DateRangeKind.NUMERIC_TO_PRESENT]
    assert len(numeric) == 1
    assert numeric[0].start_date == date(2020, 3, 1)
    assert numeric[0].end_date == TODAY
    assert DateRangeKind.YEAR_TO_PRESENT in {p.kind for p in periods}


@pytest.mark.parametrize("open_end", ["in corso", "presente", "attuale"])
def test_numeric_to_present_accepts_italian_open_ends(open_end):
    periods = extract_date_ranges(f"05/2018 – {open_end}, Sviluppatore", today=TODAY)

    numeric = [p for p in periods if p.kind is DateRangeKind.NUMERIC_TO_PRESENT]
    assert len(numeric) == 1
    assert numeric[0].start_date == date(2018, 5, 1)
    assert numeric[0].end_date == TODAY


def test_numeric_month_out_of_range_is_skipped():
    """A single malformed fragment is skipped, the rest of the text still parses."""
    periods = extract_date_ranges("13/2019 - 02/2020 broken\n2015 - 2017 Engineer", today=TODAY)

    assert [(p.start_date, p.end_date) for p in periods] == [(date(2015, 1, 1), date(2017, 12, 31))]


def test_bare_year_range_ends_december_31():
    periods = extract_date_ranges("2015 - 2017 Engineer", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.YEAR_RANGE
    assert periods[0].end_date == date(2017, 12, 31)


def test_year_to_present():
    periods = extract_date_ranges("2020 – current: Lead Engineer", today=TODAY)

    assert len(periods) == 1
    assert periods[0].kind is DateRangeKind.YEAR_TO_PRESENT
    assert periods[0].start_date == date(2020, 1, 1)
    assert periods[0].end_date == TODAY


# ===== VALIDITY FILTER =====

def test_ranges_outside_year_window_are_discarded():
    text = "1965 - 1968 something\n2030 - 2032 future\n2020 - 2018 reversed"
    assert extract_date_ranges(text, today=TODAY) == []


def test_next_year_start_is_still_accepted():
    periods = extract_date_ranges("2027 - 2027 planned contract", today=TODAY)
    assert len(periods) == 1


def test_far_future_end_year_is_discarded():
    """A typo like 2099 must not add decades of experience."""
    assert extract_date_ranges("2020 - 2099 Engineer", today=TODAY) == []
    assert extract_date_ranges("01/2020 - 12/2099 Engineer", today=TODAY) == []


def test_every_period_satisfies_start_before_end_and_year_bounds():
    text = (
        "Gen 2021 – Apr 2023 Engineer\n"
        "dal 2007 al 2011 impiegato\n"
        "01/2015 - 12/2016 Analyst\n"
        "1960 - 1962 ignored\n"
        "2019 - present Consultant\n"
    )
    periods = extract_date_ranges(text, today=TODAY)

    assert periods
    for p in periods:
        assert p.start_date <= p.end_date
        assert 1970 <= p.start_date.year <= TODAY.year + 1
        assert p.end_date.year <= TODAY.year + 1


# ===== CONTEXT WINDOW =====

def test_context_window_spans_100_before_and_300_after():
    text = "x" * 199 + " " + "2019 - 2020" + " " + "y" * 399
    periods = extract_date_ranges(text, today=TODAY)

    assert len(periods) == 1
    assert periods[0].context_window == text[100:211 + 300]


def test_context_window_is_clamped_to_text_bounds():
    text = "2019 - 2020 Engineer"
    periods = extract_date_ranges(text, today=TODAY)

    assert periods[0].context_window == text
