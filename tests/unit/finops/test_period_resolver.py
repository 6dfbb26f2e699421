"""
Tests for the period_resolver module.

Tests cover:
- Month-only shortcut with current-year override
- Explicit-year routing to the natural-language layer
- Single-day phrases (explicit dates, relative days, weekdays)
- Relative month fallbacks and the default
- Previous-period derivation
"""

import pytest
from datetime import date, datetime
from freezegun import freeze_time
import pytz

from cost_insights.finops.period_resolver import (
    Period,
    PeriodResolver,
    month_period,
    parse_date_phrase,
    previous_period,
    resolve_period,
)


# 2025-08-15 is a Friday
REFERENCE = datetime(2025, 8, 15, 10, 30)


@pytest.fixture
def resolver():
    """Create a resolver instance"""
    return PeriodResolver(tz="UTC")


class TestMonthOnly:
    """Bare month names resolve into the reference year"""

    def test_bare_month_uses_current_year(self, resolver):
        period = resolver.resolve("May", now=REFERENCE)

        assert period == Period(date(2025, 5, 1), date(2025, 5, 31))

    def test_bare_month_is_case_insensitive(self, resolver):
        period = resolver.resolve("what did we spend in SEPTEMBER?", now=REFERENCE)

        assert period == Period(date(2025, 9, 1), date(2025, 9, 30))

    def test_future_month_is_not_moved_to_last_year(self, resolver):
        """Bare months mean this year, not the nearest past occurrence"""
        period = resolver.resolve("December costs", now=REFERENCE)

        assert period == Period(date(2025, 12, 1), date(2025, 12, 31))

    def test_february_in_leap_year(self, resolver):
        period = resolver.resolve("February", now=datetime(2024, 6, 1))

        assert period == Period(date(2024, 2, 1), date(2024, 2, 29))

    def test_unrelated_number_is_not_a_year(self, resolver):
        """A 4-digit amount skips the shortcut but never becomes the year"""
        period = resolver.resolve("May costs above 1000 dollars", now=REFERENCE)

        assert period == Period(date(2025, 5, 1), date(2025, 5, 31))

    def test_unrelated_number_with_future_month_prefers_past(self, resolver):
        period = resolver.resolve("October spend over 5000", now=REFERENCE)

        assert period == Period(date(2024, 10, 1), date(2024, 10, 31))

    def test_year_found_after_unrelated_number(self, resolver):
        period = resolver.resolve("May costs above 1000 dollars in 2024", now=REFERENCE)

        assert period == Period(date(2024, 5, 1), date(2024, 5, 31))


class TestExplicitYear:
    """Queries with a year go straight to the natural-language layer"""

    def test_month_and_year(self, resolver):
        period = resolver.resolve("May 2025", now=REFERENCE)

        assert period == Period(date(2025, 5, 1), date(2025, 5, 31))

    def test_month_and_year_not_adjacent(self, resolver):
        period = resolver.resolve("show me the May bill for fiscal 2025", now=REFERENCE)

        assert period == Period(date(2025, 5, 1), date(2025, 5, 31))

    def test_year_before_month(self, resolver):
        period = resolver.resolve("in 2024, how much was spent during March?", now=REFERENCE)

        assert period == Period(date(2024, 3, 1), date(2024, 3, 31))

    def test_abbreviated_month_with_year(self, resolver):
        period = resolver.resolve("Nov 2024 spend", now=REFERENCE)

        assert period == Period(date(2024, 11, 1), date(2024, 11, 30))

    def test_iso_date_is_single_day(self, resolver):
        period = resolver.resolve("costs on 2025-05-10", now=REFERENCE)

        assert period == Period(date(2025, 5, 10), date(2025, 5, 10))

    def test_month_day_year_is_single_day(self, resolver):
        period = resolver.resolve("What did we spend on March 3rd, 2025?", now=REFERENCE)

        assert period == Period(date(2025, 3, 3), date(2025, 3, 3))

    def test_day_month_year_is_single_day(self, resolver):
        period = resolver.resolve("bill for 7 July 2024", now=REFERENCE)

        assert period == Period(date(2024, 7, 7), date(2024, 7, 7))

    def test_slash_date_is_month_first(self, resolver):
        period = resolver.resolve("spend on 04/05/2025", now=REFERENCE)

        assert period == Period(date(2025, 4, 5), date(2025, 4, 5))

    def test_impossible_date_falls_back_to_default(self, resolver):
        period = resolver.resolve("costs for 2025-02-30", now=REFERENCE)

        assert period == Period(date(2025, 8, 1), date(2025, 8, 31))


class TestMonthWithoutYear:
    """Abbreviated months and month-day phrases resolve into the past"""

    def test_abbreviated_future_month_is_last_year(self, resolver):
        period = resolver.resolve("Nov costs", now=REFERENCE)

        assert period == Period(date(2024, 11, 1), date(2024, 11, 30))

    def test_abbreviated_past_month_is_this_year(self, resolver):
        period = resolver.resolve("Feb spend", now=REFERENCE)

        assert period == Period(date(2025, 2, 1), date(2025, 2, 28))

    def test_month_day_in_the_past(self, resolver):
        period = resolver.resolve("costs on Mar 3", now=REFERENCE)

        assert period == Period(date(2025, 3, 3), date(2025, 3, 3))

    def test_month_day_later_in_year_is_last_year(self, resolver):
        period = resolver.resolve("what did we spend on Dec 25th?", now=REFERENCE)

        assert period == Period(date(2024, 12, 25), date(2024, 12, 25))

    def test_month_day_today(self, resolver):
        period = resolver.resolve("aug 15 bill", now=REFERENCE)

        assert period == Period(date(2025, 8, 15), date(2025, 8, 15))


class TestRelativeDays:
    """Relative phrases resolve into the past"""

    def test_today(self, resolver):
        period = resolver.resolve("today's costs", now=REFERENCE)

        assert period == Period(date(2025, 8, 15), date(2025, 8, 15))

    def test_yesterday(self, resolver):
        period = resolver.resolve("What did we spend yesterday?", now=REFERENCE)

        assert period == Period(date(2025, 8, 14), date(2025, 8, 14))

    def test_days_ago(self, resolver):
        period = resolver.resolve("costs from 3 days ago", now=REFERENCE)

        assert period == Period(date(2025, 8, 12), date(2025, 8, 12))

    def test_last_weekday_is_strictly_in_the_past(self, resolver):
        """'last Friday' on a Friday means the previous week's Friday"""
        period = resolver.resolve("spend last Friday", now=REFERENCE)

        assert period == Period(date(2025, 8, 8), date(2025, 8, 8))

    def test_last_weekday_earlier_in_week(self, resolver):
        period = resolver.resolve("last tuesday", now=REFERENCE)

        assert period == Period(date(2025, 8, 12), date(2025, 8, 12))

    def test_on_weekday_includes_today(self, resolver):
        period = resolver.resolve("what was spent on Friday", now=REFERENCE)

        assert period == Period(date(2025, 8, 15), date(2025, 8, 15))


class TestRelativeMonths:
    """Substring fallbacks for this/last month"""

    @pytest.mark.parametrize("query", ["this month", "What's the CURRENT MONTH cost?"])
    def test_this_month(self, resolver, query):
        period = resolver.resolve(query, now=REFERENCE)

        assert period == Period(date(2025, 8, 1), date(2025, 8, 31))

    @pytest.mark.parametrize("query", ["last month", "previous month's AWS bill"])
    def test_last_month(self, resolver, query):
        period = resolver.resolve(query, now=REFERENCE)

        assert period == Period(date(2025, 7, 1), date(2025, 7, 31))

    def test_last_month_in_january_crosses_year(self, resolver):
        period = resolver.resolve("last month", now=datetime(2026, 1, 10))

        assert period == Period(date(2025, 12, 1), date(2025, 12, 31))


class TestDefault:
    """Unrecognised queries fall back to the current month"""

    @pytest.mark.parametrize("query", ["", "how much are we spending?", "top 5 services"])
    def test_default_is_current_month(self, resolver, query):
        period = resolver.resolve(query, now=REFERENCE)

        assert period == Period(date(2025, 8, 1), date(2025, 8, 31))

    def test_none_query_does_not_raise(self, resolver):
        period = resolver.resolve(None, now=REFERENCE)

        assert period == Period(date(2025, 8, 1), date(2025, 8, 31))

    @freeze_time("2026-01-21")
    def test_default_uses_clock_when_now_missing(self):
        period = resolve_period("how much did we spend?")

        assert period == Period(date(2026, 1, 1), date(2026, 1, 31))

    def test_reference_instant_converted_to_timezone(self):
        resolver = PeriodResolver(tz="America/New_York")
        now = pytz.utc.localize(datetime(2025, 1, 1, 2, 0))

        period = resolver.resolve("this month", now=now)

        assert period == Period(date(2024, 12, 1), date(2024, 12, 31))

    def test_accepts_plain_date_reference(self, resolver):
        period = resolver.resolve("May", now=date(2023, 2, 2))

        assert period == Period(date(2023, 5, 1), date(2023, 5, 31))


class TestIdempotence:
    """Resolving the same query twice yields the same period"""

    @pytest.mark.parametrize(
        "query",
        ["May", "May 2025", "yesterday", "last month", "anything else", "2025-05-10"],
    )
    def test_same_query_same_period(self, resolver, query):
        assert resolver.resolve(query, now=REFERENCE) == resolver.resolve(query, now=REFERENCE)


class TestParseDatePhrase:
    """Direct tests of the natural-language layer"""

    def test_month_year_has_uncertain_day(self):
        parsed = parse_date_phrase("June 2023", date(2025, 1, 1))

        assert (parsed.year, parsed.month) == (2023, 6)
        assert not parsed.day_certain

    def test_unparseable_returns_none(self):
        assert parse_date_phrase("cost breakdown please", date(2025, 1, 1)) is None


class TestPeriod:
    """Period value object"""

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            Period(date(2025, 5, 2), date(2025, 5, 1))

    def test_days_inclusive(self):
        assert Period(date(2025, 5, 1), date(2025, 5, 31)).days == 31
        assert Period(date(2025, 5, 1), date(2025, 5, 1)).days == 1

    def test_previous_has_same_length(self):
        """A 31-day May maps to the 31 days before it, not to April"""
        previous = previous_period(month_period(2025, 5))

        assert previous == Period(date(2025, 3, 31), date(2025, 4, 30))
        assert previous.days == 31

    def test_previous_of_single_day(self):
        previous = Period(date(2025, 5, 10), date(2025, 5, 10)).previous()

        assert previous == Period(date(2025, 5, 9), date(2025, 5, 9))

    def test_previous_of_february(self):
        previous = month_period(2025, 2).previous()

        assert previous == Period(date(2025, 1, 4), date(2025, 1, 31))

    def test_labels(self):
        assert month_period(2025, 5).label() == "May 2025"
        assert Period(date(2025, 5, 10), date(2025, 5, 10)).label() == "May 10, 2025"
        assert Period(date(2025, 5, 1), date(2025, 5, 10)).label() == "May 01, 2025 to May 10, 2025"

    def test_to_dict(self):
        assert month_period(2025, 5).to_dict() == {"start": "2025-05-01", "end": "2025-05-31"}

    def test_period_is_immutable(self):
        period = month_period(2025, 5)

        with pytest.raises(Exception):
            period.start = date(2025, 1, 1)
