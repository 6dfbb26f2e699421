"""
Period Resolver - Turn a free-text query into an inclusive calendar-day range

Resolution is an ordered chain of rules; the first rule that produces a
period wins:

1. month_only: a bare month name with no 4-digit year anywhere in the query
   means that month of the reference year.
2. natural_language: phrase extractors (explicit dates, month + year,
   month + day, bare month names,
   today/yesterday, "N days ago", "last Friday"), preferring past dates.
   A month without a confirmed day covers the whole month, a confirmed day
   yields a single-day period.
3. relative_month: "this/current month" and "last/previous month".
4. default: the current calendar month.

The resolver never raises.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import re

import pytz
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta, MO, TU, WE, TH, FR, SA, SU

from cost_insights.utils.logging import LoggerPort, get_logger


MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

MONTH_MAP = {name: index for index, name in enumerate(MONTH_NAMES, start=1)}
MONTH_MAP.update({
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7,
    "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
})

WEEKDAY_MAP = {
    "monday": MO, "tuesday": TU, "wednesday": WE, "thursday": TH,
    "friday": FR, "saturday": SA, "sunday": SU,
}

YEAR_TOKEN = re.compile(r"\b\d{4}\b")

# Years outside 1900-2100 are read as plain numbers ("above 1000 dollars")
_YEAR = r"(19\d{2}|20\d{2}|2100)"

FULL_MONTH = re.compile(r"\b(" + "|".join(MONTH_NAMES) + r")\b", re.IGNORECASE)

_MONTH = r"(january|february|march|april|may|june|july|august|september|october|november|december" \
         r"|jan|feb|mar|apr|jun|jul|aug|sept|sep|oct|nov|dec)"
_WEEKDAY = r"(monday|tuesday|wednesday|thursday|friday|saturday|sunday)"


@dataclass(frozen=True)
class Period:
    """Inclusive calendar-day range with no time-of-day component"""
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Period start ({self.start}) must be <= end ({self.end})")

    @property
    def days(self) -> int:
        """Number of days in the range, both ends included"""
        return (self.end - self.start).days + 1

    @property
    def is_single_day(self) -> bool:
        return self.start == self.end

    @property
    def is_full_month(self) -> bool:
        return self.start.day == 1 and self.end == month_period(self.start.year, self.start.month).end

    def previous(self) -> "Period":
        """Equal-length window ending the day before this period starts"""
        prev_end = self.start - timedelta(days=1)
        prev_start = prev_end - timedelta(days=self.days - 1)
        return Period(prev_start, prev_end)

    def label(self) -> str:
        """Human-readable description used in summaries"""
        if self.is_full_month:
            return self.start.strftime("%B %Y")
        if self.is_single_day:
            return self.start.strftime("%B %d, %Y")
        return f"{self.start.strftime('%B %d, %Y')} to {self.end.strftime('%B %d, %Y')}"

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class ParsedDate:
    """Date components recognised by the natural-language layer"""
    year: int
    month: int
    day: Optional[int] = None

    @property
    def day_certain(self) -> bool:
        return self.day is not None


def month_period(year: int, month: int) -> Period:
    """First to last calendar day of the given month"""
    start = date(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return Period(start, end)


def previous_period(period: Period) -> Period:
    """Mirror-image period of identical length immediately before ``period``"""
    return period.previous()


def _from_date(value: date) -> ParsedDate:
    return ParsedDate(value.year, value.month, value.day)


def _parse_explicit_date(match: re.Match, today: date, **parse_kwargs) -> Optional[ParsedDate]:
    parsed = date_parser.parse(match.group(0), **parse_kwargs)
    return _from_date(parsed.date())


def _parse_iso_date(match: re.Match, today: date) -> Optional[ParsedDate]:
    return _parse_explicit_date(match, today, yearfirst=True)


def _parse_slash_date(match: re.Match, today: date) -> Optional[ParsedDate]:
    return _parse_explicit_date(match, today, dayfirst=False)


def _parse_month_day_year(match: re.Match, today: date) -> Optional[ParsedDate]:
    month = MONTH_MAP[match.group(1).lower()]
    return _from_date(date(int(match.group(3)), month, int(match.group(2))))


def _parse_day_month_year(match: re.Match, today: date) -> Optional[ParsedDate]:
    month = MONTH_MAP[match.group(2).lower()]
    return _from_date(date(int(match.group(3)), month, int(match.group(1))))


def _parse_month_then_year(match: re.Match, today: date) -> Optional[ParsedDate]:
    return ParsedDate(int(match.group(2)), MONTH_MAP[match.group(1).lower()])


def _parse_year_then_month(match: re.Match, today: date) -> Optional[ParsedDate]:
    return ParsedDate(int(match.group(1)), MONTH_MAP[match.group(2).lower()])


def _parse_month_day(match: re.Match, today: date) -> Optional[ParsedDate]:
    month = MONTH_MAP[match.group(1).lower()]
    day = int(match.group(2))
    candidate = date(today.year, month, day)
    if candidate > today:
        candidate = date(today.year - 1, month, day)
    return _from_date(candidate)


def _parse_month_name(match: re.Match, today: date) -> Optional[ParsedDate]:
    month = MONTH_MAP[match.group(1).lower()]
    year = today.year if month <= today.month else today.year - 1
    return ParsedDate(year, month)


def _parse_today(match: re.Match, today: date) -> Optional[ParsedDate]:
    return _from_date(today)


def _parse_yesterday(match: re.Match, today: date) -> Optional[ParsedDate]:
    return _from_date(today - timedelta(days=1))


def _parse_days_ago(match: re.Match, today: date) -> Optional[ParsedDate]:
    return _from_date(today - timedelta(days=int(match.group(1))))


def _parse_last_weekday(match: re.Match, today: date) -> Optional[ParsedDate]:
    weekday = WEEKDAY_MAP[match.group(1).lower()]
    return _from_date(today + relativedelta(days=-1, weekday=weekday(-1)))


def _parse_on_weekday(match: re.Match, today: date) -> Optional[ParsedDate]:
    weekday = WEEKDAY_MAP[match.group(1).lower()]
    return _from_date(today + relativedelta(weekday=weekday(-1)))


# Ordered most specific first. Every relative phrase resolves into the past.
DATE_PHRASE_PATTERNS: List[Tuple[str, Callable[[re.Match, date], Optional[ParsedDate]]]] = [
    (r"\b" + _YEAR + r"-\d{1,2}-\d{1,2}\b", _parse_iso_date),
    (r"\b\d{1,2}/\d{1,2}/" + _YEAR + r"\b", _parse_slash_date),
    (r"\b" + _MONTH + r"\s+(\d{1,2})(?:st|nd|rd|th)?\s*,?\s*" + _YEAR + r"\b", _parse_month_day_year),
    (r"\b(\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?" + _MONTH + r"\s*,?\s*" + _YEAR + r"\b", _parse_day_month_year),
    (r"\b" + _MONTH + r"\b.*?\b" + _YEAR + r"\b", _parse_month_then_year),
    (r"\b" + _YEAR + r"\b.*?\b" + _MONTH + r"\b", _parse_year_then_month),
    (r"\btoday\b", _parse_today),
    (r"\byesterday\b", _parse_yesterday),
    (r"\b(\d{1,3})\s+days?\s+ago\b", _parse_days_ago),
    (r"\b(?:last|past|previous)\s+" + _WEEKDAY + r"\b", _parse_last_weekday),
    (r"\bon\s+" + _WEEKDAY + r"\b", _parse_on_weekday),
    (r"\b" + _MONTH + r"\s+(\d{1,2})(?:st|nd|rd|th)?\b", _parse_month_day),
    (r"\b" + _MONTH + r"\b", _parse_month_name),
]

RELATIVE_MONTH_PHRASES: List[Tuple[Tuple[str, ...], int]] = [
    (("this month", "current month"), 0),
    (("last month", "previous month"), -1),
]


def parse_date_phrase(text: str, today: date) -> Optional[ParsedDate]:
    """
    Recognise the first date phrase in ``text``.

    Returns:
        ParsedDate with ``day`` set only when the phrase pins a specific day,
        or None when no phrase could be parsed.
    """
    text_lower = text.lower()
    for pattern, handler in DATE_PHRASE_PATTERNS:
        match = re.search(pattern, text_lower, re.DOTALL)
        if not match:
            continue
        try:
            return handler(match, today)
        except (ValueError, OverflowError):
            # e.g. "2025-02-30"; try the next pattern
            continue
    return None


class PeriodResolver:
    """Resolve natural-language period references against a reference instant"""

    def __init__(self, tz: Union[str, Any] = "UTC", logger: Optional[LoggerPort] = None):
        self.tz = pytz.timezone(tz) if isinstance(tz, str) else tz
        self.logger = get_logger(__name__, logger)
        self.rules: List[Tuple[str, Callable[[str, date], Optional[Period]]]] = [
            ("month_only", self._resolve_month_only),
            ("natural_language", self._resolve_natural_language),
            ("relative_month", self._resolve_relative_month),
        ]

    def reference_date(self, now: Optional[Union[datetime, date]] = None) -> date:
        """Calendar date of the reference instant in the configured timezone"""
        if now is None:
            return datetime.now(self.tz).date()
        if isinstance(now, datetime):
            if now.tzinfo is not None:
                return now.astimezone(self.tz).date()
            return now.date()
        return now

    def resolve(self, query: str, now: Optional[Union[datetime, date]] = None) -> Period:
        """
        Resolve ``query`` to a Period.

        Args:
            query: Free-text user query
            now: Reference instant (defaults to the current time)

        Returns:
            Period; the current calendar month when nothing matches
        """
        today = self.reference_date(now)
        query = query or ""

        for name, rule in self.rules:
            period = rule(query, today)
            if period is not None:
                self.logger.debug(
                    "period_resolved",
                    rule=name,
                    query=query,
                    start=period.start.isoformat(),
                    end=period.end.isoformat(),
                )
                return period

        period = month_period(today.year, today.month)
        self.logger.debug(
            "period_resolved",
            rule="default",
            query=query,
            start=period.start.isoformat(),
            end=period.end.isoformat(),
        )
        return period

    def _resolve_month_only(self, query: str, today: date) -> Optional[Period]:
        if YEAR_TOKEN.search(query):
            return None
        match = FULL_MONTH.search(query)
        if not match:
            return None
        return month_period(today.year, MONTH_MAP[match.group(1).lower()])

    def _resolve_natural_language(self, query: str, today: date) -> Optional[Period]:
        parsed = parse_date_phrase(query, today)
        if parsed is None:
            return None
        if parsed.day_certain:
            day = date(parsed.year, parsed.month, parsed.day)
            return Period(day, day)
        try:
            return month_period(parsed.year, parsed.month)
        except ValueError:
            # year outside the supported calendar range
            return None

    def _resolve_relative_month(self, query: str, today: date) -> Optional[Period]:
        query_lower = query.lower()
        for phrases, month_offset in RELATIVE_MONTH_PHRASES:
            if any(phrase in query_lower for phrase in phrases):
                target = today.replace(day=1) + relativedelta(months=month_offset)
                return month_period(target.year, target.month)
        return None


def resolve_period(
    query: str,
    now: Optional[Union[datetime, date]] = None,
    tz: str = "UTC",
) -> Period:
    """
    Resolve a free-text query into a Period.

    Args:
        query: Natural language query
        now: Reference instant (defaults to now in ``tz``)
        tz: Timezone string (default: UTC)
    """
    return PeriodResolver(tz).resolve(query, now)
