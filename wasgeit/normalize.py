"""
Date-time normalization for venue program text.

Venue pages write dates in many shapes: with or without year, with a
"Doors: 20:00" suffix, spread over several lines, padded with non-breaking
spaces. Adapters use the helpers here to cut the relevant text out of a
fragment, and normalize_date_time() turns the result into a naive datetime
using the adapter's DateTimeFormat.

Policies:
- Missing year: next occurrence on or after the reference date.
- Missing clock time: midnight, reported as time_known=False.
"""

from datetime import datetime
from typing import Optional
import re

from .errors import DateTimeParseError, ExtractionError
from .models import DateTimeFormat, NormalizedDateTime, RawDateTime


# \s covers U+00A0, U+2007 and U+202F; zero-width space is not whitespace
WHITESPACE_RE = re.compile(r"[\s\u200b]+")

TIME_RE = re.compile(r"\d{2}:\d{2}")

# Short day at the start of the text: "2.1", "2. January", "2 Jan"
SHORT_DAY_RE = re.compile(r"^(\d)(?=\D)")

# How many years ahead to look for a valid date (29 February)
YEAR_LOOKAHEAD = 4


def clean_whitespace(text: str) -> str:
    """Collapse whitespace runs, including non-breaking variants, to one space."""
    if not text:
        return ""
    return WHITESPACE_RE.sub(" ", text).strip()


def slice_text(text: str, start: int, end: Optional[int] = None) -> str:
    """
    Cut text[start:end] out of a larger blob.

    Offsets are character offsets. Unlike plain slicing, a text too short
    for the requested window raises instead of returning a truncated piece.

    Raises:
        ExtractionError: If text does not reach `end` (or `start`)
    """
    required = end if end is not None else start
    if len(text) < required:
        raise ExtractionError(
            f"text too short for offsets [{start}:{'' if end is None else end}]",
            raw_text=text,
        )
    return text[start:end]


def capture_date_time(pattern: re.Pattern, text: str) -> RawDateTime:
    """
    Extract a date and a clock time with a two-group regex.

    Group 1 is the date, group 2 the time; the result is always
    date-then-time regardless of where they appear in the text.
    """
    match = pattern.search(text)
    if not match:
        raise ExtractionError(
            f"no match for pattern '{pattern.pattern}'", raw_text=text
        )
    return RawDateTime(date_text=match.group(1), time_text=match.group(2))


def find_time(text: str) -> str:
    """Return the first HH:MM in text, or an empty string."""
    match = TIME_RE.search(text or "")
    return match.group() if match else ""


def pad_day(text: str) -> str:
    """Left-pad a one-digit leading day: '2.1' -> '02.1'."""
    return SHORT_DAY_RE.sub(r"0\1", text, count=1)


def _parse(text: str, fmt: str, venue_key: Optional[str]) -> datetime:
    try:
        return datetime.strptime(text, fmt)
    except ValueError:
        raise DateTimeParseError(text, fmt, venue_key=venue_key) from None


def _complete_year(
    text: str, fmt: str, now: datetime, venue_key: Optional[str]
) -> datetime:
    """Parse a year-less date as its next occurrence on or after now."""
    for year in range(now.year, now.year + YEAR_LOOKAHEAD + 1):
        try:
            candidate = _parse(f"{text} {year}", f"{fmt} %Y", venue_key)
        except DateTimeParseError:
            # 29 February outside a leap year
            continue
        if candidate.date() >= now.date():
            return candidate

    raise DateTimeParseError(text, fmt, venue_key=venue_key)


def normalize_date_time(
    raw: RawDateTime,
    fmt: DateTimeFormat,
    now: Optional[datetime] = None,
    venue_key: Optional[str] = None,
) -> NormalizedDateTime:
    """
    Convert extracted date-time text into a naive timestamp.

    Args:
        raw: Date and time text from the adapter
        fmt: The venue's DateTimeFormat
        now: Reference time for year completion (defaults to now)
        venue_key: Venue short name, carried into errors

    Returns:
        NormalizedDateTime with the parsed start and whether the time was known

    Raises:
        DateTimeParseError: If the text does not match the format
    """
    now = now or datetime.now()
    date_text = clean_whitespace(raw.date_text)
    time_text = clean_whitespace(raw.time_text)

    if fmt.time and time_text:
        text, pattern, time_known = date_text + time_text, fmt.pattern, True
    else:
        text, pattern, time_known = date_text, fmt.date, False

    if fmt.has_year:
        start = _parse(text, pattern, venue_key)
    else:
        start = _complete_year(text, pattern, now, venue_key)

    return NormalizedDateTime(start=start, time_known=time_known)
