# readings/progress.py
"""
Pure derivations over a user's reading logs.

Every function takes the logs as an iterable of objects exposing
`book_name`, `chapter` and `created_at` (ReadingLog instances in production,
any lookalike in tests) and never touches the database. Unknown book names
yield empty progress, never an exception.
"""
from __future__ import annotations

import calendar
import datetime as dt
from collections import defaultdict
from typing import Dict, Iterable, List, NamedTuple, Set

import pytz

from .catalog import CATALOG, Catalog


READ = "read"
UNREAD = "unread"
FUTURE = "future"


class BookProgress(NamedTuple):
    book_name: str
    chapters: int
    read_count: int
    is_complete: bool
    ratio: float


class CalendarDay(NamedTuple):
    day: dt.date
    status: str
    count: int


def resolve_tz(tz: str | dt.tzinfo) -> dt.tzinfo:
    """Accept a tz name or tzinfo; unknown names raise ValueError."""
    if isinstance(tz, dt.tzinfo):
        return tz
    try:
        return pytz.timezone(tz)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"unknown time zone: {tz}") from None


def completed_chapters(records: Iterable, book_name: str) -> Set[int]:
    return {r.chapter for r in records if r.book_name == book_name}


def read_count(records: Iterable, book_name: str) -> int:
    # Distinct chapters; equal to the row count under the unique constraint.
    return len(completed_chapters(records, book_name))


def progress_ratio(records: Iterable, book_name: str, catalog: Catalog = CATALOG) -> float:
    chapters = catalog.chapter_count(book_name)
    if not chapters:
        return 0.0
    return read_count(records, book_name) / chapters


def book_progress(records: Iterable, book_name: str, catalog: Catalog = CATALOG) -> BookProgress:
    chapters = catalog.chapter_count(book_name)
    count = read_count(records, book_name)
    return BookProgress(
        book_name=book_name,
        chapters=chapters,
        read_count=count,
        is_complete=chapters > 0 and count == chapters,
        ratio=(count / chapters) if chapters else 0.0,
    )


def catalog_progress(records: Iterable, catalog: Catalog = CATALOG) -> List[BookProgress]:
    """Progress of every catalog book, in catalog order."""
    by_book: Dict[str, Set[int]] = defaultdict(set)
    for r in records:
        by_book[r.book_name].add(r.chapter)
    out = []
    for entry in catalog:
        count = len(by_book.get(entry.name, ()))
        out.append(BookProgress(
            book_name=entry.name,
            chapters=entry.chapters,
            read_count=count,
            is_complete=count == entry.chapters,
            ratio=count / entry.chapters,
        ))
    return out


def local_day(timestamp: dt.datetime, tz: str | dt.tzinfo) -> dt.date:
    """Calendar day of `timestamp` in the local timezone (naive timestamps are UTC)."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=dt.timezone.utc)
    return timestamp.astimezone(resolve_tz(tz)).date()


def group_by_local_day(records: Iterable, tz: str | dt.tzinfo) -> Dict[dt.date, list]:
    tzinfo = resolve_tz(tz)
    grouped: Dict[dt.date, list] = defaultdict(list)
    for r in records:
        grouped[local_day(r.created_at, tzinfo)].append(r)
    return dict(grouped)


def date_status(day: dt.date, grouped: Dict[dt.date, list], today: dt.date) -> str:
    """`future` wins over everything; otherwise read iff the day has a log."""
    if isinstance(day, dt.datetime):
        day = day.date()
    if isinstance(today, dt.datetime):
        today = today.date()
    if day > today:
        return FUTURE
    return READ if grouped.get(day) else UNREAD


def month_calendar(year: int, month: int, grouped: Dict[dt.date, list], today: dt.date) -> List[CalendarDay]:
    _, days_in_month = calendar.monthrange(year, month)
    out = []
    for d in range(1, days_in_month + 1):
        day = dt.date(year, month, d)
        out.append(CalendarDay(day, date_status(day, grouped, today), len(grouped.get(day, ()))))
    return out


def reading_streak(grouped: Dict[dt.date, list], today: dt.date) -> int:
    """
    Consecutive read days ending today.
    A streak that ended yesterday still counts while today has no log yet.
    """
    day = today if grouped.get(today) else today - dt.timedelta(days=1)
    streak = 0
    while grouped.get(day):
        streak += 1
        day -= dt.timedelta(days=1)
    return streak


def sorted_logs_for_day(records: Iterable, catalog: Catalog = CATALOG) -> list:
    """
    Order logs by catalog position, then chapter.
    Books missing from the catalog go after every known book,
    ordered among themselves by name then chapter.
    """
    unknown = len(catalog)

    def key(r):
        pos = catalog.position(r.book_name)
        if pos is None:
            return (unknown, r.book_name, r.chapter)
        return (pos, "", r.chapter)

    return sorted(records, key=key)
