"""Read models for the daily agenda and the calendar view."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from .models import EntryStatus, PlanningEntry, UserRoutine, weekday_index


@dataclass
class DaySummary:
    """Progress of a single study day."""

    day: date
    planned_minutes: int = 0
    total_sessions: int = 0
    completed_sessions: int = 0
    review_sessions: int = 0
    minutes_studied: float = 0.0

    @property
    def is_done(self) -> bool:
        return self.total_sessions > 0 and self.completed_sessions == self.total_sessions

    @property
    def completion_rate(self) -> float:
        if not self.total_sessions:
            return 0.0
        return self.completed_sessions / self.total_sessions


def visible_entries(routine: UserRoutine, entries: Sequence[PlanningEntry]) -> list[PlanningEntry]:
    """A paused plan shows nothing until it is resumed."""
    if routine.is_paused:
        return []
    return list(entries)


def entries_on(entries: Iterable[PlanningEntry], day: date) -> list[PlanningEntry]:
    return [e for e in entries if e.date == day]


def summarize_day(entries: Iterable[PlanningEntry], day: date) -> DaySummary:
    summary = DaySummary(day=day)
    for entry in entries_on(entries, day):
        summary.total_sessions += 1
        summary.planned_minutes += entry.duration_minutes
        if entry.is_review:
            summary.review_sessions += 1
        if entry.status == EntryStatus.COMPLETED:
            summary.completed_sessions += 1
            summary.minutes_studied += entry.actual_time_spent or 0
    return summary


def group_by_date(
    entries: Iterable[PlanningEntry],
    start: date | None = None,
    end: date | None = None,
) -> dict[date, list[PlanningEntry]]:
    """
    Group entries by day, in date order.

    Args:
        entries: Calendar entries
        start: First day to include (inclusive)
        end: Last day to include (inclusive)
    """
    grouped: dict[date, list[PlanningEntry]] = {}
    for entry in sorted(entries, key=lambda e: e.date):
        if start and entry.date < start:
            continue
        if end and entry.date > end:
            continue
        grouped.setdefault(entry.date, []).append(entry)
    return grouped


def week_days(day: date) -> list[date]:
    """The Sunday-to-Saturday week containing a day."""
    sunday = day - timedelta(days=weekday_index(day))
    return [sunday + timedelta(days=offset) for offset in range(7)]


def overdue_entries(entries: Iterable[PlanningEntry], today: date) -> list[PlanningEntry]:
    """Unfinished sessions dated before today."""
    return [
        e for e in entries
        if e.status != EntryStatus.COMPLETED and e.date < today
    ]
