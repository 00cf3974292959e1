"""
Capacity-constrained allocation of work units onto calendar days.

Walks forward one day at a time, filling each day's spare minutes with the
head of the work queue. A unit that does not fit is split and its remainder
carried over to the next study day, except lessons: a lesson is only split
when it is longer than a whole day's budget.

Days are budgeted in whole minutes. Each fragment gets the rounded minutes
of the unit placed after it minus those placed before it, so the fragments
of a unit sum to its rounded duration and never exceed the day's budget.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from loguru import logger

from .curriculum import WorkUnit
from .ids import IdProvider, default_id_provider
from .models import EntryStatus, PlanningEntry, UserRoutine

EPSILON = 0.1  # Remainders below this many minutes count as done
DEFAULT_MAX_ENTRIES = 10_000


def _whole_minutes(minutes: float) -> int:
    """Round half up, so consecutive fragments of a unit add up to its rounded total."""
    return math.floor(minutes + 0.5)


def _anchored_minutes(entries: Iterable[PlanningEntry]) -> dict[date, int]:
    minutes: dict[date, int] = defaultdict(int)
    for entry in entries:
        minutes[entry.date] += entry.duration_minutes
    return minutes


def _entry_seed(unit: WorkUnit, day: date, sequence: int) -> str:
    return f"{unit.discipline_id}/{unit.topic_id}/{unit.goal.id}/{unit.sub_goal_id or ''}/{day.isoformat()}/{sequence}"


def allocate(
    units: Sequence[WorkUnit],
    routine: UserRoutine,
    start: date,
    *,
    today: date | None = None,
    anchored: Iterable[PlanningEntry] = (),
    id_provider: IdProvider | None = None,
    max_entries: int = DEFAULT_MAX_ENTRIES,
    max_days: int | None = None,
) -> list[PlanningEntry]:
    """
    Place work units onto days according to the weekly routine.

    Args:
        units: Work queue in study order
        routine: Weekly minutes per weekday
        start: First day that may receive work
        today: Reference date for DELAYED status (defaults to date.today())
        anchored: Entries already fixed on the calendar; their minutes count
            against the capacity of their day
        id_provider: Generates entry ids (stable UUIDs by default)
        max_entries: Stop after generating this many entries
        max_days: Optional limit on the calendar days walked; the walk is
            otherwise bounded only by the queue and max_entries

    Returns:
        New entries in chronological order
    """
    today = today or date.today()
    id_provider = id_provider or default_id_provider()
    spent_by_day = _anchored_minutes(anchored)

    entries: list[PlanningEntry] = []
    if not units:
        return entries
    if not routine.has_capacity:
        logger.warning(f"Routine has no study time; {len(units)} work units left unscheduled")
        return entries

    index = 0
    carry_over = 0.0
    placed = 0.0  # Minutes of the current unit already placed
    cursor = start
    walked = 0

    while index < len(units) and len(entries) < max_entries:
        if max_days is not None and walked >= max_days:
            break
        walked += 1

        budget = routine.capacity_for(cursor)
        if budget <= 0:
            cursor += timedelta(days=1)
            continue

        spent = spent_by_day.get(cursor, 0)

        while spent < budget and index < len(units):
            unit = units[index]
            need = carry_over if carry_over > 0 else unit.duration

            if need < EPSILON:
                index += 1
                carry_over = 0.0
                placed = 0.0
                continue

            remaining = budget - spent
            if unit.is_lesson and carry_over <= 0 and remaining < need <= budget:
                # Lesson fits a fresh day; keep it whole
                break

            session = min(need, remaining)
            minutes = _whole_minutes(placed + session) - _whole_minutes(placed)
            placed += session
            if minutes > 0:
                entries.append(
                    PlanningEntry(
                        id=id_provider(_entry_seed(unit, cursor, len(entries))),
                        goal_id=unit.goal.id,
                        sub_goal_id=unit.sub_goal_id,
                        topic_id=unit.topic_id,
                        discipline_id=unit.discipline_id,
                        date=cursor,
                        duration_minutes=minutes,
                        status=EntryStatus.DELAYED if cursor < today else EntryStatus.PENDING,
                        is_review=False,
                    )
                )
                spent += minutes

            left = need - session
            if left < EPSILON:
                index += 1
                carry_over = 0.0
                placed = 0.0
            else:
                carry_over = left

            if len(entries) >= max_entries:
                break

        cursor += timedelta(days=1)

    if index < len(units):
        logger.warning(
            f"Allocation stopped with {len(units) - index} work units left "
            f"({len(entries)} entries, last day {cursor - timedelta(days=1)})"
        )
    else:
        logger.debug(f"Allocated {len(units)} work units into {len(entries)} entries")

    return entries
