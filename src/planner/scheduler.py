"""
Schedule generation with history preservation.

generate_schedule() is the engine's entry point. Every call rebuilds the
future part of the calendar from scratch:

1. Historic entries (completed sessions, reviews still ahead or done) are kept
   verbatim
2. Everything else from a previous run is discarded
3. The curriculum is flattened again, skipping completed goals and lessons
4. The allocator fills the calendar from the start date, counting historic
   minutes against each day's budget
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING, Literal

from loguru import logger

from .allocator import DEFAULT_MAX_ENTRIES, allocate
from .curriculum import build_work_queue
from .ids import IdProvider
from .models import PlanningEntry, StudyPlan, UserRoutine, to_calendar_day

if TYPE_CHECKING:
    from config import Settings

PlanningMode = Literal["new", "replan"]


def split_history(
    entries: Iterable[PlanningEntry],
    today: date,
) -> tuple[list[PlanningEntry], list[PlanningEntry]]:
    """
    Partition entries into (historic, superseded).

    Historic entries are de-duplicated by id, first occurrence wins.
    """
    historic: list[PlanningEntry] = []
    superseded: list[PlanningEntry] = []
    seen: set[str] = set()

    for entry in entries:
        if entry.is_historic(today):
            if entry.id in seen:
                continue
            seen.add(entry.id)
            historic.append(entry)
        else:
            superseded.append(entry)

    return historic, superseded


def completed_unit_ids(entries: Iterable[PlanningEntry]) -> set[str]:
    """Ids of goals (or lessons, for CLASS goals) already studied."""
    return {
        entry.sub_goal_id or entry.goal_id
        for entry in entries
        if entry.is_completed and not entry.is_review
    }


def generate_schedule(
    plan: StudyPlan | None,
    routine: UserRoutine,
    start_date: date | datetime | None = None,
    existing_entries: Iterable[PlanningEntry] = (),
    mode: PlanningMode = "new",
    *,
    today: date | datetime | None = None,
    id_provider: IdProvider | None = None,
    settings: Settings | None = None,
) -> list[PlanningEntry]:
    """
    Generate (or regenerate) the full study calendar for a plan.

    Args:
        plan: Study plan to schedule
        routine: Weekly budget and proficiency profile
        start_date: First day to place new work on (defaults to today)
        existing_entries: Current calendar; historic entries are preserved
        mode: "new" or "replan"; both rebuild the future schedule
        today: Reference date (defaults to date.today())
        id_provider: Generates entry ids (stable UUIDs by default)
        settings: Safety bounds; the allocator defaults apply when None

    Returns:
        Historic entries followed by newly placed entries, sorted by date
    """
    if not plan or not plan.cycles:
        return []

    today = to_calendar_day(today) if today else date.today()
    start = to_calendar_day(start_date) if start_date else today

    historic, superseded = split_history(existing_entries, today)
    completed = completed_unit_ids(historic)
    units = build_work_queue(plan, routine.profile, completed)

    logger.debug(
        f"Generating schedule ({mode}) for plan {plan.id} from {start}: "
        f"{len(historic)} historic kept, {len(superseded)} superseded"
    )

    new_entries = allocate(
        units,
        routine,
        start,
        today=today,
        anchored=historic,
        id_provider=id_provider,
        max_entries=settings.max_generated_entries if settings else DEFAULT_MAX_ENTRIES,
        max_days=settings.max_horizon_days if settings else None,
    )

    # sorted() is stable: historic first, then creation order within a day
    return sorted(historic + new_entries, key=lambda e: e.date)
