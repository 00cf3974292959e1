"""
Spaced-repetition review chaining.

Completing a session of a goal with reviews enabled schedules the next review
of that goal. Each goal's review config is a list of day intervals:

    intervals=[1, 7, 15, 30], repeat_last=True

    completion of the study session  -> review step 1 in 1 day
    completion of review step 1      -> review step 2 in 7 days
    completion of review step 2      -> review step 3 in 15 days
    completion of review step 3      -> review step 4 in 30 days
    completion of review step 4      -> review step 4 again in 30 days, forever

Without repeat_last the chain ends once the intervals are exhausted.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from datetime import date, datetime, timedelta
from typing import NamedTuple

from loguru import logger

from .ids import IdProvider, default_id_provider
from .models import EntryStatus, PlanningEntry, ReviewConfig, StudyPlan, to_calendar_day


class NextReview(NamedTuple):
    step: int
    interval_days: int


def next_review(config: ReviewConfig | None, current_step: int) -> NextReview | None:
    """
    Decide the review that follows a completed step.

    Args:
        config: Goal review configuration
        current_step: Step of the completed entry (0 for the study session)

    Returns:
        The next step and its delay in days, or None when the chain ends
    """
    if config is None or not config.enabled:
        return None

    intervals = config.intervals
    if current_step < len(intervals):
        return NextReview(current_step + 1, intervals[current_step])
    if config.repeat_last and intervals:
        return NextReview(len(intervals), intervals[-1])
    return None


def review_schedule(config: ReviewConfig, start_step: int = 0) -> Iterator[NextReview]:
    """
    Lazily yield the review chain from a given step.

    Infinite when repeat_last is set; slice it with itertools.islice.
    """
    step = start_step
    while (review := next_review(config, step)) is not None:
        yield review
        step = review.step


def parse_intervals(text: str) -> list[int]:
    """
    Parse user-entered intervals such as "1, 7, 15, 30".

    Anything that is not a positive whole number is dropped.
    """
    intervals = []
    for token in re.split(r"[,;\s]+", text or ""):
        if token.isdigit() and int(token) > 0:
            intervals.append(int(token))
    return intervals


def complete_entry(
    entries: Sequence[PlanningEntry],
    entry_id: str,
    time_spent: float,
    plan: StudyPlan | None,
    *,
    today: date | datetime | None = None,
    id_provider: IdProvider | None = None,
) -> list[PlanningEntry]:
    """
    Mark an entry as completed and chain its next review.

    Args:
        entries: Current calendar
        entry_id: Entry being completed
        time_spent: Minutes actually studied
        plan: Plan owning the goal, used to read its review config
        today: Completion date (defaults to date.today())
        id_provider: Generates the review entry id

    Returns:
        Updated calendar; the input sequence is left untouched. Completing
        an entry twice returns the calendar unchanged, so each entry chains
        at most one review.
    """
    entry = next((e for e in entries if e.id == entry_id), None)
    if entry is None:
        logger.warning(f"Cannot complete unknown planning entry {entry_id}")
        return list(entries)

    if entry.is_completed:
        logger.warning(f"Planning entry {entry_id} is already completed; nothing to do")
        return list(entries)

    today = to_calendar_day(today) if today else date.today()
    completed = entry.model_copy(
        update={"status": EntryStatus.COMPLETED, "actual_time_spent": time_spent}
    )
    updated = [completed if e.id == entry_id else e for e in entries]

    goal = plan.find_goal(entry.discipline_id, entry.topic_id, entry.goal_id) if plan else None
    if goal is None:
        logger.warning(f"Goal {entry.goal_id} not found in plan; no review scheduled")
        return updated

    review = next_review(goal.review_config, entry.review_step or 0)
    if review is None:
        return updated

    id_provider = id_provider or default_id_provider()
    review_date = today + timedelta(days=review.interval_days)
    updated.append(
        PlanningEntry(
            id=id_provider(f"review/{entry.id}/{review.step}"),
            goal_id=entry.goal_id,
            sub_goal_id=entry.sub_goal_id,
            topic_id=entry.topic_id,
            discipline_id=entry.discipline_id,
            date=review_date,
            duration_minutes=entry.duration_minutes,
            status=EntryStatus.PENDING,
            is_review=True,
            review_step=review.step,
        )
    )
    logger.debug(f"Review step {review.step} of goal {goal.id} scheduled for {review_date}")
    return updated
