"""
Curriculum flattening.

Turns a plan's cycles into one deterministic queue of work units:

- CONTINUOUS: each cycle's content is emitted end-to-end before the next cycle
- ROTATING: rounds over all cycles, taking a fixed chunk of topics from every
  referenced discipline per round, until nothing is left

CLASS goals are expanded into one unit per sub-goal so lessons are scheduled
individually.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import NamedTuple

from loguru import logger

from .durations import goal_duration, sub_goal_duration
from .models import (
    Cycle,
    CycleItem,
    CycleItemType,
    CycleSystem,
    Discipline,
    Goal,
    GoalType,
    StudyPlan,
    Topic,
    UserProfile,
)


class PlacedGoal(NamedTuple):
    """A goal together with its position in the curriculum."""

    goal: Goal
    topic_id: str
    discipline_id: str


@dataclass(frozen=True)
class WorkUnit:
    """Atomic schedulable item: a goal, or a single lesson of a CLASS goal."""

    goal: Goal
    topic_id: str
    discipline_id: str
    duration: float = 0
    sub_goal_id: str | None = None

    @property
    def is_lesson(self) -> bool:
        return self.sub_goal_id is not None

    @property
    def unit_id(self) -> str:
        return self.sub_goal_id or self.goal.id


# =============================================================================
# Ordering helpers
# =============================================================================


def sorted_cycles(plan: StudyPlan) -> list[Cycle]:
    return sorted(plan.cycles, key=lambda c: c.order)


def sorted_topics(discipline: Discipline) -> list[Topic]:
    return sorted(discipline.topics, key=lambda t: t.order)


def _topic_goals(topic: Topic, discipline_id: str) -> list[PlacedGoal]:
    return [
        PlacedGoal(goal, topic.id, discipline_id)
        for goal in sorted(topic.goals, key=lambda g: g.order)
    ]


def ordered_discipline_ids(plan: StudyPlan, items: Iterable[CycleItem]) -> list[str]:
    """
    Expand cycle items into a duplicate-free list of discipline ids.

    A folder item expands to every discipline of that folder, by order.
    """
    ids: list[str] = []
    for item in items:
        if item.type == CycleItemType.DISCIPLINE:
            ids.append(item.id)
        else:
            folder_disciplines = sorted(
                (d for d in plan.disciplines if d.folder_id == item.id),
                key=lambda d: d.order,
            )
            ids.extend(d.id for d in folder_disciplines)
    return list(dict.fromkeys(ids))


# =============================================================================
# Traversal strategies
# =============================================================================


def flatten_continuous(plan: StudyPlan) -> list[PlacedGoal]:
    ordered: list[PlacedGoal] = []
    for cycle in sorted_cycles(plan):
        for discipline_id in ordered_discipline_ids(plan, cycle.items):
            discipline = plan.discipline(discipline_id)
            if discipline is None:
                continue
            for topic in sorted_topics(discipline):
                ordered.extend(_topic_goals(topic, discipline_id))
    return ordered


def rotation_round(
    plan: StudyPlan,
    cycles: list[Cycle],
    offsets: Mapping[str, int],
) -> tuple[list[PlacedGoal], dict[str, int]]:
    """
    Run one ROTATING round.

    Args:
        plan: Study plan
        cycles: Cycles in traversal order
        offsets: Topics already consumed per discipline id

    Returns:
        (goals emitted this round, updated offsets)
    """
    consumed = dict(offsets)
    emitted: list[PlacedGoal] = []

    for cycle in cycles:
        chunk = max(1, cycle.topics_per_discipline or 1)
        for discipline_id in ordered_discipline_ids(plan, cycle.items):
            discipline = plan.discipline(discipline_id)
            if discipline is None:
                continue
            start = consumed.get(discipline_id, 0)
            batch = sorted_topics(discipline)[start : start + chunk]
            if not batch:
                continue
            for topic in batch:
                emitted.extend(_topic_goals(topic, discipline_id))
            consumed[discipline_id] = start + len(batch)

    return emitted, consumed


def flatten_rotating(plan: StudyPlan) -> list[PlacedGoal]:
    cycles = sorted_cycles(plan)
    ordered: list[PlacedGoal] = []
    offsets: dict[str, int] = {}
    rounds = 0

    while True:
        emitted, next_offsets = rotation_round(plan, cycles, offsets)
        # Topics without goals still count as progress
        if next_offsets == offsets:
            break
        ordered.extend(emitted)
        offsets = next_offsets
        rounds += 1

    logger.debug(f"Rotating traversal finished after {rounds} rounds")
    return ordered


def flatten_plan(plan: StudyPlan) -> list[PlacedGoal]:
    if plan.cycle_system == CycleSystem.ROTATING:
        return flatten_rotating(plan)
    return flatten_continuous(plan)


# =============================================================================
# Work queue
# =============================================================================


def expand_lessons(placed: Iterable[PlacedGoal], profile: UserProfile) -> list[WorkUnit]:
    """Turn placed goals into work units, one per lesson for CLASS goals."""
    units: list[WorkUnit] = []
    for goal, topic_id, discipline_id in placed:
        if goal.type == GoalType.CLASS:
            for sub_goal in sorted(goal.sub_goals, key=lambda s: s.order):
                units.append(
                    WorkUnit(
                        goal=goal,
                        topic_id=topic_id,
                        discipline_id=discipline_id,
                        duration=sub_goal_duration(sub_goal),
                        sub_goal_id=sub_goal.id,
                    )
                )
        else:
            units.append(
                WorkUnit(
                    goal=goal,
                    topic_id=topic_id,
                    discipline_id=discipline_id,
                    duration=goal_duration(goal, profile),
                )
            )
    return units


def build_work_queue(
    plan: StudyPlan,
    profile: UserProfile,
    completed_ids: set[str] | frozenset[str] = frozenset(),
) -> list[WorkUnit]:
    """
    Flatten a plan into the ordered queue of outstanding work.

    Args:
        plan: Study plan
        profile: Proficiency profile used for page-based durations
        completed_ids: Goal and sub-goal ids already completed

    Returns:
        Work units still to be scheduled, in study order
    """
    placed = [p for p in flatten_plan(plan) if p.goal.id not in completed_ids]
    units = [u for u in expand_lessons(placed, profile) if u.unit_id not in completed_ids]
    logger.debug(
        f"Work queue for plan {plan.id}: {len(units)} units "
        f"({plan.cycle_system.value}, {len(completed_ids)} completed ids)"
    )
    return units
