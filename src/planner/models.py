"""
Domain models for the study planner.

Plans (disciplines -> topics -> goals) are authored outside the engine and
are read-only inputs. PlanningEntry is the only entity the engine produces.
"""

from __future__ import annotations

import datetime as dt
import math
from enum import Enum

from pydantic import BaseModel, Field, field_validator

WEEKDAYS = range(7)  # 0=Sunday ... 6=Saturday


def to_calendar_day(value: dt.date | dt.datetime | str) -> dt.date:
    """Truncate a datetime (or ISO string) to its calendar day."""
    if isinstance(value, str):
        value = dt.datetime.fromisoformat(value) if "T" in value else dt.date.fromisoformat(value)
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def weekday_index(day: dt.date) -> int:
    """Weekday with Sunday as 0, matching the routine's day keys."""
    return (day.weekday() + 1) % 7


# =============================================================================
# Enums
# =============================================================================


class GoalType(str, Enum):
    """Kinds of study work a goal can describe."""

    CLASS = "CLASS"  # Video/recorded lessons, split into sub-goals
    MATERIAL = "MATERIAL"  # Reading material, page based
    QUESTIONS = "QUESTIONS"  # Practice questions, page based
    LEI_SECA = "LEI_SECA"  # Statute reading, page based with repetition
    SUMMARY = "SUMMARY"  # Summary writing, fixed minutes


class CycleSystem(str, Enum):
    """Traversal strategy over the plan's cycles."""

    CONTINUOUS = "CONTINUOUS"
    ROTATING = "ROTATING"


class UserProfile(str, Enum):
    """Reading-speed profile of the candidate."""

    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class EntryStatus(str, Enum):
    PENDING = "PENDING"
    DELAYED = "DELAYED"
    COMPLETED = "COMPLETED"


class CycleItemType(str, Enum):
    DISCIPLINE = "DISCIPLINE"
    FOLDER = "FOLDER"


# =============================================================================
# Curriculum
# =============================================================================


class ReviewConfig(BaseModel):
    """Spaced-repetition settings of a goal."""

    enabled: bool = False
    intervals: list[int] = Field(default_factory=list, description="Days between reviews")
    repeat_last: bool = False


class SubGoal(BaseModel):
    """A single lesson inside a CLASS goal."""

    id: str
    title: str = ""
    minutes: float = 0
    order: int = 0


class Goal(BaseModel):
    id: str
    type: GoalType
    title: str = ""
    order: int = 0
    pages: float | None = None
    minutes: float | None = None
    multiplier: float | None = None
    sub_goals: list[SubGoal] = Field(default_factory=list)
    review_config: ReviewConfig | None = None
    color: str | None = None
    links: list[str] = Field(default_factory=list)
    observations: str | None = None

    @property
    def review_enabled(self) -> bool:
        return bool(self.review_config and self.review_config.enabled)


class Topic(BaseModel):
    id: str
    title: str = ""
    order: int = 0
    goals: list[Goal] = Field(default_factory=list)


class Discipline(BaseModel):
    id: str
    name: str = ""
    order: int = 0
    folder_id: str | None = None
    topics: list[Topic] = Field(default_factory=list)


class Folder(BaseModel):
    """Pure grouping of disciplines."""

    id: str
    name: str = ""


class CycleItem(BaseModel):
    id: str
    type: CycleItemType = CycleItemType.DISCIPLINE


class Cycle(BaseModel):
    """An ordered curriculum block."""

    id: str
    name: str = ""
    order: int = 0
    items: list[CycleItem] = Field(default_factory=list)
    topics_per_discipline: int = Field(default=1, description="Topic chunk size under ROTATING")


class StudyPlan(BaseModel):
    id: str
    name: str = ""
    disciplines: list[Discipline] = Field(default_factory=list)
    folders: list[Folder] = Field(default_factory=list)
    cycles: list[Cycle] = Field(default_factory=list)
    cycle_system: CycleSystem = CycleSystem.CONTINUOUS

    def discipline(self, discipline_id: str) -> Discipline | None:
        for discipline in self.disciplines:
            if discipline.id == discipline_id:
                return discipline
        return None

    def find_goal(self, discipline_id: str, topic_id: str, goal_id: str) -> Goal | None:
        """Look up a goal by its position in the curriculum tree."""
        discipline = self.discipline(discipline_id)
        if discipline is None:
            return None
        for topic in discipline.topics:
            if topic.id != topic_id:
                continue
            for goal in topic.goals:
                if goal.id == goal_id:
                    return goal
        return None


# =============================================================================
# Routine & Planning
# =============================================================================


class UserRoutine(BaseModel):
    """Weekly time budget and preferences of a candidate."""

    days: dict[int, float] = Field(default_factory=lambda: {d: 0 for d in WEEKDAYS})
    profile: UserProfile = UserProfile.BEGINNER
    selected_plan_id: str | None = None
    is_paused: bool = False

    def capacity_for(self, day: dt.date) -> int:
        """Whole minutes available on a calendar day."""
        return max(0, math.floor(self.days.get(weekday_index(day)) or 0))

    @property
    def has_capacity(self) -> bool:
        return any(math.floor(minutes or 0) >= 1 for minutes in self.days.values())


class PlanningEntry(BaseModel):
    """One scheduled study session."""

    id: str
    goal_id: str
    sub_goal_id: str | None = None
    topic_id: str
    discipline_id: str
    date: dt.date
    duration_minutes: int = 0
    status: EntryStatus = EntryStatus.PENDING
    is_review: bool = False
    review_step: int | None = None
    actual_time_spent: float | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_date(cls, value):
        return to_calendar_day(value)

    @property
    def is_completed(self) -> bool:
        return self.status == EntryStatus.COMPLETED

    def is_historic(self, today: dt.date) -> bool:
        """Completed work and placed reviews survive regeneration."""
        if self.is_completed:
            return True
        return self.is_review and self.date >= today
