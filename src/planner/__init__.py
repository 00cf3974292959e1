"""
Study Planner: exam study calendar generation.

Builds a day-by-day study calendar from a curriculum (disciplines -> topics
-> goals) and a weekly time budget, and chains spaced-repetition reviews as
goals are completed.

Components:
- build_work_queue: Curriculum flattening (continuous or rotating cycles)
- goal_duration: Minutes required per goal and proficiency profile
- allocate: Capacity-constrained day-by-day placement
- generate_schedule: Regeneration that preserves completed work and reviews
- complete_entry: Completion and review chaining
- PlannerStore: JSON persistence
"""

from .allocator import allocate
from .curriculum import WorkUnit, build_work_queue, flatten_plan
from .durations import goal_duration
from .ids import RandomIdProvider, SequentialIdProvider, StableIdProvider
from .models import (
    Cycle,
    CycleItem,
    CycleItemType,
    CycleSystem,
    Discipline,
    EntryStatus,
    Folder,
    Goal,
    GoalType,
    PlanningEntry,
    ReviewConfig,
    StudyPlan,
    SubGoal,
    Topic,
    UserProfile,
    UserRoutine,
)
from .reviews import complete_entry, next_review, parse_intervals, review_schedule
from .scheduler import generate_schedule
from .store import PlannerStore, PlanNotFoundError, StoreError

__all__ = [
    # Models
    "StudyPlan",
    "Discipline",
    "Folder",
    "Topic",
    "Goal",
    "GoalType",
    "SubGoal",
    "ReviewConfig",
    "Cycle",
    "CycleItem",
    "CycleItemType",
    "CycleSystem",
    "UserRoutine",
    "UserProfile",
    "PlanningEntry",
    "EntryStatus",
    # Engine
    "goal_duration",
    "WorkUnit",
    "flatten_plan",
    "build_work_queue",
    "allocate",
    "generate_schedule",
    # Reviews
    "complete_entry",
    "next_review",
    "review_schedule",
    "parse_intervals",
    # Ids
    "StableIdProvider",
    "RandomIdProvider",
    "SequentialIdProvider",
    # Persistence
    "PlannerStore",
    "StoreError",
    "PlanNotFoundError",
]
