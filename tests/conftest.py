"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.planner.models import (  # noqa: E402
    Cycle,
    CycleItem,
    CycleSystem,
    Discipline,
    Goal,
    GoalType,
    ReviewConfig,
    StudyPlan,
    SubGoal,
    Topic,
    UserProfile,
    UserRoutine,
)

MONDAY = date(2024, 1, 1)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def monday():
    """A Monday used as the reference 'today' in scheduling tests."""
    return MONDAY


@pytest.fixture
def monday_routine():
    """60 minutes on Mondays, nothing else."""
    return UserRoutine(
        days={0: 0, 1: 60, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0},
        profile=UserProfile.BEGINNER,
    )


@pytest.fixture
def math_plan():
    """
    One discipline, one topic: Goal A (10 pages of questions) then
    Goal B (5 pages of material).
    """
    topic = Topic(
        id="t-algebra",
        title="Algebra",
        order=0,
        goals=[
            Goal(id="goal-a", type=GoalType.QUESTIONS, title="Questions", order=0, pages=10),
            Goal(id="goal-b", type=GoalType.MATERIAL, title="Reading", order=1, pages=5),
        ],
    )
    return StudyPlan(
        id="plan-math",
        name="Math",
        disciplines=[Discipline(id="d-math", name="Math", order=0, topics=[topic])],
        cycles=[Cycle(id="c1", order=0, items=[CycleItem(id="d-math")])],
        cycle_system=CycleSystem.CONTINUOUS,
    )


@pytest.fixture
def lesson_plan():
    """A single CLASS goal with a 50 minute and a 20 minute lesson."""
    goal = Goal(
        id="goal-class",
        type=GoalType.CLASS,
        title="Video lessons",
        sub_goals=[
            SubGoal(id="lesson-1", title="Part 1", minutes=50, order=0),
            SubGoal(id="lesson-2", title="Part 2", minutes=20, order=1),
        ],
    )
    return StudyPlan(
        id="plan-lessons",
        disciplines=[
            Discipline(id="d-law", name="Law", topics=[Topic(id="t-1", goals=[goal])])
        ],
        cycles=[Cycle(id="c1", items=[CycleItem(id="d-law")])],
    )


@pytest.fixture
def review_plan():
    """A single SUMMARY goal with reviews at 1, 7, 15, 30 days repeating."""
    goal = Goal(
        id="goal-summary",
        type=GoalType.SUMMARY,
        minutes=30,
        review_config=ReviewConfig(enabled=True, intervals=[1, 7, 15, 30], repeat_last=True),
    )
    return StudyPlan(
        id="plan-review",
        disciplines=[
            Discipline(id="d-1", name="History", topics=[Topic(id="t-1", goals=[goal])])
        ],
        cycles=[Cycle(id="c1", items=[CycleItem(id="d-1")])],
    )
