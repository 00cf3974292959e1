"""
Unit tests for schedule generation and history preservation.
"""

from datetime import datetime, timedelta

import pytest

from config import Settings
from src.planner.models import EntryStatus, PlanningEntry, StudyPlan, UserRoutine
from src.planner.scheduler import completed_unit_ids, generate_schedule, split_history


def entry(entry_id, goal_id, day, status=EntryStatus.PENDING, **kwargs):
    return PlanningEntry(
        id=entry_id,
        goal_id=goal_id,
        topic_id="t-algebra",
        discipline_id="d-math",
        date=day,
        duration_minutes=kwargs.pop("duration_minutes", 30),
        status=status,
        **kwargs,
    )


class TestEmptyInputs:
    def test_no_plan(self, monday_routine, monday):
        assert generate_schedule(None, monday_routine, monday, today=monday) == []

    def test_plan_without_cycles(self, monday_routine, monday):
        assert generate_schedule(StudyPlan(id="p"), monday_routine, monday, today=monday) == []

    def test_zero_routine_keeps_history_only(self, math_plan, monday):
        done = entry("done", "goal-a", monday - timedelta(days=7), EntryStatus.COMPLETED)
        result = generate_schedule(math_plan, UserRoutine(), monday, [done], today=monday)
        assert result == [done]


class TestGeneration:
    def test_scenario_durations(self, math_plan, monday_routine, monday):
        result = generate_schedule(math_plan, monday_routine, monday, [], "new", today=monday)
        assert [e.duration_minutes for e in result] == [60, 40, 20, 5]
        assert all(e.status == EntryStatus.PENDING for e in result)

    def test_start_date_defaults_to_today(self, math_plan, monday_routine, monday):
        result = generate_schedule(math_plan, monday_routine, today=monday)
        assert result[0].date == monday

    def test_datetime_start_truncated(self, math_plan, monday_routine, monday):
        start = datetime(monday.year, monday.month, monday.day, 22, 30)
        result = generate_schedule(math_plan, monday_routine, start, today=monday)
        assert result[0].date == monday

    def test_idempotent(self, math_plan, monday_routine, monday):
        first = generate_schedule(math_plan, monday_routine, monday, [], "new", today=monday)
        second = generate_schedule(math_plan, monday_routine, monday, [], "new", today=monday)
        assert first == second
        assert [e.model_dump_json() for e in first] == [e.model_dump_json() for e in second]

    def test_regenerating_own_output_is_stable(self, math_plan, monday_routine, monday):
        first = generate_schedule(math_plan, monday_routine, monday, today=monday)
        second = generate_schedule(math_plan, monday_routine, monday, first, "replan", today=monday)
        assert first == second

    @pytest.mark.parametrize("mode", ["new", "replan"])
    def test_modes_behave_the_same(self, math_plan, monday_routine, monday, mode):
        baseline = generate_schedule(math_plan, monday_routine, monday, today=monday)
        assert generate_schedule(math_plan, monday_routine, monday, [], mode, today=monday) == baseline

    def test_settings_bound_entries(self, math_plan, monday_routine, monday):
        settings = Settings(max_generated_entries=2)
        result = generate_schedule(math_plan, monday_routine, monday, today=monday, settings=settings)
        assert len(result) == 2


class TestHistoryPreservation:
    def test_completed_and_reviews_kept_verbatim(self, math_plan, monday_routine, monday):
        done = entry(
            "done", "goal-a", monday - timedelta(days=7), EntryStatus.COMPLETED,
            duration_minutes=100, actual_time_spent=95,
        )
        review = entry("rev", "goal-a", monday + timedelta(days=7), is_review=True, review_step=1)
        existing = [done, review]

        result = generate_schedule(math_plan, monday_routine, monday, existing, "replan", today=monday)

        assert result.count(done) == 1
        assert result.count(review) == 1
        assert [e for e in result if e.id == "done"][0] == done
        # goal-a is done; only goal-b is rescheduled
        new = [e for e in result if e.id not in {"done", "rev"}]
        assert {e.goal_id for e in new} == {"goal-b"}
        assert sum(e.duration_minutes for e in new) == 25

    def test_stale_pending_entries_superseded(self, math_plan, monday_routine, monday):
        stale = entry("stale", "goal-a", monday - timedelta(days=14), EntryStatus.DELAYED)
        result = generate_schedule(math_plan, monday_routine, monday, [stale], today=monday)
        assert "stale" not in {e.id for e in result}
        assert sum(e.duration_minutes for e in result) == 125

    def test_past_pending_review_dropped(self, math_plan, monday_routine, monday):
        old_review = entry("old", "goal-a", monday - timedelta(days=1), is_review=True, review_step=2)
        result = generate_schedule(math_plan, monday_routine, monday, [old_review], today=monday)
        assert "old" not in {e.id for e in result}

    def test_review_minutes_count_against_capacity(self, math_plan, monday_routine, monday):
        review = entry("rev", "goal-x", monday, is_review=True, review_step=1, duration_minutes=30)
        result = generate_schedule(math_plan, monday_routine, monday, [review], today=monday)
        first_day = [e for e in result if e.date == monday]
        assert sum(e.duration_minutes for e in first_day) == 60
        assert first_day[0] == review

    def test_duplicate_history_collapsed(self, math_plan, monday_routine, monday):
        done = entry("done", "goal-a", monday - timedelta(days=7), EntryStatus.COMPLETED)
        result = generate_schedule(math_plan, monday_routine, monday, [done, done], today=monday)
        assert [e.id for e in result].count("done") == 1

    def test_completed_reviews_do_not_exclude_goal(self, math_plan, monday_routine, monday):
        review_done = entry(
            "rev", "goal-a", monday - timedelta(days=3), EntryStatus.COMPLETED,
            is_review=True, review_step=1,
        )
        result = generate_schedule(math_plan, monday_routine, monday, [review_done], today=monday)
        assert "goal-a" in {e.goal_id for e in result if not e.is_review}


class TestHelpers:
    def test_split_history(self, monday):
        done = entry("a", "g", monday - timedelta(days=3), EntryStatus.COMPLETED)
        future_review = entry("b", "g", monday, is_review=True)
        pending = entry("c", "g", monday)
        historic, superseded = split_history([done, future_review, pending], monday)
        assert historic == [done, future_review]
        assert superseded == [pending]

    def test_completed_unit_ids_prefers_lessons(self, monday):
        lesson = entry("a", "class", monday, EntryStatus.COMPLETED, sub_goal_id="lesson-1")
        plain = entry("b", "goal-a", monday, EntryStatus.COMPLETED)
        assert completed_unit_ids([lesson, plain]) == {"lesson-1", "goal-a"}
