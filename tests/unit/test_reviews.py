"""
Unit tests for spaced-repetition review chaining.
"""

from datetime import timedelta
from itertools import islice

from src.planner.ids import SequentialIdProvider
from src.planner.models import EntryStatus, PlanningEntry, ReviewConfig
from src.planner.reviews import (
    NextReview,
    complete_entry,
    next_review,
    parse_intervals,
    review_schedule,
)


def study_entry(day, entry_id="study-1", duration=30):
    return PlanningEntry(
        id=entry_id,
        goal_id="goal-summary",
        topic_id="t-1",
        discipline_id="d-1",
        date=day,
        duration_minutes=duration,
    )


class TestNextReview:
    def test_walks_intervals(self):
        config = ReviewConfig(enabled=True, intervals=[1, 7, 15])
        assert next_review(config, 0) == NextReview(1, 1)
        assert next_review(config, 1) == NextReview(2, 7)
        assert next_review(config, 2) == NextReview(3, 15)

    def test_chain_ends_without_repeat(self):
        config = ReviewConfig(enabled=True, intervals=[1, 7])
        assert next_review(config, 2) is None

    def test_repeat_last_caps_step(self):
        config = ReviewConfig(enabled=True, intervals=[1, 7], repeat_last=True)
        assert next_review(config, 2) == NextReview(2, 7)
        assert next_review(config, 5) == NextReview(2, 7)

    def test_disabled_or_missing(self):
        assert next_review(None, 0) is None
        assert next_review(ReviewConfig(enabled=False, intervals=[1]), 0) is None

    def test_empty_intervals(self):
        assert next_review(ReviewConfig(enabled=True, repeat_last=True), 0) is None


class TestReviewSchedule:
    def test_finite_chain(self):
        config = ReviewConfig(enabled=True, intervals=[2, 4])
        assert list(review_schedule(config)) == [NextReview(1, 2), NextReview(2, 4)]

    def test_repeating_chain_is_lazy(self):
        config = ReviewConfig(enabled=True, intervals=[1, 7, 15, 30], repeat_last=True)
        steps = list(islice(review_schedule(config), 7))
        assert [s.step for s in steps] == [1, 2, 3, 4, 4, 4, 4]
        assert [s.interval_days for s in steps] == [1, 7, 15, 30, 30, 30, 30]


class TestParseIntervals:
    def test_parses_comma_list(self):
        assert parse_intervals("1, 7, 15, 30") == [1, 7, 15, 30]

    def test_drops_garbage(self):
        assert parse_intervals("1, abc, -3, 0, 2.5, 7") == [1, 7]

    def test_empty(self):
        assert parse_intervals("") == []
        assert parse_intervals(" , ,") == []


class TestCompleteEntry:
    def test_marks_completed(self, review_plan, monday):
        original = study_entry(monday)
        result = complete_entry([original], "study-1", 25, review_plan, today=monday)

        assert result[0].status == EntryStatus.COMPLETED
        assert result[0].actual_time_spent == 25
        assert original.status == EntryStatus.PENDING

    def test_first_review(self, review_plan, monday):
        result = complete_entry(
            [study_entry(monday, duration=40)],
            "study-1",
            40,
            review_plan,
            today=monday,
            id_provider=SequentialIdProvider("review"),
        )
        review = result[-1]
        assert len(result) == 2
        assert review.id == "review-1"
        assert review.is_review
        assert review.review_step == 1
        assert review.date == monday + timedelta(days=1)
        assert review.duration_minutes == 40
        assert review.status == EntryStatus.PENDING
        assert (review.goal_id, review.topic_id, review.discipline_id) == (
            "goal-summary", "t-1", "d-1",
        )

    def test_chaining_sequence(self, review_plan, monday):
        entries = [study_entry(monday)]
        current_id = "study-1"
        day = monday
        steps, offsets = [], []

        for _ in range(6):
            entries = complete_entry(entries, current_id, 30, review_plan, today=day)
            review = entries[-1]
            steps.append(review.review_step)
            offsets.append((review.date - day).days)
            current_id = review.id
            day = review.date

        assert steps == [1, 2, 3, 4, 4, 4]
        assert offsets == [1, 7, 15, 30, 30, 30]
        assert len({e.id for e in entries}) == len(entries)

    def test_no_review_when_disabled(self, math_plan, monday):
        entry = PlanningEntry(
            id="e", goal_id="goal-a", topic_id="t-algebra", discipline_id="d-math",
            date=monday, duration_minutes=60,
        )
        result = complete_entry([entry], "e", 60, math_plan, today=monday)
        assert len(result) == 1
        assert result[0].is_completed

    def test_chain_terminates(self, review_plan, monday):
        plan = review_plan.model_copy(deep=True)
        goal = plan.disciplines[0].topics[0].goals[0]
        goal.review_config = goal.review_config.model_copy(update={"repeat_last": False})

        last = study_entry(monday).model_copy(update={"is_review": True, "review_step": 4})
        result = complete_entry([last], "study-1", 30, plan, today=monday)
        assert len(result) == 1

    def test_unknown_entry_unchanged(self, review_plan, monday):
        entries = [study_entry(monday)]
        assert complete_entry(entries, "missing", 10, review_plan, today=monday) == entries

    def test_goal_missing_from_plan(self, math_plan, monday):
        result = complete_entry([study_entry(monday)], "study-1", 30, math_plan, today=monday)
        assert len(result) == 1
        assert result[0].is_completed

    def test_completing_twice_chains_one_review(self, review_plan, monday):
        entries = complete_entry([study_entry(monday)], "study-1", 30, review_plan, today=monday)
        again = complete_entry(entries, "study-1", 45, review_plan, today=monday)

        assert again == entries
        assert [e.is_review for e in again] == [False, True]
        assert len({e.id for e in again}) == len(again)
        assert again[0].actual_time_spent == 30
