"""Per-goal duration model."""

from __future__ import annotations

from .models import Goal, GoalType, SubGoal, UserProfile

# Minutes needed per page, by goal kind and proficiency profile.
MINUTES_PER_PAGE: dict[GoalType, dict[UserProfile, float]] = {
    GoalType.MATERIAL: {
        UserProfile.BEGINNER: 5,
        UserProfile.INTERMEDIATE: 3,
        UserProfile.ADVANCED: 1,
    },
    GoalType.QUESTIONS: {
        UserProfile.BEGINNER: 10,
        UserProfile.INTERMEDIATE: 6,
        UserProfile.ADVANCED: 2,
    },
    GoalType.LEI_SECA: {
        UserProfile.BEGINNER: 5,
        UserProfile.INTERMEDIATE: 3,
        UserProfile.ADVANCED: 1,
    },
}


def minutes_per_page(goal_type: GoalType, profile: UserProfile) -> float:
    return MINUTES_PER_PAGE.get(goal_type, {}).get(profile, 0)


def sub_goal_duration(sub_goal: SubGoal) -> float:
    return sub_goal.minutes or 0


def goal_duration(goal: Goal, profile: UserProfile) -> float:
    """
    Total minutes required to complete a goal.

    Args:
        goal: Goal definition
        profile: Candidate proficiency profile

    Returns:
        Minutes; 0 when the goal carries no usable workload
    """
    if goal.type == GoalType.CLASS:
        return sum(sub_goal_duration(s) for s in goal.sub_goals)

    if goal.type == GoalType.SUMMARY:
        return goal.minutes or 0

    total = (goal.pages or 0) * minutes_per_page(goal.type, profile)
    if goal.type == GoalType.LEI_SECA:
        total *= goal.multiplier if goal.multiplier is not None else 1
    return total
