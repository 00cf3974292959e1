"""
JSON document store for plans, routine and planning.

Layout under the data directory (default ~/.study_planner/):

    plans/<plan_id>.json      curriculum documents
    routine.json              weekly budget and preferences
    planning/<plan_id>.json   calendar of the plan, replaced as a whole
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .models import PlanningEntry, StudyPlan, UserProfile, UserRoutine

_ENTRIES = TypeAdapter(list[PlanningEntry])


class StoreError(Exception):
    """A document could not be read or written."""


class PlanNotFoundError(StoreError):
    def __init__(self, plan_id: str):
        super().__init__(f"Plan not found: {plan_id}")
        self.plan_id = plan_id


class PlannerStore:
    """Filesystem persistence for the planner's documents."""

    def __init__(self, data_dir: Path, default_profile: UserProfile = UserProfile.BEGINNER):
        self.data_dir = Path(data_dir)
        self.default_profile = default_profile
        self.plans_dir = self.data_dir / "plans"
        self.planning_dir = self.data_dir / "planning"
        self.routine_path = self.data_dir / "routine.json"

        self.plans_dir.mkdir(parents=True, exist_ok=True)
        self.planning_dir.mkdir(parents=True, exist_ok=True)

    # ========================================
    # Helpers
    # ========================================

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Cannot read {path}: {e}") from e

    def _write(self, path: Path, payload: str) -> Path:
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise StoreError(f"Cannot write {path}: {e}") from e
        return path

    # ========================================
    # Plans
    # ========================================

    def save_plan(self, plan: StudyPlan) -> Path:
        path = self._write(self.plans_dir / f"{plan.id}.json", plan.model_dump_json(indent=2))
        logger.info(f"Saved plan {plan.id} to {path}")
        return path

    def load_plan(self, plan_id: str) -> StudyPlan:
        path = self.plans_dir / f"{plan_id}.json"
        if not path.exists():
            raise PlanNotFoundError(plan_id)
        return StudyPlan.model_validate_json(self._read(path))

    def list_plans(self) -> list[StudyPlan]:
        plans = []
        for path in sorted(self.plans_dir.glob("*.json")):
            try:
                plans.append(StudyPlan.model_validate_json(self._read(path)))
            except ValidationError as e:
                logger.warning(f"Skipping invalid plan document {path.name}: {e.error_count()} errors")
        return plans

    def import_plan(self, source: Path) -> StudyPlan:
        """Validate a plan document from any path and store it."""
        try:
            data = json.loads(self._read(Path(source)))
        except json.JSONDecodeError as e:
            raise StoreError(f"{source} is not valid JSON: {e}") from e
        plan = StudyPlan.model_validate(data)
        self.save_plan(plan)
        return plan

    # ========================================
    # Routine
    # ========================================

    def load_routine(self) -> UserRoutine:
        if not self.routine_path.exists():
            return UserRoutine(profile=self.default_profile)
        return UserRoutine.model_validate_json(self._read(self.routine_path))

    def save_routine(self, routine: UserRoutine) -> Path:
        return self._write(self.routine_path, routine.model_dump_json(indent=2))

    # ========================================
    # Planning
    # ========================================

    def load_entries(self, plan_id: str) -> list[PlanningEntry]:
        path = self.planning_dir / f"{plan_id}.json"
        if not path.exists():
            return []
        return _ENTRIES.validate_json(self._read(path))

    def save_entries(self, plan_id: str, entries: list[PlanningEntry]) -> Path:
        """Replace the plan's calendar with the given entries."""
        path = self._write(
            self.planning_dir / f"{plan_id}.json",
            _ENTRIES.dump_json(entries, indent=2).decode("utf-8"),
        )
        logger.info(f"Saved {len(entries)} planning entries for plan {plan_id}")
        return path

    def clear_entries(self, plan_id: str) -> bool:
        """Drop the plan's calendar entirely. Returns True if one existed."""
        path = self.planning_dir / f"{plan_id}.json"
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Cleared planning for plan {plan_id}")
        return True
