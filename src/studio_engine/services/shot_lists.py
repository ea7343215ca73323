"""Persisted shot list planning and manual edits."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from studio_engine.domain.shot_lists import Package, PlanningProfile, ShotList
from studio_engine.services.planner import (
    ShotListPlanner,
    is_ai_owned,
    recompute_aggregates,
)


class ShotListRepository(Protocol):
    """Persistence interface for shot lists."""

    def get_for_package(self, package_id: UUID) -> ShotList | None:
        """Return the shot list attached to a package, if present."""

    def save_shot_list(self, shot_list: ShotList) -> ShotList:
        """Insert or update a shot list and return the stored version."""


@dataclass
class ShotListService:
    """Application service that plans and stores shot lists."""

    planner: ShotListPlanner
    repository: ShotListRepository

    def replan(self, package: Package, shoot_id: UUID | None = None) -> ShotList:
        """Plan the package's shot list again, keeping manual shots."""
        profile = PlanningProfile(
            event_type=package.event_type,
            shot_count_target=package.shot_count,
            style_tags=package.style_tags,
            equipment=package.equipment,
            delivery_days=package.delivery_days,
            must_have_shots=package.must_have_shots,
            avoid_shots=package.avoid_shots,
            existing_shot_list=self.repository.get_for_package(package.id),
            package_id=package.id,
            shoot_id=shoot_id,
        )
        return self._save(self.planner.plan(profile))

    def save_manual_edit(self, shot_list: ShotList) -> ShotList:
        """Store a hand-edited shot list with freshly derived totals."""
        return self._save(
            replace(shot_list, ai_generated=is_ai_owned(shot_list.sections))
        )

    def _save(self, shot_list: ShotList) -> ShotList:
        return self.repository.save_shot_list(recompute_aggregates(shot_list))
