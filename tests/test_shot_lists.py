"""Tests for the shot list application service."""

from dataclasses import replace
from uuid import uuid4

from studio_engine.domain.shot_lists import (
    MUST_HAVE,
    ORIGIN_MANUAL,
    Package,
    ShotItem,
    ShotListSection,
)
from studio_engine.services.planner import ShotListPlanner
from studio_engine.services.shot_lists import ShotListService
from tests.conftest import InMemoryShotListRepository


def _package(shot_count: int = 30) -> Package:
    return Package(
        id=uuid4(),
        client_id=uuid4(),
        event_type="family",
        style_tags=("candid",),
        shot_count=shot_count,
        delivery_days=14,
    )


def test_replan_stores_plan_for_package(
    shot_list_repository: InMemoryShotListRepository,
) -> None:
    service = ShotListService(ShotListPlanner(), shot_list_repository)
    package = _package()
    shoot_id = uuid4()

    stored = service.replan(package, shoot_id=shoot_id)

    assert stored.id is not None
    assert stored.package_id == package.id
    assert stored.shoot_id == shoot_id
    assert stored.total_shots == 30
    assert shot_list_repository.get_for_package(package.id) == stored


def test_replan_updates_existing_list_and_keeps_manual_shots(
    shot_list_repository: InMemoryShotListRepository,
) -> None:
    service = ShotListService(ShotListPlanner(), shot_list_repository)
    package = _package()
    first = service.replan(package)
    manual = ShotItem("Dog in the family photo", MUST_HAVE, 3.0, origin=ORIGIN_MANUAL)
    service.save_manual_edit(
        replace(
            first,
            sections=(
                *first.sections,
                ShotListSection("Pets", (manual,)),
            ),
        )
    )

    second = service.replan(replace(package, shot_count=40))

    assert second.id == first.id
    assert second.total_shots == 41
    assert second.sections[-1].shots == (manual,)
    assert len(shot_list_repository.shot_lists) == 1


def test_save_manual_edit_recomputes_totals(
    shot_list_repository: InMemoryShotListRepository,
) -> None:
    service = ShotListService(ShotListPlanner(), shot_list_repository)
    planned = service.replan(_package(shot_count=10))
    trimmed = replace(planned, sections=planned.sections[:1], total_shots=10)

    saved = service.save_manual_edit(trimmed)

    assert saved.total_shots == len(planned.sections[0].shots)
    assert saved.ai_generated is True
    assert shot_list_repository.saves == 2


def test_save_manual_edit_marks_human_owned(
    shot_list_repository: InMemoryShotListRepository,
) -> None:
    service = ShotListService(ShotListPlanner(), shot_list_repository)
    planned = service.replan(_package(shot_count=5))
    section = planned.sections[0]
    edited_shot = replace(section.shots[0], description="Kids on shoulders")
    edited_shot = replace(edited_shot, origin=ORIGIN_MANUAL)

    saved = service.save_manual_edit(
        replace(
            planned,
            sections=(
                replace(section, shots=(edited_shot, *section.shots[1:])),
                *planned.sections[1:],
            ),
        )
    )

    assert saved.ai_generated is False
    assert saved.total_shots == 5


def test_replan_passes_client_requests_and_avoid_list(
    shot_list_repository: InMemoryShotListRepository,
) -> None:
    service = ShotListService(ShotListPlanner(), shot_list_repository)
    package = replace(
        _package(shot_count=12),
        must_have_shots=("Three generations together",),
        avoid_shots=("playing",),
    )

    stored = service.replan(package)

    assert stored.sections[0].name == "Client Requests"
    assert stored.sections[0].shots[0].description == "Three generations together"
    assert stored.total_shots == 12
    assert not any(
        shot.description.startswith("Playing together")
        for section in stored.sections
        for shot in section.shots
    )
