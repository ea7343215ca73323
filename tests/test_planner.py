"""Tests for shot list planning."""

from dataclasses import replace
from uuid import uuid4

import pytest

from studio_engine.domain.shot_lists import (
    CREATIVE,
    MUST_HAVE,
    NICE_TO_HAVE,
    ORIGIN_MANUAL,
    PlanningProfile,
    ShotArchetype,
    ShotItem,
    ShotList,
    ShotListSection,
)
from studio_engine.errors import InvalidShotCountTarget
from studio_engine.services.catalog import EventTemplate, ShotCatalog
from studio_engine.services.planner import (
    ShotListPlanner,
    apportion,
    is_ai_owned,
    recompute_aggregates,
)


def _two_section_planner() -> ShotListPlanner:
    catalog = ShotCatalog(
        templates={
            "wedding": EventTemplate(
                archetypes=(
                    ShotArchetype("Ceremony", "Vows", MUST_HAVE, 2.0, weight=70.0),
                    ShotArchetype("Reception", "Dancing", NICE_TO_HAVE, 1.0, 30.0),
                ),
                lighting_plan="Window light",
            )
        }
    )
    return ShotListPlanner(catalog)


def test_plan_splits_target_by_archetype_weight() -> None:
    planner = _two_section_planner()

    shot_list = planner.plan(
        PlanningProfile(event_type="wedding", shot_count_target=50)
    )

    sizes = {section.name: len(section.shots) for section in shot_list.sections}
    assert sizes == {"Ceremony": 35, "Reception": 15}
    assert shot_list.total_shots == 50
    assert shot_list.must_have_count == 35
    assert shot_list.estimated_time == 85.0
    assert shot_list.ai_generated is True
    assert shot_list.lighting_plan == "Window light"


def test_plan_numbers_repeated_descriptions() -> None:
    shot_list = _two_section_planner().plan(
        PlanningProfile(event_type="wedding", shot_count_target=3)
    )

    ceremony = shot_list.sections[0]
    assert [shot.description for shot in ceremony.shots] == ["Vows #1", "Vows #2"]
    assert shot_list.sections[1].shots[0].description == "Dancing"


def test_plan_is_deterministic() -> None:
    planner = ShotListPlanner()
    profile = PlanningProfile(
        event_type="wedding",
        shot_count_target=40,
        style_tags=("documentary",),
        equipment=("telephoto-lens",),
    )

    assert planner.plan(profile) == planner.plan(profile)


def test_plan_total_matches_target_for_default_templates() -> None:
    planner = ShotListPlanner()

    for event_type in planner.catalog.event_types():
        for target in (1, 7, 23, 120):
            shot_list = planner.plan(
                PlanningProfile(event_type=event_type, shot_count_target=target)
            )
            assert shot_list.total_shots == target


def test_plan_filters_style_specific_archetypes() -> None:
    planner = ShotListPlanner()

    plain = planner.plan(PlanningProfile(event_type="wedding", shot_count_target=60))
    documentary = planner.plan(
        PlanningProfile(
            event_type="wedding", shot_count_target=60, style_tags=("Documentary",)
        )
    )

    def descriptions(shot_list: ShotList) -> str:
        return " ".join(
            shot.description
            for section in shot_list.sections
            for shot in section.shots
        )

    assert "Unposed candids" not in descriptions(plain)
    assert "Editorial couple portrait" not in descriptions(plain)
    assert "Unposed candids" in descriptions(documentary)


def test_unknown_event_type_falls_back_to_generic_template() -> None:
    shot_list = ShotListPlanner().plan(
        PlanningProfile(event_type="quinceanera", shot_count_target=10)
    )

    assert shot_list.total_shots == 10
    assert shot_list.event_type == "quinceanera"
    assert [section.name for section in shot_list.sections][:2] == [
        "Overview",
        "People",
    ]


@pytest.mark.parametrize("target", [0, -3, True, 2.5, None])
def test_invalid_target_raises(target) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(InvalidShotCountTarget):
        ShotListPlanner().plan(
            PlanningProfile(event_type="wedding", shot_count_target=target)
        )


def test_client_requests_lead_and_count_towards_target() -> None:
    shot_list = _two_section_planner().plan(
        PlanningProfile(
            event_type="wedding",
            shot_count_target=12,
            must_have_shots=(
                "Grandparents with the couple",
                " grandparents with the couple ",
                "Vintage car exit",
                "",
            ),
        )
    )

    assert [section.name for section in shot_list.sections] == [
        "Client Requests",
        "Ceremony",
        "Reception",
    ]
    requests = shot_list.sections[0].shots
    assert [shot.description for shot in requests] == [
        "Grandparents with the couple",
        "Vintage car exit",
    ]
    assert all(shot.priority == MUST_HAVE for shot in requests)
    assert shot_list.total_shots == 12
    assert len(shot_list.sections[1].shots) == 7
    assert shot_list.must_have_count == 9
    assert shot_list.ai_generated is True


def test_client_requests_beyond_target_are_all_kept() -> None:
    shot_list = _two_section_planner().plan(
        PlanningProfile(
            event_type="wedding",
            shot_count_target=1,
            must_have_shots=("Sparkler exit", "Dog ring bearer"),
        )
    )

    assert [section.name for section in shot_list.sections] == ["Client Requests"]
    assert shot_list.total_shots == 2


def test_avoided_shots_are_dropped_and_target_still_met() -> None:
    shot_list = _two_section_planner().plan(
        PlanningProfile(
            event_type="wedding", shot_count_target=10, avoid_shots=("DANCING",)
        )
    )

    assert [section.name for section in shot_list.sections] == ["Ceremony"]
    assert shot_list.total_shots == 10

    default = ShotListPlanner().plan(
        PlanningProfile(
            event_type="wedding",
            shot_count_target=25,
            avoid_shots=("cake", "guest reactions"),
        )
    )
    descriptions = [
        shot.description for section in default.sections for shot in section.shots
    ]
    assert default.total_shots == 25
    assert not any("cake" in text.lower() for text in descriptions)
    assert not any(text.startswith("Guest reactions") for text in descriptions)


def test_avoiding_every_catalog_shot_uses_generic_template() -> None:
    shot_list = _two_section_planner().plan(
        PlanningProfile(
            event_type="wedding", shot_count_target=10, avoid_shots=("vows", "danc")
        )
    )

    names = [section.name for section in shot_list.sections]
    assert "Ceremony" not in names
    assert "Reception" not in names
    assert shot_list.total_shots == 10


def test_missing_equipment_adds_backup_plan() -> None:
    shot_list = ShotListPlanner().plan(
        PlanningProfile(
            event_type="engagement", shot_count_target=10, equipment=("reflector",)
        )
    )

    assert shot_list.equipment_list[0] == "reflector"
    assert "macro-lens" in shot_list.equipment_list
    assert shot_list.backup_plans[-1] == (
        "Source or rent missing equipment: macro-lens."
    )


def test_owned_equipment_adds_no_backup_plan() -> None:
    shot_list = ShotListPlanner().plan(
        PlanningProfile(
            event_type="engagement", shot_count_target=10, equipment=("macro-lens",)
        )
    )

    assert shot_list.backup_plans == ("Alternate covered location nearby.",)


def test_replan_keeps_manual_shots() -> None:
    planner = _two_section_planner()
    first = planner.plan(PlanningProfile(event_type="wedding", shot_count_target=10))
    manual = ShotItem("Grandma's toast", CREATIVE, 4.0, origin=ORIGIN_MANUAL)
    extra = ShotItem("Sparkler exit", MUST_HAVE, 5.0, origin=ORIGIN_MANUAL)
    edited = replace(
        first,
        sections=(
            replace(
                first.sections[1], shots=(*first.sections[1].shots, manual)
            ),
            first.sections[0],
            ShotListSection("Send-off", (extra,)),
        ),
    )

    replanned = planner.plan(
        PlanningProfile(
            event_type="wedding", shot_count_target=20, existing_shot_list=edited
        )
    )

    names = [section.name for section in replanned.sections]
    assert names == ["Ceremony", "Reception", "Send-off"]
    assert replanned.sections[1].shots[-1] == manual
    assert replanned.sections[2].shots == (extra,)
    assert replanned.total_shots == 22
    assert replanned.must_have_count == 15
    assert replanned.ai_generated is False


def test_replan_keeps_identity_of_existing_list() -> None:
    planner = _two_section_planner()
    existing = replace(
        planner.plan(PlanningProfile(event_type="wedding", shot_count_target=5)),
        id=uuid4(),
    )

    replanned = planner.plan(
        PlanningProfile(
            event_type="wedding", shot_count_target=5, existing_shot_list=existing
        )
    )

    assert replanned.id == existing.id
    assert replanned == existing


def test_apportion_sums_to_total() -> None:
    assert apportion(10, [1, 1, 1]) == [4, 3, 3]
    assert apportion(7, [0.5, 0.25, 0.25]) == [3, 2, 2]
    assert apportion(0, [2, 3]) == [0, 0]
    assert apportion(5, [0, 1]) == [0, 5]


@pytest.mark.parametrize("weights", [[], [0, 0], [1, -1]])
def test_apportion_rejects_bad_weights(weights) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(ValueError):
        apportion(5, weights)


def test_recompute_aggregates_ignores_stored_totals() -> None:
    stale = ShotList(
        event_type="portrait",
        sections=(
            ShotListSection(
                "Classic",
                (
                    ShotItem("Headshot", MUST_HAVE, 2.5),
                    ShotItem("Profile", NICE_TO_HAVE, 1.25),
                ),
            ),
        ),
        total_shots=99,
        must_have_count=42,
        estimated_time=1000.0,
    )

    fresh = recompute_aggregates(stale)

    assert (fresh.total_shots, fresh.must_have_count, fresh.estimated_time) == (
        2,
        1,
        3.75,
    )


def test_is_ai_owned() -> None:
    ai = ShotListSection("A", (ShotItem("x", MUST_HAVE, 1.0),))
    manual = ShotListSection(
        "B", (ShotItem("y", MUST_HAVE, 1.0, origin=ORIGIN_MANUAL),)
    )

    assert is_ai_owned([ai]) is True
    assert is_ai_owned([ai, manual]) is False
