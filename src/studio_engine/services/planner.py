"""Shot list planning from an event profile and the shot catalog."""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from fractions import Fraction

from studio_engine.domain.shot_lists import (
    MUST_HAVE,
    ORIGIN_AI,
    ORIGIN_MANUAL,
    PlanningProfile,
    ShotArchetype,
    ShotItem,
    ShotList,
    ShotListSection,
)
from studio_engine.errors import InvalidShotCountTarget, UnknownEventType
from studio_engine.services.catalog import ShotCatalog

_logger = logging.getLogger(__name__)

CLIENT_REQUESTS_SECTION = "Client Requests"
CLIENT_REQUEST_MINUTES = 2.0


@dataclass
class ShotListPlanner:
    """Builds deterministic shot lists while preserving manual edits."""

    catalog: ShotCatalog = field(default_factory=ShotCatalog)

    def plan(self, profile: PlanningProfile) -> ShotList:
        """Plan a shot list for the profile.

        Client requests fill the leading "Client Requests" section and count
        towards the target; the catalog fills the rest. Requests beyond the
        target are all kept.
        """
        target = profile.shot_count_target
        if isinstance(target, bool) or not isinstance(target, int) or target <= 0:
            raise InvalidShotCountTarget(target)

        archetypes, lighting_plan, backup_plans = self._lookup(profile.event_type)
        active = self._avoid(
            _filter_by_style(archetypes, profile.style_tags), profile.avoid_shots
        )
        requests = _client_requests(profile.must_have_shots)
        counts = apportion(
            max(0, target - len(requests)), [archetype.weight for archetype in active]
        )

        generated: dict[str, list[ShotItem]] = {}
        if requests:
            generated[CLIENT_REQUESTS_SECTION] = requests
        for archetype, count in zip(active, counts, strict=True):
            shots = generated.setdefault(archetype.section, [])
            shots.extend(_render_shots(archetype, count))

        pinned = _pinned_shots(profile.existing_shot_list)
        sections = _merge_sections(generated, pinned)

        equipment = _equipment_list(profile.equipment, sections)
        missing = [item for item in equipment if item not in profile.equipment]
        if missing:
            backup_plans = [
                *backup_plans,
                f"Source or rent missing equipment: {', '.join(missing)}.",
            ]

        existing = profile.existing_shot_list
        shot_list = ShotList(
            event_type=profile.event_type,
            sections=sections,
            ai_generated=is_ai_owned(sections),
            equipment_list=tuple(equipment),
            lighting_plan=lighting_plan,
            backup_plans=tuple(backup_plans),
            id=existing.id if existing else None,
            package_id=profile.package_id
            or (existing.package_id if existing else None),
            shoot_id=profile.shoot_id or (existing.shoot_id if existing else None),
        )
        return recompute_aggregates(shot_list)

    def _lookup(self, event_type: str) -> tuple[list[ShotArchetype], str, list[str]]:
        try:
            return (
                self.catalog.archetypes_for(event_type),
                self.catalog.lighting_plan_for(event_type),
                self.catalog.backup_plans_for(event_type),
            )
        except UnknownEventType:
            _logger.warning(
                "No archetypes for event type %r, using generic template", event_type
            )
            generic = self.catalog.generic
            return (
                self.catalog.generic_archetypes(),
                generic.lighting_plan,
                list(generic.backup_plans),
            )

    def _avoid(
        self, archetypes: list[ShotArchetype], avoid_shots: Iterable[str]
    ) -> list[ShotArchetype]:
        avoided = [entry.strip().lower() for entry in avoid_shots if entry.strip()]
        if not avoided:
            return archetypes
        kept = _without_avoided(archetypes, avoided)
        if kept:
            return kept
        kept = _without_avoided(self.catalog.generic_archetypes(), avoided)
        if kept:
            _logger.warning("Every catalog shot is avoided, using generic template")
            return kept
        _logger.warning("Every shot is avoided, ignoring avoid list")
        return archetypes


def apportion(total: int, weights: Sequence[float]) -> list[int]:
    """Split total across weights with largest-remainder apportionment.

    The result always sums to ``total``. Equal remainders go to the earlier
    weight so the split is deterministic.
    """
    if total < 0:
        raise ValueError("total must not be negative")
    if not weights:
        raise ValueError("weights must not be empty")
    exact = [Fraction(weight) for weight in weights]
    if any(weight < 0 for weight in exact):
        raise ValueError("weights must not be negative")
    weight_sum = sum(exact)
    if weight_sum <= 0:
        raise ValueError("weights must not all be zero")

    quotas = [total * weight / weight_sum for weight in exact]
    counts = [math.floor(quota) for quota in quotas]
    remaining = total - sum(counts)
    by_remainder = sorted(
        range(len(quotas)), key=lambda index: (counts[index] - quotas[index], index)
    )
    for index in by_remainder[:remaining]:
        counts[index] += 1
    return counts


def recompute_aggregates(shot_list: ShotList) -> ShotList:
    """Return the shot list with totals derived from its sections."""
    shots = [shot for section in shot_list.sections for shot in section.shots]
    return replace(
        shot_list,
        total_shots=len(shots),
        must_have_count=sum(1 for shot in shots if shot.priority == MUST_HAVE),
        estimated_time=round(sum(shot.estimated_minutes for shot in shots), 2),
    )


def is_ai_owned(sections: Iterable[ShotListSection]) -> bool:
    """Return True when no shot in the sections was edited by a person."""
    return all(
        shot.origin == ORIGIN_AI for section in sections for shot in section.shots
    )


def _filter_by_style(
    archetypes: list[ShotArchetype], style_tags: Iterable[str]
) -> list[ShotArchetype]:
    wanted = {tag.strip().lower() for tag in style_tags}
    active = [
        archetype
        for archetype in archetypes
        if not archetype.style_tags
        or wanted.intersection(tag.lower() for tag in archetype.style_tags)
    ]
    return active or archetypes


def _without_avoided(
    archetypes: list[ShotArchetype], avoided: list[str]
) -> list[ShotArchetype]:
    return [
        archetype
        for archetype in archetypes
        if not any(entry in archetype.description.lower() for entry in avoided)
    ]


def _client_requests(must_have_shots: Iterable[str]) -> list[ShotItem]:
    requests: list[ShotItem] = []
    seen: set[str] = set()
    for raw in must_have_shots:
        description = raw.strip()
        if not description or description.lower() in seen:
            continue
        seen.add(description.lower())
        requests.append(
            ShotItem(
                description=description,
                priority=MUST_HAVE,
                estimated_minutes=CLIENT_REQUEST_MINUTES,
                origin=ORIGIN_AI,
            )
        )
    return requests


def _render_shots(archetype: ShotArchetype, count: int) -> list[ShotItem]:
    shots = []
    for number in range(1, count + 1):
        description = archetype.description
        if count > 1:
            description = f"{description} #{number}"
        shots.append(
            ShotItem(
                description=description,
                priority=archetype.priority,
                estimated_minutes=archetype.minutes,
                equipment_tags=archetype.equipment_tags,
                origin=ORIGIN_AI,
            )
        )
    return shots


def _pinned_shots(existing: ShotList | None) -> dict[str, list[ShotItem]]:
    pinned: dict[str, list[ShotItem]] = {}
    if existing is None:
        return pinned
    for section in existing.sections:
        manual = [shot for shot in section.shots if shot.origin == ORIGIN_MANUAL]
        if manual:
            pinned.setdefault(section.name, []).extend(manual)
    return pinned


def _merge_sections(
    generated: dict[str, list[ShotItem]], pinned: dict[str, list[ShotItem]]
) -> tuple[ShotListSection, ...]:
    sections = []
    for name, shots in generated.items():
        merged = [*shots, *pinned.get(name, [])]
        if merged:
            sections.append(ShotListSection(name=name, shots=tuple(merged)))
    for name, shots in pinned.items():
        if name not in generated:
            sections.append(ShotListSection(name=name, shots=tuple(shots)))
    return tuple(sections)


def _equipment_list(
    base: Iterable[str], sections: Iterable[ShotListSection]
) -> list[str]:
    ordered: list[str] = []
    for item in base:
        if item not in ordered:
            ordered.append(item)
    for section in sections:
        for shot in section.shots:
            for tag in shot.equipment_tags:
                if tag not in ordered:
                    ordered.append(tag)
    return ordered
