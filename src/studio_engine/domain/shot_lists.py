"""Domain models for packages and shot lists."""

from dataclasses import dataclass
from typing import Literal
from uuid import UUID

ShotPriority = Literal["must_have", "nice_to_have", "creative"]
ShotOrigin = Literal["ai", "manual"]

MUST_HAVE: ShotPriority = "must_have"
NICE_TO_HAVE: ShotPriority = "nice_to_have"
CREATIVE: ShotPriority = "creative"

ORIGIN_AI: ShotOrigin = "ai"
ORIGIN_MANUAL: ShotOrigin = "manual"


@dataclass(frozen=True)
class Package:
    """A booked photography service."""

    id: UUID
    client_id: UUID
    event_type: str
    style_tags: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()
    shot_count: int = 0
    delivery_days: int = 0
    must_have_shots: tuple[str, ...] = ()
    avoid_shots: tuple[str, ...] = ()


@dataclass(frozen=True)
class ShotArchetype:
    """Catalog entry describing a kind of shot for an event type."""

    section: str
    description: str
    priority: ShotPriority
    minutes: float
    weight: float = 1.0
    equipment_tags: tuple[str, ...] = ()
    style_tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ShotItem:
    """A single planned shot."""

    description: str
    priority: ShotPriority
    estimated_minutes: float
    equipment_tags: tuple[str, ...] = ()
    origin: ShotOrigin = ORIGIN_AI


@dataclass(frozen=True)
class ShotListSection:
    """Named, ordered group of shots."""

    name: str
    shots: tuple[ShotItem, ...] = ()


@dataclass(frozen=True)
class ShotList:
    """Sectioned shot plan for a package or shoot."""

    event_type: str
    sections: tuple[ShotListSection, ...]
    ai_generated: bool = True
    total_shots: int = 0
    must_have_count: int = 0
    estimated_time: float = 0.0
    equipment_list: tuple[str, ...] = ()
    lighting_plan: str = ""
    backup_plans: tuple[str, ...] = ()
    id: UUID | None = None
    package_id: UUID | None = None
    shoot_id: UUID | None = None


@dataclass(frozen=True)
class PlanningProfile:
    """Inputs for planning a shot list.

    ``must_have_shots`` are client requests planned verbatim as must-have
    shots; catalog shots whose description contains an ``avoid_shots``
    entry are left out.
    """

    event_type: str
    shot_count_target: int
    style_tags: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()
    delivery_days: int = 0
    existing_shot_list: ShotList | None = None
    package_id: UUID | None = None
    shoot_id: UUID | None = None
    must_have_shots: tuple[str, ...] = ()
    avoid_shots: tuple[str, ...] = ()
