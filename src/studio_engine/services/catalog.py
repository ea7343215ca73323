"""Catalog of shot archetypes per event type."""

from dataclasses import dataclass, field

from studio_engine.domain.shot_lists import (
    CREATIVE,
    MUST_HAVE,
    NICE_TO_HAVE,
    ShotArchetype,
    ShotPriority,
)
from studio_engine.errors import UnknownEventType


@dataclass(frozen=True)
class EventTemplate:
    """Archetypes and planning notes registered for one event type."""

    archetypes: tuple[ShotArchetype, ...]
    lighting_plan: str = ""
    backup_plans: tuple[str, ...] = ()


def _a(  # noqa: PLR0913
    section: str,
    description: str,
    priority: ShotPriority = NICE_TO_HAVE,
    minutes: float = 2.0,
    weight: float = 1.0,
    equipment: tuple[str, ...] = (),
    styles: tuple[str, ...] = (),
) -> ShotArchetype:
    return ShotArchetype(
        section=section,
        description=description,
        priority=priority,
        minutes=minutes,
        weight=weight,
        equipment_tags=equipment,
        style_tags=styles,
    )


_GENERIC = EventTemplate(
    archetypes=(
        _a("Overview", "Establishing shot of the location", MUST_HAVE, 3.0, 2.0),
        _a("People", "Portraits of the main subjects", MUST_HAVE, 3.0, 4.0),
        _a("Moments", "Candid moments as they happen", NICE_TO_HAVE, 2.0, 3.0),
        _a("Details", "Detail shots of decor and objects", NICE_TO_HAVE, 1.5, 1.0),
    ),
    lighting_plan="Work with available light; bounce flash indoors when needed.",
    backup_plans=("Carry a second body and spare batteries.",),
)

DEFAULT_TEMPLATES: dict[str, EventTemplate] = {
    "wedding": EventTemplate(
        archetypes=(
            _a("Getting Ready", "Bride in robe before the dress", MUST_HAVE, 2.0, 2.0),
            _a(
                "Getting Ready",
                "Dress, shoes and rings detail",
                MUST_HAVE,
                1.5,
                2.0,
                ("macro-lens",),
            ),
            _a("Getting Ready", "Emotional dressing moment", CREATIVE, 3.0, 1.0),
            _a(
                "Ceremony",
                "Groom and bride arrivals",
                MUST_HAVE,
                2.0,
                2.0,
                ("telephoto-lens",),
            ),
            _a(
                "Ceremony",
                "Ring exchange and first kiss",
                MUST_HAVE,
                2.0,
                3.0,
                ("telephoto-lens",),
            ),
            _a("Ceremony", "Guest reactions", CREATIVE, 1.5, 1.0),
            _a("Portraits", "Couple portraits", MUST_HAVE, 3.0, 3.0),
            _a("Portraits", "Family formals", MUST_HAVE, 2.5, 2.0, ("tripod",)),
            _a(
                "Reception",
                "First dance and cake cutting",
                MUST_HAVE,
                2.0,
                2.0,
                ("speedlight",),
            ),
            _a(
                "Reception",
                "Guests on the dance floor",
                NICE_TO_HAVE,
                1.0,
                2.0,
                ("speedlight",),
            ),
            _a("Details", "Venue decor and table settings", NICE_TO_HAVE, 1.0, 1.0),
            _a(
                "Moments",
                "Unposed candids between events",
                NICE_TO_HAVE,
                1.5,
                2.0,
                styles=("documentary", "candid"),
            ),
            _a(
                "Portraits",
                "Editorial couple portrait",
                CREATIVE,
                4.0,
                1.0,
                ("off-camera-flash",),
                ("editorial", "fine-art"),
            ),
        ),
        lighting_plan=(
            "Natural window light for preparations, fill flash for ceremony "
            "backlight, bounced speedlight for the reception."
        ),
        backup_plans=(
            "Indoor location for portraits in case of rain.",
            "Dual card slots and a second body for the ceremony.",
        ),
    ),
    "engagement": EventTemplate(
        archetypes=(
            _a("Couple", "Classic couple portraits", MUST_HAVE, 3.0, 3.0),
            _a("Couple", "Walking together", NICE_TO_HAVE, 2.0, 2.0),
            _a("Details", "Ring close-up", MUST_HAVE, 1.5, 1.0, ("macro-lens",)),
            _a("Creative", "Silhouette at golden hour", CREATIVE, 3.0, 1.0),
        ),
        lighting_plan="Schedule for golden hour; reflector for faces.",
        backup_plans=("Alternate covered location nearby.",),
    ),
    "portrait": EventTemplate(
        archetypes=(
            _a("Classic Portraits", "Front headshot", MUST_HAVE, 2.0, 2.0),
            _a("Classic Portraits", "Three-quarter headshot", MUST_HAVE, 2.0, 2.0),
            _a("Classic Portraits", "Full length", MUST_HAVE, 2.5, 1.0),
            _a("Moods", "Genuine smile and laughter", MUST_HAVE, 2.0, 2.0),
            _a("Moods", "Thoughtful look", NICE_TO_HAVE, 2.0, 1.0),
            _a(
                "Creative", "Dramatic light", CREATIVE, 4.0, 1.0, ("off-camera-flash",)
            ),
        ),
        lighting_plan="Key light at 45 degrees with a reflector for fill.",
        backup_plans=("Spare strobe battery.",),
    ),
    "family": EventTemplate(
        archetypes=(
            _a("Group", "Whole family, formal", MUST_HAVE, 3.0, 2.0, ("tripod",)),
            _a("Group", "Whole family, playful", MUST_HAVE, 2.0, 2.0),
            _a("Group", "Parents with children", MUST_HAVE, 2.0, 2.0),
            _a("Individuals", "Portrait of each child", MUST_HAVE, 2.0, 2.0),
            _a("Lifestyle", "Playing together", NICE_TO_HAVE, 2.0, 2.0),
            _a("Lifestyle", "Hugs and laughter", MUST_HAVE, 1.5, 1.0),
        ),
        lighting_plan="Open shade outdoors; avoid midday sun.",
        backup_plans=("Toys and snacks to reset the kids between sets.",),
    ),
    "corporate": EventTemplate(
        archetypes=(
            _a(
                "Headshots",
                "Individual headshots",
                MUST_HAVE,
                2.0,
                4.0,
                ("backdrop", "strobe"),
            ),
            _a("Team", "Team group photo", MUST_HAVE, 3.0, 1.0, ("tripod",)),
            _a("Workplace", "People at work", NICE_TO_HAVE, 2.0, 2.0),
            _a("Workplace", "Office and brand details", NICE_TO_HAVE, 1.0, 1.0),
        ),
        lighting_plan="Two-light setup for headshots; ambient for workplace.",
        backup_plans=("Portable backdrop if the meeting room is unavailable.",),
    ),
    "product": EventTemplate(
        archetypes=(
            _a(
                "Packshots",
                "Product on white",
                MUST_HAVE,
                3.0,
                3.0,
                ("lightbox", "tripod"),
            ),
            _a("Packshots", "Product angles", MUST_HAVE, 2.0, 2.0, ("tripod",)),
            _a(
                "Details",
                "Texture and material close-ups",
                NICE_TO_HAVE,
                2.0,
                1.0,
                ("macro-lens",),
            ),
            _a("Lifestyle", "Product in use", NICE_TO_HAVE, 4.0, 2.0),
        ),
        lighting_plan="Softboxes either side with overhead fill.",
        backup_plans=("Spare product units for damaged samples.",),
    ),
    "newborn": EventTemplate(
        archetypes=(
            _a("Baby", "Sleeping baby poses", MUST_HAVE, 5.0, 3.0),
            _a(
                "Details",
                "Hands, feet and lashes",
                MUST_HAVE,
                2.0,
                2.0,
                ("macro-lens",),
            ),
            _a("Family", "Baby with parents", MUST_HAVE, 3.0, 2.0),
            _a("Family", "Siblings with baby", NICE_TO_HAVE, 3.0, 1.0),
        ),
        lighting_plan="Large window light with blackout control; no flash.",
        backup_plans=("Keep the room warm and plan feeding breaks.",),
    ),
    "maternity": EventTemplate(
        archetypes=(
            _a("Portraits", "Silhouette profile", MUST_HAVE, 3.0, 2.0),
            _a("Portraits", "Hands on belly", MUST_HAVE, 2.0, 2.0),
            _a("Couple", "Partner embrace", NICE_TO_HAVE, 3.0, 2.0),
            _a("Creative", "Backlit fabric", CREATIVE, 4.0, 1.0),
        ),
        lighting_plan="Backlight for silhouettes, soft front fill for portraits.",
        backup_plans=("Seating available for rest breaks.",),
    ),
    "event": EventTemplate(
        archetypes=(
            _a("Venue", "Venue and signage", MUST_HAVE, 2.0, 1.0, ("wide-lens",)),
            _a(
                "Program", "Speakers on stage", MUST_HAVE, 2.0, 3.0, ("telephoto-lens",)
            ),
            _a("Audience", "Audience reactions", NICE_TO_HAVE, 1.5, 2.0),
            _a("Networking", "Guests mingling", NICE_TO_HAVE, 1.5, 2.0),
        ),
        lighting_plan="High ISO for stage; bounce flash for networking.",
        backup_plans=("Confirm stage access and run of show with the organizer.",),
    ),
}


@dataclass
class ShotCatalog:
    """Read-only lookup of shot archetypes by event type."""

    templates: dict[str, EventTemplate] = field(
        default_factory=lambda: dict(DEFAULT_TEMPLATES)
    )
    generic: EventTemplate = _GENERIC

    def archetypes_for(self, event_type: str) -> list[ShotArchetype]:
        """Return archetypes for an event type in registration order."""
        return list(self._template(event_type).archetypes)

    def lighting_plan_for(self, event_type: str) -> str:
        """Return the lighting plan for an event type."""
        return self._template(event_type).lighting_plan

    def backup_plans_for(self, event_type: str) -> list[str]:
        """Return backup plans for an event type."""
        return list(self._template(event_type).backup_plans)

    def generic_archetypes(self) -> list[ShotArchetype]:
        """Return the fallback archetypes used for unknown event types."""
        return list(self.generic.archetypes)

    def event_types(self) -> list[str]:
        """Return registered event types."""
        return list(self.templates)

    def _template(self, event_type: str) -> EventTemplate:
        template = self.templates.get(_normalize(event_type))
        if template is None or not template.archetypes:
            raise UnknownEventType(event_type)
        return template


def _normalize(event_type: str) -> str:
    return event_type.strip().lower()
