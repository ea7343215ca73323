"""Error types raised by the planning and curation engine."""

from uuid import UUID


class StudioEngineError(Exception):
    """Base class for engine errors."""


class UnknownEventType(StudioEngineError):
    """Raised when the catalog has no archetypes for an event type."""

    def __init__(self, event_type: str) -> None:
        super().__init__(f"No shot archetypes registered for event type {event_type!r}")
        self.event_type = event_type


class InvalidShotCountTarget(StudioEngineError):
    """Raised when a shot count target is not a positive integer."""

    def __init__(self, target: object) -> None:
        super().__init__(f"Shot count target must be positive, got {target!r}")
        self.target = target


class PhotoScoringError(StudioEngineError):
    """Raised when a single photo cannot be scored."""

    def __init__(self, reason: str, photo_id: UUID | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.photo_id = photo_id


class CurationAbortedError(StudioEngineError):
    """Raised when a whole curation run cannot proceed."""


class RunAlreadyInProgress(StudioEngineError):
    """Raised when a gallery already has a running curation."""

    def __init__(self, gallery_id: UUID) -> None:
        super().__init__(f"Curation already running for gallery {gallery_id}")
        self.gallery_id = gallery_id


class InvalidStatusTransition(StudioEngineError):
    """Raised when a gallery status would move backwards."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot move gallery from {current!r} to {requested!r}")
        self.current = current
        self.requested = requested
