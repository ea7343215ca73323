"""Per-gallery curation run orchestration."""

import asyncio
import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Literal, Protocol
from uuid import UUID

from studio_engine.domain.galleries import CurationResult, Gallery, GalleryPhoto
from studio_engine.errors import CurationAbortedError, RunAlreadyInProgress
from studio_engine.services.curation import GalleryCurator
from studio_engine.services.metrics import PhotoMetricsService

_logger = logging.getLogger(__name__)

RunState = Literal["idle", "running", "failed"]

RUN_IDLE: RunState = "idle"
RUN_RUNNING: RunState = "running"
RUN_FAILED: RunState = "failed"


class GalleryRepository(Protocol):
    """Persistence interface for galleries and their photos."""

    def get_gallery(self, gallery_id: UUID) -> Gallery | None:
        """Return a gallery by id, if present."""

    def list_photos(self, gallery_id: UUID) -> list[GalleryPhoto]:
        """Return all photos in a gallery."""

    def save_curation(self, gallery: Gallery, photos: Sequence[GalleryPhoto]) -> None:
        """Persist a curated gallery and its photos in one call."""


@dataclass
class RunLease:
    """Run state for one gallery."""

    gallery_id: UUID
    state: RunState = RUN_IDLE
    attempts: int = 0
    started_at: datetime | None = None
    finished_at: datetime | None = None
    last_error: str | None = None


@dataclass
class RunRegistry:
    """Lease table enforcing at most one running curation per gallery.

    Only running and failed galleries keep an entry; a gallery whose run
    ends cleanly drops out of the table.
    """

    _leases: dict[UUID, RunLease] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def __len__(self) -> int:
        with self._lock:
            return len(self._leases)

    def acquire(self, gallery_id: UUID) -> RunLease:
        """Move a gallery to running or raise if it already is."""
        with self._lock:
            lease = self._leases.setdefault(gallery_id, RunLease(gallery_id))
            if lease.state == RUN_RUNNING:
                raise RunAlreadyInProgress(gallery_id)
            lease.state = RUN_RUNNING
            lease.attempts += 1
            lease.started_at = datetime.now(tz=UTC)
            lease.finished_at = None
            lease.last_error = None
            return replace(lease)

    def release(self, gallery_id: UUID, error: str | None = None) -> None:
        """End the running state; keep the lease only when the run failed."""
        with self._lock:
            if not error:
                self._leases.pop(gallery_id, None)
                return
            lease = self._leases.setdefault(gallery_id, RunLease(gallery_id))
            lease.state = RUN_FAILED
            lease.finished_at = datetime.now(tz=UTC)
            lease.last_error = error

    def reset(self, gallery_id: UUID) -> None:
        """Return a failed gallery to idle."""
        with self._lock:
            lease = self._leases.get(gallery_id)
            if lease is not None and lease.state == RUN_FAILED:
                del self._leases[gallery_id]

    def get(self, gallery_id: UUID) -> RunLease:
        """Return a snapshot of the gallery's lease."""
        with self._lock:
            lease = self._leases.get(gallery_id)
            return replace(lease) if lease else RunLease(gallery_id)

    @contextmanager
    def hold(self, gallery_id: UUID) -> Iterator[None]:
        """Block runs on a gallery for a short edit without counting a run.

        Raises RunAlreadyInProgress when a run holds the gallery. The
        previous lease, such as a failed run awaiting reset, is restored
        on exit.
        """
        with self._lock:
            previous = self._leases.get(gallery_id)
            if previous is not None and previous.state == RUN_RUNNING:
                raise RunAlreadyInProgress(gallery_id)
            self._leases[gallery_id] = RunLease(gallery_id, state=RUN_RUNNING)
        try:
            yield
        finally:
            with self._lock:
                if previous is None:
                    self._leases.pop(gallery_id, None)
                else:
                    self._leases[gallery_id] = previous


@dataclass
class CurationRunCoordinator:
    """Runs curation with per-gallery exclusivity and all-or-nothing saves."""

    curator: GalleryCurator
    repository: GalleryRepository
    registry: RunRegistry = field(default_factory=RunRegistry)
    metrics_service: PhotoMetricsService | None = None
    run_timeout_seconds: float | None = 120.0

    async def start_run(
        self,
        gallery_id: UUID,
        photos: Sequence[GalleryPhoto] | None = None,
        target_selected_count: int | None = None,
    ) -> CurationResult:
        """Curate a gallery and persist the result once, on success only.

        Raises RunAlreadyInProgress when the gallery is already being
        curated. Any failure leaves persisted state untouched and marks
        the gallery's run as failed; a later call retries from scratch.
        """
        self.registry.acquire(gallery_id)
        try:
            try:
                result = await asyncio.wait_for(
                    self._curate(gallery_id, photos, target_selected_count),
                    timeout=self.run_timeout_seconds,
                )
            except TimeoutError as exc:
                raise CurationAbortedError(
                    f"Curation of gallery {gallery_id} exceeded "
                    f"{self.run_timeout_seconds}s"
                ) from exc
            self.repository.save_curation(result.gallery, result.photos)
        except asyncio.CancelledError:
            _logger.info("Curation of gallery %s cancelled; nothing saved", gallery_id)
            self.registry.release(gallery_id)
            raise
        except Exception as exc:
            _logger.exception("Curation of gallery %s failed", gallery_id)
            self.registry.release(gallery_id, error=str(exc) or type(exc).__name__)
            raise
        self.registry.release(gallery_id)
        return result

    def run_state(self, gallery_id: UUID) -> RunState:
        """Return the gallery's current run state."""
        return self.registry.get(gallery_id).state

    def reset(self, gallery_id: UUID) -> None:
        """Acknowledge a failed run and return the gallery to idle."""
        self.registry.reset(gallery_id)

    async def _curate(
        self,
        gallery_id: UUID,
        photos: Sequence[GalleryPhoto] | None,
        target_selected_count: int | None,
    ) -> CurationResult:
        gallery = self.repository.get_gallery(gallery_id)
        if gallery is None:
            raise CurationAbortedError(f"Gallery {gallery_id} not found")
        if photos is None:
            batch = self.repository.list_photos(gallery_id)
        else:
            batch = list(photos)
        if self.metrics_service is not None:
            batch = await self.metrics_service.attach(batch)
        return await self.curator.curate(gallery, batch, target_selected_count)
