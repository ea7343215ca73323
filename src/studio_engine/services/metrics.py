"""Fetching raw photo metrics from the upstream analysis provider."""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol

from studio_engine.domain.galleries import GalleryPhoto

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence


class MetricsClient(Protocol):
    """Interface for the upstream technical-metrics provider."""

    async def fetch_metrics(self, photo: GalleryPhoto) -> dict[str, object]:
        """Return raw metrics for a photo."""


@dataclass
class PhotoMetricsService:
    """Attaches upstream metrics to photos that arrive without them."""

    client: MetricsClient
    max_concurrency: int = 4
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    debug: bool = False

    async def attach(self, photos: "Sequence[GalleryPhoto]") -> list[GalleryPhoto]:
        """Return photos with metrics filled in where the provider has them.

        A photo whose fetch fails keeps ``raw_metrics=None`` and is later
        reported as a scoring error for that photo alone.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch(photo: GalleryPhoto) -> GalleryPhoto:
            if photo.raw_metrics is not None:
                return photo
            async with semaphore:
                try:
                    metrics = await self._call_with_retry(
                        lambda: self.client.fetch_metrics(photo),
                        action=f"fetch_metrics:{photo.id}",
                    )
                except Exception as exc:  # noqa: BLE001
                    _logger.warning(
                        "Metrics unavailable for photo %s (status=%s): %s",
                        photo.id,
                        _status_code_from_exception(exc),
                        exc,
                    )
                    return photo
            return replace(photo, raw_metrics=metrics)

        return list(await asyncio.gather(*(fetch(photo) for photo in photos)))

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                if self.debug:
                    _logger.warning(
                        "Metrics %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        _status_code_from_exception(exc),
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
