"""HTTP client for the photo analysis service."""

from dataclasses import dataclass

import httpx

from studio_engine.domain.galleries import GalleryPhoto
from studio_engine.services.metrics import MetricsClient


@dataclass
class HttpxMetricsClient(MetricsClient):
    """HTTPX-backed client for precomputed photo metrics."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxMetricsClient":
        """Create a metrics client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    async def fetch_metrics(self, photo: GalleryPhoto) -> dict[str, object]:
        """Fetch raw metrics for one photo."""
        response = await self.http_client.post(
            f"{self.base_url}/photos/metrics",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "photo_id": str(photo.id),
                "filename": photo.filename,
                "url": photo.url,
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
        metrics = payload.get("metrics", payload) if isinstance(payload, dict) else None
        if not isinstance(metrics, dict):
            raise RuntimeError("Metrics service returned an unexpected payload")
        return metrics

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
