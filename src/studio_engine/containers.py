"""Dependency container wiring for the engine."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from supabase import Client, create_client

from studio_engine.adapters.http_metrics_client import HttpxMetricsClient
from studio_engine.adapters.openai_metrics_client import OpenAIMetricsClient
from studio_engine.adapters.supabase_gallery_repository import (
    SupabaseGalleryRepository,
)
from studio_engine.adapters.supabase_shot_list_repository import (
    SupabaseShotListRepository,
)
from studio_engine.config import Settings, parse_scoring_weights
from studio_engine.services.catalog import ShotCatalog
from studio_engine.services.curation import CurationConfig, GalleryCurator
from studio_engine.services.metrics import MetricsClient, PhotoMetricsService
from studio_engine.services.planner import ShotListPlanner
from studio_engine.services.review import GalleryReviewService
from studio_engine.services.runs import CurationRunCoordinator, RunRegistry
from studio_engine.services.scoring import PhotoScorer, ScoringConfig
from studio_engine.services.shot_lists import ShotListService


@dataclass
class AppContainer:
    """Holds process-wide dependencies shared by every tenant."""

    settings: Settings
    supabase_client: Client
    planner: ShotListPlanner
    curator: GalleryCurator
    run_registry: RunRegistry
    metrics_service: PhotoMetricsService | None
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class TenantServices:
    """Services bound to one tenant's data."""

    tenant_id: UUID
    shot_lists: ShotListService
    curation_runs: CurationRunCoordinator
    review: GalleryReviewService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    scorer = PhotoScorer(
        ScoringConfig(weights=parse_scoring_weights(resolved_settings.scoring_weights))
    )
    curator = GalleryCurator(
        scorer=scorer,
        config=CurationConfig(
            default_selection_ratio=resolved_settings.selection_ratio,
            highlight_quality_threshold=resolved_settings.highlight_quality_threshold,
            highlight_top_fraction=resolved_settings.highlight_top_fraction,
            photo_timeout_seconds=resolved_settings.photo_timeout_seconds,
            max_concurrency=resolved_settings.scoring_concurrency,
            prioritize_emotions=resolved_settings.prioritize_emotions,
            max_category_share=resolved_settings.max_category_share,
        ),
    )
    metrics_client = _build_metrics_client(resolved_settings)
    metrics_service = (
        PhotoMetricsService(
            client=metrics_client,
            max_concurrency=resolved_settings.metrics_concurrency,
        )
        if metrics_client is not None
        else None
    )

    async def close_resources() -> None:
        if isinstance(metrics_client, HttpxMetricsClient):
            await metrics_client.close()

    return AppContainer(
        settings=resolved_settings,
        supabase_client=supabase_client,
        planner=ShotListPlanner(ShotCatalog()),
        curator=curator,
        run_registry=RunRegistry(),
        metrics_service=metrics_service,
        close_resources=close_resources,
    )


def build_tenant_services(container: AppContainer, tenant_id: UUID) -> TenantServices:
    """Create tenant-scoped services on top of the shared container."""
    gallery_repository = SupabaseGalleryRepository(
        container.supabase_client, tenant_id
    )
    return TenantServices(
        tenant_id=tenant_id,
        shot_lists=ShotListService(
            planner=container.planner,
            repository=SupabaseShotListRepository(
                container.supabase_client, tenant_id
            ),
        ),
        curation_runs=CurationRunCoordinator(
            curator=container.curator,
            repository=gallery_repository,
            registry=container.run_registry,
            metrics_service=container.metrics_service,
            run_timeout_seconds=container.settings.run_timeout_seconds,
        ),
        review=GalleryReviewService(gallery_repository, container.run_registry),
    )


def _build_metrics_client(settings: Settings) -> MetricsClient | None:
    if settings.metrics_backend == "http":
        if not settings.metrics_service_url or not settings.metrics_service_key:
            raise ValueError("metrics_backend=http needs metrics service URL and key")
        return HttpxMetricsClient.create(
            api_key=settings.metrics_service_key,
            base_url=settings.metrics_service_url,
        )
    if settings.metrics_backend == "openai":
        if not settings.openai_api_key:
            raise ValueError("metrics_backend=openai needs an OpenAI API key")
        return OpenAIMetricsClient.create(
            settings.openai_api_key, settings.openai_model, settings.openai_store
        )
    return None
