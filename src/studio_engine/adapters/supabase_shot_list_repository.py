"""Supabase repository for shot lists."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from studio_engine.adapters.documents import shot_list_from_row, shot_list_to_row
from studio_engine.domain.shot_lists import ShotList
from studio_engine.services.shot_lists import ShotListRepository


@dataclass
class SupabaseShotListRepository(ShotListRepository):
    """Supabase-backed shot list storage scoped to one tenant."""

    client: Client
    tenant_id: UUID

    def get_for_package(self, package_id: UUID) -> ShotList | None:
        """Return the shot list attached to a package, if present."""
        response = (
            self.client.table("shot_lists")
            .select("*")
            .eq("tenant_id", str(self.tenant_id))
            .eq("package_id", str(package_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return shot_list_from_row(response.data[0])

    def save_shot_list(self, shot_list: ShotList) -> ShotList:
        """Insert a new shot list or update the stored one."""
        payload = shot_list_to_row(shot_list)
        table = self.client.table("shot_lists")
        if shot_list.id is None:
            response = table.insert(
                {"tenant_id": str(self.tenant_id), **payload}
            ).execute()
            if not response.data:
                raise RuntimeError("Failed to create shot list")
        else:
            response = (
                table.update(payload)
                .eq("tenant_id", str(self.tenant_id))
                .eq("id", str(shot_list.id))
                .execute()
            )
            if not response.data:
                raise RuntimeError("Failed to update shot list")
        return shot_list_from_row(response.data[0])
