from typing import List, Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.permissions import Feature, PermissionEntry, Role, UpdatePermissionsPayload
from school_portal.services.base import API_PREFIX, ResourceService, as_model


class PermissionService(ResourceService):
    """Roles, features and the role x feature permission matrix of the current branch."""

    async def roles(self) -> Optional[ApiResponse]:
        async def fetch():
            return await self.api.get(f"{API_PREFIX}/roles", model=list[Role])

        return await self._query(("roles", self.branch_id), fetch, enabled=bool(self.branch_id))

    async def features(self) -> Optional[ApiResponse]:
        async def fetch():
            return await self.api.get(f"{API_PREFIX}/features", model=list[Feature])

        return await self._query(("features", self.branch_id), fetch, enabled=bool(self.branch_id))

    async def matrix(self) -> Optional[List[PermissionEntry]]:
        async def fetch():
            response = await self.api.get(f"{API_PREFIX}/permissions", model=list[PermissionEntry])
            return response.data or []

        return await self._query(("permissions", self.branch_id), fetch, enabled=bool(self.branch_id))

    async def update_all(self, data: Union[UpdatePermissionsPayload, dict]) -> List[PermissionEntry]:
        """Replace the whole matrix in one request; returns the rows the server kept."""
        payload = as_model(UpdatePermissionsPayload, data)

        async def send():
            response = await self.api.put(f"{API_PREFIX}/permissions", json=payload, model=list[PermissionEntry])
            return response.data or []

        return await self._mutate(
            send,
            invalidate=[("permissions", self.branch_id)],
            success="Permissions updated successfully",
            failure="Failed to update permissions",
        )
