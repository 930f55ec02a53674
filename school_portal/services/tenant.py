from typing import Optional, Union
from school_portal.schemas.auth import Branch
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.tenant import Tenant, TenantUpdate
from school_portal.services.base import API_PREFIX, ResourceService, as_model

TENANT_KEY = ("tenant", "me")
BRANCHES_KEY = ("branches", "byTenant")


class TenantService(ResourceService):
    async def me(self) -> Optional[Tenant]:
        async def fetch():
            response = await self.api.get(f"{API_PREFIX}/tenants/me", model=Tenant)
            return response.data

        return await self._query(TENANT_KEY, fetch)

    async def update(self, data: Union[TenantUpdate, dict]) -> Tenant:
        payload = as_model(TenantUpdate, data)

        async def send():
            response = await self.api.patch(f"{API_PREFIX}/tenants/me", json=payload, model=Tenant)
            return response.data

        return await self._mutate(send, invalidate=[TENANT_KEY])


class BranchService(ResourceService):
    async def by_tenant(self) -> ApiResponse:
        """Every branch of the signed-in user's tenant."""

        async def fetch():
            return await self.api.get(f"{API_PREFIX}/branches/by-tenant", model=list[Branch])

        return await self._query(BRANCHES_KEY, fetch)
