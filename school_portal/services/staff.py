from typing import Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.staff import Staff, StaffCreate, StaffQuery, StaffSchedule, StaffUpdate
from school_portal.services.base import API_PREFIX, ResourceService, as_model
from school_portal.services.query_cache import make_key

BASE = f"{API_PREFIX}/staff"


class StaffService(ResourceService):
    async def list(self, query: Union[StaffQuery, dict, None] = None) -> Optional[ApiResponse]:
        query = as_model(StaffQuery, query)

        async def fetch():
            return await self.api.get(BASE, params=query.to_params(), model=list[Staff])

        return await self._query(
            make_key("staff", self.branch_id, query), fetch, enabled=bool(self.branch_id)
        )

    async def me(self) -> Optional[Staff]:
        """Staff record of the signed-in user in the current branch."""

        async def fetch():
            response = await self.api.get(f"{BASE}/me", model=Optional[Staff])
            return response.data

        return await self._query(("staff", "me", self.branch_id), fetch, enabled=bool(self.branch_id))

    async def schedule(self, staff_id: str) -> Optional[StaffSchedule]:
        async def fetch():
            response = await self.api.get(f"{BASE}/{staff_id}/schedule", model=StaffSchedule)
            return response.data

        return await self._query(
            ("staff-schedule", staff_id, self.branch_id),
            fetch,
            enabled=bool(staff_id and self.branch_id),
        )

    async def create(self, data: Union[StaffCreate, dict]) -> Staff:
        payload = as_model(StaffCreate, data)

        async def send():
            response = await self.api.post(BASE, json=payload, model=Staff)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("staff", self.branch_id)],
            success="Staff member created successfully",
            failure="Failed to create staff member",
        )

    async def update(self, staff_id: str, data: Union[StaffUpdate, dict]) -> Staff:
        payload = as_model(StaffUpdate, data)

        async def send():
            response = await self.api.put(f"{BASE}/{staff_id}", json=payload, model=Staff)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("staff", self.branch_id)],
            success="Staff member updated successfully",
            failure="Failed to update staff member",
        )
