from typing import Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.parents import ParentAssociation, ParentAssociationCreate, ParentAssociationQuery
from school_portal.services.base import API_PREFIX, ResourceService, as_model
from school_portal.services.query_cache import make_key

BASE = f"{API_PREFIX}/parents"

ALL_KEY = ("parent-associations",)


class ParentAssociationService(ResourceService):
    """Links between parent users and the students they are responsible for."""

    async def list(self, query: Union[ParentAssociationQuery, dict, None] = None) -> Optional[ApiResponse]:
        query = as_model(ParentAssociationQuery, query)

        async def fetch():
            return await self.api.get(f"{BASE}/associations", params=query, model=list[ParentAssociation])

        return await self._query(
            make_key("parent-associations", self.branch_id, query), fetch, enabled=bool(self.branch_id)
        )

    async def create(self, data: Union[ParentAssociationCreate, dict]) -> ParentAssociation:
        payload = as_model(ParentAssociationCreate, data)

        async def send():
            response = await self.api.post(
                f"{BASE}/{payload.parent_user_id}/children", json=payload, model=ParentAssociation
            )
            return response.data

        return await self._mutate(
            send,
            invalidate=[ALL_KEY],
            success="Parent-student association created successfully",
            failure="Failed to create association",
        )

    async def delete(self, parent_user_id: str, student_id: str) -> None:
        async def send():
            await self.api.delete(f"{BASE}/{parent_user_id}/children/{student_id}")

        await self._mutate(
            send,
            invalidate=[ALL_KEY],
            success="Association removed successfully",
            failure="Failed to remove association",
        )
