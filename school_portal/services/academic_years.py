from typing import Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.settings import AcademicYear, AcademicYearCreate, AcademicYearQuery
from school_portal.services.base import API_PREFIX, ResourceService, as_model
from school_portal.services.query_cache import make_key

BASE = f"{API_PREFIX}/academic-years"

ALL_KEY = ("academicYears",)


def list_key(query: AcademicYearQuery) -> tuple:
    return make_key("academicYears", "list", query)


def active_key() -> tuple:
    return ("academicYears", "active")


class AcademicYearService(ResourceService):
    async def list(self, query: Union[AcademicYearQuery, dict, None] = None) -> ApiResponse:
        query = as_model(AcademicYearQuery, query)

        async def fetch():
            return await self.api.get(BASE, params=query.to_params(), model=list[AcademicYear])

        return await self._query(list_key(query), fetch)

    async def active(self) -> Optional[AcademicYear]:
        async def fetch():
            response = await self.api.get(f"{BASE}/active", model=Optional[AcademicYear])
            return response.data

        return await self._query(active_key(), fetch)

    async def create(self, data: Union[AcademicYearCreate, dict]) -> AcademicYear:
        payload = as_model(AcademicYearCreate, data)

        async def send():
            response = await self.api.post(BASE, json=payload, model=AcademicYear)
            return response.data

        return await self._mutate(send, invalidate=[ALL_KEY])

    async def activate(self, year_id: str) -> AcademicYear:
        async def send():
            response = await self.api.patch(f"{BASE}/{year_id}/activate", model=AcademicYear)
            return response.data

        return await self._mutate(send, invalidate=[ALL_KEY])

    async def lock(self, year_id: str) -> AcademicYear:
        async def send():
            response = await self.api.patch(f"{BASE}/{year_id}/lock", model=AcademicYear)
            return response.data

        return await self._mutate(send, invalidate=[ALL_KEY])
