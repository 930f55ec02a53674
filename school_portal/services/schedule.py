from typing import List, Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.settings import (
    AssignClasses,
    DateRangeUpdate,
    PublicHoliday,
    PublicHolidayCreate,
    SchoolDaysUpdate,
    TimingTemplate,
    TimingTemplateCreate,
    Vacation,
    VacationCreate,
)
from school_portal.services.base import API_PREFIX, ResourceService, as_model

SCHOOL_DAYS_KEY = ("schedule", "schoolDays")
TIMING_TEMPLATES_KEY = ("schedule", "timingTemplates")
HOLIDAYS_KEY = ("schedule", "holidays")
VACATIONS_KEY = ("schedule", "vacations")


class ScheduleService(ResourceService):
    """School days, timing templates, public holidays and vacations."""

    async def school_days(self) -> Optional[List[int]]:
        async def fetch():
            response = await self.api.get(f"{API_PREFIX}/settings/school-days", model=list[int])
            return response.data or []

        return await self._query(SCHOOL_DAYS_KEY, fetch)

    async def update_school_days(self, active_days: List[int]) -> List[int]:
        payload = SchoolDaysUpdate(active_days=active_days)

        async def send():
            response = await self.api.put(f"{API_PREFIX}/settings/school-days", json=payload, model=list[int])
            return response.data or []

        return await self._mutate(send, invalidate=[SCHOOL_DAYS_KEY])

    async def timing_templates(self) -> ApiResponse:
        async def fetch():
            return await self.api.get(
                f"{API_PREFIX}/timing-templates", params={"page": 1, "limit": 100}, model=list[TimingTemplate]
            )

        return await self._query(TIMING_TEMPLATES_KEY, fetch)

    async def create_timing_template(self, data: Union[TimingTemplateCreate, dict]) -> TimingTemplate:
        payload = as_model(TimingTemplateCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/timing-templates", json=payload, model=TimingTemplate)
            return response.data

        return await self._mutate(send, invalidate=[TIMING_TEMPLATES_KEY])

    async def assign_classes(self, template_id: str, class_ids: List[str]) -> List[str]:
        payload = AssignClasses(class_ids=class_ids)

        async def send():
            response = await self.api.put(
                f"{API_PREFIX}/timing-templates/{template_id}/assign-classes", json=payload, model=list[str]
            )
            return response.data or []

        return await self._mutate(send, invalidate=[TIMING_TEMPLATES_KEY])

    async def public_holidays(self, academic_year_id: Optional[str]) -> Optional[List[PublicHoliday]]:
        async def fetch():
            response = await self.api.get(
                f"{API_PREFIX}/public-holidays",
                params={"academicYearId": academic_year_id},
                model=list[PublicHoliday],
            )
            return response.data or []

        return await self._query(
            (*HOLIDAYS_KEY, academic_year_id or "none"), fetch, enabled=bool(academic_year_id)
        )

    async def create_public_holiday(self, data: Union[PublicHolidayCreate, dict]) -> PublicHoliday:
        payload = as_model(PublicHolidayCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/public-holidays", json=payload, model=PublicHoliday)
            return response.data

        return await self._mutate(send, invalidate=[(*HOLIDAYS_KEY, payload.academic_year_id)])

    async def update_public_holiday(self, holiday_id: str, data: Union[DateRangeUpdate, dict]) -> PublicHoliday:
        payload = as_model(DateRangeUpdate, data)

        async def send():
            response = await self.api.put(
                f"{API_PREFIX}/public-holidays/{holiday_id}", json=payload, model=PublicHoliday
            )
            return response.data

        return await self._mutate(send, invalidate=[HOLIDAYS_KEY])

    async def delete_public_holiday(self, holiday_id: str) -> None:
        async def send():
            await self.api.delete(f"{API_PREFIX}/public-holidays/{holiday_id}")

        await self._mutate(send, invalidate=[HOLIDAYS_KEY])

    async def vacations(self, academic_year_id: Optional[str]) -> Optional[List[Vacation]]:
        async def fetch():
            response = await self.api.get(
                f"{API_PREFIX}/vacations", params={"academicYearId": academic_year_id}, model=list[Vacation]
            )
            return response.data or []

        return await self._query(
            (*VACATIONS_KEY, academic_year_id or "none"), fetch, enabled=bool(academic_year_id)
        )

    async def create_vacation(self, data: Union[VacationCreate, dict]) -> Vacation:
        payload = as_model(VacationCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/vacations", json=payload, model=Vacation)
            return response.data

        return await self._mutate(send, invalidate=[(*VACATIONS_KEY, payload.academic_year_id)])

    async def update_vacation(self, vacation_id: str, data: Union[DateRangeUpdate, dict]) -> Vacation:
        payload = as_model(DateRangeUpdate, data)

        async def send():
            response = await self.api.put(f"{API_PREFIX}/vacations/{vacation_id}", json=payload, model=Vacation)
            return response.data

        return await self._mutate(send, invalidate=[VACATIONS_KEY])

    async def delete_vacation(self, vacation_id: str) -> None:
        async def send():
            await self.api.delete(f"{API_PREFIX}/vacations/{vacation_id}")

        await self._mutate(send, invalidate=[VACATIONS_KEY])
