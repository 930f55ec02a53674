from typing import List, Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.settings import (
    AssessmentType,
    AssessmentTypeCreate,
    AssignGradeTemplate,
    ClassGradeAssignment,
    GradeTemplate,
    GradeTemplateCreate,
    GradeTemplateUpdate,
    LeaveQuota,
)
from school_portal.services.base import API_PREFIX, ResourceService, as_model

TYPES_KEY = ("assessment", "types")
TEMPLATES_KEY = ("assessment", "templates")
ASSIGNMENTS_KEY = ("assessment", "assignments")
LEAVE_QUOTA_KEY = ("assessment", "leaveQuota")


class AssessmentService(ResourceService):
    async def types(self) -> ApiResponse:
        async def fetch():
            return await self.api.get(
                f"{API_PREFIX}/assessment-types", params={"page": 1, "limit": 100}, model=list[AssessmentType]
            )

        return await self._query(TYPES_KEY, fetch)

    async def create_type(self, data: Union[AssessmentTypeCreate, dict]) -> AssessmentType:
        payload = as_model(AssessmentTypeCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/assessment-types", json=payload, model=AssessmentType)
            return response.data

        return await self._mutate(send, invalidate=[TYPES_KEY])

    async def grade_templates(self) -> Optional[List[GradeTemplate]]:
        async def fetch():
            response = await self.api.get(f"{API_PREFIX}/grade-templates", model=list[GradeTemplate])
            return response.data or []

        return await self._query(TEMPLATES_KEY, fetch)

    async def create_grade_template(self, data: Union[GradeTemplateCreate, dict]) -> GradeTemplate:
        payload = as_model(GradeTemplateCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/grade-templates", json=payload, model=GradeTemplate)
            return response.data

        return await self._mutate(send, invalidate=[TEMPLATES_KEY])

    async def update_grade_template(self, template_id: str, data: Union[GradeTemplateUpdate, dict]) -> GradeTemplate:
        payload = as_model(GradeTemplateUpdate, data)

        async def send():
            response = await self.api.put(
                f"{API_PREFIX}/grade-templates/{template_id}", json=payload, model=GradeTemplate
            )
            return response.data

        return await self._mutate(send, invalidate=[TEMPLATES_KEY])

    async def delete_grade_template(self, template_id: str) -> None:
        async def send():
            await self.api.delete(f"{API_PREFIX}/grade-templates/{template_id}")

        await self._mutate(send, invalidate=[TEMPLATES_KEY])

    async def class_assignments(self) -> Optional[List[ClassGradeAssignment]]:
        async def fetch():
            response = await self.api.get(
                f"{API_PREFIX}/grade-templates/assignments", model=list[ClassGradeAssignment]
            )
            return response.data or []

        return await self._query(ASSIGNMENTS_KEY, fetch)

    async def assign_to_class(self, data: Union[AssignGradeTemplate, dict]) -> None:
        payload = as_model(AssignGradeTemplate, data)

        async def send():
            await self.api.put(
                f"{API_PREFIX}/grade-templates/{payload.grade_template_id}/assign-classes", json=payload
            )

        await self._mutate(send, invalidate=[ASSIGNMENTS_KEY])

    async def leave_quota(self, academic_year_id: Optional[str]) -> Optional[LeaveQuota]:
        async def fetch():
            response = await self.api.get(
                f"{API_PREFIX}/settings/leave-quota",
                params={"academicYearId": academic_year_id},
                model=LeaveQuota,
            )
            return response.data

        return await self._query(
            (*LEAVE_QUOTA_KEY, academic_year_id or "none"), fetch, enabled=bool(academic_year_id)
        )

    async def set_leave_quota(self, academic_year_id: str, annual_quota: int) -> LeaveQuota:
        payload = LeaveQuota(academic_year_id=academic_year_id, annual_quota=annual_quota)

        async def send():
            response = await self.api.put(f"{API_PREFIX}/settings/leave-quota", json=payload, model=LeaveQuota)
            return response.data

        return await self._mutate(send, invalidate=[(*LEAVE_QUOTA_KEY, academic_year_id)])
