from typing import List, Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.teacher_assignments import (
    TeacherAssignment,
    TeacherAssignmentCreate,
    TeacherAssignmentQuery,
    TeacherAssignmentUpdate,
)
from school_portal.services.base import API_PREFIX, ResourceService, as_model
from school_portal.services.query_cache import make_key

BASE = f"{API_PREFIX}/teacher-assignments"


class TeacherAssignmentService(ResourceService):
    """Which staff member teaches which subject to which class section."""

    async def list(self, query: Union[TeacherAssignmentQuery, dict, None] = None) -> Optional[ApiResponse]:
        query = as_model(TeacherAssignmentQuery, query)

        async def fetch():
            return await self.api.get(BASE, params=query.to_params(), model=list[TeacherAssignment])

        return await self._query(
            make_key("teacher-assignments", self.branch_id, query), fetch, enabled=bool(self.branch_id)
        )

    async def get(self, assignment_id: str) -> Optional[TeacherAssignment]:
        async def fetch():
            response = await self.api.get(f"{BASE}/{assignment_id}", model=TeacherAssignment)
            return response.data

        return await self._query(("teacher-assignment", assignment_id), fetch, enabled=bool(assignment_id))

    async def by_teacher(
        self, staff_id: str, academic_year_id: Optional[str] = None
    ) -> Optional[List[TeacherAssignment]]:
        async def fetch():
            response = await self.api.get(
                f"{BASE}/by-teacher/{staff_id}",
                params={"academicYearId": academic_year_id},
                model=list[TeacherAssignment],
            )
            return response.data or []

        return await self._query(
            ("teacher-assignments-by-teacher", staff_id, self.branch_id, academic_year_id),
            fetch,
            enabled=bool(staff_id and self.branch_id),
        )

    async def by_class_section(
        self, class_section_id: str, academic_year_id: Optional[str] = None
    ) -> Optional[List[TeacherAssignment]]:
        async def fetch():
            response = await self.api.get(
                f"{BASE}/by-class/{class_section_id}",
                params={"academicYearId": academic_year_id},
                model=list[TeacherAssignment],
            )
            return response.data or []

        return await self._query(
            ("teacher-assignments-by-class", class_section_id, self.branch_id, academic_year_id),
            fetch,
            enabled=bool(class_section_id and self.branch_id),
        )

    async def create(self, data: Union[TeacherAssignmentCreate, dict]) -> TeacherAssignment:
        payload = as_model(TeacherAssignmentCreate, data)

        async def send():
            response = await self.api.post(BASE, json=payload, model=TeacherAssignment)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("teacher-assignments", self.branch_id)],
            success="Teacher assignment created successfully",
            failure="Failed to create teacher assignment",
        )

    async def update(self, assignment_id: str, data: Union[TeacherAssignmentUpdate, dict]) -> TeacherAssignment:
        payload = as_model(TeacherAssignmentUpdate, data)

        async def send():
            response = await self.api.put(f"{BASE}/{assignment_id}", json=payload, model=TeacherAssignment)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("teacher-assignments", self.branch_id), ("teacher-assignment", assignment_id)],
            success="Teacher assignment updated successfully",
            failure="Failed to update teacher assignment",
        )

    async def delete(self, assignment_id: str) -> None:
        async def send():
            await self.api.delete(f"{BASE}/{assignment_id}")

        await self._mutate(
            send,
            invalidate=[("teacher-assignments", self.branch_id)],
            success="Teacher assignment deleted successfully",
            failure="Failed to delete teacher assignment",
        )
