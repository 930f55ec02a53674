from typing import Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.students import (
    GeneratedStudentId,
    Student,
    StudentCreate,
    StudentQuery,
    StudentUpdate,
)
from school_portal.services.base import API_PREFIX, ResourceService, as_model
from school_portal.services.query_cache import make_key

BASE = f"{API_PREFIX}/students"


class StudentService(ResourceService):
    def list_key(self, query: Optional[StudentQuery] = None) -> tuple:
        return make_key("students", self.branch_id, query)

    async def list(self, query: Union[StudentQuery, dict, None] = None) -> Optional[ApiResponse]:
        query = as_model(StudentQuery, query)

        async def fetch():
            return await self.api.get(BASE, params=query.to_params(), model=list[Student])

        return await self._query(self.list_key(query), fetch, enabled=bool(self.branch_id))

    async def get(self, student_id: str) -> Optional[Student]:
        async def fetch():
            response = await self.api.get(f"{BASE}/{student_id}", model=Student)
            return response.data

        return await self._query(("student", student_id), fetch, enabled=bool(student_id))

    async def generate_id(
        self,
        class_id: Optional[str] = None,
        section_id: Optional[str] = None,
        academic_year_id: Optional[str] = None,
    ) -> str:
        params = {"classId": class_id, "sectionId": section_id, "academicYearId": academic_year_id}
        response = await self.api.get(f"{BASE}/generate-id", params=params, model=GeneratedStudentId)
        return response.data.student_id

    async def create(self, data: Union[StudentCreate, dict]) -> Student:
        payload = as_model(StudentCreate, data)

        async def send():
            response = await self.api.post(BASE, json=payload, model=Student)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("students", self.branch_id)],
            success="Student created successfully",
            failure="Failed to create student",
        )

    async def update(self, student_id: str, data: Union[StudentUpdate, dict]) -> Student:
        payload = as_model(StudentUpdate, data)

        async def send():
            response = await self.api.put(f"{BASE}/{student_id}", json=payload, model=Student)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("students", self.branch_id), ("student", student_id)],
            success="Student updated successfully",
            failure="Failed to update student",
        )
