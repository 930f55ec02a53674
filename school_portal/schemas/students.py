from datetime import date, datetime
from typing import Any, Optional
from pydantic import field_validator
from school_portal.schemas.common import CamelModel, ListQuery
from school_portal.schemas.users import PersonCreate, PersonUpdate


class Student(CamelModel):
    id: str
    user_id: str
    branch_id: str
    student_id: str
    class_id: Optional[str] = None
    section_id: Optional[str] = None
    blood_group: Optional[str] = None
    medical_notes: Optional[str] = None
    admission_date: Optional[date] = None
    academic_year_id: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    class_name: Optional[str] = None
    section_name: Optional[str] = None


class StudentCreate(PersonCreate):
    student_id: str
    class_id: Optional[str] = None
    section_id: Optional[str] = None
    blood_group: Optional[str] = None
    medical_notes: Optional[str] = None
    admission_date: Optional[date] = None
    academic_year_id: Optional[str] = None

    @field_validator("student_id")
    @classmethod
    def student_id_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Student ID is required")
        return v


class StudentUpdate(PersonUpdate):
    class_id: Optional[str] = None
    section_id: Optional[str] = None
    blood_group: Optional[str] = None
    medical_notes: Optional[str] = None
    admission_date: Optional[date] = None


class StudentQuery(ListQuery):
    class_ids: Optional[list[str]] = None
    class_id: Optional[str] = None
    section_ids: Optional[list[str]] = None
    section_id: Optional[str] = None
    academic_year_id: Optional[str] = None
    is_active: Optional[bool] = None

    def to_params(self) -> dict[str, Any]:
        # the multi-select filters take precedence over the single ones
        params = super().to_params()
        if self.class_ids:
            params.pop("classId", None)
        if self.section_ids:
            params.pop("sectionId", None)
        return params


class GeneratedStudentId(CamelModel):
    student_id: str
