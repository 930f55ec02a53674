from datetime import datetime
from typing import Optional
from pydantic import Field
from school_portal.schemas.common import CamelModel, ListQuery

DEFAULT_CAPACITY = 30


class ClassSection(CamelModel):
    id: str
    class_id: str
    section_id: str
    branch_id: str
    academic_year_id: str
    capacity: int
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class_name: Optional[str] = None
    class_display_name: Optional[str] = None
    section_name: Optional[str] = None
    student_count: Optional[int] = None
    class_teacher_id: Optional[str] = None
    class_teacher_name: Optional[str] = None


class ClassSectionCreate(CamelModel):
    class_id: str = Field(min_length=1)
    section_id: str = Field(min_length=1)
    capacity: int = Field(default=DEFAULT_CAPACITY, ge=1)


class BulkClassSectionCreate(CamelModel):
    class_sections: list[ClassSectionCreate]


class ClassSectionUpdate(CamelModel):
    capacity: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None


class AssignClassTeacher(CamelModel):
    staff_id: Optional[str] = None

    def to_payload(self) -> dict:
        # null unassigns, so it must be sent explicitly
        return {"staffId": self.staff_id}


class ClassSectionStudent(CamelModel):
    id: str
    student_id: str
    full_name: str


class ClassSectionQuery(ListQuery):
    class_id: Optional[str] = None
    section_id: Optional[str] = None
    academic_year_id: Optional[str] = None
    is_active: Optional[bool] = None
