from datetime import datetime
from typing import Optional
from school_portal.schemas.common import CamelModel, ListQuery


class TeacherAssignment(CamelModel):
    id: str
    staff_id: str
    subject_id: str
    class_section_id: str
    academic_year_id: str
    branch_id: str
    created_at: Optional[datetime] = None
    staff_name: Optional[str] = None
    subject_name: Optional[str] = None
    class_name: Optional[str] = None
    section_name: Optional[str] = None
    class_section_name: Optional[str] = None


class TeacherAssignmentCreate(CamelModel):
    staff_id: str
    subject_id: str
    class_section_id: str


class TeacherAssignmentUpdate(CamelModel):
    staff_id: str


class TeacherAssignmentQuery(ListQuery):
    staff_id: Optional[str] = None
    subject_id: Optional[str] = None
    class_section_id: Optional[str] = None
    academic_year_id: Optional[str] = None
