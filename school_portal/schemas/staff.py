from datetime import date, datetime
from typing import Optional
from school_portal.schemas.auth import UserRole
from school_portal.schemas.common import CamelModel, ListQuery
from school_portal.schemas.users import PersonCreate, PersonUpdate


class Staff(CamelModel):
    id: str
    user_id: str
    branch_id: str
    employee_id: Optional[str] = None
    department: Optional[str] = None
    join_date: Optional[date] = None
    is_active: bool = True
    deactivated_at: Optional[datetime] = None
    deactivation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    roles: list[UserRole] = []


class StaffCreate(PersonCreate):
    employee_id: Optional[str] = None
    department: Optional[str] = None
    join_date: Optional[date] = None
    role_ids: Optional[list[str]] = None


class StaffUpdate(PersonUpdate):
    employee_id: Optional[str] = None
    department: Optional[str] = None
    join_date: Optional[date] = None


class StaffQuery(ListQuery):
    role: Optional[str] = None
    is_active: Optional[bool] = None


class ClassTeacherOf(CamelModel):
    class_section_id: str
    class_name: str
    section_name: str


class SubjectAssignment(CamelModel):
    subject_id: str
    subject_name: str
    class_section_id: str
    class_name: Optional[str] = None
    section_name: Optional[str] = None


class StaffSchedule(CamelModel):
    class_teacher_of: list[ClassTeacherOf] = []
    subject_assignments: list[SubjectAssignment] = []
