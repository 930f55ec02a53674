import datetime as dt
from typing import Any, Optional
from pydantic import Field
from school_portal.schemas.common import CamelModel, ListQuery
from school_portal.schemas.enums import AttendanceStatus


class Attendance(CamelModel):
    id: str
    student_id: str
    student_id_number: Optional[str] = None
    student_name: str
    class_section_id: str
    class_name: str
    section_name: str
    date: dt.date
    status: AttendanceStatus
    entry_time: Optional[str] = None
    exit_time: Optional[str] = None
    notes: Optional[str] = None
    marked_by_id: Optional[str] = None
    marked_by_name: Optional[str] = None
    branch_id: str
    academic_year_id: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class AttendanceRecordInput(CamelModel):
    student_id: str
    status: AttendanceStatus
    entry_time: Optional[str] = None
    exit_time: Optional[str] = None
    notes: Optional[str] = None


class BulkMarkAttendance(CamelModel):
    class_section_id: str
    date: dt.date
    records: list[AttendanceRecordInput] = Field(min_length=1)


class AttendanceUpdate(CamelModel):
    status: Optional[AttendanceStatus] = None
    entry_time: Optional[str] = None
    exit_time: Optional[str] = None
    notes: Optional[str] = None


class AttendanceSummary(CamelModel):
    total_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0
    excused_days: int = 0
    percentage: float = 0


class AttendanceReport(CamelModel):
    start_date: dt.date
    end_date: dt.date
    class_section_id: Optional[str] = None
    class_name: Optional[str] = None
    section_name: Optional[str] = None
    summary: AttendanceSummary
    records: list[Attendance] = []


class AttendanceQuery(ListQuery):
    date: Optional[dt.date] = None
    class_section_id: Optional[str] = None
    class_section_ids: Optional[list[str]] = None
    student_id: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    statuses: Optional[list[AttendanceStatus]] = None
    academic_year_id: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    def to_params(self) -> dict[str, Any]:
        params = super().to_params()
        if self.class_section_ids:
            params.pop("classSectionId", None)
        if self.statuses:
            params.pop("status", None)
        return params


class AttendanceReportQuery(CamelModel):
    class_section_id: Optional[str] = None
    date: Optional[dt.date] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    student_id: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    academic_year_id: Optional[str] = None
