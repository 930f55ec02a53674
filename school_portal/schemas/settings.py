import datetime as dt
from typing import Any, Optional
from pydantic import Field, field_validator, model_validator
from school_portal.schemas.common import CamelModel, ListQuery


class AcademicYear(CamelModel):
    id: str
    name: str
    start_date: dt.date
    end_date: dt.date
    is_active: bool = False
    is_locked: bool = False
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class AcademicYearCreate(CamelModel):
    name: str
    start_date: dt.date
    end_date: dt.date

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class AcademicYearQuery(ListQuery):
    page: Optional[int] = 1
    limit: Optional[int] = 20
    sort_by: Optional[str] = "created_at"
    sort_order: Optional[str] = "desc"


class Subject(CamelModel):
    id: str
    name: str
    name_ar: Optional[str] = None
    code: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class SubjectCreate(CamelModel):
    name: str = Field(min_length=1)
    name_ar: Optional[str] = None
    code: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class ClassEntity(CamelModel):
    id: str
    name: str
    display_name: str
    sort_order: int = 0
    is_active: bool = True
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class ClassCreate(CamelModel):
    name: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    sort_order: int
    is_active: Optional[bool] = None


class Section(CamelModel):
    id: str
    name: str
    is_active: bool = True
    sort_order: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class SectionCreate(CamelModel):
    name: str = Field(min_length=1)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class Level(CamelModel):
    id: str
    name: str
    name_ar: Optional[str] = None
    sort_order: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    classes: list[ClassEntity] = []


class LevelCreate(CamelModel):
    name: str = Field(min_length=1)
    name_ar: Optional[str] = None
    sort_order: Optional[int] = None
    class_ids: Optional[list[str]] = None


class TimingTemplate(CamelModel):
    id: str
    name: str
    start_time: str
    end_time: str
    assembly_start: Optional[str] = None
    assembly_end: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    period_duration_minutes: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    assigned_class_ids: list[str] = []


class TimingSlot(CamelModel):
    name: str
    start_time: str
    end_time: str
    sort_order: int = 0


class TimingTemplateCreate(CamelModel):
    name: str = Field(min_length=1)
    start_time: str
    end_time: str
    assembly_start: Optional[str] = None
    assembly_end: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    period_duration_minutes: Optional[int] = Field(default=None, ge=1)
    slots: Optional[list[TimingSlot]] = None


class SchoolDaysUpdate(CamelModel):
    active_days: list[int]

    @field_validator("active_days")
    @classmethod
    def valid_weekdays(cls, v: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("Days must be between 0 (Sunday) and 6 (Saturday)")
        return v


class AssignClasses(CamelModel):
    class_ids: list[str]


class DateRangeCreate(CamelModel):
    name: str = Field(min_length=1)
    name_ar: Optional[str] = None
    start_date: dt.date
    end_date: dt.date
    academic_year_id: str

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date")
        return self


class DateRangeUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    name_ar: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date")
        return self


class PublicHoliday(CamelModel):
    id: str
    name: str
    name_ar: Optional[str] = None
    start_date: dt.date
    end_date: dt.date
    academic_year_id: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class PublicHolidayCreate(DateRangeCreate):
    pass


class Vacation(PublicHoliday):
    pass


class VacationCreate(DateRangeCreate):
    pass


class AssessmentType(CamelModel):
    id: str
    name: str
    name_ar: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class AssessmentTypeCreate(CamelModel):
    name: str = Field(min_length=1)
    name_ar: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class GradeRange(CamelModel):
    id: str
    letter: str
    min_percentage: float
    max_percentage: float
    sort_order: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class GradeRangeInput(CamelModel):
    letter: str = Field(min_length=1)
    min_percentage: float = Field(ge=0, le=100)
    max_percentage: float = Field(ge=0, le=100)
    sort_order: Optional[int] = None

    @model_validator(mode="after")
    def min_not_above_max(self):
        if self.min_percentage > self.max_percentage:
            raise ValueError("Minimum percentage cannot exceed maximum percentage")
        return self


class GradeTemplate(CamelModel):
    id: str
    name: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    ranges: list[GradeRange] = []


class GradeTemplateCreate(CamelModel):
    name: str = Field(min_length=1)
    ranges: list[GradeRangeInput]


class GradeTemplateUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    ranges: Optional[list[GradeRangeInput]] = None


class ClassGradeAssignment(CamelModel):
    id: str
    class_id: str
    class_name: str
    grade_template_id: str
    grade_template_name: str
    minimum_passing_grade: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class AssignGradeTemplate(CamelModel):
    grade_template_id: str
    class_id: str
    minimum_passing_grade: str

    def to_payload(self) -> dict[str, Any]:
        return {"classId": self.class_id, "minimumPassingGrade": self.minimum_passing_grade}


class LeaveQuota(CamelModel):
    academic_year_id: str
    annual_quota: int = Field(ge=0)


class SystemSetting(CamelModel):
    key: str
    value: Any = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class SettingsStatus(CamelModel):
    academic_year: bool = False
    academic: bool = False
    schedule: bool = False
    assessment: bool = False
    communication: bool = False
    behavior: bool = False
    permissions: bool = False
    is_initialized: bool = False


class BranchWithSettings(CamelModel):
    id: str
    name: str
    code: Optional[str] = None
