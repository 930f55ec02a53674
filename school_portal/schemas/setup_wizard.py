from typing import Optional
from school_portal.schemas.common import CamelModel
from school_portal.schemas.settings import (
    AcademicYearCreate,
    AssessmentTypeCreate,
    ClassCreate,
    GradeTemplateCreate,
    LevelCreate,
    SectionCreate,
    SubjectCreate,
    TimingTemplateCreate,
)


class SchoolDay(CamelModel):
    day_of_week: int
    is_active: bool = True


class AcademicSetup(CamelModel):
    subjects: list[SubjectCreate] = []
    classes: list[ClassCreate] = []
    sections: list[SectionCreate] = []
    levels: list[LevelCreate] = []


class ScheduleSetup(CamelModel):
    school_days: list[SchoolDay] = []
    timing_templates: list[TimingTemplateCreate] = []


class AssessmentSetup(CamelModel):
    assessment_types: list[AssessmentTypeCreate] = []
    grade_templates: list[GradeTemplateCreate] = []


class CommunicationSetup(CamelModel):
    teacher_student: str
    teacher_parent: str


class BehaviorSetup(CamelModel):
    enabled: bool = False
    mandatory: bool = False
    attributes: list[str] = []


class SetupWizardData(CamelModel):
    academic_year: Optional[AcademicYearCreate] = None
    academic: AcademicSetup = AcademicSetup()
    schedule: ScheduleSetup = ScheduleSetup()
    assessment: AssessmentSetup = AssessmentSetup()
    communication: Optional[CommunicationSetup] = None
    behavior: Optional[BehaviorSetup] = None
