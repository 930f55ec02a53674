import logging
from typing import Union
from school_portal.core.notify import Notifier
from school_portal.schemas.setup_wizard import SetupWizardData
from school_portal.services.academic_years import AcademicYearService
from school_portal.services.assessment import AssessmentService
from school_portal.services.base import as_model, error_message
from school_portal.services.core_lookups import CoreLookupService
from school_portal.services.query_cache import QueryClient
from school_portal.services.schedule import ScheduleService
from school_portal.services.system_settings import (
    BEHAVIORAL_ASSESSMENT,
    COMMUNICATION_DIRECTION,
    SystemSettingService,
)

logger = logging.getLogger(__name__)


class SetupWizardService:
    """Saves the first-run settings wizard through the services that own each step.

    Steps run one after another; a failure stops the run and leaves the
    earlier steps in place.
    """

    def __init__(
        self,
        cache: QueryClient,
        academic_years: AcademicYearService,
        lookups: CoreLookupService,
        schedule: ScheduleService,
        assessment: AssessmentService,
        system_settings: SystemSettingService,
        notifier: Notifier,
    ):
        self.cache = cache
        self.academic_years = academic_years
        self.lookups = lookups
        self.schedule = schedule
        self.assessment = assessment
        self.system_settings = system_settings
        self.notifier = notifier

    async def save(self, data: Union[SetupWizardData, dict]) -> None:
        data = as_model(SetupWizardData, data)
        try:
            await self._run(data)
        except Exception as e:
            self.notifier.error(error_message(e, "Failed to save settings"))
            raise

        self.cache.invalidate()
        self.notifier.success("All settings saved successfully")

    async def _run(self, data: SetupWizardData) -> None:
        if data.academic_year is not None:
            year = await self.academic_years.create(data.academic_year)
            if year is not None and year.id:
                await self.academic_years.activate(year.id)

        for subject in data.academic.subjects:
            await self.lookups.create_subject(subject)
        for cls in data.academic.classes:
            await self.lookups.create_class(cls)
        for section in data.academic.sections:
            await self.lookups.create_section(section)
        for level in data.academic.levels:
            await self.lookups.create_level(level)
        logger.info("Setup wizard: academic structure saved")

        if data.schedule.school_days:
            active_days = [day.day_of_week for day in data.schedule.school_days if day.is_active]
            await self.schedule.update_school_days(active_days)
        for template in data.schedule.timing_templates:
            await self.schedule.create_timing_template(template)

        for assessment_type in data.assessment.assessment_types:
            await self.assessment.create_type(assessment_type)
        for template in data.assessment.grade_templates:
            await self.assessment.create_grade_template(template)

        if data.communication is not None:
            await self.system_settings.update(
                COMMUNICATION_DIRECTION,
                {
                    "teacher_student": data.communication.teacher_student,
                    "teacher_parent": data.communication.teacher_parent,
                },
            )
        if data.behavior is not None:
            await self.system_settings.update(
                BEHAVIORAL_ASSESSMENT,
                {
                    "enabled": data.behavior.enabled,
                    "mandatory": data.behavior.mandatory,
                    "attributes": data.behavior.attributes,
                },
            )
        logger.info("Setup wizard: all steps saved")
