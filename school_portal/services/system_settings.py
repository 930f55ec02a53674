import logging
from typing import Any, List, Optional
from school_portal.schemas.common import CamelModel
from school_portal.schemas.settings import BranchWithSettings, SettingsStatus, SystemSetting
from school_portal.services import academic_years, assessment, core_lookups, schedule
from school_portal.services.base import API_PREFIX, ResourceService

logger = logging.getLogger(__name__)

ALL_SETTINGS_KEY = ("systemSettings", "all")
STATUS_KEY = ("settingsStatus", "status")
BRANCHES_WITH_SETTINGS_KEY = ("settingsStatus", "branchesWithSettings")

COMMUNICATION_DIRECTION = "communication_direction"
BEHAVIORAL_ASSESSMENT = "behavioral_assessment"

# everything a branch copy can overwrite
COPIED_SETTINGS_KEYS = [
    academic_years.ALL_KEY,
    core_lookups.SUBJECTS_KEY,
    core_lookups.CLASSES_KEY,
    core_lookups.SECTIONS_KEY,
    core_lookups.LEVELS_KEY,
    schedule.TIMING_TEMPLATES_KEY,
    schedule.SCHOOL_DAYS_KEY,
    assessment.TYPES_KEY,
    assessment.TEMPLATES_KEY,
    ("systemSettings",),
    ("permissions",),
]


def setting_key(key: str) -> tuple:
    return ("systemSettings", "key", key)


class SettingValue(CamelModel):
    value: Any = None

    def to_payload(self) -> dict[str, Any]:
        return {"value": self.value}


class CopyFromBranch(CamelModel):
    source_branch_id: str


class SystemSettingService(ResourceService):
    """Key/value settings of the current branch, such as communication rules."""

    async def get(self, key: str) -> Optional[SystemSetting]:
        async def fetch():
            response = await self.api.get(f"{API_PREFIX}/settings/{key}", model=SystemSetting)
            return response.data

        return await self._query(setting_key(key), fetch)

    async def update(self, key: str, value: Any) -> SystemSetting:
        async def send():
            response = await self.api.put(
                f"{API_PREFIX}/settings/{key}", json=SettingValue(value=value), model=SystemSetting
            )
            return response.data

        return await self._mutate(send, invalidate=[setting_key(key), ALL_SETTINGS_KEY])


class SettingsStatusService(ResourceService):
    """Which settings groups the current branch has configured."""

    async def status(self) -> Optional[SettingsStatus]:
        async def fetch():
            response = await self.api.get(f"{API_PREFIX}/settings-status/status", model=SettingsStatus)
            return response.data

        return await self._query(STATUS_KEY, fetch, enabled=bool(self.branch_id))

    async def branches_with_settings(self) -> Optional[List[BranchWithSettings]]:
        async def fetch():
            response = await self.api.get(
                f"{API_PREFIX}/settings-status/branches-with-settings", model=list[BranchWithSettings]
            )
            return response.data or []

        return await self._query(BRANCHES_WITH_SETTINGS_KEY, fetch, enabled=bool(self.branch_id))

    async def copy_from_branch(self, source_branch_id: str) -> Any:
        """Copy every settings group of another branch into the current one."""
        payload = CopyFromBranch(source_branch_id=source_branch_id)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/settings-status/copy-from-branch", json=payload)
            logger.info(f"Copied settings from branch {source_branch_id} into {self.branch_id}")
            return response.data

        return await self._mutate(
            send,
            invalidate=[STATUS_KEY, BRANCHES_WITH_SETTINGS_KEY, *COPIED_SETTINGS_KEYS],
            success="Settings copied successfully",
            failure="Failed to copy settings",
        )
