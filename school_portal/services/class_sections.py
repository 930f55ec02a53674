import logging
from typing import List, Optional, Union
from school_portal.schemas.class_sections import (
    DEFAULT_CAPACITY,
    AssignClassTeacher,
    BulkClassSectionCreate,
    ClassSection,
    ClassSectionCreate,
    ClassSectionQuery,
    ClassSectionStudent,
    ClassSectionUpdate,
)
from school_portal.schemas.common import ApiResponse
from school_portal.services.base import API_PREFIX, ResourceService, as_model, error_message
from school_portal.services.class_section_planner import missing_combinations, plan_class_sections
from school_portal.services.core_lookups import CoreLookupService
from school_portal.services.query_cache import make_key

logger = logging.getLogger(__name__)

BASE = f"{API_PREFIX}/class-sections"


class ClassSectionService(ResourceService):
    def __init__(self, *args, lookups: Optional[CoreLookupService] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.lookups = lookups

    def _invalidations(self, class_section_id: Optional[str] = None) -> list[tuple]:
        keys = [("class-sections", self.branch_id)]
        if class_section_id:
            keys.append(("class-section", class_section_id))
        return keys

    async def list(self, query: Union[ClassSectionQuery, dict, None] = None) -> Optional[ApiResponse]:
        query = as_model(ClassSectionQuery, query)

        async def fetch():
            return await self.api.get(BASE, params=query.to_params(), model=list[ClassSection])

        return await self._query(
            make_key("class-sections", self.branch_id, query), fetch, enabled=bool(self.branch_id)
        )

    async def all(self) -> Optional[List[ClassSection]]:
        """Every class section in the current branch, across all pages."""
        async def fetch():
            return await self._fetch_all(BASE, list[ClassSection])

        return await self._query(("class-sections", self.branch_id, "all"), fetch, enabled=bool(self.branch_id))

    async def get(self, class_section_id: str) -> Optional[ClassSection]:
        async def fetch():
            response = await self.api.get(f"{BASE}/{class_section_id}", model=ClassSection)
            return response.data

        return await self._query(("class-section", class_section_id), fetch, enabled=bool(class_section_id))

    async def students(self, class_section_id: str) -> Optional[List[ClassSectionStudent]]:
        async def fetch():
            response = await self.api.get(f"{BASE}/{class_section_id}/students", model=list[ClassSectionStudent])
            return response.data or []

        return await self._query(
            ("class-section-students", class_section_id), fetch, enabled=bool(class_section_id)
        )

    async def create(self, data: Union[ClassSectionCreate, dict]) -> ClassSection:
        payload = as_model(ClassSectionCreate, data)

        async def send():
            response = await self.api.post(BASE, json=payload, model=ClassSection)
            return response.data

        return await self._mutate(
            send,
            invalidate=self._invalidations(),
            success="Class section created successfully",
            failure="Failed to create class section",
        )

    async def bulk_create(self, data: Union[BulkClassSectionCreate, dict]) -> List[ClassSection]:
        payload = as_model(BulkClassSectionCreate, data)

        async def send():
            response = await self.api.post(BASE, json=payload, model=list[ClassSection])
            return response.data or []

        try:
            created = await self.cache.mutate(send, invalidate=self._invalidations())
        except Exception as e:
            self.notifier.error(error_message(e, "Failed to create class sections"))
            raise

        self.notifier.success(f"{len(created)} class section(s) created successfully")
        return created

    async def bulk_create_missing(self, capacity: int = DEFAULT_CAPACITY) -> List[ClassSection]:
        """Create a class section for every class x section pair that has none.

        Sends nothing when every combination already exists.
        """
        if self.lookups is None:
            raise RuntimeError("ClassSectionService needs lookups to plan class sections")

        classes = await self.lookups.all_classes()
        sections = await self.lookups.all_sections()
        existing = await self.all()

        missing = missing_combinations(classes, sections, existing or [])
        if not missing:
            logger.info("All class-section combinations already exist")
            return []

        return await self.bulk_create(
            BulkClassSectionCreate(class_sections=plan_class_sections(missing, capacity))
        )

    async def update(self, class_section_id: str, data: Union[ClassSectionUpdate, dict]) -> ClassSection:
        payload = as_model(ClassSectionUpdate, data)

        async def send():
            response = await self.api.put(f"{BASE}/{class_section_id}", json=payload, model=ClassSection)
            return response.data

        return await self._mutate(
            send,
            invalidate=self._invalidations(class_section_id),
            success="Class section updated successfully",
            failure="Failed to update class section",
        )

    async def delete(self, class_section_id: str) -> None:
        async def send():
            await self.api.delete(f"{BASE}/{class_section_id}")

        await self._mutate(
            send,
            invalidate=self._invalidations(),
            success="Class section deleted successfully",
            failure="Failed to delete class section",
        )

    async def assign_class_teacher(self, class_section_id: str, staff_id: Optional[str]) -> ClassSection:
        """Set the class teacher; `None` removes the current one."""
        payload = AssignClassTeacher(staff_id=staff_id)

        async def send():
            response = await self.api.put(
                f"{BASE}/{class_section_id}/class-teacher", json=payload.to_payload(), model=ClassSection
            )
            return response.data

        return await self._mutate(
            send,
            invalidate=self._invalidations(class_section_id),
            success=(
                "Class teacher assigned successfully" if staff_id else "Class teacher unassigned successfully"
            ),
            failure="Failed to assign class teacher",
        )
