from typing import Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.settings import (
    ClassCreate,
    ClassEntity,
    Level,
    LevelCreate,
    Section,
    SectionCreate,
    Subject,
    SubjectCreate,
)
from school_portal.services.base import API_PREFIX, ResourceService, as_model
from school_portal.services.query_cache import make_key

LOOKUP_PARAMS = {"page": 1, "limit": 100}

SUBJECTS_KEY = ("subjects",)
CLASSES_KEY = ("classes",)
SECTIONS_KEY = ("sections",)
LEVELS_KEY = ("levels",)


class CoreLookupService(ResourceService):
    """Subjects, classes, sections and levels: small lists, usually read in one page."""

    async def subjects(self) -> ApiResponse:
        async def fetch():
            return await self.api.get(f"{API_PREFIX}/subjects", params=LOOKUP_PARAMS, model=list[Subject])

        return await self._query(SUBJECTS_KEY, fetch)

    async def classes(self, level_id: Optional[str] = None) -> ApiResponse:
        params = {"levelId": level_id} if level_id else {}

        async def fetch():
            return await self.api.get(
                f"{API_PREFIX}/classes", params={**LOOKUP_PARAMS, **params}, model=list[ClassEntity]
            )

        return await self._query(make_key("classes", params), fetch)

    async def sections(self) -> ApiResponse:
        async def fetch():
            return await self.api.get(f"{API_PREFIX}/sections", params=LOOKUP_PARAMS, model=list[Section])

        return await self._query(SECTIONS_KEY, fetch)

    async def all_classes(self) -> list[ClassEntity]:
        async def fetch():
            return await self._fetch_all(f"{API_PREFIX}/classes", list[ClassEntity])

        return await self._query(CLASSES_KEY + ("all",), fetch)

    async def all_sections(self) -> list[Section]:
        async def fetch():
            return await self._fetch_all(f"{API_PREFIX}/sections", list[Section])

        return await self._query(SECTIONS_KEY + ("all",), fetch)

    async def levels(self) -> ApiResponse:
        async def fetch():
            return await self.api.get(f"{API_PREFIX}/levels", params=LOOKUP_PARAMS, model=list[Level])

        return await self._query(LEVELS_KEY, fetch)

    async def create_subject(self, data: Union[SubjectCreate, dict]) -> Subject:
        payload = as_model(SubjectCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/subjects", json=payload, model=Subject)
            return response.data

        return await self._mutate(send, invalidate=[SUBJECTS_KEY])

    async def create_class(self, data: Union[ClassCreate, dict]) -> ClassEntity:
        payload = as_model(ClassCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/classes", json=payload, model=ClassEntity)
            return response.data

        # levels embed their classes
        return await self._mutate(send, invalidate=[CLASSES_KEY, LEVELS_KEY])

    async def create_section(self, data: Union[SectionCreate, dict]) -> Section:
        payload = as_model(SectionCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/sections", json=payload, model=Section)
            return response.data

        return await self._mutate(send, invalidate=[SECTIONS_KEY])

    async def create_level(self, data: Union[LevelCreate, dict]) -> Level:
        payload = as_model(LevelCreate, data)

        async def send():
            response = await self.api.post(f"{API_PREFIX}/levels", json=payload, model=Level)
            return response.data

        return await self._mutate(send, invalidate=[LEVELS_KEY])
