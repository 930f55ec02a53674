import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, Type, TypeVar, Union
from pydantic import BaseModel
from school_portal.core.api_client import ApiClient
from school_portal.core.notify import Notifier
from school_portal.core.session import SessionStore
from school_portal.services.query_cache import QueryClient

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

API_PREFIX = "/api/v1"


def as_model(model_cls: Type[M], data: Union[M, dict, None] = None, **fields) -> M:
    """Coerce dict input into `model_cls`, validating before anything is sent."""
    if isinstance(data, model_cls):
        return data
    if data is None:
        data = {}
    return model_cls.model_validate({**data, **fields})


def error_message(error: Exception, fallback: str) -> str:
    return getattr(error, "message", None) or str(error) or fallback


class ResourceService:
    """Shared plumbing for one API resource: cached reads, notifying writes."""

    def __init__(
        self,
        api: ApiClient,
        cache: QueryClient,
        session: SessionStore,
        notifier: Optional[Notifier] = None,
        stale_time: Optional[float] = None,
    ):
        self.api = api
        self.cache = cache
        self.session = session
        self.notifier = notifier or Notifier()
        self.stale_time = stale_time

    @property
    def branch_id(self) -> Optional[str]:
        return self.session.current_branch_id

    async def _query(self, key: tuple, fn: Callable[[], Awaitable[Any]], enabled: bool = True) -> Any:
        return await self.cache.fetch(key, fn, stale_time=self.stale_time, enabled=enabled)

    async def _mutate(
        self,
        fn: Callable[[], Awaitable[Any]],
        invalidate: Iterable[tuple] = (),
        success: Optional[str] = None,
        failure: Optional[str] = None,
    ) -> Any:
        try:
            result = await self.cache.mutate(fn, invalidate=invalidate)
        except Exception as e:
            if failure is not None:
                self.notifier.error(error_message(e, failure))
            raise
        if success is not None:
            self.notifier.success(success)
        return result

    async def _fetch_all(self, path: str, model: Any, params: Optional[dict] = None, page_size: int = 100) -> list:
        """Read every page of a list endpoint, following `meta.totalPages`."""
        rows: list = []
        page = 1
        while True:
            query = {**(params or {}), "page": page, "limit": page_size}
            response = await self.api.get(path, params=query, model=model)
            batch = response.data or []
            rows.extend(batch)
            meta = response.meta
            if meta is None or not batch:
                break
            if meta.total_pages:
                if page >= meta.total_pages:
                    break
            elif len(rows) >= meta.total:
                break
            page += 1
        logger.debug(f"Read {len(rows)} rows from {path} over {page} page(s)")
        return rows
