import asyncio
import inspect
import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Optional
from pydantic import BaseModel

logger = logging.getLogger(__name__)

QueryKey = tuple
QueryFn = Callable[[], Awaitable[Any]]


def _freeze(value: Any) -> Any:
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(value, dict):
        return tuple(sorted((str(k), _freeze(v)) for k, v in value.items() if v is not None))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return tuple(sorted(_freeze(v) for v in value))
    if isinstance(value, Enum):
        return value.value
    return value


def make_key(*parts: Any) -> QueryKey:
    """Hashable cache key; equal filter dicts produce equal keys."""
    return tuple(_freeze(part) for part in parts)


def key_matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[:len(prefix)] == prefix


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class QueryState:
    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: Optional[BaseException] = None
    updated_at: Optional[float] = None
    is_stale: bool = True

    @property
    def is_loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR

    @property
    def is_success(self) -> bool:
        return self.status == QueryStatus.SUCCESS

    def is_fresh(self, stale_time: float, now: float) -> bool:
        return (
            self.status == QueryStatus.SUCCESS
            and not self.is_stale
            and self.updated_at is not None
            and now - self.updated_at < stale_time
        )


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    deduplicated: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class QueryClient:
    """Keyed cache of server reads.

    Entries are refetched when stale; concurrent reads of one key share a
    single request. Mutations invalidate key prefixes, so the next read of any
    dependent query goes back to the server.

    Invalidating or clearing a key detaches its in-flight request: later reads
    start a new one, and the detached request still answers its own callers
    but never writes to the cache.
    """

    def __init__(self, default_stale_time: float = 0.0, clock: Callable[[], float] = time.monotonic):
        self.default_stale_time = default_stale_time
        self._clock = clock
        self._entries: dict[QueryKey, QueryState] = {}
        self._inflight: dict[QueryKey, asyncio.Future] = {}
        self._generations: dict[QueryKey, int] = {}
        self.stats = CacheStats()

    def get_state(self, key: QueryKey) -> QueryState:
        return self._entries.get(key, QueryState())

    def get_data(self, key: QueryKey) -> Any:
        return self.get_state(key).data

    def set_data(self, key: QueryKey, data: Any) -> None:
        self._entries[key] = QueryState(
            status=QueryStatus.SUCCESS, data=data, updated_at=self._clock(), is_stale=False
        )

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    async def fetch(
        self,
        key: QueryKey,
        fn: QueryFn,
        stale_time: Optional[float] = None,
        enabled: bool = True,
    ) -> Any:
        if not enabled:
            return None

        stale_time = self.default_stale_time if stale_time is None else stale_time
        state = self._entries.get(key)
        if state is not None and state.is_fresh(stale_time, self._clock()):
            self.stats.hits += 1
            return state.data

        task = self._inflight.get(key)
        if task is None:
            self.stats.misses += 1
            self._entries[key] = replace(state or QueryState(), status=QueryStatus.LOADING, error=None)
            generation = self._generations.get(key, 0)
            task = asyncio.ensure_future(self._run(key, fn, generation))
            self._inflight[key] = task
        else:
            self.stats.deduplicated += 1

        return await asyncio.shield(task)

    def _is_current(self, key: QueryKey, generation: int) -> bool:
        return self._generations.get(key, 0) == generation

    def _detach(self, key: QueryKey) -> None:
        self._inflight.pop(key, None)
        self._generations[key] = self._generations.get(key, 0) + 1
        state = self._entries.get(key)
        if state is not None and state.is_loading:
            idle = QueryStatus.IDLE if state.updated_at is None else QueryStatus.SUCCESS
            self._entries[key] = replace(state, status=idle, is_stale=True)

    async def _run(self, key: QueryKey, fn: QueryFn, generation: int) -> Any:
        try:
            data = await fn()
        except Exception as exc:
            if self._is_current(key, generation):
                self._inflight.pop(key, None)
                previous = self._entries.get(key, QueryState())
                self._entries[key] = QueryState(
                    status=QueryStatus.ERROR,
                    data=previous.data,
                    error=exc,
                    updated_at=previous.updated_at,
                    is_stale=True,
                )
            raise

        if not self._is_current(key, generation):
            logger.debug(f"Dropped superseded result for {key!r}")
            return data

        self._inflight.pop(key, None)
        self._entries[key] = QueryState(
            status=QueryStatus.SUCCESS, data=data, updated_at=self._clock(), is_stale=False
        )
        return data

    def invalidate(self, prefix: Iterable[Any] = ()) -> int:
        """Mark every entry under `prefix` stale; an empty prefix means all."""
        prefix = tuple(prefix)
        for key in [k for k in self._inflight if key_matches(k, prefix)]:
            self._detach(key)

        count = 0
        for key, state in list(self._entries.items()):
            if key_matches(key, prefix):
                self._entries[key] = replace(state, is_stale=True)
                count += 1

        self.stats.invalidations += 1
        logger.debug(f"Invalidated {count} queries under {prefix!r}")
        return count

    def invalidate_many(self, prefixes: Iterable[Iterable[Any]]) -> int:
        return sum(self.invalidate(prefix) for prefix in prefixes)

    def remove(self, prefix: Iterable[Any] = ()) -> None:
        prefix = tuple(prefix)
        for key in [k for k in self._inflight if key_matches(k, prefix)]:
            self._detach(key)
        for key in [k for k in self._entries if key_matches(k, prefix)]:
            del self._entries[key]

    def clear(self) -> None:
        for key in list(self._inflight):
            self._detach(key)
        self._entries.clear()
        logger.debug("Query cache cleared")

    async def mutate(
        self,
        fn: QueryFn,
        invalidate: Iterable[Iterable[Any]] = (),
        on_success: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """Run a write; on success invalidate the given prefixes and return its result."""
        result = await fn()
        self.invalidate_many(invalidate)
        if on_success is not None:
            outcome = on_success(result)
            if inspect.isawaitable(outcome):
                await outcome
        return result
