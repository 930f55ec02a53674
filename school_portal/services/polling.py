import logging
from typing import Any, Awaitable, Callable
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


class Poller:
    """Fixed-interval background refetch jobs on an AsyncIOScheduler."""

    def __init__(self, scheduler: AsyncIOScheduler):
        self.scheduler = scheduler
        self._names: set[str] = set()

    def start(self, name: str, func: Callable[[], Awaitable[Any]], seconds: float) -> None:
        # pending jobs of a stopped scheduler are not deduplicated by replace_existing
        if self.scheduler.get_job(name) is not None:
            self.scheduler.remove_job(name)
        self.scheduler.add_job(
            func,
            trigger=IntervalTrigger(seconds=seconds),
            id=name,
            name=name,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._names.add(name)
        logger.info(f"Polling '{name}' every {seconds}s")

    def stop(self, name: str) -> None:
        if self.scheduler.get_job(name) is not None:
            self.scheduler.remove_job(name)
            logger.info(f"Stopped polling '{name}'")
        self._names.discard(name)

    def stop_all(self) -> None:
        for name in list(self._names):
            self.stop(name)

    def is_running(self, name: str) -> bool:
        return self.scheduler.get_job(name) is not None
