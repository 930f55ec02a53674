import logging
from typing import Any, Callable, Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.notifications import Notification, NotificationQuery
from school_portal.services.base import API_PREFIX, ResourceService, as_model
from school_portal.services.polling import Poller
from school_portal.services.query_cache import make_key

logger = logging.getLogger(__name__)

BASE = f"{API_PREFIX}/notifications"

ALL_KEY = ("notifications",)
UNREAD_POLL_JOB = "notifications-unread-count"


def _total(response: ApiResponse) -> int:
    if response.meta is not None:
        return response.meta.total
    return len(response.data or [])


class NotificationService(ResourceService):
    """Notifications of the signed-in user; scoped by user, not by branch."""

    @property
    def user_id(self) -> Optional[str]:
        session = self.session.session
        return session.user_id if session else None

    def unread_count_key(self) -> tuple:
        return ("notifications", "unread-count", self.user_id)

    async def list(self, query: Union[NotificationQuery, dict, None] = None) -> Optional[ApiResponse]:
        query = as_model(NotificationQuery, query)

        async def fetch():
            return await self.api.get(BASE, params=query, model=list[Notification])

        return await self._query(
            make_key("notifications", self.user_id, query), fetch, enabled=bool(self.user_id)
        )

    async def get(self, notification_id: str) -> Optional[Notification]:
        async def fetch():
            response = await self.api.get(f"{BASE}/{notification_id}", model=Notification)
            return response.data

        return await self._query(
            ("notification", notification_id, self.user_id),
            fetch,
            enabled=bool(notification_id and self.user_id),
        )

    async def unread_count(self) -> int:
        """Total minus read, both taken from `meta.total` of one-row pages."""

        async def fetch():
            everything = await self.api.get(BASE, params={"limit": 1})
            read = await self.api.get(BASE, params={"isRead": True, "limit": 1})
            return max(_total(everything) - _total(read), 0)

        count = await self._query(self.unread_count_key(), fetch, enabled=bool(self.user_id))
        return count or 0

    async def mark_read(self, notification_id: str) -> Notification:
        async def send():
            response = await self.api.put(f"{BASE}/{notification_id}/read", json={}, model=Notification)
            return response.data

        return await self._mutate(
            send,
            invalidate=[ALL_KEY],
            failure="Failed to mark notification as read",
        )

    async def mark_all_read(self) -> None:
        async def send():
            await self.api.put(f"{BASE}/read-all", json={})

        await self._mutate(
            send,
            invalidate=[ALL_KEY],
            success="All notifications marked as read",
            failure="Failed to mark all notifications as read",
        )

    def watch_unread_count(
        self,
        poller: Poller,
        seconds: float = 30,
        on_change: Optional[Callable[[int], Any]] = None,
    ) -> None:
        """Refetch the unread count every `seconds` until `unwatch_unread_count`."""
        last = {"count": None}

        async def refresh():
            self.cache.invalidate(self.unread_count_key())
            try:
                count = await self.unread_count()
            except Exception as e:
                logger.error(f"Unread count refresh failed: {e}")
                return
            if on_change is not None and count != last["count"]:
                on_change(count)
            last["count"] = count

        poller.start(UNREAD_POLL_JOB, refresh, seconds)

    def unwatch_unread_count(self, poller: Poller) -> None:
        poller.stop(UNREAD_POLL_JOB)
