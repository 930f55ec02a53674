from datetime import datetime
from typing import Any, Optional
from school_portal.schemas.common import CamelModel
from school_portal.schemas.enums import NotificationType


class Notification(CamelModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    body: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    is_read: bool = False
    created_at: Optional[datetime] = None


class NotificationQuery(CamelModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    is_read: Optional[bool] = None
    type: Optional[NotificationType] = None
