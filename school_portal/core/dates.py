from datetime import date, datetime
from typing import Optional, Union
import pytz
from school_portal.core.config import settings


def school_now(tz_name: Optional[str] = None) -> datetime:
    return datetime.now(pytz.timezone(tz_name or settings.TIMEZONE))


def school_today(tz_name: Optional[str] = None) -> date:
    """Calendar date at the school, which can differ from the server's UTC date."""
    return school_now(tz_name).date()


def as_date(value: Union[str, date, None]) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)
