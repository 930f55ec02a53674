from typing import Optional
from pydantic import Field
from school_portal.schemas.common import CamelModel


class Tenant(CamelModel):
    id: str
    name: str
    code: str
    domain: Optional[str] = None
    is_active: Optional[bool] = None


class TenantUpdate(CamelModel):
    name: str = Field(min_length=1)
