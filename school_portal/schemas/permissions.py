from datetime import datetime
from typing import Optional
from school_portal.schemas.common import CamelModel
from school_portal.schemas.enums import Permission


class Role(CamelModel):
    id: str
    name: str
    display_name: str
    display_name_ar: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class Feature(CamelModel):
    id: str
    code: str
    name: str
    created_at: Optional[datetime] = None


class PermissionEntry(CamelModel):
    """One cell of the role x feature matrix as the server reports it."""

    role_id: str
    role_name: Optional[str] = None
    feature_id: str
    feature_code: Optional[str] = None
    permission: Permission = Permission.NONE
    branch_id: Optional[str] = None
    updated_at: Optional[datetime] = None


class PermissionAssignment(CamelModel):
    role_id: str
    feature_id: str
    permission: Permission


class UpdatePermissionsPayload(CamelModel):
    permissions: list[PermissionAssignment]
