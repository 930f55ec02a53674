from datetime import datetime
from typing import Optional
from school_portal.schemas.common import CamelModel
from school_portal.schemas.enums import Relationship


class ParentAssociation(CamelModel):
    id: str
    parent_user_id: str
    student_id: str
    relationship: Relationship
    is_primary: bool = False
    can_approve: bool = True
    created_at: Optional[datetime] = None
    parent_name: Optional[str] = None
    student_name: Optional[str] = None
    student_student_id: Optional[str] = None


class ParentAssociationCreate(CamelModel):
    parent_user_id: str
    student_id: str
    relationship: Relationship
    is_primary: bool = False
    can_approve: bool = True

    def to_payload(self) -> dict:
        # the parent goes in the URL, not the body
        return self.model_dump(by_alias=True, mode="json", exclude={"parent_user_id"})


class ParentAssociationQuery(CamelModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    parent_id: Optional[str] = None
    student_id: Optional[str] = None
