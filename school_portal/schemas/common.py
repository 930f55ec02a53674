from typing import Any, Generic, TypeVar, Optional, Union
from pydantic import AliasChoices, BaseModel, Field
from pydantic.alias_generators import to_camel


T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for every payload exchanged with the API (camelCase on the wire)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class PaginationMeta(CamelModel):
    total: int = 0
    page: int = 1
    limit: int = Field(default=20, validation_alias=AliasChoices("limit", "pageSize", "page_size"))
    total_pages: int = 0


class ErrorBody(BaseModel):
    code: Optional[Union[str, int]] = None
    message: Optional[Union[str, list[str]]] = None


class ApiResponse(BaseModel, Generic[T]):
    data: Optional[T] = None
    meta: Optional[PaginationMeta] = None
    error: Optional[ErrorBody] = None


class ListQuery(CamelModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    def to_params(self) -> dict[str, Any]:
        return self.to_payload()
