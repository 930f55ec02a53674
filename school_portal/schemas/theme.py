from typing import Optional
from pydantic import BaseModel, Field


class ThemeRead(BaseModel):
    primary_color: str
    color_scheme: str
    version: int
    colors: dict[str, str]
    semantic: dict[str, str]
    shades: list[str]
    components: dict[str, dict[str, str]]


class ThemeUpdate(BaseModel):
    primary_color: str = Field(pattern=r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
    color_scheme: Optional[str] = Field(default=None, pattern=r"^(light|dark)$")
