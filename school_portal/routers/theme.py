from fastapi import APIRouter
from fastapi.responses import Response
from school_portal.deps import Theme
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.theme import ThemeRead, ThemeUpdate
from school_portal.theme.context import ThemeContext

router = APIRouter(prefix="/theme", tags=["Theme"])


def _read(theme: ThemeContext) -> ThemeRead:
    return ThemeRead(
        primary_color=theme.primary_color,
        color_scheme=theme.color_scheme,
        version=theme.version,
        colors=theme.colors(),
        semantic=theme.semantic_colors(),
        shades=theme.shades(),
        components=theme.components(),
    )


@router.get("", response_model=ApiResponse[ThemeRead])
async def get_theme(theme: Theme):
    return ApiResponse[ThemeRead](data=_read(theme))


@router.get("/stylesheet.css")
async def get_stylesheet(theme: Theme):
    return Response(
        content=theme.stylesheet(),
        media_type="text/css",
        headers={"ETag": f'"theme-{theme.version}"'},
    )


@router.put("", response_model=ApiResponse[ThemeRead])
async def update_theme(data: ThemeUpdate, theme: Theme):
    theme.set_primary_color(data.primary_color)
    if data.color_scheme is not None and data.color_scheme != theme.color_scheme:
        theme.set_color_scheme(data.color_scheme)
    return ApiResponse[ThemeRead](data=_read(theme))
