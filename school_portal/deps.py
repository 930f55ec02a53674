from typing import Annotated
from fastapi import Depends, HTTPException, Request, status
from school_portal.theme.context import ThemeContext


def get_theme(request: Request) -> ThemeContext:
    theme = getattr(request.app.state, "theme", None)
    if theme is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Theme is not initialised",
        )
    return theme


Theme = Annotated[ThemeContext, Depends(get_theme)]
