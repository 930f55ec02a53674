import logging
from typing import Callable, Optional
from school_portal.theme import palette
from school_portal.theme.stylesheet import component_colors, css_variables, render_stylesheet

logger = logging.getLogger(__name__)

COLOR_SCHEMES = ("light", "dark")

ThemeListener = Callable[["ThemeContext"], None]


class ThemeContext:
    """Current primary colour and colour scheme, passed explicitly to consumers.

    `version` increases on every change so cached renderings can tell when to
    rebuild. Listeners are called synchronously after each change.
    """

    def __init__(self, primary_color: str = palette.DEFAULT_PRIMARY_COLOR, color_scheme: str = "light"):
        self._primary = palette.validate_primary_color(primary_color)
        self._scheme = color_scheme if color_scheme in COLOR_SCHEMES else "light"
        self.version = 0
        self._listeners: list[ThemeListener] = []

    @classmethod
    def from_settings(cls, settings) -> "ThemeContext":
        return cls(settings.THEME_PRIMARY_COLOR, settings.THEME_COLOR_SCHEME)

    @property
    def primary_color(self) -> str:
        return self._primary

    @property
    def color_scheme(self) -> str:
        return self._scheme

    @property
    def is_dark(self) -> bool:
        return self._scheme == "dark"

    def set_primary_color(self, color: str) -> str:
        self._primary = palette.validate_primary_color(color)
        self._changed()
        logger.info(f"Primary color set to {self._primary} (v{self.version})")
        return self._primary

    def set_color_scheme(self, scheme: str) -> None:
        if scheme not in COLOR_SCHEMES:
            raise ValueError(f"Unknown color scheme: {scheme}")
        self._scheme = scheme
        self._changed()

    def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        self.version += 1
        for listener in list(self._listeners):
            listener(self)

    def colors(self) -> dict[str, str]:
        return palette.generate_theme_colors(self._primary, self.is_dark)

    def semantic_colors(self) -> dict[str, str]:
        return palette.semantic_colors(self._primary)

    def components(self) -> dict[str, dict[str, str]]:
        return component_colors(self.colors(), self.is_dark)

    def shade(self, index: int = 8) -> str:
        return palette.shade(self._primary, index)

    def shades(self) -> list[str]:
        return palette.primary_shades(self._primary)

    def css_variables(self) -> dict[str, str]:
        colors = self.colors()
        return css_variables(colors, component_colors(colors, self.is_dark))

    def stylesheet(self, primary: Optional[str] = None) -> str:
        return render_stylesheet(primary or self._primary, self.is_dark)
