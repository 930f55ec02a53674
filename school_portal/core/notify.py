import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

FALLBACK_COLORS = {
    "success": "#4caf50",
    "error": "#f44336",
    "warning": "#ff9800",
    "info": "#e4f4f5",
}


@dataclass(frozen=True)
class Toast:
    title: str
    message: str
    level: str
    color: str


class Notifier:
    """User-facing success/error messages, coloured from the active theme."""

    def __init__(self, theme: Any = None, sink: Optional[Callable[[Toast], Any]] = None, history_size: int = 50):
        self.theme = theme
        self.sink = sink
        self.history: deque[Toast] = deque(maxlen=history_size)

    def _color(self, level: str) -> str:
        if self.theme is None:
            return FALLBACK_COLORS[level]
        return self.theme.semantic_colors()[level]

    def show(self, level: str, title: str, message: str) -> Toast:
        toast = Toast(title=title, message=message, level=level, color=self._color(level))
        self.history.append(toast)

        if level == "error":
            logger.error(f"{title}: {message}")
        elif level == "warning":
            logger.warning(f"{title}: {message}")
        else:
            logger.info(f"{title}: {message}")

        if self.sink is not None:
            self.sink(toast)
        return toast

    def success(self, message: str, title: str = "Success") -> Toast:
        return self.show("success", title, message)

    def error(self, message: str, title: str = "Error") -> Toast:
        return self.show("error", title, message)

    def warning(self, message: str, title: str = "Warning") -> Toast:
        return self.show("warning", title, message)

    def info(self, message: str, title: str = "Info") -> Toast:
        return self.show("info", title, message)
