"""Status line controller for the TUI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from rich.text import Text

from ambient_mixer.ui.mixer_render import ellipsize

KEY_HINT = "↑↓: select  ←→: volume  Shift+←→: all  Space: pause  ?: help  q: quit"
PAUSED_HINT = "Master pause on  Space: resume  ?: help  q: quit"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: str
    until: Optional[float]


class StatusLine:
    """Transient messages over a key hint fallback."""

    def __init__(self, now: Callable[[], float]) -> None:
        self._now = now
        self._message: Optional[StatusMessage] = None

    @property
    def message(self) -> Optional[StatusMessage]:
        return self._current_message()

    def show_message(
        self,
        text: str,
        *,
        level: str = "info",
        timeout: Optional[float] = None,
    ) -> None:
        if timeout is None:
            timeout = 6.0 if level in {"warn", "error"} else 2.0
        until = None if timeout == 0 else self._now() + max(0.0, timeout)
        self._message = StatusMessage(text=text, level=level, until=until)

    def clear_message(self) -> None:
        self._message = None

    def render_line(self, width: int, *, paused: bool = False) -> Text:
        message = self._current_message()
        if message:
            line = ellipsize(message.text, width)
            if message.level == "warn":
                return Text(line, style="#ffcc66")
            if message.level == "error":
                return Text(line, style="#ff5f52")
            return Text(line)
        hint = PAUSED_HINT if paused else KEY_HINT
        return Text(ellipsize(hint, width), style="dim")

    def _current_message(self) -> Optional[StatusMessage]:
        if not self._message:
            return None
        if self._message.until is None or self._message.until > self._now():
            return self._message
        self._message = None
        return None
