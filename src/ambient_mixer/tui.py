"""Textual-based control loop for the ambient mixer."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional

try:
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.widget import Widget
    from textual.widgets import Header, Static
    from rich.text import Text
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from ambient_mixer.hangwatch import dump_threads
from ambient_mixer.logging_setup import set_console_level
from ambient_mixer.mixer import MixerState
from ambient_mixer.ui.help_modal import HelpModal
from ambient_mixer.ui.mixer_render import render_mixer_view, render_title
from ambient_mixer.ui.status_line import StatusLine
from ambient_mixer.ui.view_model import MixerView, build_view

logger = logging.getLogger(__name__)

APP_TITLE = "Ambient Mixer"
PANEL_TITLE = "Channels"


# UI components
class MixerPanel(Widget):
    """Channel gauges for the rows that fit the panel."""

    def __init__(self, mixer: MixerState, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._mixer = mixer

    def current_view(self) -> MixerView:
        return build_view(self._mixer, self.size.height, title=PANEL_TITLE)

    def render(self) -> Text:
        view = self.current_view()
        return render_mixer_view(view, max(1, self.size.width))


class StatusBar(Static):
    """Status bar widget."""

    def __init__(
        self, controller: StatusLine, paused: Callable[[], bool], **kwargs: Any
    ) -> None:
        super().__init__(**kwargs)
        self._controller = controller
        self._paused = paused

    def render(self) -> Text:
        width = max(1, self.size.width)
        return self._controller.render_line(width, paused=self._paused())


# Main application
class MixerApp(App):
    """Ambient mixer Textual application."""

    TITLE = APP_TITLE
    CSS = """
    #mixer_panel {
        height: 1fr;
        border: round #5fc9d6;
        padding: 0 1;
    }
    #status_bar {
        height: 1;
        padding: 0 1;
    }
    HelpModal {
        align: center middle;
    }
    #help_modal {
        width: 70;
        height: auto;
        max-height: 90%;
        border: round #5fc9d6;
        background: $surface;
        padding: 1 2;
    }
    #help_scroll {
        height: auto;
        max-height: 20;
    }
    #help_footer {
        height: auto;
    }
    """

    # --- Keybindings ---
    BINDINGS = [
        Binding("up", "select_previous", "Select Up"),
        Binding("k", "select_previous", "Select Up", show=False),
        Binding("down", "select_next", "Select Down"),
        Binding("j", "select_next", "Select Down", show=False),
        Binding("right", "volume_up", "Volume +1"),
        Binding("l", "volume_up", "Volume +1", show=False),
        Binding("left", "volume_down", "Volume -1"),
        Binding("h", "volume_down", "Volume -1", show=False),
        Binding("shift+right", "volume_up_all", "All +1"),
        Binding("shift+left", "volume_down_all", "All -1"),
        Binding("space", "toggle_pause", "Pause"),
        Binding("ctrl+shift+d", "dump_threads", "Dump Threads"),
        Binding("?", "show_help", "Help"),
        Binding("f1", "show_help", "Help"),
        Binding("q", "quit_app", "Quit"),
    ]

    # --- Lifecycle ---
    def __init__(
        self,
        *,
        mixer: MixerState,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self.mixer = mixer
        self._status = StatusLine(now)
        self._mixer_panel: Optional[MixerPanel] = None
        self._status_bar: Optional[StatusBar] = None
        self._render_count = 0

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield MixerPanel(self.mixer, id="mixer_panel")
        yield StatusBar(self._status, lambda: self.mixer.paused, id="status_bar")

    # --- Internal helpers ---
    def _install_asyncio_exception_handler(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        def handler(_loop: asyncio.AbstractEventLoop, context: dict) -> None:
            exc = context.get("exception")
            if exc:
                logger.exception("Asyncio exception", exc_info=exc)
            else:
                logger.error("Asyncio error: %s", context.get("message"))

        loop.set_exception_handler(handler)

    def _set_message(self, text: str, *, level: str = "info") -> None:
        self._status.show_message(text, level=level)

    @property
    def status_line(self) -> StatusLine:
        return self._status

    def _update_titles(self) -> None:
        if not self._mixer_panel:
            return
        count = len(self.mixer.registry)
        self.sub_title = render_title(f"{count} channels", self.mixer.paused)
        view = self._mixer_panel.current_view()
        self._mixer_panel.border_title = render_title(view.title, view.paused)

    def _refresh_view(self) -> None:
        self._render_count += 1
        self._update_titles()
        if self._mixer_panel:
            self._mixer_panel.refresh()
        if self._status_bar:
            self._status_bar.refresh()

    def _selected_label(self) -> str:
        return self.mixer.registry.get(self.mixer.selected).label

    # --- Actions ---
    def action_select_previous(self) -> None:
        self.mixer.move_selection(-1)
        self._refresh_view()

    def action_select_next(self) -> None:
        self.mixer.move_selection(1)
        self._refresh_view()

    def action_volume_up(self) -> None:
        level = self.mixer.adjust_selected(1)
        self._set_message(f"{self._selected_label()}: {level}")
        self._refresh_view()

    def action_volume_down(self) -> None:
        level = self.mixer.adjust_selected(-1)
        label = self._selected_label()
        self._set_message(f"{label}: muted" if level == 0 else f"{label}: {level}")
        self._refresh_view()

    def action_volume_up_all(self) -> None:
        self.mixer.adjust_all(1)
        self._set_message("All channels +1")
        self._refresh_view()

    def action_volume_down_all(self) -> None:
        self.mixer.adjust_all(-1)
        self._set_message("All channels -1")
        self._refresh_view()

    def action_toggle_pause(self) -> None:
        paused = self.mixer.toggle_pause()
        self._set_message("Master pause" if paused else "Resumed")
        self._refresh_view()

    def action_dump_threads(self) -> None:
        self._set_message("Dumping threads")
        logger.info("Manual thread dump requested")
        dump_threads("manual dump")
        self._refresh_view()

    def action_show_help(self) -> None:
        self.push_screen(HelpModal(self.BINDINGS))

    def action_quit_app(self) -> None:
        logger.info("TUI exit requested")
        self.exit()

    # --- Event handlers ---
    def on_mount(self) -> None:
        self._mixer_panel = self.query_one("#mixer_panel", MixerPanel)
        self._status_bar = self.query_one("#status_bar", StatusBar)
        self._install_asyncio_exception_handler()
        self.set_interval(0.5, self._tick_status)
        self._refresh_view()
        logger.info("TUI mounted with %d channel(s)", len(self.mixer.registry))

    def on_key(self, event: events.Key) -> None:
        bound = {binding.key for binding in self.BINDINGS}
        if event.key in bound or event.character in bound:
            return
        # Unbound keys leave the mixer alone but still redraw it.
        self._refresh_view()

    def on_resize(self) -> None:
        self._refresh_view()

    def _tick_status(self) -> None:
        if self._status_bar:
            self._status_bar.refresh()


# Public entrypoints
def run_tui(mixer: MixerState) -> int:
    """Run the TUI and return an exit code."""
    logger.info("TUI start channels=%d", len(mixer.registry))
    try:
        set_console_level(logging.WARNING)
    except Exception:
        logger.exception("Failed to set console log level for TUI")
    app = MixerApp(mixer=mixer)
    app.run()
    logger.info("TUI exit")
    return 0
