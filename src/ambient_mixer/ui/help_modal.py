"""Help modal for the ambient mixer."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from rich.text import Text
from textual.app import ComposeResult
from textual import events
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static


_SECTION_ACTIONS: dict[str, list[str]] = {
    "Channels": [
        "select_previous",
        "select_next",
        "volume_up",
        "volume_down",
    ],
    "All channels": [
        "volume_up_all",
        "volume_down_all",
        "toggle_pause",
    ],
    "General": [
        "show_help",
        "quit_app",
    ],
    "Troubleshooting": [
        "dump_threads",
    ],
}

_ACTION_OVERRIDES: dict[str, str] = {
    "toggle_pause": "Master pause / resume",
    "show_help": "Open help",
}


def _format_key(key: str) -> str:
    key_map = {
        "left": "←",
        "right": "→",
        "up": "↑",
        "down": "↓",
        "space": "Space",
    }
    if key in key_map:
        return key_map[key]
    parts = key.split("+")
    formatted: list[str] = []
    for part in parts:
        if part in key_map:
            formatted.append(key_map[part])
        elif len(part) == 1:
            formatted.append(part.upper())
        else:
            formatted.append(part.capitalize())
    return "+".join(formatted)


def build_help_text(bindings: Iterable[Binding]) -> Text:
    by_action: dict[str, list[str]] = defaultdict(list)
    by_desc: dict[str, str] = {}
    for binding in bindings:
        by_action[binding.action].append(binding.key)
        if binding.description:
            by_desc[binding.action] = binding.description

    content = Text()
    first_section = True
    for section, actions in _SECTION_ACTIONS.items():
        if not first_section:
            content.append("\n")
        first_section = False
        content.append(f"{section}\n", style="bold #5fc9d6")
        for action in actions:
            keys = by_action.get(action)
            if not keys:
                continue
            key_text = ", ".join(_format_key(key) for key in keys)
            label = _ACTION_OVERRIDES.get(action, by_desc.get(action, action))
            content.append(f"{key_text} — {label}\n")

        if section == "Troubleshooting":
            content.append(
                "Logs — %LOCALAPPDATA%/AmbientMixer/logs or ~/.ambient_mixer/logs\n"
            )
    return content


class HelpModal(ModalScreen[None]):
    """Help modal listing keybinds."""

    def __init__(self, bindings: Iterable[Binding]) -> None:
        super().__init__()
        self._help_bindings = list(bindings)

    def compose(self) -> ComposeResult:
        content = build_help_text(self._help_bindings)
        with Vertical(id="help_modal"):
            yield Static("Ambient Mixer Help", id="help_title")
            with VerticalScroll(id="help_scroll"):
                yield Static(content, id="help_content")
            with Horizontal(id="help_footer"):
                yield Static("Esc/q — Close", id="help_hint")
                yield Button("Close", id="help_close")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "help_close":
            self.dismiss(None)

    def on_key(self, event: events.Key) -> None:
        if event.key in {"escape", "q"}:
            event.stop()
            self.dismiss(None)
