"""View model handed from the mixer state to the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

from ambient_mixer.mixer import MixerState
from ambient_mixer.ui.viewport import window


@dataclass(frozen=True)
class ChannelRow:
    label: str
    ratio: float
    is_selected: bool
    level: int = 0


@dataclass(frozen=True)
class MixerView:
    title: str
    paused: bool
    rows: list[ChannelRow] = field(default_factory=list)
    per_item_height: int = 1


def build_view(state: MixerState, available_height: int, *, title: str) -> MixerView:
    """Snapshot the rows that fit in ``available_height`` lines."""
    registry = state.registry
    indices, per_item_height = window(len(registry), state.selected, available_height)
    rows = []
    for index in indices:
        channel = registry.get(index)
        rows.append(
            ChannelRow(
                label=channel.label,
                ratio=registry.gain_for(channel.volume),
                is_selected=index == state.selected,
                level=channel.volume,
            )
        )
    return MixerView(
        title=title,
        paused=state.paused,
        rows=rows,
        per_item_height=per_item_height,
    )
