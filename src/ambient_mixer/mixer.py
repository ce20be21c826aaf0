"""Mixer control state: channels, selection, volume and master pause."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Iterator, Protocol

from ambient_mixer.discovery import SoundSource
from ambient_mixer.errors import DuplicateOrInvalidSource, NoMediaFound

logger = logging.getLogger(__name__)


class PlaybackChannel(Protocol):
    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def set_gain(self, gain: float) -> None:
        ...


class LoadablePlaybackChannel(PlaybackChannel, Protocol):
    def append(self, path: str) -> None:
        ...

    def release(self) -> None:
        ...


class PlaybackOutput(Protocol):
    def connect(self) -> LoadablePlaybackChannel:
        ...


@dataclass(eq=False)
class Channel:
    """One looping sound with its own volume level."""

    label: str
    playback: PlaybackChannel
    volume: int = 0


class ChannelRegistry:
    """Ordered channels sharing a single volume granularity."""

    def __init__(self, granularity: int) -> None:
        if granularity < 1:
            raise ValueError(f"granularity must be >= 1, got {granularity}")
        self._granularity = granularity
        self._channels: list[Channel] = []

    @property
    def granularity(self) -> int:
        return self._granularity

    def __len__(self) -> int:
        return len(self._channels)

    def __iter__(self) -> Iterator[Channel]:
        return iter(self._channels)

    def is_empty(self) -> bool:
        return not self._channels

    def get(self, index: int) -> Channel:
        if index < 0 or index >= len(self._channels):
            raise IndexError(f"channel index {index} out of range")
        return self._channels[index]

    def gain_for(self, level: int) -> float:
        return level / float(self._granularity)

    def add(
        self, label: str, playback: PlaybackChannel, initial_volume: int = 0
    ) -> Channel:
        """Append a channel and bring its playback in line with its volume."""
        volume = max(0, min(self._granularity, initial_volume))
        channel = Channel(label=label, playback=playback, volume=volume)
        if volume:
            playback.set_gain(self.gain_for(volume))
            playback.play()
        else:
            playback.pause()
        self._channels.append(channel)
        return channel


class SelectionCursor:
    """Cyclic selection over a non-empty registry."""

    def __init__(self, registry: ChannelRegistry, selected: int = 0) -> None:
        if registry.is_empty():
            raise ValueError("selection requires at least one channel")
        self._registry = registry
        self.selected = selected % len(registry)

    def move(self, delta: int) -> int:
        self.selected = (self.selected + delta) % len(self._registry)
        return self.selected


class MasterPause:
    """Session-wide pause that leaves stored volumes untouched."""

    def __init__(self, registry: ChannelRegistry) -> None:
        self._registry = registry
        self.paused = False

    def toggle(self) -> bool:
        self.paused = not self.paused
        if self.paused:
            for channel in self._registry:
                channel.playback.pause()
        else:
            for channel in self._registry:
                if channel.volume != 0:
                    channel.playback.play()
        logger.info("Master pause %s", "on" if self.paused else "off")
        return self.paused


class VolumeController:
    """Applies level deltas as gain and play/pause changes."""

    def __init__(self, registry: ChannelRegistry, master: MasterPause) -> None:
        self._registry = registry
        self._master = master

    def adjust(self, index: int, delta: int) -> int:
        channel = self._registry.get(index)
        granularity = self._registry.granularity
        level = max(0, min(granularity, channel.volume + delta))
        if level == 0:
            channel.playback.pause()
        else:
            channel.playback.set_gain(self._registry.gain_for(level))
            # Gain is kept while paused so resume picks it up.
            if not self._master.paused:
                channel.playback.play()
        channel.volume = level
        logger.debug("Channel %s volume=%s/%s", channel.label, level, granularity)
        return level

    def adjust_all(self, delta: int) -> None:
        for index in range(len(self._registry)):
            self.adjust(index, delta)


class MixerState:
    """All mutable mixer state for one session."""

    def __init__(self, registry: ChannelRegistry, selected: int = 0) -> None:
        self.registry = registry
        self.cursor = SelectionCursor(registry, selected)
        self.master = MasterPause(registry)
        self.volume = VolumeController(registry, self.master)

    @property
    def selected(self) -> int:
        return self.cursor.selected

    @property
    def paused(self) -> bool:
        return self.master.paused

    def move_selection(self, delta: int) -> int:
        return self.cursor.move(delta)

    def adjust_selected(self, delta: int) -> int:
        return self.volume.adjust(self.cursor.selected, delta)

    def adjust_all(self, delta: int) -> None:
        self.volume.adjust_all(delta)

    def toggle_pause(self) -> bool:
        return self.master.toggle()


def load_mixer(
    sources: Iterable[SoundSource],
    output: PlaybackOutput,
    *,
    granularity: int,
    start_volume: int = 0,
) -> MixerState:
    """Open a looping channel per source and return the session state.

    Sources whose playback cannot be created are logged and skipped. Raises
    NoMediaFound when nothing could be loaded.
    """
    registry = ChannelRegistry(granularity)
    for source in sources:
        handle = output.connect()
        try:
            handle.append(str(source.path))
        except DuplicateOrInvalidSource as exc:
            handle.release()
            logger.warning("Skipping %s: %s", source.path, exc)
            continue
        registry.add(source.label, handle, start_volume)
        logger.info("Loaded channel %s from %s", source.label, source.path)
    if registry.is_empty():
        raise NoMediaFound()
    return MixerState(registry)
