"""Fake playback collaborators shared by the tests."""

from __future__ import annotations

from pathlib import Path

from ambient_mixer.errors import DuplicateOrInvalidSource
from ambient_mixer.mixer import ChannelRegistry, MixerState


class FakePlayback:
    """Records the control calls the mixer issues to a channel."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.playing = False
        self.gain: float | None = None
        self.calls: list[str] = []
        self.source: str | None = None
        self.released = False
        self._fail_on = fail_on or set()

    def play(self) -> None:
        self.calls.append("play")
        self.playing = True

    def pause(self) -> None:
        self.calls.append("pause")
        self.playing = False

    def set_gain(self, gain: float) -> None:
        self.calls.append("set_gain")
        self.gain = gain

    def append(self, path: str) -> None:
        if Path(path).name in self._fail_on:
            raise DuplicateOrInvalidSource(f"cannot open {path}")
        self.source = path

    def release(self) -> None:
        self.released = True


class FakeOutput:
    def __init__(self, fail_on: set[str] | None = None) -> None:
        self._fail_on = fail_on or set()
        self.channels: list[FakePlayback] = []

    def connect(self) -> FakePlayback:
        channel = FakePlayback(self._fail_on)
        self.channels.append(channel)
        return channel


def make_mixer(
    volumes: list[int], *, granularity: int = 25, selected: int = 0
) -> MixerState:
    registry = ChannelRegistry(granularity)
    for index, volume in enumerate(volumes):
        registry.add(f"ch{index}", FakePlayback(), volume)
    return MixerState(registry, selected)


def playback(state: MixerState, index: int) -> FakePlayback:
    handle = state.registry.get(index).playback
    assert isinstance(handle, FakePlayback)
    return handle
