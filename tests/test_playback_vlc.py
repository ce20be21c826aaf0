"""Tests for the VLC playback channels using fakes."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from ambient_mixer import playback_vlc
from ambient_mixer.errors import DuplicateOrInvalidSource


class FakeMediaPlayer:
    def __init__(self) -> None:
        self.volumes: list[int] = []
        self.released = False

    def audio_set_volume(self, volume: int) -> None:
        self.volumes.append(volume)

    def release(self) -> None:
        self.released = True


class FakeMediaList:
    def __init__(self) -> None:
        self.items: list[object] = []

    def add_media(self, media: object) -> None:
        self.items.append(media)


class FakeListPlayer:
    def __init__(self) -> None:
        self.player: FakeMediaPlayer | None = None
        self.media_list: FakeMediaList | None = None
        self.mode: object = None
        self.calls: list[str] = []

    def set_media_player(self, player: FakeMediaPlayer) -> None:
        self.player = player

    def set_media_list(self, media_list: FakeMediaList) -> None:
        self.media_list = media_list

    def set_playback_mode(self, mode: object) -> None:
        self.mode = mode

    def play(self) -> None:
        self.calls.append("play")

    def set_pause(self, flag: int) -> None:
        self.calls.append(f"set_pause({flag})")

    def release(self) -> None:
        self.calls.append("release")


class FakeInstance:
    def __init__(self) -> None:
        self.list_players: list[FakeListPlayer] = []

    def media_player_new(self) -> FakeMediaPlayer:
        return FakeMediaPlayer()

    def media_list_player_new(self) -> FakeListPlayer:
        player = FakeListPlayer()
        self.list_players.append(player)
        return player

    def media_list_new(self) -> FakeMediaList:
        return FakeMediaList()

    def media_new(self, path: str) -> object | None:
        return None if path.endswith("missing.ogg") else f"media:{path}"


class FakeVlc:
    PlaybackMode = SimpleNamespace(loop="loop")
    instance = FakeInstance()

    @staticmethod
    def Instance(*_args: str) -> FakeInstance:
        return FakeVlc.instance


@pytest.fixture
def fake_vlc(monkeypatch: pytest.MonkeyPatch) -> FakeInstance:
    FakeVlc.instance = FakeInstance()
    monkeypatch.setattr(playback_vlc, "vlc", FakeVlc)
    monkeypatch.setattr(playback_vlc, "_VLC_IMPORT_ERROR", None)
    return FakeVlc.instance


def test_channel_loops_appended_source(fake_vlc: FakeInstance) -> None:
    channel = playback_vlc.VlcOutput().connect()
    channel.append("rain.ogg")
    list_player = fake_vlc.list_players[0]
    assert channel.source == "rain.ogg"
    assert list_player.mode == "loop"
    assert list_player.media_list is not None
    assert list_player.media_list.items == ["media:rain.ogg"]


def test_channels_are_independent(fake_vlc: FakeInstance) -> None:
    output = playback_vlc.VlcOutput()
    first = output.connect()
    second = output.connect()
    first.play()
    second.pause()
    assert fake_vlc.list_players[0].calls == ["play"]
    assert fake_vlc.list_players[1].calls == ["set_pause(1)"]


def test_append_invalid_media_raises(fake_vlc: FakeInstance) -> None:
    channel = playback_vlc.VlcOutput().connect()
    with pytest.raises(DuplicateOrInvalidSource):
        channel.append("missing.ogg")


def test_release_frees_both_players(fake_vlc: FakeInstance) -> None:
    channel = playback_vlc.VlcOutput().connect()
    channel.release()
    list_player = fake_vlc.list_players[0]
    assert list_player.calls == ["release"]
    assert list_player.player is not None
    assert list_player.player.released is True


def test_gain_maps_to_vlc_volume_and_is_reapplied_on_play(
    fake_vlc: FakeInstance,
) -> None:
    channel = playback_vlc.VlcOutput().connect()
    channel.set_gain(0.4)
    channel.play()
    player = fake_vlc.list_players[0].player
    assert player is not None
    assert player.volumes == [40, 40]
    channel.set_gain(3.0)
    assert channel.gain == 1.0
    assert player.volumes[-1] == 100


def test_pause_is_never_a_toggle(fake_vlc: FakeInstance) -> None:
    channel = playback_vlc.VlcOutput().connect()
    channel.pause()
    channel.pause()
    assert fake_vlc.list_players[0].calls == ["set_pause(1)", "set_pause(1)"]


def test_missing_vlc_raises_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(playback_vlc, "vlc", None)
    monkeypatch.setattr(playback_vlc, "_VLC_IMPORT_ERROR", RuntimeError("missing"))
    with pytest.raises(RuntimeError, match="VLC backend is unavailable"):
        playback_vlc.VlcOutput()


def test_load_vlc_import_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    import builtins

    original_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "vlc":
            raise ModuleNotFoundError("vlc")
        return original_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    monkeypatch.setattr(playback_vlc, "vlc", None)
    monkeypatch.setattr(playback_vlc, "_VLC_IMPORT_ERROR", None)
    playback_vlc._load_vlc()
    assert playback_vlc.vlc is None
    assert isinstance(playback_vlc._VLC_IMPORT_ERROR, ModuleNotFoundError)


@pytest.mark.vlc
def test_real_vlc_output_opens(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(playback_vlc, "vlc", None)
    monkeypatch.setattr(playback_vlc, "_VLC_IMPORT_ERROR", None)
    try:
        output = playback_vlc.VlcOutput()
    except RuntimeError as exc:
        pytest.skip(str(exc))
    channel = output.connect()
    channel.set_gain(0.5)
    channel.pause()
    assert channel.gain == 0.5
