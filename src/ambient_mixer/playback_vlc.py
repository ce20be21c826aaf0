"""VLC-backed looping playback channels."""

from __future__ import annotations

from typing import Any, Optional, cast

from ambient_mixer.errors import DuplicateOrInvalidSource

vlc: Any | None = None
_VLC_IMPORT_ERROR: Optional[Exception] = None


def _load_vlc() -> None:
    global vlc
    global _VLC_IMPORT_ERROR
    if vlc is not None or _VLC_IMPORT_ERROR is not None:
        return
    try:
        import vlc as vlc_module  # type: ignore
    except Exception as exc:  # pragma: no cover - platform-dependent import
        vlc = None
        _VLC_IMPORT_ERROR = exc
    else:
        vlc = cast(Any, vlc_module)
        _VLC_IMPORT_ERROR = None


class VlcOutput:
    """Shared libVLC instance that channels connect to."""

    def __init__(self) -> None:
        _load_vlc()
        if vlc is None:
            raise RuntimeError(
                "VLC backend is unavailable. Install VLC and the python-vlc package."
            ) from _VLC_IMPORT_ERROR
        self._instance = cast(Any, vlc).Instance("--no-video")
        if self._instance is None:
            raise RuntimeError("Could not open the VLC audio output.")

    def connect(self) -> "VlcChannel":
        """Return a new, empty channel on this output."""
        return VlcChannel(self._instance)


class VlcChannel:
    """One media player looping a single source forever."""

    def __init__(self, instance: Any) -> None:
        self._instance = instance
        self._player = instance.media_player_new()
        self._list_player = instance.media_list_player_new()
        self._list_player.set_media_player(self._player)
        self._gain = 1.0
        self._source: Optional[str] = None

    @property
    def source(self) -> Optional[str]:
        return self._source

    @property
    def gain(self) -> float:
        return self._gain

    def append(self, path: str) -> None:
        """Queue a source and loop it without gaps."""
        media = self._instance.media_new(path)
        if media is None:
            raise DuplicateOrInvalidSource(f"cannot open media {path!r}")
        media_list = self._instance.media_list_new()
        media_list.add_media(media)
        self._list_player.set_media_list(media_list)
        self._list_player.set_playback_mode(cast(Any, vlc).PlaybackMode.loop)
        self._source = path

    def set_gain(self, gain: float) -> None:
        """Set the linear gain (0.0-1.0)."""
        self._gain = max(0.0, min(1.0, float(gain)))
        self._player.audio_set_volume(self._volume_percent())

    def play(self) -> None:
        """Start or resume playback."""
        self._list_player.play()
        # libVLC drops volume set before the audio output exists.
        self._player.audio_set_volume(self._volume_percent())

    def pause(self) -> None:
        """Pause playback; pausing a paused channel is a no-op."""
        self._list_player.set_pause(1)

    def release(self) -> None:
        """Free the libVLC players behind this channel."""
        self._list_player.release()
        self._player.release()

    def _volume_percent(self) -> int:
        return int(round(self._gain * 100))
