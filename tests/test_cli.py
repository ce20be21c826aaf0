"""Tests for CLI parsing and dispatch."""

from __future__ import annotations

from pathlib import Path

import pytest

from ambient_mixer import cli
from ambient_mixer.config import AppConfig
from ambient_mixer.discovery import SoundSource
from fakes import FakeOutput

_install_exception_hooks = cli._install_exception_hooks


@pytest.fixture(autouse=True)
def quiet_startup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "init_logging", lambda: Path("app.log"))
    monkeypatch.setattr(cli, "enable_faulthandler", lambda _: Path("faultdump.log"))
    monkeypatch.setattr(cli, "_install_exception_hooks", lambda: None)
    monkeypatch.setattr(cli, "load_config", lambda: AppConfig())


def _sources(*names: str) -> list[SoundSource]:
    return [SoundSource(path=Path(name), label=Path(name).stem) for name in names]


def test_parse_defaults() -> None:
    args = cli.build_parser().parse_args([])
    assert args.paths == []
    assert args.granularity is None
    assert args.start_volume is None


def test_parse_options() -> None:
    args = cli.build_parser().parse_args(["a", "b", "-g", "10", "--start-volume", "3"])
    assert args.paths == ["a", "b"]
    assert args.granularity == 10
    assert args.start_volume == 3


def test_zero_granularity_rejected(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.build_parser().parse_args(["--granularity", "0"])
    assert excinfo.value.code == 2
    assert "must be >= 1" in capsys.readouterr().err


def test_main_reports_no_media(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    ran: list[object] = []
    monkeypatch.setattr(cli, "discover_sources", lambda roots: [])
    monkeypatch.setattr(cli, "_run_tui", lambda mixer: ran.append(mixer) or 0)
    exit_code = cli.main(["nowhere"])
    assert exit_code == 1
    assert "no media found" in capsys.readouterr().err
    assert ran == []


def test_main_uses_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    seen_roots: list[list[str]] = []
    captured: list[object] = []

    def fake_discover(roots):
        seen_roots.append(list(roots))
        return _sources("rain.ogg", "city.ogg")

    monkeypatch.setattr(
        cli, "load_config", lambda: AppConfig(sound_dirs=("ambience",), granularity=5)
    )
    monkeypatch.setattr(cli, "discover_sources", fake_discover)
    monkeypatch.setattr(cli, "VlcOutput", FakeOutput)
    monkeypatch.setattr(cli, "_run_tui", lambda mixer: captured.append(mixer) or 0)
    assert cli.main(["--start-volume", "9"]) == 0
    assert seen_roots == [["ambience"]]
    mixer = captured[0]
    assert mixer.registry.granularity == 5
    assert [c.volume for c in mixer.registry] == [5, 5]


def test_main_handles_audio_output_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def boom():
        raise RuntimeError("no audio device")

    monkeypatch.setattr(cli, "discover_sources", lambda roots: _sources("rain.ogg"))
    monkeypatch.setattr(cli, "VlcOutput", boom)
    assert cli.main([]) == 1
    assert "no audio device" in capsys.readouterr().err


def test_main_fails_when_no_source_loads(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "discover_sources", lambda roots: _sources("bad.ogg"))
    monkeypatch.setattr(cli, "VlcOutput", lambda: FakeOutput(fail_on={"bad.ogg"}))
    assert cli.main([]) == 1
    assert "no media found" in capsys.readouterr().err


def test_run_tui_handles_import_error(monkeypatch, capsys) -> None:
    import builtins

    original_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "ambient_mixer.tui":
            raise ImportError("boom")
        return original_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    assert cli._run_tui(object()) == 1  # type: ignore[arg-type]
    assert "boom" in capsys.readouterr().err


def test_thread_exceptions_dump_threads(monkeypatch: pytest.MonkeyPatch) -> None:
    import sys
    import threading
    from types import SimpleNamespace

    calls: list[str] = []
    monkeypatch.setattr(cli, "dump_threads", calls.append)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    _install_exception_hooks()
    fake_args = SimpleNamespace(
        exc_type=RuntimeError,
        exc_value=RuntimeError("boom"),
        exc_traceback=None,
        thread=SimpleNamespace(name="worker"),
    )
    threading.excepthook(fake_args)
    assert calls == ["thread exception in worker"]
