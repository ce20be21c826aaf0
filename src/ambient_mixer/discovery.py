"""Sound source discovery."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from mutagen import File as MutagenFile, MutagenError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".mp3", ".flac", ".wav", ".ogg", ".m4a", ".aac"}


@dataclass(frozen=True)
class SoundSource:
    """A playable file and the label shown for it."""

    path: Path
    label: str


def discover_sources(roots: Iterable[Path | str]) -> list[SoundSource]:
    """Collect decodable sound files from files or folders (recursive).

    Missing roots and files that cannot be read or decoded are logged and
    skipped. A file reachable through several roots is returned once.
    """
    found: list[SoundSource] = []
    seen: set[Path] = set()
    for root in roots:
        path = Path(root)
        if not path.exists():
            logger.warning("Sound root %s does not exist", path)
            continue
        for item in _walk_sound_files(path):
            resolved = _safe_resolve(item)
            if resolved in seen:
                continue
            seen.add(resolved)
            if not is_decodable(item):
                continue
            found.append(SoundSource(path=item, label=label_for(item)))
    logger.info("Discovered %d sound source(s)", len(found))
    return found


def label_for(path: Path) -> str:
    return path.stem or path.name


def is_decodable(path: Path) -> bool:
    """Probe the file header; unknown or broken files are rejected."""
    try:
        audio = MutagenFile(path)
    except (MutagenError, OSError) as exc:
        logger.warning("Skipping unreadable sound %s: %s", path, exc)
        return False
    if audio is None:
        logger.warning("Skipping undecodable sound %s", path)
        return False
    return True


def _walk_sound_files(path: Path) -> Iterator[Path]:
    if path.is_dir():
        for root, dirs, files in os.walk(path):
            dirs.sort(key=str.casefold)
            files.sort(key=str.casefold)
            for name in files:
                item = Path(root) / name
                if _is_supported(item):
                    yield item
        return
    if path.is_file():
        yield path


def _is_supported(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


def _safe_resolve(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path.absolute()
