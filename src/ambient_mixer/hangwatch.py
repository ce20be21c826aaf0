"""Fault dumps for crashes and stuck sessions."""

from __future__ import annotations

import faulthandler
import logging
import threading
import time
from pathlib import Path
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

FAULT_FILE_NAME = "faultdump.log"

_FAULT_FILE: Optional[TextIO] = None
_LOCK = threading.Lock()


def enable_faulthandler(log_path: Path) -> Path:
    """Route fatal tracebacks to a dump file beside ``log_path``."""
    fault_path = log_path.parent / FAULT_FILE_NAME
    global _FAULT_FILE
    try:
        fault_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(fault_path, "a", encoding="utf-8")
    except OSError:
        logger.warning("Cannot open fault dump file %s", fault_path)
        return fault_path
    with _LOCK:
        if _FAULT_FILE is not None:
            _FAULT_FILE.close()
        _FAULT_FILE = handle
    faulthandler.enable(file=handle, all_threads=True)
    return fault_path


def dump_threads(label: str) -> None:
    """Write a labeled stack dump of every thread."""
    with _LOCK:
        handle = _FAULT_FILE
        if handle is None:
            return
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        try:
            handle.write(f"\n[{stamp}] {label}\n")
            faulthandler.dump_traceback(file=handle, all_threads=True)
            handle.flush()
        except (OSError, ValueError):
            logger.exception("Thread dump failed")
