"""faulthandler integration for post-mortem thread dumps."""

from __future__ import annotations

import faulthandler
import logging
import threading
import time
from pathlib import Path
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

_DUMP_FILE: Optional[TextIO] = None
_LOCK = threading.Lock()


def enable_faulthandler(log_path: Path) -> Path:
    """Route fatal-signal tracebacks to a dump file beside ``log_path``."""
    dump_path = log_path.parent / "crashdump.log"
    try:
        dump_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(dump_path, "a", encoding="utf-8")
    except OSError:
        logger.warning("Crash dumps disabled; cannot open %s", dump_path)
        return dump_path
    global _DUMP_FILE
    with _LOCK:
        _DUMP_FILE = handle
    faulthandler.enable(file=handle, all_threads=True)
    return dump_path


def dump_threads(label: str) -> None:
    """Write a timestamped header and the stacks of all threads."""
    with _LOCK:
        handle = _DUMP_FILE
        if handle is None:
            return
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        try:
            handle.write(f"\n[{stamp}] {label}\n")
            handle.flush()
            faulthandler.dump_traceback(file=handle, all_threads=True)
            handle.flush()
        except (OSError, ValueError):
            logger.warning("Failed to write thread dump for %s", label)
