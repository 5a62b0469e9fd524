from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

from zj.types import hex_preview, ts_str

if TYPE_CHECKING:
    from zj.keys import Key

DEFAULT_LOG_NAME = "debug.log"


class DebugLogger:
    """Optional debug log of key events, query changes and run decisions.

    Disabled until start() is called; every log_* method is a no-op while
    disabled. Never writes to stdout or the terminal.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else Path(DEFAULT_LOG_NAME)
        self.enabled = False
        self._fh = None

    def start(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self.path, "a", encoding="utf-8")
        self.enabled = True
        sep = f"\n{'='*60}\n  Session started: {time.strftime('%Y-%m-%d %H:%M:%S')}\n{'='*60}\n"
        self._fh.write(sep)
        self._fh.flush()

    def stop(self):
        self.enabled = False
        if self._fh:
            try:
                self._fh.close()
            except OSError:
                pass
        self._fh = None

    def _write(self, line: str):
        if not self.enabled or not self._fh:
            return
        self._fh.write(f"{ts_str(time.time())} | {line}\n")
        self._fh.flush()

    def log_event(self, text: str):
        self._write(text)

    def log_key(self, key: "Key"):
        if not self.enabled:
            return
        hex_str = hex_preview(key.raw) if key.raw else ""
        self._write(
            f"KEY {key.type.name:<9}"
            + (f" | hex: {hex_str}" if hex_str else "")
        )

    def log_query(self, query: bytes, match_count: int):
        if not self.enabled:
            return
        self._write(f"QUERY {query.decode('utf-8', 'replace')!r} -> {match_count} matches")

    def log_outcome(self, state: str, path: str | None):
        self._write(f"OUTCOME {state}" + (f" {path!r}" if path is not None else ""))
