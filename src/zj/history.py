"""Directory visit history kept in a plain data file.

The shell hooks append one `<unix-seconds>:<absolute path>` line per visit.
Loading aggregates the lines per path, drops directories that no longer
exist and compacts the file once it holds too many distinct paths.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from zj.scoring import current_timestamp, frecency
from zj.types import HistoryEntry

MAX_ENTRIES = 1000
PRUNE_TARGET = 800  # entries kept after pruning
MAX_FILE_SIZE = 10 * 1024 * 1024


@dataclass
class VisitData:
    count: int
    latest_timestamp: int


def parse_data_line(line: str) -> tuple[int, str] | None:
    """Parse one `timestamp:path` line, or None if it is malformed."""
    colon = line.find(":")
    if colon <= 0 or colon >= len(line) - 1:
        return None
    try:
        timestamp = int(line[:colon])
    except ValueError:
        return None
    path = line[colon + 1 :]
    if not path.startswith("/"):
        return None
    return timestamp, path


def parse_data_lines(lines: Iterable[str]) -> dict[str, VisitData]:
    """Aggregate visit lines per path, in order of first appearance."""
    visits: dict[str, VisitData] = {}
    for line in lines:
        if not line:
            continue
        parsed = parse_data_line(line)
        if parsed is None:
            continue
        timestamp, path = parsed
        data = visits.get(path)
        if data is None:
            visits[path] = VisitData(count=1, latest_timestamp=timestamp)
        else:
            data.count += 1
            if timestamp > data.latest_timestamp:
                data.latest_timestamp = timestamp
    return visits


def _decoded_lines(raw: bytes):
    for raw_line in raw.split(b"\n"):
        try:
            yield raw_line.decode("utf-8")
        except UnicodeDecodeError:
            continue


def parse_data_file(path: str | Path) -> dict[str, VisitData]:
    """Read and aggregate the data file. Lines that are not UTF-8 are skipped.

    Raises FileNotFoundError if the file does not exist.
    """
    with open(path, "rb") as f:
        raw = f.read(MAX_FILE_SIZE)
    return parse_data_lines(_decoded_lines(raw))


def read_known_paths(path: str | Path) -> set[str]:
    """Every path mentioned in the data file, valid or not. Empty if missing."""
    try:
        with open(path, "rb") as f:
            raw = f.read(MAX_FILE_SIZE)
    except (FileNotFoundError, NotADirectoryError):
        return set()
    known = set()
    for line in _decoded_lines(raw):
        colon = line.find(":")
        if colon < 0 or colon >= len(line) - 1:
            continue
        known.add(line[colon + 1 :])
    return known


def prune_entries(entries: list[HistoryEntry], keep: int, now: int) -> list[HistoryEntry]:
    """Keep the `keep` entries with the highest frecency."""
    ranked = sorted(
        entries,
        key=lambda e: frecency(e.visit_count, e.timestamp, now),
        reverse=True,
    )
    return ranked[:keep]


def write_data_file(path: str | Path, entries: Iterable[HistoryEntry]):
    """Rewrite the data file with one line per entry."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for entry in entries:
            f.write(f"{entry.timestamp}:{entry.path}\n")


def append_visits(path: str | Path, paths: Iterable[str], timestamp: int):
    """Append one visit line per path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        for p in paths:
            f.write(f"{timestamp}:{p}\n")


def _warn_stderr(message: str):
    print(f"zj: {message}", file=sys.stderr)


def load_history(
    path: str | Path,
    now: int | None = None,
    max_entries: int = MAX_ENTRIES,
    prune_target: int = PRUNE_TARGET,
    is_dir: Callable[[str], bool] = os.path.isdir,
    warn: Callable[[str], None] | None = None,
) -> list[HistoryEntry]:
    """Load history entries for directories that still exist.

    A missing data file means no history yet. When more than max_entries
    directories remain, the list is pruned to prune_target by frecency and
    the file is rewritten in compacted form. A failed rewrite is reported
    through warn (stderr by default) and the pruned list is still returned.
    """
    try:
        visits = parse_data_file(path)
    except (FileNotFoundError, NotADirectoryError):
        return []

    entries = [
        HistoryEntry(path=p, timestamp=data.latest_timestamp, visit_count=data.count)
        for p, data in visits.items()
        if is_dir(p)
    ]

    if len(entries) > max_entries:
        if now is None:
            now = current_timestamp()
        entries = prune_entries(entries, prune_target, now)
        try:
            write_data_file(path, entries)
        except OSError as e:
            (warn or _warn_stderr)(f"could not compact history file {path}: {e}")

    return entries
