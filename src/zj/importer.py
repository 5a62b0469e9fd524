"""Seed the visit history from `cd` commands in a shell history file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping

from zj import history
from zj.scoring import current_timestamp

MAX_HISTORY_FILE_SIZE = 50 * 1024 * 1024

_COMMAND_SEPARATORS = (" #", " &&", " ||", " ;", " |")


class ImportSource(Enum):
    ZSH = "zsh"
    BASH = "bash"

    @property
    def default_filename(self) -> str:
        return f".{self.value}_history"


@dataclass
class ImportResult:
    imported_count: int = 0
    skipped_count: int = 0
    already_exists_count: int = 0

    def summary(self) -> str:
        msg = f"Done! Imported {self.imported_count} directories"
        if self.skipped_count:
            msg += f" (skipped {self.skipped_count} relative/invalid paths)"
        if self.already_exists_count:
            msg += f" ({self.already_exists_count} already in history)"
        return msg + "."


def _home(environ: Mapping[str, str]) -> str:
    return environ.get("HOME") or str(Path.home())


def get_shell_history_path(source: ImportSource, environ: Mapping[str, str] | None = None) -> str:
    """$HISTFILE if set, otherwise the shell's default history file in $HOME."""
    env = os.environ if environ is None else environ
    histfile = env.get("HISTFILE")
    if histfile:
        return histfile
    return os.path.join(_home(env), source.default_filename)


def extract_command(line: str, source: ImportSource) -> str:
    """Strip the zsh extended-history prefix (`: <ts>:<dur>;`) from a line."""
    if source == ImportSource.ZSH and len(line) > 2 and line.startswith(": "):
        semicolon = line.find(";")
        if 0 <= semicolon < len(line) - 1:
            return line[semicolon + 1 :]
        return ""
    return line


def extract_cd_path(command: str) -> str | None:
    """Return the target of a `cd` command, or None if there is no usable one.

    Options are skipped, commands using `$(` or backticks are rejected and
    quoted targets are taken verbatim up to the closing quote.
    """
    trimmed = command.strip(" \t")
    if not trimmed.startswith("cd "):
        return None

    rest = trimmed[3:].strip(" \t")
    while rest.startswith("-"):
        space = rest.find(" ")
        if space < 0:
            return None
        rest = rest[space:].strip(" \t")

    if not rest:
        return None
    if "$(" in rest or "`" in rest:
        return None

    path = rest
    quoted = False
    if path[0] in "\"'" and len(path) > 1:
        quote = path[0]
        i = 1
        while i < len(path):
            if path[i] == "\\" and i + 1 < len(path):
                i += 2
                continue
            if path[i] == quote:
                path = path[1:i]
                quoted = True
                break
            i += 1
        if not quoted:
            return None

    if not quoted:
        for sep in _COMMAND_SEPARATORS:
            idx = path.find(sep)
            if idx >= 0:
                path = path[:idx]

    path = path.strip(" \t")
    if not path or path == "-":
        return None
    return path


def is_absolute_or_tilde(path: str) -> bool:
    return path.startswith(("/", "~"))


def expand_tilde(path: str, home: str) -> str:
    """Expand `~` and `~/...`. Raises ValueError for `~user` forms."""
    if not path.startswith("~"):
        return path
    if path == "~" or path.startswith("~/"):
        return home + path[1:]
    raise ValueError(f"unsupported tilde form: {path}")


def normalize_path(path: str) -> str:
    """Resolve `.` and `..` lexically. Never climbs above `/`."""
    components: list[str] = []
    for part in path.split("/"):
        if not part or part == ".":
            continue
        if part == "..":
            if components:
                components.pop()
        else:
            components.append(part)
    return "/" + "/".join(components)


def collect_paths(
    lines,
    source: ImportSource,
    home: str,
    known: set[str],
    is_dir: Callable[[str], bool] = os.path.isdir,
) -> tuple[list[str], ImportResult]:
    """Pick new directories out of history lines, in order of first use."""
    result = ImportResult()
    found: list[str] = []
    seen: set[str] = set()

    for line in lines:
        if not line:
            continue
        command = extract_command(line, source)
        if not command:
            continue
        target = extract_cd_path(command)
        if target is None:
            continue
        if not is_absolute_or_tilde(target):
            result.skipped_count += 1
            continue
        try:
            expanded = expand_tilde(target, home)
        except ValueError:
            result.skipped_count += 1
            continue
        normalized = normalize_path(expanded)

        if normalized in known:
            result.already_exists_count += 1
            continue
        if normalized in seen:
            continue
        if not is_dir(normalized):
            result.skipped_count += 1
            continue
        seen.add(normalized)
        found.append(normalized)

    result.imported_count = len(found)
    return found, result


def import_from_shell_history(
    source: ImportSource,
    data_file: str | Path,
    environ: Mapping[str, str] | None = None,
    now: int | None = None,
    is_dir: Callable[[str], bool] = os.path.isdir,
) -> ImportResult:
    """Append every new `cd` target from the shell history to the data file.

    Raises FileNotFoundError if the shell history file does not exist.
    """
    env = os.environ if environ is None else environ
    history_path = get_shell_history_path(source, env)
    with open(history_path, "rb") as f:
        raw = f.read(MAX_HISTORY_FILE_SIZE)
    # zsh metafies non-ASCII bytes, so decoding must not fail
    lines = raw.decode("utf-8", "replace").split("\n")

    known = history.read_known_paths(data_file)
    paths, result = collect_paths(lines, source, _home(env), known, is_dir=is_dir)
    if paths:
        history.append_visits(data_file, paths, now if now is not None else current_timestamp())
    return result
