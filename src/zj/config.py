"""Configuration system with minimal YAML parser.

Settings are read from a small YAML file, searched for in the user's config
directory and the working directory. The parser has no external dependencies
and supports:
- Scalars (strings, numbers, booleans)
- Nested mappings (key: value syntax)
- Comments (# ...)
- Quoted strings (single and double)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from zj.ui import FullscreenRenderer, InlineRenderer

DEFAULT_CONFIG_NAME = "config"

# --- Minimal YAML Parser ---


def parse_simple_yaml(text: str) -> dict:
    """Parse a simple YAML document into a Python dict.

    Supports:
    - Scalars: strings, integers, floats, booleans, null
    - Nested dicts: using 'key:' with indented children
    - Comments: lines starting with # (or inline # comments)
    - Quoted strings: 'single' or "double" quoted
    """
    lines = text.split("\n")
    return _parse_block(lines, 0, 0)[0]


def _parse_block(lines: list[str], start: int, base_indent: int) -> tuple[dict, int]:
    """Parse a mapping block starting at line `start` with `base_indent`."""
    result: dict = {}
    i = start

    while i < len(lines):
        line = lines[i]
        stripped = line.lstrip()

        if not stripped or stripped.startswith("#"):
            i += 1
            continue

        indent = len(line) - len(stripped)
        if indent < base_indent:
            break

        colon_pos = _find_unquoted_colon(stripped)
        if colon_pos <= 0:
            i += 1
            continue

        key = stripped[:colon_pos].strip()
        value_part = _remove_inline_comment(stripped[colon_pos + 1 :].strip())

        if value_part:
            result[key] = _parse_value(value_part)
            i += 1
            continue

        # Look past comments and blank lines for a nested block
        j = i + 1
        while j < len(lines):
            next_stripped = lines[j].lstrip()
            if not next_stripped or next_stripped.startswith("#"):
                j += 1
                continue
            break

        if j < len(lines):
            next_indent = len(lines[j]) - len(lines[j].lstrip())
            if next_indent > indent:
                result[key], i = _parse_block(lines, j, next_indent)
                continue

        result[key] = None
        i += 1

    return result, i


def _find_unquoted_colon(s: str) -> int:
    """Find the position of the first colon not inside quotes."""
    in_single = False
    in_double = False
    for i, c in enumerate(s):
        if c == "'" and not in_double:
            in_single = not in_single
        elif c == '"' and not in_single:
            in_double = not in_double
        elif c == ":" and not in_single and not in_double:
            return i
    return -1


def _remove_inline_comment(s: str) -> str:
    """Remove inline comments from a value string."""
    in_single = False
    in_double = False
    for i, c in enumerate(s):
        if c == "'" and not in_double:
            in_single = not in_single
        elif c == '"' and not in_single:
            in_double = not in_double
        elif c == "#" and not in_single and not in_double and (i == 0 or s[i - 1] == " "):
            return s[:i].rstrip()
    return s


def _parse_value(s: str) -> str | int | float | bool | None:
    """Parse a scalar YAML value."""
    s = s.strip()
    if not s:
        return None

    lowered = s.lower()
    if lowered in ("null", "~", "none"):
        return None
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False

    if len(s) >= 2:
        if s[0] == '"' and s[-1] == '"':
            return _unescape_double_quoted(s[1:-1])
        if s[0] == "'" and s[-1] == "'":
            return s[1:-1].replace("''", "'")

    try:
        if "." in s:
            return float(s)
        return int(s)
    except ValueError:
        pass

    return s


_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"', "/": "/"}


def _unescape_double_quoted(s: str) -> str:
    """Process YAML escape sequences in a double-quoted string."""
    result = []
    i = 0
    while i < len(s):
        if s[i] == "\\" and i + 1 < len(s):
            next_char = s[i + 1]
            # Unknown escape: keep as-is
            result.append(_ESCAPES.get(next_char, s[i] + next_char))
            i += 2
        else:
            result.append(s[i])
            i += 1
    return "".join(result)


# --- Configuration Dataclasses ---


@dataclass
class AutoSelectConfig:
    """When to skip the interactive list for a jump query."""

    enabled: bool = True
    min_score: int = 100
    margin: int = 50


@dataclass
class UIConfig:
    """Selection list layout."""

    visible_rows: int = 20
    inline_rows: int = 10
    max_entries: int = 100


@dataclass
class HistoryConfig:
    """Where visits are stored and when the file is compacted."""

    data_file: str | None = None
    max_entries: int = 1000
    prune_target: int = 800


@dataclass
class Config:
    """Complete application configuration."""

    auto_select: AutoSelectConfig = field(default_factory=AutoSelectConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    debug: bool = False

    @property
    def debug_log_path(self) -> Path:
        """debug.log next to the history data file."""
        return Path(self.history.data_file or ".").parent / "debug.log"


# --- Config Loading ---


def _get_config_dir(environ: Mapping[str, str]) -> Path:
    """$XDG_CONFIG_HOME/zj, or ~/.config/zj."""
    base = environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "zj"
    return Path.home() / ".config" / "zj"


def _get_data_dir(environ: Mapping[str, str]) -> Path:
    """$XDG_DATA_HOME/zj, or ~/.local/share/zj."""
    base = environ.get("XDG_DATA_HOME")
    if base:
        return Path(base) / "zj"
    return Path.home() / ".local" / "share" / "zj"


def _is_path(config_name_or_path: str) -> bool:
    return (
        "/" in config_name_or_path
        or "\\" in config_name_or_path
        or config_name_or_path.endswith(".yml")
    )


def _find_config_file(config_name_or_path: str, environ: Mapping[str, str]) -> Path | None:
    """Find a config file by name or path.

    Search order:
    1. If it looks like a path (contains / or \\ or ends in .yml), treat as path
    2. $XDG_CONFIG_HOME/zj/<name>.yml (or ~/.config/zj/<name>.yml)
    3. Current working directory .zj/<name>.yml
    """
    if _is_path(config_name_or_path):
        path = Path(config_name_or_path).expanduser()
        if path.is_file():
            return path
        return None

    for candidate in _get_config_search_paths(config_name_or_path, environ):
        if candidate.is_file():
            return candidate
    return None


def _get_config_search_paths(config_name: str, environ: Mapping[str, str]) -> list[Path]:
    """Get list of paths that would be searched for a config name."""
    config_filename = f"{config_name}.yml"
    return [
        _get_config_dir(environ) / config_filename,
        Path.cwd() / ".zj" / config_filename,
    ]


def load_config(
    config_name_or_path: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from a YAML file and the environment.

    Args:
        config_name_or_path: Name of config file (without .yml extension),
                            or path to a config file. Falls back to $ZJ_CONFIG,
                            then 'config'.
        environ: Environment to read ZJ_* and XDG_* variables from
                 (os.environ if None).

    Returns:
        Config object with loaded values merged over defaults.

    Raises:
        FileNotFoundError: If a non-default config is specified but not found.
        ValueError: If a setting is out of range.
    """
    env = os.environ if environ is None else environ
    if not config_name_or_path:
        config_name_or_path = env.get("ZJ_CONFIG") or DEFAULT_CONFIG_NAME

    config_path = _find_config_file(config_name_or_path, env)
    config = Config()

    if config_path is None and config_name_or_path != DEFAULT_CONFIG_NAME:
        if _is_path(config_name_or_path):
            raise FileNotFoundError(f"Config file not found: {config_name_or_path}")
        search_paths = _get_config_search_paths(config_name_or_path, env)
        paths_str = "\n  - ".join(str(p) for p in search_paths)
        raise FileNotFoundError(
            f"Config '{config_name_or_path}' not found. Searched:\n  - {paths_str}"
        )

    if config_path is not None:
        with open(config_path, encoding="utf-8") as f:
            yaml_data = parse_simple_yaml(f.read())
        _merge_config(config, yaml_data)

    _apply_environment(config, env)
    validate_config(config)
    return config


def _merge_config(config: Config, data: dict):
    """Merge parsed YAML data into a Config object."""
    if not isinstance(data, dict):
        return

    if "debug" in data:
        config.debug = bool(data["debug"])

    # Auto-select
    if "auto_select" in data and isinstance(data["auto_select"], dict):
        auto = data["auto_select"]
        if "enabled" in auto:
            config.auto_select.enabled = bool(auto["enabled"])
        if "min_score" in auto:
            config.auto_select.min_score = _as_int("auto_select.min_score", auto["min_score"])
        if "margin" in auto:
            config.auto_select.margin = _as_int("auto_select.margin", auto["margin"])

    # UI
    if "ui" in data and isinstance(data["ui"], dict):
        ui = data["ui"]
        if "visible_rows" in ui:
            config.ui.visible_rows = _as_int("ui.visible_rows", ui["visible_rows"])
        if "inline_rows" in ui:
            config.ui.inline_rows = _as_int("ui.inline_rows", ui["inline_rows"])
        if "max_entries" in ui:
            config.ui.max_entries = _as_int("ui.max_entries", ui["max_entries"])

    # History
    if "history" in data and isinstance(data["history"], dict):
        h = data["history"]
        if "data_file" in h:
            config.history.data_file = (
                str(Path(str(h["data_file"])).expanduser()) if h["data_file"] is not None else None
            )
        if "max_entries" in h:
            config.history.max_entries = _as_int("history.max_entries", h["max_entries"])
        if "prune_target" in h:
            config.history.prune_target = _as_int("history.prune_target", h["prune_target"])


def _as_int(key: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"{key}: expected an integer, got {value!r}")
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{key}: expected an integer, got {value!r}") from None


def _apply_environment(config: Config, environ: Mapping[str, str]):
    """Resolve ZJ_DATA_FILE, ZJ_DEBUG and the default data file location."""
    data_file = environ.get("ZJ_DATA_FILE")
    if data_file:
        config.history.data_file = data_file
    elif not config.history.data_file:
        config.history.data_file = str(_get_data_dir(environ) / "history")
    if environ.get("ZJ_DEBUG"):
        config.debug = True


def validate_config(config: Config):
    """Raise ValueError naming the first setting that is out of range."""
    if config.ui.visible_rows <= FullscreenRenderer.RESERVED_ROWS:
        raise ValueError(
            f"ui.visible_rows must be greater than {FullscreenRenderer.RESERVED_ROWS}"
        )
    if config.ui.inline_rows <= InlineRenderer.RESERVED_ROWS:
        raise ValueError(f"ui.inline_rows must be greater than {InlineRenderer.RESERVED_ROWS}")
    if config.ui.max_entries < 1:
        raise ValueError("ui.max_entries must be positive")
    if config.auto_select.min_score < 0:
        raise ValueError("auto_select.min_score must not be negative")
    if config.auto_select.margin < 0:
        raise ValueError("auto_select.margin must not be negative")
    if config.history.max_entries < 1:
        raise ValueError("history.max_entries must be positive")
    if config.history.prune_target < 1:
        raise ValueError("history.prune_target must be positive")
    if config.history.prune_target > config.history.max_entries:
        raise ValueError("history.prune_target must not exceed history.max_entries")


def get_default_config() -> Config:
    """Return a Config with all default values."""
    return Config()
