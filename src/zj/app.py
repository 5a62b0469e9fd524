"""Run modes: jump, pipe selection, completion widget, import and diagnostics.

Every run_* function returns the process exit code. Only output_path writes
to stdout; everything the user reads goes to stderr.
"""

from __future__ import annotations

import os
import sys
from importlib.resources import files
from typing import BinaryIO, Callable, TextIO

from zj.autoselect import try_auto_select
from zj.candidates import CandidateStore
from zj.config import Config
from zj.constants import MAX_PIPE_SIZE
from zj.debug_log import DebugLogger
from zj.history import load_history
from zj.importer import ImportSource, import_from_shell_history
from zj.scoring import score_history, score_lines
from zj.selector import select_directory, select_inline
from zj.terminal import TerminalError, open_tty
from zj.types import ScoredEntry

EXIT_OK = 0
EXIT_FAILURE = 1

DEBUG_HISTORY_LIMIT = 50
SHELLS = ("bash", "zsh")


def _err(message: str):
    print(f"zj: {message}", file=sys.stderr)


def output_path(path: str, out: BinaryIO | None = None):
    """Write the chosen path and one newline to stdout, nothing else.

    Raises ValueError for paths a shell wrapper could not `cd` into safely.
    """
    if "\0" in path or "\n" in path or "\r" in path:
        raise ValueError("invalid path")
    out = out if out is not None else sys.stdout.buffer
    out.write(os.fsencode(path) + b"\n")
    out.flush()


def _emit(path: str, out: BinaryIO | None) -> int:
    try:
        output_path(path, out)
    except ValueError as e:
        _err(str(e))
        return EXIT_FAILURE
    return EXIT_OK


def start_logger(config: Config) -> DebugLogger:
    """A started DebugLogger when debugging is on, a disabled one otherwise.

    A log that cannot be opened is reported as a warning and left disabled.
    """
    logger = DebugLogger(config.debug_log_path)
    if config.debug:
        try:
            logger.start()
        except OSError as e:
            logger.stop()
            _err(f"warning: cannot open debug log: {e}")
    return logger


def load_scored_history(config: Config, logger: DebugLogger | None = None) -> list[ScoredEntry]:
    """History entries for existing directories, ranked by frecency."""
    logger = logger or DebugLogger()

    def warn(message: str):
        logger.log_event(message)
        _err(f"warning: {message}")

    entries = load_history(
        config.history.data_file,
        max_entries=config.history.max_entries,
        prune_target=config.history.prune_target,
        warn=warn,
    )
    logger.log_event(f"Loaded {len(entries)} history entries from {config.history.data_file}")
    return score_history(entries)


def _auto_select(config: Config, ranked: list[ScoredEntry], logger: DebugLogger) -> str | None:
    if not config.auto_select.enabled:
        return None
    path = try_auto_select(ranked, config.auto_select.min_score, config.auto_select.margin)
    if path is not None:
        logger.log_event(f"Auto-selected {path!r} from {len(ranked)} matches")
    return path


def _finish_selection(
    run: Callable[[], str | None],
    out: BinaryIO | None,
    cancel_message: str | None = "selection cancelled",
) -> int:
    try:
        selected = run()
    except TerminalError as e:
        _err(f"selection error: {e}")
        return EXIT_FAILURE
    if selected is None:
        if cancel_message:
            _err(cancel_message)
        return EXIT_FAILURE
    return _emit(selected, out)


def run_jump(
    config: Config,
    query: str | None = None,
    logger: DebugLogger | None = None,
    out: BinaryIO | None = None,
    selector: Callable[..., str | None] = select_directory,
) -> int:
    """`zj [QUERY]`: jump to a directory from the visit history."""
    logger = logger or DebugLogger()
    scored = load_scored_history(config, logger)
    if not scored:
        print(
            "zj: No history yet.\n"
            "    Start using cd to build history, or run:\n"
            "    zj import --zsh-history",
            file=sys.stderr,
        )
        return EXIT_FAILURE

    if query:
        ranked = CandidateStore(scored).rank(query)
        logger.log_query(os.fsencode(query), len(ranked))
        if not ranked:
            _err("no matching directories found")
            return EXIT_FAILURE
        path = _auto_select(config, ranked, logger)
        if path is not None:
            return _emit(path, out)

    return _finish_selection(
        lambda: selector(
            scored,
            initial_query=query,
            visible_rows=config.ui.visible_rows,
            max_results=config.ui.max_entries,
            debug_logger=logger,
        ),
        out,
    )


def run_query_mode(
    config: Config,
    prefix: str | None = None,
    logger: DebugLogger | None = None,
    out: BinaryIO | None = None,
    selector: Callable[..., str | None] = select_inline,
) -> int:
    """`zj -q [PREFIX]`: inline list for the shell completion widget."""
    logger = logger or DebugLogger()
    scored = load_scored_history(config, logger)
    if not scored:
        return EXIT_FAILURE
    return _finish_selection(
        lambda: selector(
            scored,
            initial_query=prefix,
            visible_rows=config.ui.inline_rows,
            max_results=config.ui.max_entries,
            debug_logger=logger,
        ),
        out,
        cancel_message=None,
    )


def read_pipe_lines(stream: BinaryIO, limit: int = MAX_PIPE_SIZE) -> list[str]:
    """Non-empty lines of piped input, at most `limit` bytes of it.

    One trailing CR is dropped from each line, so CRLF input works.
    """
    raw = stream.read(limit)
    lines = []
    for line in raw.split(b"\n"):
        if line.endswith(b"\r"):
            line = line[:-1]
        if line:
            lines.append(os.fsdecode(line))
    return lines


def run_pipe_mode(
    config: Config,
    query: str | None = None,
    logger: DebugLogger | None = None,
    stdin: BinaryIO | None = None,
    out: BinaryIO | None = None,
    tty_opener: Callable[[], int] = open_tty,
    selector: Callable[..., str | None] = select_directory,
) -> int:
    """Select one of the lines piped into zj, reading keys from /dev/tty."""
    logger = logger or DebugLogger()
    stdin = stdin if stdin is not None else sys.stdin.buffer
    try:
        lines = read_pipe_lines(stdin)
    except OSError as e:
        _err(f"failed to read from stdin: {e}")
        return EXIT_FAILURE
    if not lines:
        _err("no input received from pipe")
        return EXIT_FAILURE
    logger.log_event(f"Read {len(lines)} lines from pipe")

    candidates = score_lines(lines)
    if query:
        ranked = CandidateStore(candidates).rank(query)
        logger.log_query(os.fsencode(query), len(ranked))
        if not ranked:
            _err("no matching entries found")
            return EXIT_FAILURE
        path = _auto_select(config, ranked, logger)
        if path is not None:
            return _emit(path, out)

    try:
        tty_fd = tty_opener()
    except TerminalError as e:
        logger.log_event(str(e))
        _err("failed to open /dev/tty (not running in a terminal?)")
        return EXIT_FAILURE

    return _finish_selection(
        lambda: selector(
            candidates,
            initial_query=query,
            tty_fd=tty_fd,
            visible_rows=config.ui.visible_rows,
            max_results=config.ui.max_entries,
            debug_logger=logger,
        ),
        out,
    )


def debug_history(
    config: Config,
    err: TextIO | None = None,
    logger: DebugLogger | None = None,
) -> int:
    """`zj --debug-history`: show what the data file parses to."""
    err = err if err is not None else sys.stderr
    logger = logger or DebugLogger()
    entries = load_history(
        config.history.data_file,
        max_entries=config.history.max_entries,
        prune_target=config.history.prune_target,
    )
    logger.log_event(f"Parsed {len(entries)} history entries from {config.history.data_file}")
    err.write(f"Parsed {len(entries)} history entries:\n\n")
    for entry in entries[:DEBUG_HISTORY_LIMIT]:
        err.write(f"  {entry.path}\n")
        err.write(f"    visits: {entry.visit_count}, timestamp: {entry.timestamp}\n\n")
    if len(entries) > DEBUG_HISTORY_LIMIT:
        err.write(f"  ... and {len(entries) - DEBUG_HISTORY_LIMIT} more\n")
    return EXIT_OK


def shell_script(shell: str) -> str:
    """The bundled integration script for a shell."""
    if shell not in SHELLS:
        raise ValueError(f"unknown shell '{shell}'. Supported: {', '.join(SHELLS)}")
    return files("zj").joinpath("shell", f"zj.{shell}").read_text(encoding="utf-8")


def print_init(shell: str, out: TextIO | None = None) -> int:
    """`zj init <shell>`: print the integration script to stdout."""
    out = out if out is not None else sys.stdout
    out.write(shell_script(shell))
    out.flush()
    return EXIT_OK


def run_import(config: Config, source: ImportSource, logger: DebugLogger | None = None) -> int:
    """`zj import --zsh-history|--bash-history`."""
    logger = logger or DebugLogger()
    print(f"Importing from {source.value} history...", file=sys.stderr)
    try:
        result = import_from_shell_history(source, config.history.data_file)
    except FileNotFoundError as e:
        _err(f"history file not found: {e.filename}")
        return EXIT_FAILURE
    except OSError as e:
        _err(f"import failed: {e}")
        return EXIT_FAILURE
    logger.log_event(
        f"Import {source.value}: imported={result.imported_count} "
        f"skipped={result.skipped_count} existing={result.already_exists_count}"
    )
    print(result.summary(), file=sys.stderr)
    return EXIT_OK
