"""Interactive selection: the session state machine and the loop driving it.

`SelectionSession` holds no terminal state and can be exercised key by key.
`Selector` owns the terminal for the duration of one session: it reads keys,
feeds them to the session and redraws after each one.
"""

from __future__ import annotations

import os
import sys
from enum import Enum, auto
from typing import Callable, ContextManager, Sequence

from zj.candidates import CandidateStore
from zj.constants import MAX_DISPLAY_ENTRIES, PRINTABLE_MAX, PRINTABLE_MIN
from zj.debug_log import DebugLogger
from zj.input_buffer import InputBuffer
from zj.keys import Key, KeyReader, KeyType
from zj.terminal import RawTerminal, close_tty
from zj.types import ScoredEntry
from zj.ui import FullscreenRenderer, InlineRenderer, Renderer


class SelectionState(Enum):
    RUNNING = auto()
    SELECTED = auto()
    CANCELLED = auto()


class SelectionSession:
    def __init__(self, store: CandidateStore, max_visible: int, initial_query: bytes = b""):
        if len(store) == 0:
            raise ValueError("no candidates to select from")
        if max_visible < 1:
            raise ValueError(f"max_visible must be at least 1, got {max_visible}")
        self.store = store
        self.max_visible = max_visible
        self.input = InputBuffer(initial_query)
        self.selected_index = 0
        self.scroll_offset = 0
        self.state = SelectionState.RUNNING
        self.selected_path: str | None = None
        self._refresh()

    @property
    def filtered(self) -> list[ScoredEntry]:
        return self.store.filtered

    @property
    def is_running(self) -> bool:
        return self.state == SelectionState.RUNNING

    def handle_key(self, key: Key) -> SelectionState:
        """Apply one key event and return the resulting state."""
        if not self.is_running:
            return self.state

        kt = key.type
        if kt == KeyType.CHAR:
            if PRINTABLE_MIN <= key.char <= PRINTABLE_MAX and self.input.append(key.char):
                self._reset_and_refresh()
        elif kt == KeyType.BACKSPACE:
            if self.input.backspace():
                self._reset_and_refresh()
        elif kt == KeyType.CTRL_U:
            self.input.clear()
            self._reset_and_refresh()
        elif kt == KeyType.CTRL_W:
            self.input.kill_word_back()
            self._reset_and_refresh()
        elif kt in (KeyType.UP, KeyType.CTRL_P):
            if self.selected_index > 0:
                self.selected_index -= 1
                self._adjust_scroll()
        elif kt in (KeyType.DOWN, KeyType.CTRL_N):
            if self.selected_index + 1 < len(self.filtered):
                self.selected_index += 1
                self._adjust_scroll()
        elif kt == KeyType.ENTER:
            if self.filtered:
                self.selected_path = self.filtered[self.selected_index].path
                self.state = SelectionState.SELECTED
            else:
                self.state = SelectionState.CANCELLED
        elif kt in (KeyType.ESCAPE, KeyType.CTRL_C, KeyType.EOF):
            self.state = SelectionState.CANCELLED
        # LEFT, RIGHT, DELETE, UNKNOWN: ignored
        return self.state

    # --- Internal helpers ---

    def _refresh(self):
        self.store.refresh(self.input.text)
        count = len(self.filtered)
        if self.selected_index >= count:
            self.selected_index = max(0, count - 1)

    def _reset_and_refresh(self):
        self.selected_index = 0
        self.scroll_offset = 0
        self._refresh()

    def _adjust_scroll(self):
        if self.selected_index < self.scroll_offset:
            self.scroll_offset = self.selected_index
        elif self.selected_index >= self.scroll_offset + self.max_visible:
            self.scroll_offset = self.selected_index - self.max_visible + 1


class Selector:
    """Runs one interactive selection on a terminal.

    The input descriptor is put into raw mode for the whole loop and is
    always restored on the way out. If owns_input_fd is set (a /dev/tty the
    caller opened for us) it is closed as well.
    """

    def __init__(
        self,
        entries: Sequence[ScoredEntry],
        renderer: Renderer,
        initial_query: bytes = b"",
        input_fd: int | None = None,
        owns_input_fd: bool = False,
        max_results: int = MAX_DISPLAY_ENTRIES,
        terminal_factory: Callable[[int], ContextManager] = RawTerminal,
        debug_logger: DebugLogger | None = None,
    ):
        self.renderer = renderer
        self.input_fd = input_fd if input_fd is not None else sys.stdin.fileno()
        self.owns_input_fd = owns_input_fd
        self.terminal_factory = terminal_factory
        self.logger = debug_logger or DebugLogger()
        self.reader = KeyReader(self.input_fd)
        store = CandidateStore(entries, max_results=max_results)
        self.session = SelectionSession(store, renderer.max_visible, initial_query)

    def run(self) -> str | None:
        """Run until the user selects or cancels. Returns the chosen path or None."""
        session = self.session
        try:
            with self.terminal_factory(self.input_fd):
                self.renderer.begin()
                try:
                    self.logger.log_query(session.input.text, len(session.filtered))
                    self.renderer.draw(session)
                    while session.is_running:
                        key = self.reader.read_key()
                        self.logger.log_key(key)
                        before = session.input.text
                        session.handle_key(key)
                        if session.input.text != before:
                            self.logger.log_query(session.input.text, len(session.filtered))
                        if session.is_running:
                            self.renderer.draw(session)
                finally:
                    self.renderer.cleanup()
        finally:
            if self.owns_input_fd:
                close_tty(self.input_fd)
        self.logger.log_outcome(session.state.name, session.selected_path)
        return session.selected_path


def select_directory(
    entries: Sequence[ScoredEntry],
    initial_query: str | None = None,
    tty_fd: int | None = None,
    visible_rows: int | None = None,
    **kwargs,
) -> str | None:
    """Fullscreen selection. With tty_fd, keys come from that descriptor and it is closed afterwards."""
    if not entries:
        if tty_fd is not None:
            close_tty(tty_fd)
        return None
    renderer = FullscreenRenderer(**_rows(visible_rows))
    selector = Selector(
        entries,
        renderer,
        initial_query=_encode(initial_query),
        input_fd=tty_fd,
        owns_input_fd=tty_fd is not None,
        **kwargs,
    )
    return selector.run()


def select_inline(
    entries: Sequence[ScoredEntry],
    initial_query: str | None = None,
    visible_rows: int | None = None,
    **kwargs,
) -> str | None:
    """Inline selection below the current prompt line (shell completion widget)."""
    if not entries:
        return None
    renderer = InlineRenderer(**_rows(visible_rows))
    selector = Selector(entries, renderer, initial_query=_encode(initial_query), **kwargs)
    return selector.run()


def _rows(visible_rows: int | None) -> dict:
    return {} if visible_rows is None else {"visible_rows": visible_rows}


def _encode(query: str | None) -> bytes:
    if not query:
        return b""
    return os.fsencode(query)
