"""Frame rendering for the selection session.

Frames are assembled in memory and written to the error stream with a
single write, so the terminal never shows half-drawn frames and stdout stays
free for the selected path.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, BinaryIO

from zj import ansi
from zj.constants import DEFAULT_VISIBLE_LINES, INLINE_VISIBLE_LINES

if TYPE_CHECKING:
    from zj.selector import SelectionSession

SEPARATOR_LINE = "─" * 45


class Renderer:
    """Common frame layout: input line, separator, visible entries, status."""

    RESERVED_ROWS = 2  # input line + separator

    def __init__(self, out: BinaryIO | None = None, visible_rows: int = DEFAULT_VISIBLE_LINES):
        if visible_rows <= self.RESERVED_ROWS:
            raise ValueError(
                f"visible_rows must be greater than {self.RESERVED_ROWS}, got {visible_rows}"
            )
        self.out = out if out is not None else sys.stderr.buffer
        self.visible_rows = visible_rows
        self.frames_written = 0

    @property
    def max_visible(self) -> int:
        """Number of entry rows that fit in one frame."""
        return self.visible_rows - self.RESERVED_ROWS

    def begin(self):
        """Prepare the screen before the first frame."""

    def frame(self, session: "SelectionSession") -> bytes:
        raise NotImplementedError

    def teardown_sequence(self) -> str:
        raise NotImplementedError

    def draw(self, session: "SelectionSession"):
        self._write(self.frame(session))
        self.frames_written += 1

    def cleanup(self):
        """Erase the UI and leave the cursor visible with default attributes."""
        self._write(self.teardown_sequence().encode("utf-8"))

    def _write(self, data: bytes):
        self.out.write(data)
        self.out.flush()

    # --- Frame pieces ---

    def _input_line(self, session: "SelectionSession") -> str:
        query = session.input.text.decode("utf-8", "replace")
        return f"{ansi.BOLD}> {ansi.RESET}{ansi.sanitize_for_display(query)}_\n"

    def _separator(self) -> str:
        return f"{ansi.DIM}{SEPARATOR_LINE}\n{ansi.RESET}"

    def _entry_lines(self, session: "SelectionSession") -> list[str]:
        lines = []
        start, end = self.window(session)
        for idx in range(start, end):
            path = ansi.sanitize_for_display(session.filtered[idx].path)
            if idx == session.selected_index:
                lines.append(f"{ansi.REVERSE}{ansi.BOLD}> {path}{ansi.RESET}\n")
            else:
                lines.append(f"  {path}\n")
        return lines

    def window(self, session: "SelectionSession") -> tuple[int, int]:
        """Index range [start, end) of the entries shown in the frame."""
        count = len(session.filtered)
        start = min(session.scroll_offset, count)
        end = min(start + self.max_visible, count)
        return start, end


class FullscreenRenderer(Renderer):
    """Clears the whole screen and redraws from the top on every frame."""

    def frame(self, session: "SelectionSession") -> bytes:
        parts = [ansi.CURSOR_HIDE, ansi.CURSOR_HOME, ansi.CLEAR_SCREEN]
        parts.append(self._input_line(session))
        parts.append(self._separator())
        parts.extend(self._entry_lines(session))

        count = len(session.filtered)
        start, end = self.window(session)
        status = f"  {count} matches"
        if count > self.max_visible:
            status += f" (showing {start + 1}-{end})"
        parts.append(f"\n{ansi.DIM}{status}{ansi.RESET}")
        parts.append(ansi.CURSOR_SHOW)
        return "".join(parts).encode("utf-8", "replace")

    def teardown_sequence(self) -> str:
        return ansi.CLEAR_SCREEN + ansi.CURSOR_HOME + ansi.CURSOR_SHOW + ansi.RESET


class InlineRenderer(Renderer):
    """Redraws in place below the shell prompt.

    Each frame moves the cursor back up over the previous frame and clears
    to the end of the screen, so rendered_lines must track how many lines
    the last frame occupied.
    """

    RESERVED_ROWS = 3  # input line + separator + status line

    def __init__(self, out: BinaryIO | None = None, visible_rows: int = INLINE_VISIBLE_LINES):
        super().__init__(out, visible_rows)
        self.rendered_lines = 0

    def begin(self):
        # Step off the prompt line
        self._write(b"\n")

    def _rewind(self) -> str:
        if self.rendered_lines > 0:
            return ansi.cursor_up(self.rendered_lines) + ansi.CURSOR_COLUMN_1
        return ""

    def frame(self, session: "SelectionSession") -> bytes:
        parts = [self._rewind(), ansi.CURSOR_HIDE, ansi.CLEAR_TO_END]
        parts.append(self._input_line(session))
        parts.append(self._separator())
        entries = self._entry_lines(session)
        parts.extend(entries)
        parts.append(f"{ansi.DIM}  {len(session.filtered)} matches\n{ansi.RESET}")
        parts.append(ansi.CURSOR_SHOW)
        self.rendered_lines = 2 + len(entries) + 1
        return "".join(parts).encode("utf-8", "replace")

    def teardown_sequence(self) -> str:
        seq = self._rewind() + ansi.CLEAR_TO_END + ansi.CURSOR_SHOW + ansi.RESET
        self.rendered_lines = 0
        return seq
