"""POSIX terminal handling: raw mode as a scoped resource, /dev/tty access."""

from __future__ import annotations

import os
import termios

TTY_PATH = "/dev/tty"

# termios attribute list indices
_IFLAG, _OFLAG, _CFLAG, _LFLAG, _ISPEED, _OSPEED, _CC = range(7)


class TerminalError(Exception):
    """Terminal attributes could not be read or changed."""


class RawTerminal:
    """Context manager putting a terminal descriptor into raw input mode.

    Echo, line buffering, signal keys and input translation are turned off
    so every key arrives as bytes; output processing is left alone. The
    original attributes are restored on exit, whatever the exit path. The
    descriptor itself is not closed here.
    """

    def __init__(self, fd: int):
        self.fd = fd
        self._saved: list | None = None

    @property
    def is_raw(self) -> bool:
        return self._saved is not None

    def enable(self):
        try:
            saved = termios.tcgetattr(self.fd)
        except termios.error as e:
            raise TerminalError(f"cannot read terminal attributes: {e}") from e

        attrs = list(saved)
        attrs[_CC] = list(saved[_CC])
        attrs[_LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        attrs[_IFLAG] &= ~(
            termios.IXON | termios.ICRNL | termios.BRKINT | termios.INPCK | termios.ISTRIP
        )
        attrs[_CC][termios.VMIN] = 1
        attrs[_CC][termios.VTIME] = 0

        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, attrs)
        except termios.error as e:
            raise TerminalError(f"cannot set terminal attributes: {e}") from e
        self._saved = saved

    def restore(self):
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, saved)
        except termios.error as e:
            raise TerminalError(f"cannot restore terminal attributes: {e}") from e

    def __enter__(self) -> "RawTerminal":
        self.enable()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.restore()
        return False


def is_tty(fd: int) -> bool:
    return os.isatty(fd)


def open_tty(path: str = TTY_PATH) -> int:
    """Open the controlling terminal for reading keys when stdin is a pipe."""
    try:
        return os.open(path, os.O_RDWR | os.O_NOCTTY)
    except OSError as e:
        raise TerminalError(f"cannot open {path}: {e}") from e


def close_tty(fd: int):
    try:
        os.close(fd)
    except OSError:
        pass
