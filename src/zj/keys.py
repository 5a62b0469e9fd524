"""Key events decoded from a raw terminal byte stream.

No terminal state is touched here; `KeyReader` only reads bytes from a
descriptor that someone else has put into raw mode.
"""

from __future__ import annotations

import os
import select
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable

from zj.constants import BS, CR, CTRL_C, CTRL_N, CTRL_P, CTRL_U, CTRL_W, DEL, ESC, LF

ESCAPE_TIMEOUT = 0.05  # seconds to wait for the rest of an escape sequence


class KeyType(Enum):
    CHAR = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    BACKSPACE = auto()
    DELETE = auto()
    CTRL_C = auto()
    CTRL_N = auto()
    CTRL_P = auto()
    CTRL_U = auto()
    CTRL_W = auto()
    UNKNOWN = auto()
    EOF = auto()


@dataclass(frozen=True)
class Key:
    type: KeyType
    char: int | None = None  # set for KeyType.CHAR only
    raw: bytes = field(default=b"", compare=False)


_CONTROL_KEYS = {
    CTRL_C: KeyType.CTRL_C,
    CTRL_N: KeyType.CTRL_N,
    CTRL_P: KeyType.CTRL_P,
    CTRL_U: KeyType.CTRL_U,
    CTRL_W: KeyType.CTRL_W,
    CR: KeyType.ENTER,
    LF: KeyType.ENTER,
    DEL: KeyType.BACKSPACE,
    BS: KeyType.BACKSPACE,
}

_CSI_KEYS = {
    ord("A"): KeyType.UP,
    ord("B"): KeyType.DOWN,
    ord("C"): KeyType.RIGHT,
    ord("D"): KeyType.LEFT,
}


def decode_key(read_byte: Callable[[], int | None],
               read_pending: Callable[[], int | None] | None = None) -> Key:
    """Decode the next key.

    read_byte blocks for the lead byte; read_pending fetches escape sequence
    continuation bytes and returns None when nothing more is available.
    Both return None at end of input.
    """
    if read_pending is None:
        read_pending = read_byte

    c = read_byte()
    if c is None:
        return Key(KeyType.EOF)

    if c != ESC:
        key_type = _CONTROL_KEYS.get(c)
        if key_type is not None:
            return Key(key_type, raw=bytes([c]))
        return Key(KeyType.CHAR, char=c, raw=bytes([c]))

    raw = bytearray([c])
    c2 = read_pending()
    if c2 is None:
        return Key(KeyType.ESCAPE, raw=bytes(raw))
    raw.append(c2)
    if c2 != ord("["):
        return Key(KeyType.UNKNOWN, raw=bytes(raw))

    c3 = read_pending()
    if c3 is None:
        return Key(KeyType.UNKNOWN, raw=bytes(raw))
    raw.append(c3)
    if c3 in _CSI_KEYS:
        return Key(_CSI_KEYS[c3], raw=bytes(raw))
    if c3 == ord("3"):
        # Delete is ESC [ 3 ~
        c4 = read_pending()
        if c4 is None:
            return Key(KeyType.UNKNOWN, raw=bytes(raw))
        raw.append(c4)
        if c4 == ord("~"):
            return Key(KeyType.DELETE, raw=bytes(raw))
    return Key(KeyType.UNKNOWN, raw=bytes(raw))


class KeyReader:
    """Reads keys one at a time from a file descriptor."""

    def __init__(self, fd: int, escape_timeout: float = ESCAPE_TIMEOUT):
        self.fd = fd
        self.escape_timeout = escape_timeout

    def read_byte(self) -> int | None:
        data = os.read(self.fd, 1)
        if not data:
            return None
        return data[0]

    def read_pending(self) -> int | None:
        ready, _, _ = select.select([self.fd], [], [], self.escape_timeout)
        if not ready:
            return None
        return self.read_byte()

    def read_key(self) -> Key:
        return decode_key(self.read_byte, self.read_pending)
