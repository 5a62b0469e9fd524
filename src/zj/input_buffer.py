from zj.constants import MAX_INPUT_LEN


class InputBuffer:
    """Append-only query buffer holding raw UTF-8 bytes.

    Editing happens at the end only: append, backspace (one code point),
    kill word (Ctrl+W) and clear (Ctrl+U). The buffer never grows past
    max_len bytes.
    """

    def __init__(self, text: bytes = b"", max_len: int = MAX_INPUT_LEN):
        self._buf = bytearray()
        self.max_len = max_len
        self.set_text(text)

    @property
    def text(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    @property
    def is_full(self) -> bool:
        return len(self._buf) >= self.max_len

    def append(self, byte: int) -> bool:
        """Append one byte. Returns False when the buffer is full."""
        if self.is_full:
            return False
        self._buf.append(byte)
        return True

    def backspace(self) -> bool:
        """Delete the last UTF-8 code point. Returns False if already empty."""
        if not self._buf:
            return False
        i = len(self._buf) - 1
        # Walk back over continuation bytes (10xxxxxx) to the lead byte
        while i > 0 and (self._buf[i] & 0xC0) == 0x80:
            i -= 1
        del self._buf[i:]
        return True

    def kill_word_back(self):
        """Delete trailing spaces and the space-delimited word before them (Ctrl+W)."""
        i = len(self._buf)
        while i > 0 and self._buf[i - 1] == 0x20:
            i -= 1
        while i > 0 and self._buf[i - 1] != 0x20:
            i -= 1
        del self._buf[i:]

    def set_text(self, text: bytes):
        """Replace buffer content, truncated to max_len."""
        self._buf[:] = text[: self.max_len]

    def clear(self) -> bytes:
        """Clear the buffer and return the previous content."""
        text = bytes(self._buf)
        self._buf.clear()
        return text
