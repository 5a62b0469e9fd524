CLEAR_SCREEN = "\x1b[2J"
CLEAR_TO_END = "\x1b[J"
CURSOR_HOME = "\x1b[H"
CURSOR_COLUMN_1 = "\x1b[1G"
CURSOR_HIDE = "\x1b[?25l"
CURSOR_SHOW = "\x1b[?25h"
RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
REVERSE = "\x1b[7m"


def cursor_up(n: int) -> str:
    """Sequence moving the cursor up n lines (nothing for n <= 0)."""
    if n <= 0:
        return ""
    return f"\x1b[{n}A"


def sanitize_for_display(text: str) -> str:
    """Make untrusted text safe to embed in a rendered frame.

    ESC and a following CSI sequence (parameter bytes 0x20-0x3F plus one
    final byte) become the literal marker \\e. Tabs become four spaces,
    CR/LF are dropped and any other control character is shown as \\xHH.
    Everything else passes through unchanged.
    """
    out = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        code = ord(c)
        if code == 0x1B:
            out.append("\\e")
            i += 1
            if i < n and text[i] == "[":
                i += 1
                while i < n and 0x20 <= ord(text[i]) < 0x40:
                    i += 1
                if i < n:
                    i += 1  # final byte
            continue
        if code < 0x20 or code == 0x7F:
            if c == "\t":
                out.append("    ")
            elif c not in "\r\n":
                out.append(f"\\x{code:02x}")
        else:
            out.append(c)
        i += 1
    return "".join(out)
