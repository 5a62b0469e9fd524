# Control bytes as they arrive from a terminal in raw mode
ESC = 0x1B
CTRL_C = 0x03  # ETX
CTRL_N = 0x0E  # SO
CTRL_P = 0x10  # DLE
CTRL_U = 0x15  # NAK
CTRL_W = 0x17  # ETB
CR = 0x0D
LF = 0x0A
DEL = 0x7F
BS = 0x08

PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E

# Selection session limits
MAX_INPUT_LEN = 256  # bytes
MAX_DISPLAY_ENTRIES = 100
DEFAULT_VISIBLE_LINES = 20
INLINE_VISIBLE_LINES = 10

MAX_PIPE_SIZE = 10 * 1024 * 1024  # 10 MiB of piped candidate lines
