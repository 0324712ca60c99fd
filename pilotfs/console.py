"""A text-mode screen model and number formatting helpers."""

from __future__ import annotations

VGA_WIDTH = 80
VGA_HEIGHT = 25
WHITE_ON_BLACK = 0x0F

_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Console:
    """A character grid with a cursor, line wrapping and scrolling."""

    def __init__(
        self,
        width: int = VGA_WIDTH,
        height: int = VGA_HEIGHT,
        color: int = WHITE_ON_BLACK,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError("console dimensions must be positive")
        self.width = width
        self.height = height
        self.color = color
        self.row = 0
        self.col = 0
        self.cells: list[list[tuple[str, int]]] = [
            self._blank_row() for _ in range(height)
        ]

    def _blank_row(self) -> list[tuple[str, int]]:
        return [(" ", self.color)] * self.width

    def put_char(self, char: str) -> None:
        """Write one character at the cursor and advance it."""
        if len(char) != 1:
            raise ValueError(f"expected a single character, got {char!r}")
        if char == "\r":
            return
        if char == "\n":
            self.col = 0
            self.row += 1
        elif char == "\b":
            if self.col > 0:
                self.col -= 1
            elif self.row > 0:
                self.row -= 1
                self.col = self.width - 1
            self.cells[self.row][self.col] = (" ", self.color)
        else:
            self.cells[self.row][self.col] = (char, self.color)
            self.col += 1
            if self.col >= self.width:
                self.col = 0
                self.row += 1

        if self.row >= self.height:
            self.cells.pop(0)
            self.cells.append(self._blank_row())
            self.row = self.height - 1

    def write(self, text: str) -> None:
        """Write every character of ``text``."""
        for char in text:
            self.put_char(char)

    def clear(self) -> None:
        """Blank the screen in the current color and home the cursor."""
        self.cells = [self._blank_row() for _ in range(self.height)]
        self.row = 0
        self.col = 0

    def set_color(self, color: int) -> None:
        """Set the attribute used for subsequent output."""
        self.color = color

    def set_cursor(self, row: int, col: int) -> None:
        """Move the cursor."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise ValueError(f"cursor position ({row}, {col}) is off screen")
        self.row = row
        self.col = col

    def row_text(self, row: int) -> str:
        """Return the characters of one row without trailing blanks."""
        return "".join(char for char, _ in self.cells[row]).rstrip(" ")

    def lines(self) -> list[str]:
        """Return the text of every row."""
        return [self.row_text(row) for row in range(self.height)]


def format_uint(value: int) -> str:
    """Format a value as an unsigned 32-bit decimal number."""
    return str(value & 0xFFFFFFFF)


def format_hex16(value: int) -> str:
    """Format a value as four upper-case hex digits."""
    return f"{value & 0xFFFF:04X}"


def format_hex32(value: int) -> str:
    """Format a value as eight upper-case hex digits."""
    return f"{value & 0xFFFFFFFF:08X}"


def format_int(value: int, base: int = 10) -> str:
    """Format an integer in ``base`` with upper-case digits.

    Negative numbers are only supported in base 10.
    """
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"unsupported base {base}")
    if value < 0 and base != 10:
        raise ValueError("negative numbers are only supported in base 10")
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while True:
        value, digit = divmod(value, base)
        digits.append(_DIGITS[digit])
        if not value:
            break
    return sign + "".join(reversed(digits))


def hex_dump(data: bytes) -> str:
    """Render bytes as hex pairs, sixteen to a line."""
    parts = []
    for position, byte in enumerate(data, 1):
        parts.append(f"{byte:02X} ")
        if position % 16 == 0:
            parts.append("\n")
    return "".join(parts)