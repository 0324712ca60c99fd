"""Scan code translation and line editing."""

from __future__ import annotations

from typing import Iterable, Optional

_RELEASE_BIT = 0x80

_LAYOUT: tuple[Optional[str], ...] = (
    None, "\x1b", *"1234567890-=", "\b",
    "\t", *"qwertyuiop[]", "\n", None,
    *"asdfghjkl;'`", None, "\\",
    *"zxcvbnm,./", None, "*",
    None, " ",
)

_TABLE: tuple[Optional[str], ...] = _LAYOUT + (None,) * (128 - len(_LAYOUT))


def scancode_to_char(scancode: int) -> Optional[str]:
    """Translate a set-1 scan code into a character.

    Key releases and keys without a character give ``None``.
    """
    if not 0 <= scancode <= 0xFF:
        raise ValueError(f"scan code out of range: {scancode}")
    if scancode & _RELEASE_BIT:
        return None
    return _TABLE[scancode]


def read_line(chars: Iterable[Optional[str]], max_length: int = 512) -> str:
    """Assemble a line from typed characters.

    Reading stops at a newline, when ``max_length - 1`` characters are
    held, or when ``chars`` runs out. Backspace removes the last character;
    other non-printable characters are ignored.
    """
    if max_length < 1:
        raise ValueError("max_length must be at least 1")
    line: list[str] = []
    typed = iter(chars)
    while len(line) < max_length - 1:
        char = next(typed, None)
        if char is None:
            # Either the source is exhausted or the key had no character.
            break
        if char == "\n":
            break
        if char == "\b":
            if line:
                line.pop()
        elif len(char) == 1 and " " <= char <= "~":
            line.append(char)
    return "".join(line)