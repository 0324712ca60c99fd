import pytest

from pilotfs.console import (
    WHITE_ON_BLACK,
    Console,
    format_hex16,
    format_hex32,
    format_int,
    format_uint,
    hex_dump,
)


def test_write_places_text_and_moves_cursor():
    con = Console()
    con.write("hello")
    assert con.row_text(0) == "hello"
    assert (con.row, con.col) == (0, len("hello"))


def test_newline_starts_next_row():
    con = Console()
    con.write("a\nb")
    assert con.lines()[:2] == ["a", "b"]
    assert con.row == 1


def test_carriage_return_ignored():
    con = Console()
    con.write("ab\rc")
    assert con.row_text(0) == "abc"


def test_long_line_wraps():
    con = Console(width=4, height=3)
    con.write("abcdef")
    assert con.row_text(0) == "abcd"
    assert con.row_text(1) == "ef"


def test_scrolls_when_bottom_passed():
    con = Console(width=4, height=2)
    con.write("a\nb\nc")
    assert con.lines() == ["b", "c"]
    assert con.row == con.height - 1


def test_backspace_erases_previous_char():
    con = Console()
    con.write("ab\b")
    assert con.row_text(0) == "a"
    assert con.col == 1


def test_backspace_at_row_start_goes_up():
    con = Console(width=3, height=3)
    con.write("abc")
    assert (con.row, con.col) == (1, 0)
    con.put_char("\b")
    assert (con.row, con.col) == (0, con.width - 1)
    assert con.row_text(0) == "ab"


def test_cells_carry_color():
    con = Console()
    con.set_color(0x1F)
    con.write("x")
    assert con.cells[0][0] == ("x", 0x1F)


def test_clear_uses_color_and_homes_cursor():
    con = Console(width=5, height=2)
    con.write("abc\nde")
    con.set_color(0x1F)
    con.clear()
    assert (con.row, con.col) == (0, 0)
    assert all(cell == (" ", 0x1F) for row in con.cells for cell in row)


def test_default_color():
    con = Console()
    assert con.cells[0][0] == (" ", WHITE_ON_BLACK)


def test_set_cursor_moves_output():
    con = Console()
    con.set_cursor(2, 3)
    con.write("x")
    assert con.cells[2][3][0] == "x"
    assert (con.row, con.col) == (2, 4)


def test_set_cursor_off_screen_raises():
    with pytest.raises(ValueError):
        Console(width=10, height=5).set_cursor(5, 0)


def test_put_char_requires_single_char():
    with pytest.raises(ValueError):
        Console().put_char("ab")


def test_format_hex32_pins_value():
    assert format_hex32(0x1BADB002) == "1BADB002"


@pytest.mark.parametrize("value", [0, 1, 0xABC, 0xFFFF])
def test_format_hex16_round_trip(value):
    text = format_hex16(value)
    assert len(text) == 4
    assert int(text, 16) == value


@pytest.mark.parametrize("value", [0, 7, 4294967295])
def test_format_uint_round_trip(value):
    assert int(format_uint(value)) == value


def test_format_uint_wraps_at_32_bits():
    assert format_uint(2**32 + 7) == format_uint(7)


@pytest.mark.parametrize("value,base", [(0, 10), (-255, 10), (255, 16), (5, 2), (1234, 36)])
def test_format_int_round_trip(value, base):
    assert int(format_int(value, base), base) == value


def test_format_int_uppercase():
    assert format_int(255, 16) == format_int(255, 16).upper()


def test_format_int_rejects_negative_non_decimal():
    with pytest.raises(ValueError):
        format_int(-42, 16)


def test_format_int_rejects_bad_base():
    with pytest.raises(ValueError):
        format_int(10, 1)


def test_hex_dump_round_trip_and_line_breaks():
    data = bytes(range(32))
    dump = hex_dump(data)
    assert bytes.fromhex(" ".join(dump.split())) == data
    assert dump.count("\n") == len(data) // 16


def test_hex_dump_pins_format():
    assert hex_dump(b"\x1b") == "1B "