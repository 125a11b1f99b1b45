import math

import pytest

from hexdump import FormatConfig, format_hex_dump, hex_chars, is_printable

TEXT    = FormatConfig(byte_line_length=16, show_text=True)
NO_TEXT = FormatConfig(byte_line_length=16, show_text=False)


def test_short_line_is_padded_to_full_width():
    out = format_hex_dump(bytes([0x41, 0x42, 0x43]), TEXT)
    assert out == "0000   41 42 43" + " " * (3 + 13 * 3) + "ABC\n"


def test_empty_buffer_gives_empty_string():
    assert format_hex_dump(b"", NO_TEXT) == ""
    assert format_hex_dump(b"", TEXT) == ""


def test_two_full_lines_without_text():
    lines = format_hex_dump(bytes(range(32)), NO_TEXT).splitlines()
    assert len(lines) == 2
    assert lines[0] == "0000  " + "".join(f" {b:02x}" for b in range(16))
    assert lines[1].startswith("0010   10 11")


def test_nul_byte_renders_as_dot():
    out = format_hex_dump(b"\x00A", TEXT)
    assert out.endswith(".A\n")


def test_single_byte():
    out = format_hex_dump(b"\xff", TEXT)
    assert out == "0000   ff" + " " * (3 + 15 * 3) + ".\n"


@pytest.mark.parametrize("length", [1, 7, 15, 16, 17, 32, 33, 100])
@pytest.mark.parametrize("width", [1, 3, 8, 16])
def test_one_line_per_chunk(length, width):
    data = bytes(i & 0xFF for i in range(length))
    for show_text in (True, False):
        out = format_hex_dump(data, FormatConfig(width, show_text))
        assert len(out.split("\n")) - 1 == math.ceil(length / width)


@pytest.mark.parametrize("width", [4, 8, 10, 16])
def test_offsets_follow_line_width(width):
    data = bytes(50)
    lines = format_hex_dump(data, FormatConfig(width, False)).splitlines()
    assert [ln[:4] for ln in lines] == [f"{i * width:04x}" for i in range(len(lines))]
    assert all(ln[4:6] == "  " for ln in lines)


@pytest.mark.parametrize("width", [5, 16])
def test_hex_tokens_reproduce_input(width):
    data = bytes(range(200, 256)) + b"\x00\x7f hello"
    lines = format_hex_dump(data, FormatConfig(width, True)).splitlines()
    decoded = b""
    for ln in lines:
        hex_field = ln[6:6 + 3 * width]
        decoded += bytes.fromhex("".join(hex_field.split()))
    assert decoded == data


def test_text_column_is_aligned_on_every_line():
    data = b"The quick brown fox jumps"
    lines = format_hex_dump(data, TEXT).splitlines()
    start = 6 + 16 * 3 + 3
    assert lines[0][start:] == "The quick brown "
    assert lines[1][start:] == "fox jumps"
    assert lines[1][start - 1] == " "


def test_text_column_aligned_with_custom_width():
    data = b"abcdefghij"
    lines = format_hex_dump(data, FormatConfig(4, True)).splitlines()
    start = 6 + 4 * 3 + 3
    assert [ln[start:] for ln in lines] == ["abcd", "efgh", "ij"]


def test_exact_multiple_needs_no_padding():
    lines = format_hex_dump(b"A" * 32, TEXT).splitlines()
    assert len(lines) == 2
    assert len(lines[0]) == len(lines[1]) == 6 + 48 + 3 + 16


def test_without_text_there_is_no_trailing_separator():
    out = format_hex_dump(b"ABC", NO_TEXT)
    assert out == "0000   41 42 43\n"


def test_printable_range():
    assert is_printable(0x20)
    assert is_printable(ord("~"))
    assert not is_printable(0x1F)
    assert not is_printable(0x7F)
    assert not is_printable(0xFF)
    out = format_hex_dump(b" \x7f\x80~", TEXT)
    assert out.endswith(" ..~\n")


def test_default_config():
    assert FormatConfig() == FormatConfig(16, True)
    assert format_hex_dump(b"A") == format_hex_dump(b"A", TEXT)


def test_config_is_immutable():
    with pytest.raises(AttributeError):
        TEXT.byte_line_length = 8


@pytest.mark.parametrize("view, interval, expected", [
    ("hex", 8, 49),
    ("bits", 8, 72),
    ("hex", 4, 51),
])
def test_hex_chars(view, interval, expected):
    assert hex_chars(view, interval) == expected


def test_hex_chars_unknown_view():
    with pytest.raises(ValueError, match="Unknown bytes view"):
        hex_chars("octal")
