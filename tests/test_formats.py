import pytest

import dataprinter
from hexdump import FormatConfig, format_hex_dump

CONFIG = FormatConfig()


@pytest.fixture(scope="module")
def formats():
    registry = dataprinter.scan_formats(dataprinter.DEFAULT_FORMATS)
    return {fmt.name: fmt.dump for fmt in registry}


def test_all_dump_types_load(formats):
    assert set(formats) == {
        "binary", "escaped_string", "hex_dump",
        "hex_only", "hex_stream", "printable_text",
    }
    assert all(fn is not None for fn in formats.values())


def test_hex_dump_always_shows_text(formats):
    data = b"GET / HTTP/1.1\r\n"
    hidden = FormatConfig(16, show_text=False)
    assert formats["hex_dump"](data, hidden) == format_hex_dump(data, CONFIG)
    assert formats["hex_dump"](data, hidden).endswith("GET / HTTP/1.1..\n")


def test_hex_only_never_shows_text(formats):
    data = bytes(range(20))
    assert formats["hex_only"](data, CONFIG) == format_hex_dump(
        data, FormatConfig(16, show_text=False)
    )


def test_hex_dump_uses_config_width(formats):
    out = formats["hex_only"](bytes(10), FormatConfig(4, True))
    assert [ln[:4] for ln in out.splitlines()] == ["0000", "0004", "0008"]


def test_hex_stream(formats):
    assert formats["hex_stream"](b"\x45\x00\xab\xff", CONFIG) == "4500abff"
    assert formats["hex_stream"](b"", CONFIG) == ""


def test_escaped_string_short(formats):
    assert formats["escaped_string"](b"AB", CONFIG) == '"\\x41\\x42"\n'


def test_escaped_string_empty(formats):
    assert formats["escaped_string"](b"", CONFIG) == '""\n'


def test_escaped_string_breaks_every_sixteen_bytes(formats):
    data = bytes(range(18))
    first = "".join(f"\\x{b:02x}" for b in range(16))
    assert formats["escaped_string"](data, CONFIG) == (
        '"' + first + '" \\\n"' + "\\x10\\x11" + '"\n'
    )


def test_escaped_string_keeps_last_byte_on_line(formats):
    # A lone 17th byte stays on the first line.
    out = formats["escaped_string"](bytes(17), CONFIG)
    assert "\n" not in out[:-1]
    assert out.count("\\x00") == 17

    out = formats["escaped_string"](bytes(33), CONFIG)
    assert out.count(" \\\n") == 1


def test_printable_text_keeps_letters_and_whitespace(formats):
    data = b"Hi 5!\tx\x00\xc3y\r\n"
    assert formats["printable_text"](data, CONFIG) == "Hi \txy\r\n"


def test_printable_text_empty_when_nothing_matches(formats):
    assert formats["printable_text"](b"\x00\x01123\xff", CONFIG) == ""


def test_binary_returns_raw_bytes(formats):
    data = bytearray(b"\x00\x01\xfe\xff")
    out = formats["binary"](data, CONFIG)
    assert isinstance(out, bytes)
    assert out == b"\x00\x01\xfe\xff"
