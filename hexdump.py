#!/usr/bin/env python3
"""
hexdump.py - Hex dump text formatter for DataPrinter.

Turns a byte buffer into the classic offset / hex / ASCII listing:

    0000   48 65 6c 6c 6f 0a                                  Hello.

The line width is carried by FormatConfig and passed on every call, so the
same function serves the hex_dump and hex_only formats with any width.
"""

import math
from dataclasses import dataclass

SEPARATOR   = "   "   # between the hex field and the text column
SLOT_WIDTH  = 3       # " %02x"

# Bytes view layouts used by hex_chars(): (bytes per row, chars per byte)
BYTES_VIEWS = {
    "hex":  (16, 3),
    "bits": (8, 9),
}


@dataclass(frozen=True)
class FormatConfig:
    byte_line_length: int  = 16
    show_text:        bool = True


def is_printable(byte: int) -> bool:
    return 0x20 <= byte < 0x7F


def format_hex_dump(data: bytes, config: FormatConfig = FormatConfig()) -> str:
    """
    Render *data* as a hex dump, one line per config.byte_line_length bytes.

    The offset column counts bytes. With show_text the ASCII column is
    aligned on every line: a short last line is padded with one blank slot
    per missing byte. Callers must pass byte_line_length >= 1.
    """
    width = config.byte_line_length
    lines = math.ceil(len(data) / width)
    out   = []

    for i in range(lines):
        offset = i * width
        chunk  = data[offset:offset + width]

        line = f"{offset:04x}  " + "".join(f" {b:02x}" for b in chunk)
        if config.show_text:
            line += SEPARATOR
            if i == lines - 1:
                line += " " * ((width - len(chunk)) * SLOT_WIDTH)
            line += "".join(chr(b) if is_printable(b) else "." for b in chunk)
        out.append(line + "\n")

    return "".join(out)


def hex_chars(bytes_view: str = "hex", separator_interval: int = 8) -> int:
    """Character width of one row in a byte view, separators included."""
    try:
        row_width, chars_per_byte = BYTES_VIEWS[bytes_view]
    except KeyError:
        raise ValueError(
            f"Unknown bytes view '{bytes_view}' (expected one of: "
            + ", ".join(sorted(BYTES_VIEWS)) + ")"
        ) from None
    return row_width * chars_per_byte + (row_width - 1) // separator_interval
