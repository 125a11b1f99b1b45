#!/usr/bin/env python3
"""
Hex dump with an ASCII column: offset, hex bytes, printable characters.
Non-printable bytes show as '.'; the text column lines up on every row.
"""
from dataclasses import replace

from hexdump import format_hex_dump


def dump(data: bytes, config) -> str:
    return format_hex_dump(data, replace(config, show_text=True))
