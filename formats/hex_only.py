#!/usr/bin/env python3
"""
Hex dump without the ASCII column: offset and hex bytes only.
"""
from dataclasses import replace

from hexdump import format_hex_dump


def dump(data: bytes, config) -> str:
    return format_hex_dump(data, replace(config, show_text=False))
