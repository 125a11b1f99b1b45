#!/usr/bin/env python3
"""
All bytes as one unbroken run of lowercase hex digits, e.g. 4500003c1c46.
Handy for pasting into filters or other decoders.
"""


def dump(data: bytes, config) -> str:
    return data.hex()
