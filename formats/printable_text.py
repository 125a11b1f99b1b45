#!/usr/bin/env python3
"""
Keep only the ASCII letters and whitespace of the data, dropping digits,
punctuation, control and high bytes. Useful for pulling readable strings
out of a payload.
"""


def dump(data: bytes, config) -> str:
    return "".join(
        chr(b) for b in data
        if bytes((b,)).isalpha() or bytes((b,)).isspace()
    )
