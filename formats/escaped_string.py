#!/usr/bin/env python3
"""
C-style escaped string literal ("\\x45\\x00..."), 16 bytes per source line.
Continuation lines are joined with a trailing backslash so the output
pastes straight into C or Python source.
"""

BYTES_PER_LINE = 16


def dump(data: bytes, config) -> str:
    out = ['"']
    last = len(data) - 1
    for i, b in enumerate(data):
        # The closing quote below ends the final line, so never break before it.
        if i % BYTES_PER_LINE == 0 and i != 0 and i != last:
            out.append('" \\\n"')
        out.append(f"\\x{b:02x}")
    out.append('"\n')
    return "".join(out)
