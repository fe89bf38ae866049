"""
Line classification shared by the mbox reader and writer.

A separator line starts with the five bytes ``From `` at the beginning of a
line. Body lines that would look like one are quoted the mboxrd way: any line
matching ``^>*From `` gets one more ``>`` on write, and any line matching
``^>+From `` loses one ``>`` on read.
"""

import io
import re
from typing import Iterator

SEPARATOR_PREFIX = b"From "

# Written before every message on eml -> mbox. A bare eml file carries no
# envelope sender or delivery time, so both fields are fixed.
PLACEHOLDER_SEPARATOR = b"From MAILER-DAEMON Thu Jan  1 00:00:00 1970\n"

LINE_TERMINATOR = b"\n"

_QUOTABLE_LINE = re.compile(rb">*From ")
_QUOTED_LINE = re.compile(rb">+From ")


def iter_lines(data: bytes) -> Iterator[bytes]:
    """Yield the lines of data with their terminators, splitting on b'\\n' only."""
    return iter(io.BytesIO(data))


def is_separator(line: bytes) -> bool:
    return line.startswith(SEPARATOR_PREFIX)


def escape_line(line: bytes) -> bytes:
    """Add one '>' to a line that could be read back as a separator."""
    if _QUOTABLE_LINE.match(line):
        return b">" + line
    return line


def unescape_line(line: bytes) -> bytes:
    """Remove one '>' from a line quoted by escape_line."""
    if _QUOTED_LINE.match(line):
        return line[1:]
    return line


def validate_separator(separator: bytes) -> bytes:
    """Check that separator is a single line the reader will accept."""
    if not is_separator(separator):
        raise ValueError(f"separator must start with {SEPARATOR_PREFIX!r}: {separator!r}")
    if not separator.endswith(LINE_TERMINATOR) or separator.count(LINE_TERMINATOR) != 1:
        raise ValueError(f"separator must be exactly one line: {separator!r}")
    return separator
