"""File header shared by the text and binary formats.

Format:
    MINIQLITE 1\\n
    TABLE_COUNT <n>\\n
"""

from __future__ import annotations

from typing import BinaryIO

from miniqlite.domain.errors import FormatError
from miniqlite.ports.outbound import (
    ENCODING,
    ENCODING_ERRORS,
    MAGIC,
    TABLE_COUNT_KEYWORD,
)


def encode_line(text: str) -> bytes:
    """Encode one line of text, appending the newline."""
    return (text + "\n").encode(ENCODING, ENCODING_ERRORS)


def read_line(stream: BinaryIO, what: str) -> str:
    """Read one line without its newline.

    Raises:
        FormatError: The stream is exhausted.
    """
    raw = stream.readline()
    if not raw:
        raise FormatError(f"Unexpected end of file reading {what}")
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    return raw.decode(ENCODING, ENCODING_ERRORS)


def parse_count(token: str, what: str) -> int:
    """Parse a non-negative decimal count."""
    if not (token.isascii() and token.isdigit()):
        raise FormatError(f"Invalid {what}: {token!r}")
    return int(token)


def write_header(stream: BinaryIO, table_count: int) -> int:
    """Write the magic and table count lines. Returns bytes written."""
    data = encode_line(MAGIC) + encode_line(f"{TABLE_COUNT_KEYWORD} {table_count}")
    stream.write(data)
    return len(data)


def read_header(stream: BinaryIO) -> int:
    """Validate the header and return the table count.

    Raises:
        FormatError: Bad magic or malformed count line.
    """
    magic = read_line(stream, "header")
    if magic.rstrip("\r") != MAGIC:
        raise FormatError(f"Bad magic: expected {MAGIC!r}, got {magic[:32]!r}")

    fields = read_line(stream, "table count").split()
    if len(fields) != 2 or fields[0] != TABLE_COUNT_KEYWORD:
        raise FormatError(f"Expected '{TABLE_COUNT_KEYWORD} <n>' line")
    return parse_count(fields[1], "table count")
