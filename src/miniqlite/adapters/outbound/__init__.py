"""Outbound adapters - implementations of outbound ports.

These adapters implement external dependencies: the text and binary
database file formats and the file I/O around them.
"""

from miniqlite.adapters.outbound.binary_codec import BinaryCodec
from miniqlite.adapters.outbound.file_persistence import FilePersistence
from miniqlite.adapters.outbound.text_codec import TextCodec

__all__ = [
    "TextCodec",
    "BinaryCodec",
    "FilePersistence",
]
