"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (command parser, shell)
- Outbound adapters: Implement external dependencies (database files)
"""

from miniqlite.adapters.outbound import (
    BinaryCodec,
    FilePersistence,
    TextCodec,
)

__all__ = [
    # Outbound adapters
    "TextCodec",
    "BinaryCodec",
    "FilePersistence",
]
