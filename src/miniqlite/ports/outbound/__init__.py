"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that MiniQLite
depends on, such as the on-disk database file format.
"""

from miniqlite.ports.outbound.database_codec import (
    ENCODING,
    ENCODING_ERRORS,
    MAGIC,
    TABLE_COUNT_KEYWORD,
    DatabaseCodec,
    TableImage,
)

__all__ = [
    "DatabaseCodec",
    "TableImage",
    "MAGIC",
    "TABLE_COUNT_KEYWORD",
    "ENCODING",
    "ENCODING_ERRORS",
]
