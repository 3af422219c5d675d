"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (e.g., DatabaseCodec)

Adapters implement these ports with concrete functionality.
"""

from miniqlite.ports.outbound import DatabaseCodec, TableImage

__all__ = [
    # Outbound ports
    "DatabaseCodec",
    "TableImage",
]
