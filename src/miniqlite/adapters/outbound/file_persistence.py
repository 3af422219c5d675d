"""File-based persistence of a whole database.

This adapter binds the DatabaseCodec implementations to files on disk.

Save:
    The destination is opened for truncate-write. If it cannot be opened,
    an existing file at that path is left untouched. If writing fails
    partway, the partial file is left on disk as-is.

Load:
    The database is cleared first. Tables are then rebuilt through the
    storage engine's ordinary create/insert path, so they take the layout
    that is active at load time. On any failure the database is cleared
    again and ends up empty, never half-populated.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterable

from miniqlite.adapters.outbound.binary_codec import BinaryCodec
from miniqlite.adapters.outbound.text_codec import TextCodec
from miniqlite.domain.errors import (
    FormatError,
    MiniQLiteError,
    PersistenceIoError,
    ResourceExhausted,
)
from miniqlite.domain.services import StorageEngine
from miniqlite.domain.value_objects import PersistenceFormat
from miniqlite.infrastructure.logging import get_logger
from miniqlite.ports.outbound import DatabaseCodec

logger = get_logger(__name__)


class FilePersistence:
    """Saves and loads a StorageEngine's database to and from files."""

    def __init__(self, codecs: Iterable[DatabaseCodec] | None = None) -> None:
        """Initialize with the available codecs.

        Args:
            codecs: Codec implementations, one per format. Defaults to the
                text and binary codecs.
        """
        if codecs is None:
            codecs = (TextCodec(), BinaryCodec())
        self._codecs: dict[PersistenceFormat, DatabaseCodec] = {c.format: c for c in codecs}

    def codec(self, fmt: PersistenceFormat) -> DatabaseCodec:
        try:
            return self._codecs[fmt]
        except KeyError:
            raise FormatError(f"No codec registered for format '{fmt.value}'") from None

    def save(self, engine: StorageEngine, path: str | Path, fmt: PersistenceFormat) -> int:
        """Write every table to `path`.

        Returns:
            Number of bytes written.

        Raises:
            PersistenceIoError: The file could not be opened or written.
            FormatError: A table cannot be represented in `fmt`.
        """
        codec = self.codec(fmt)
        path = Path(path)

        try:
            stream = open(path, "wb")
        except OSError as e:
            raise PersistenceIoError(f"Cannot open '{path}' for writing: {e}") from e

        try:
            with stream:
                written = codec.dump(engine.database, stream)
        except OSError as e:
            logger.error("database_save_failed", path=str(path), error=str(e))
            raise PersistenceIoError(f"Writing '{path}' failed: {e}") from e
        except MemoryError as e:
            raise ResourceExhausted("Out of memory while saving") from e
        except FormatError as e:
            logger.error("database_save_failed", path=str(path), error=str(e))
            raise

        logger.info(
            "database_saved",
            path=str(path),
            format=fmt.value,
            tables=len(engine.database),
            bytes=written,
        )
        return written

    def load(self, engine: StorageEngine, path: str | Path, fmt: PersistenceFormat) -> int:
        """Replace the database with the contents of `path`.

        Returns:
            Number of bytes read.

        Raises:
            PersistenceIoError: The file could not be read.
            FormatError: The file is malformed or holds values the engine rejects.
        """
        codec = self.codec(fmt)
        path = Path(path)
        engine.clear()

        try:
            data = path.read_bytes()
        except OSError as e:
            raise PersistenceIoError(f"Cannot read '{path}': {e}") from e

        try:
            for image in codec.load(io.BytesIO(data)):
                engine.create_table(image.name, image.columns)
                for row in image.rows:
                    engine.insert_row(image.name, row)
        except FormatError as e:
            engine.clear()
            logger.error("database_load_failed", path=str(path), error=str(e))
            raise
        except MiniQLiteError as e:
            engine.clear()
            logger.error("database_load_failed", path=str(path), error=str(e))
            raise FormatError(f"Invalid content in '{path}': {e}") from e
        except MemoryError as e:
            engine.clear()
            raise ResourceExhausted("Out of memory while loading") from e

        logger.info(
            "database_loaded",
            path=str(path),
            format=fmt.value,
            tables=len(engine.database),
            bytes=len(data),
        )
        return len(data)
