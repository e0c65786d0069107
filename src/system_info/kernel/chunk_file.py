"""Chunk file access: named, versioned byte chunks inside a container file.

The container format itself is provided by the caller through the
``ChunkFile`` protocol. ``MemoryChunkFile`` implements it over a dict for
callers that already hold chunk payloads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class ChunkFileError(ValueError):
    """Raised when a chunk cannot be read from a chunk file."""


class ChunkNotFoundError(ChunkFileError):
    """Raised when the chunk file has no chunk with the requested identifier."""
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Chunk '{identifier}' not found")


class ChunkVersionError(ChunkFileError):
    """Raised when a chunk's stored version is outside the supported range."""
    def __init__(self, identifier: str, version: int, min_version: int, max_version: int):
        self.identifier = identifier
        self.version = version
        self.min_version = min_version
        self.max_version = max_version
        super().__init__(
            f"Chunk '{identifier}' has version {version}, "
            f"supported versions are {min_version}..{max_version}"
        )


@runtime_checkable
class ChunkFile(Protocol):
    """Read access to the chunks of an open container file."""

    def contains_chunk(self, identifier: str) -> bool:
        ...

    def get_chunk_version(self, identifier: str) -> int:
        ...

    def get_chunk_data_size(self, identifier: str) -> int:
        ...

    def read_chunk_data(self, identifier: str, buffer: bytearray) -> None:
        """Copy the chunk payload into the start of ``buffer``."""
        ...


@dataclass(frozen=True)
class _Chunk:
    data: bytes
    version: int


class MemoryChunkFile:
    """In-memory chunk file."""

    def __init__(self):
        self._chunks: Dict[str, _Chunk] = {}

    def add_chunk(self, identifier: str, data: bytes, version: int = 1) -> None:
        """Add (or replace) a chunk."""
        self._chunks[identifier] = _Chunk(data=bytes(data), version=version)

    def contains_chunk(self, identifier: str) -> bool:
        return identifier in self._chunks

    def get_chunk_version(self, identifier: str) -> int:
        return self._get(identifier).version

    def get_chunk_data_size(self, identifier: str) -> int:
        return len(self._get(identifier).data)

    def read_chunk_data(self, identifier: str, buffer: bytearray) -> None:
        data = self._get(identifier).data
        buffer[:len(data)] = data

    def _get(self, identifier: str) -> _Chunk:
        try:
            return self._chunks[identifier]
        except KeyError:
            raise ChunkNotFoundError(identifier) from None


def read_chunk_text(
    chunk_file: ChunkFile,
    identifier: str,
    max_version: int,
    min_version: int = 0,
) -> str:
    """Read a chunk's payload as text.

    The version is checked before any byte is read. The payload is read
    into a buffer one byte larger than the chunk and NUL terminated; the text
    is everything before the first NUL, decoded as UTF-8.

    Raises:
        ChunkNotFoundError: If the chunk is absent.
        ChunkVersionError: If the stored version is outside min_version..max_version.
    """
    if not chunk_file.contains_chunk(identifier):
        logger.debug("chunk %s not present", identifier)
        raise ChunkNotFoundError(identifier)

    version = chunk_file.get_chunk_version(identifier)
    if version > max_version or version < min_version:
        logger.debug("chunk %s version %d outside %d..%d", identifier, version, min_version, max_version)
        raise ChunkVersionError(identifier, version, min_version, max_version)

    chunk_size = chunk_file.get_chunk_data_size(identifier)
    buffer = bytearray(chunk_size + 1)
    chunk_file.read_chunk_data(identifier, buffer)
    buffer[chunk_size] = 0
    return buffer[:buffer.index(0)].decode("utf-8", errors="replace")
