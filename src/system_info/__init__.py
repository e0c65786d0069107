"""system_info: versioned System Info document and chunk reader."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("system-info-utils")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from system_info.api import (
    ReadResult,
    extract_system_json,
    load_system_info,
    read_system_info,
    read_system_info_chunk,
)
from system_info.codes import ReadStatus
from system_info.kernel.chunk_file import ChunkFile, MemoryChunkFile
from system_info.kernel.models import SystemInfo

__all__ = [
    "__version__",
    "read_system_info",
    "load_system_info",
    "extract_system_json",
    "read_system_info_chunk",
    "ReadResult",
    "ReadStatus",
    "SystemInfo",
    "ChunkFile",
    "MemoryChunkFile",
]
