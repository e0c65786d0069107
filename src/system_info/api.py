"""Public API for the system_info package.

High-level functions that return complete, structured results. The
documented failure cases (malformed text, unsupported schema version,
missing or too new chunk) are reported through ``ReadResult`` and never
raised.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from system_info import definitions as d
from system_info.codes import ReadStatus
from system_info.kernel.chunk_file import (
    ChunkFile,
    ChunkNotFoundError,
    ChunkVersionError,
    read_chunk_text,
)
from system_info.kernel.coercion import SystemInfoDecodeError, node_exists, parse_json
from system_info.kernel.decoder import decode_system_node
from system_info.kernel.models import SystemInfo
from system_info._internal.canonical_json import canonical_dumps

logger = logging.getLogger(__name__)


class ReadResult(BaseModel):
    """Result of decoding a System Info document.

    When ``ok`` is False, ``record`` is a zero-valued ``SystemInfo``; no
    partially decoded record is ever returned.
    """
    ok: bool
    record: SystemInfo = Field(default_factory=SystemInfo)
    code: ReadStatus = ReadStatus.OK
    message: Optional[str] = None


def _failure(code: ReadStatus, message: str) -> ReadResult:
    logger.debug("system info read failed (%s): %s", code.value, message)
    return ReadResult(ok=False, code=code, message=message)


def _find_system_node(structure: Any) -> Any:
    """Return the ``system`` subtree, or the whole document if it is already unwrapped."""
    if node_exists(structure, d.NODE_SYSTEM):
        return structure[d.NODE_SYSTEM]
    return structure


def read_system_info(text: str) -> ReadResult:
    """
    Decode System Info JSON text into a ``SystemInfo`` record.

    The document may be wrapped in a ``system`` envelope or already be the
    bare system subtree (as stored in chunk files).

    Args:
        text: System Info JSON text

    Returns:
        ReadResult. ``code`` is PARSE_ERROR for malformed text or a wrongly
        typed field, UNSUPPORTED_VERSION for an unknown schema version.
    """
    try:
        structure = parse_json(text)
    except ValueError as e:
        return _failure(ReadStatus.PARSE_ERROR, f"Failed to parse System Info JSON: {e}")

    system_info = SystemInfo()
    try:
        supported = decode_system_node(_find_system_node(structure), system_info)
    except SystemInfoDecodeError as e:
        return _failure(ReadStatus.PARSE_ERROR, f"Failed to decode System Info: {e}")

    if not supported:
        return _failure(ReadStatus.UNSUPPORTED_VERSION, "Unsupported System Info version")

    return ReadResult(ok=True, record=system_info)


def load_system_info(path: Union[str, os.PathLike, Path]) -> ReadResult:
    """Decode a System Info JSON file (see ``read_system_info``)."""
    return read_system_info(Path(path).read_text(encoding="utf-8"))


def extract_system_json(text: str) -> str:
    """
    Strip the ``system`` envelope from System Info JSON text.

    Returns:
        The ``system`` subtree as compact JSON, the original text unchanged if
        there is no envelope, or "" if the text is not valid JSON.
    """
    try:
        structure = parse_json(text)
    except ValueError as e:
        logger.debug("system info extract failed: %s", e)
        return ""

    if node_exists(structure, d.NODE_SYSTEM):
        return canonical_dumps(structure[d.NODE_SYSTEM])
    return text


def read_system_info_chunk(chunk_file: ChunkFile) -> ReadResult:
    """
    Decode the System Info chunk of an open chunk file.

    Chunks newer than ``SYSTEM_INFO_CHUNK_VERSION_MAX`` are rejected without
    reading their data.
    """
    try:
        text = read_chunk_text(
            chunk_file,
            d.SYSTEM_INFO_CHUNK_IDENTIFIER,
            max_version=d.SYSTEM_INFO_CHUNK_VERSION_MAX,
        )
    except ChunkNotFoundError as e:
        return _failure(ReadStatus.CHUNK_NOT_FOUND, str(e))
    except ChunkVersionError as e:
        return _failure(ReadStatus.UNSUPPORTED_CHUNK_VERSION, str(e))

    return read_system_info(text)
