"""Status code constants for system_info read results.

These constants prevent stringly-typed status codes and let callers tell
a malformed document apart from one this reader does not understand.
"""

from enum import Enum


class ReadStatus(str, Enum):
    """Outcome codes for document and chunk reads."""

    OK = "OK"

    # Document errors
    PARSE_ERROR = "PARSE_ERROR"  # Malformed text or wrongly typed value
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"  # No decoder for the schema version

    # Chunk errors
    CHUNK_NOT_FOUND = "CHUNK_NOT_FOUND"
    UNSUPPORTED_CHUNK_VERSION = "UNSUPPORTED_CHUNK_VERSION"
