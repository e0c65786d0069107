"""Tree accessor and field coercion helpers.

The document tree is plain ``json.loads`` output (dict / list / str / int /
float / bool / None). Reads follow JSON-native conversion rules:

- A missing child yields the caller's fallback.
- A present child of the wrong shape is NOT defaulted: it raises
  FieldTypeError and fails the whole document.
- Unsigned integer fields are stored modulo their bit width.

The LUID, packaging version and CU mask helpers absorb malformed input
silently instead; those are the format's observed behaviors.
"""

import json
import math
import re
from typing import Any, Iterator, List, Tuple, TypeVar

from system_info.kernel.models import LUID_SIZE

T = TypeVar("T", str, bool, int)

_LEADING_HEX = re.compile(r"\s*([+-]?)([0-9a-fA-F]+)")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_DIGITS = re.compile(r"\d*")


class SystemInfoDecodeError(ValueError):
    """Raised when a document cannot be decoded into a System Info record."""


class FieldTypeError(SystemInfoDecodeError):
    """Raised when a present field has the wrong JSON type."""
    def __init__(self, name: str, expected: str, value: Any):
        self.name = name
        self.expected = expected
        self.value = value
        super().__init__(
            f"Field '{name}' must be {expected}, got {_json_type_name(value)}"
        )


def _json_type_name(value: Any) -> str:
    """Get the JSON type name of a decoded value."""
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, (int, float)):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, list):
        return "array"
    elif isinstance(value, dict):
        return "object"
    return type(value).__name__


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number overflow: {text}")
    return value


def parse_json(text: str) -> Any:
    """Parse strict JSON text into a document tree.

    NaN, Infinity and numbers too large for a float are rejected, as is
    nesting deeper than the interpreter can decode.

    Raises:
        ValueError: If the text is not valid JSON.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    except RecursionError:
        raise ValueError("JSON nesting too deep") from None


def node_exists(parent: Any, name: str) -> bool:
    """Check whether ``parent`` is an object with a child called ``name``."""
    return isinstance(parent, dict) and name in parent


def to_uint(value: Any, name: str, bits: int = 32) -> int:
    """Convert a JSON number (or boolean) to an unsigned integer of ``bits`` width."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value) & ((1 << bits) - 1)
    raise FieldTypeError(name, "a number", value)


def get_value(parent: Any, name: str, fallback: T, bits: int = 32) -> T:
    """Get a child value converted to the type of ``fallback``.

    Args:
        parent: The object node to read from.
        name: The child key.
        fallback: Returned when the child is absent; its type selects the conversion.
        bits: Width of unsigned integer fields (32 or 64).

    Returns:
        The converted child value, or ``fallback``.

    Raises:
        FieldTypeError: If the child exists but cannot be converted.
    """
    if not node_exists(parent, name):
        return fallback

    value = parent[name]
    if isinstance(fallback, bool):
        if not isinstance(value, bool):
            raise FieldTypeError(name, "a boolean", value)
        return value
    elif isinstance(fallback, int):
        return to_uint(value, name, bits)
    elif isinstance(fallback, str):
        if not isinstance(value, str):
            raise FieldTypeError(name, "a string", value)
        return value
    raise TypeError(f"Unsupported fallback type: {type(fallback).__name__}")


def iter_elements(node: Any) -> Iterator[Any]:
    """Iterate the elements of a list node.

    Objects yield their values, null yields nothing and any other scalar is
    treated as a single element.
    """
    if node is None:
        return
    if isinstance(node, list):
        yield from node
    elif isinstance(node, dict):
        yield from node.values()
    else:
        yield node


def iter_entries(node: Any, name: str) -> Iterator[Tuple[str, Any]]:
    """Iterate the ``(key, value)`` entries of an object node.

    Null and an empty array have no entries.

    Raises:
        FieldTypeError: If the node is any other non-object.
    """
    if node is None or node == []:
        return
    if not isinstance(node, dict):
        raise FieldTypeError(name, "an object", node)
    yield from node.items()


def parse_luid(text: str) -> bytes:
    """Decode a hex string into an 8-byte locally unique identifier.

    Each two-character slice becomes one byte, left to right, read like
    ``strtol`` in base 16: the leading hex run counts ("1g" is 0x01) and a
    slice without one decodes as 0. Bytes past the eighth are dropped. An
    odd-length string is not a byte sequence and decodes to all zero bytes.
    """
    luid = bytearray(LUID_SIZE)
    if len(text) % 2:
        return bytes(luid)

    for i in range(0, min(len(text), LUID_SIZE * 2), 2):
        match = _LEADING_HEX.match(text, i, i + 2)
        if match:
            value = int(match.group(2), 16)
            if match.group(1) == "-":
                value = -value
            luid[i // 2] = value & 0xFF
    return bytes(luid)


def parse_packaging_version(text: str) -> Tuple[int, int]:
    """Derive (major, minor) from a dotted packaging version string.

    Examples: "23.40.12" -> (23, 40), "23" -> (0, 0), "23.40" -> (23, 0).
    Without a '.', both parts stay 0. The minor is the digit run right after
    the first '.', and is only taken when something other than a digit
    follows it; a run that reaches the end of the string leaves it 0.
    """
    major, minor = 0, 0
    first = text.find(".")
    if first == -1:
        return major, minor

    match = _LEADING_INT.match(text[:first])
    if match:
        major = int(match.group(1)) & 0xFFFFFFFF

    digits = _LEADING_DIGITS.match(text, first + 1)
    if digits.end() < len(text) and digits.group(0):
        minor = int(digits.group(0)) & 0xFFFFFFFF
    return major, minor


def parse_cu_mask(node: Any) -> List[List[int]]:
    """Parse the CU mask matrix (shader engine -> per-array bitmask).

    Any structural violation (an element that is not an array, or a mask that
    is not an unsigned integer) discards the whole matrix.
    """
    if not isinstance(node, list):
        return []

    cu_mask: List[List[int]] = []
    for shader_array_list in node:
        if not isinstance(shader_array_list, list):
            return []

        shader_array_masks: List[int] = []
        for mask in shader_array_list:
            if isinstance(mask, bool) or not isinstance(mask, int) or mask < 0:
                return []
            shader_array_masks.append(mask & 0xFFFFFFFF)
        cu_mask.append(shader_array_masks)
    return cu_mask
