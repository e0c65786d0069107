"""Centralized compact JSON serialization.

One function for every JSON text this package emits: the envelope-stripped
system subtree, filtered driver overrides and CLI output. Producers of
System Info chunks dump JSON with sorted keys and no whitespace; emitting
the same form keeps extracted subtrees byte-comparable with theirs.
"""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Compact JSON serialization with sorted keys.

    Rules:
    - UTF-8 output (no ASCII escaping)
    - Sorted keys
    - Stable separators (",", ":")
    - Lists keep their order

    Args:
        obj: Python object to serialize

    Returns:
        Compact JSON string
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False  # UTF-8 output
    )
