"""
SonicState v1 Utilities - Shared helper functions.

Responsibilities:
- JSON serialization helpers

Invariants:
- Output is deterministic (sorted keys, fixed indent)
"""

import json
from typing import Any, Mapping


def serialize_json(data: Mapping[str, Any]) -> str:
    """
    Serialize dictionary to JSON deterministically.

    Args:
        data: Dictionary to serialize.

    Returns:
        JSON string with sorted keys, 2-space indent, trailing newline.
    """
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"
