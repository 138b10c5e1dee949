"""Canonical JSON serialization for event payloads.

Deterministic output: sorted keys, compact separators, ASCII-only.  Equal
mappings always produce equal payload strings.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from logcourier.errors import CompositionError


def canonical_json(obj: Mapping[str, Any]) -> str:
    """Serialize *obj* to canonical JSON text.

    Raises
    ------
    CompositionError
        If *obj* holds values JSON cannot represent (arbitrary objects,
        NaN/infinity, circular references, nesting deeper than the
        recursion limit).
    """
    try:
        return json.dumps(
            obj,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=True,
            allow_nan=False,
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise CompositionError(f"Payload is not serializable: {exc}") from exc
