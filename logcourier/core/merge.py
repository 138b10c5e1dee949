"""Flatten and merge helpers for userInfo mappings.

Both functions are pure: they never mutate their arguments and never raise
for string-keyed mappings of arbitrary values.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from logcourier.models.config import MergePolicy

CYCLE_MARKER = "<cycle>"


def _disambiguate(key: str, taken: Mapping[str, Any]) -> str:
    index = 1
    while f"{index}_{key}" in taken:
        index += 1
    return f"{index}_{key}"


def flatten(mapping: Mapping[str, Any], separator: str = ".") -> dict[str, Any]:
    """Collapse nested mappings into a single level of dot-joined keys.

    Lists and scalars are kept as values.  An empty nested mapping stays
    under its own key so that no key disappears.  A mapping that contains
    itself (directly or further down) is stored as ``CYCLE_MARKER`` at the
    point where it repeats.  Nesting depth is not limited by the recursion
    limit.

    Examples
    --------
    >>> flatten({"a": {"b": 1, "c": {"d": [2]}}, "e": 3})
    {'a.b': 1, 'a.c.d': [2], 'e': 3}
    """
    flat: dict[str, Any] = {}
    # (key prefix, remaining items, id of the mapping being walked)
    stack: list[tuple[str | None, Iterator[tuple[Any, Any]], int]] = [
        (None, iter(mapping.items()), id(mapping))
    ]
    on_path = {id(mapping)}

    while stack:
        prefix, items, mapping_id = stack[-1]
        entry = next(items, None)
        if entry is None:
            stack.pop()
            on_path.discard(mapping_id)
            continue

        key, value = entry
        flat_key = str(key) if prefix is None else f"{prefix}{separator}{key}"
        if isinstance(value, Mapping) and value:
            if id(value) in on_path:
                value = CYCLE_MARKER
            else:
                on_path.add(id(value))
                stack.append((flat_key, iter(value.items()), id(value)))
                continue

        # a literal "a.b" key and {"a": {"b": ...}} land on the same path
        if flat_key in flat:
            flat_key = _disambiguate(flat_key, flat)
        flat[flat_key] = value
    return flat


def merge(
    base: Mapping[str, Any],
    incoming: Mapping[str, Any],
    policy: MergePolicy = MergePolicy.ENCAPSULATE_FLATTEN,
) -> dict[str, Any]:
    """Merge *incoming* into a copy of *base* under *policy*.

    ``OVERRIDE``
        Incoming values replace colliding base values.
    ``ENCAPSULATE_FLATTEN``
        *incoming* is flattened first.  A colliding key ``k`` is stored as
        ``"<n>_k"`` with the smallest ``n >= 1`` that is still free, so
        repeated merges keep every value.
    """
    merged = dict(base)

    if policy is MergePolicy.OVERRIDE:
        merged.update(incoming)
        return merged

    for key, value in flatten(incoming).items():
        if key in merged:
            key = _disambiguate(key, merged)
        merged[key] = value
    return merged
