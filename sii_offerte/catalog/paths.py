"""Record paths — walking an offer record along catalog field ids.

A record is a plain nested mapping: section name → mapping (or list of
mappings for repeated sections). Field ids name templates; a concrete
*instance* replaces each ``[]`` with an index, e.g. the template
``Discounts[].prices[].price`` has instances ``Discounts[0].prices[1].price``.

*Bindings* map a repeated group id to the index of the entry being evaluated,
so that a rule on ``Discounts[].validity`` reads the ``validityPeriod`` of the
same discount. Groups that are not bound are expanded to every entry.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

Bindings = dict[str, int]


def normalize(record: Any) -> dict[str, Any]:
    """Return a detached plain-data snapshot of the record.

    Accepts a mapping or an ``OfferRecord``. Enum members become their wire
    codes and tuples become lists. Anything else yields an empty record.
    """
    if hasattr(record, "to_mapping"):
        record = record.to_mapping()
    if not isinstance(record, Mapping):
        return {}
    return {str(k): _plain(v) for k, v in record.items()}


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def is_blank(value: Any) -> bool:
    """None, empty or whitespace-only text, empty list, or a mapping of blanks."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, Mapping):
        return all(is_blank(v) for v in value.values())
    return False


def _segments(field_id: str) -> list[tuple[str, bool]]:
    """Split a field id into (key, repeated) pairs."""
    parts = field_id.split(".")
    out: list[tuple[str, bool]] = []
    for i, part in enumerate(parts):
        repeated = part.endswith("[]")
        out.append((part.removesuffix("[]"), repeated and i < len(parts) - 1))
    return out


def iter_instances(record: Mapping[str, Any], field_id: str) -> Iterator[tuple[str, Bindings, Any]]:
    """Yield ``(path, bindings, value)`` for every instance of a field.

    Missing intermediate objects count as empty; an absent or empty repeated
    group yields no instances for the fields beneath it.
    """
    yield from _walk(record, _segments(field_id), "", "", {})


def _walk(
    node: Any,
    segments: list[tuple[str, bool]],
    template: str,
    path: str,
    bindings: Bindings,
) -> Iterator[tuple[str, Bindings, Any]]:
    key, repeated = segments[0]
    value = node.get(key) if isinstance(node, Mapping) else None
    template = f"{template}.{key}" if template else key
    path = f"{path}.{key}" if path else key

    if len(segments) == 1:
        yield path, bindings, value
        return

    rest = segments[1:]
    if repeated:
        if not isinstance(value, list):
            return
        for index, entry in enumerate(value):
            yield from _walk(entry, rest, f"{template}[]", f"{path}[{index}]", {**bindings, template: index})
    else:
        yield from _walk(value if isinstance(value, Mapping) else {}, rest, template, path, bindings)


def lookup(record: Mapping[str, Any], field_id: str, bindings: Bindings | None = None) -> list[Any]:
    """Non-blank values of a field that agree with the given bindings."""
    bound = bindings or {}
    values = []
    for _path, inst_bindings, value in iter_instances(record, field_id):
        if any(bound.get(group, idx) != idx for group, idx in inst_bindings.items()):
            continue
        if not is_blank(value):
            values.append(value)
    return values


def set_value(record: dict[str, Any], field_id: str, value: Any) -> None:
    """Write a value into a record, creating first entries of repeated groups as needed."""
    node: dict[str, Any] = record
    segments = _segments(field_id)
    for key, repeated in segments[:-1]:
        if repeated:
            entries = node.setdefault(key, [])
            if not entries:
                entries.append({})
            node = entries[0]
        else:
            node = node.setdefault(key, {})
    node[segments[-1][0]] = value
