"""Exceptions raised by the validation engine.

User data never raises: problems with an offer record are returned inside the
verdict. The exceptions below signal defects in the catalog or the rule table,
or a caller asking to export a record that has not passed validation.
"""

from __future__ import annotations

from typing import Any


class SiiOfferteError(Exception):
    """Base class for all engine errors."""


class UnknownField(SiiOfferteError, KeyError):
    """A field id is not registered in the catalog."""

    def __init__(self, field_id: str) -> None:
        super().__init__(field_id)
        self.field_id = field_id

    def __str__(self) -> str:
        return f"Unknown field id: {self.field_id!r}"


class InconsistentRuleSet(SiiOfferteError):
    """Two rules give REQUIRED and FORBIDDEN for the same field under overlapping triggers."""

    def __init__(self, target: str, first: str, second: str, sample: dict[str, Any] | None = None) -> None:
        self.target = target
        self.rules = (first, second)
        self.sample = sample or {}
        detail = f" (e.g. {self.sample})" if self.sample else ""
        super().__init__(f"Rules {first!r} and {second!r} conflict on {target!r}{detail}")


class ExportBlocked(SiiOfferteError):
    """The record still has blocking errors and cannot be serialized."""

    def __init__(self, errors: list[Any]) -> None:
        self.errors = errors
        super().__init__(f"Record has {len(errors)} blocking error(s)")
