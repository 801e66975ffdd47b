"""Trigger predicates over an offer record.

A predicate is a small object wrapping a function of the evaluation
``Context`` together with the field ids it reads. Knowing the inputs lets the
static self-check enumerate the values that can drive a trigger. Predicates
compose with ``&``, ``|`` and ``~``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from sii_offerte.catalog.paths import Bindings, lookup


@dataclass
class Context:
    """The record being validated plus the repeated-group entries in focus."""

    record: Mapping[str, Any]
    bindings: Bindings = field(default_factory=dict)
    early_withdrawal_cutoff: date | None = None

    def values(self, field_id: str) -> list[Any]:
        return lookup(self.record, field_id, self.bindings)

    def value(self, field_id: str) -> Any:
        found = self.values(field_id)
        return found[0] if found else None


@dataclass(frozen=True)
class Predicate:
    fn: Callable[[Context], bool]
    inputs: frozenset[str]
    label: str

    def __call__(self, ctx: Context) -> bool:
        return self.fn(ctx)

    def __and__(self, other: Predicate) -> Predicate:
        return Predicate(
            fn=lambda ctx: self(ctx) and other(ctx),
            inputs=self.inputs | other.inputs,
            label=f"({self.label} and {other.label})",
        )

    def __or__(self, other: Predicate) -> Predicate:
        return Predicate(
            fn=lambda ctx: self(ctx) or other(ctx),
            inputs=self.inputs | other.inputs,
            label=f"({self.label} or {other.label})",
        )

    def __invert__(self) -> Predicate:
        return Predicate(fn=lambda ctx: not self(ctx), inputs=self.inputs, label=f"not {self.label}")


ALWAYS = Predicate(fn=lambda ctx: True, inputs=frozenset(), label="always")


def value_in(field_id: str, codes: Iterable[str]) -> Predicate:
    """Some instance of the field holds one of ``codes``."""
    allowed = frozenset(codes)
    return Predicate(
        fn=lambda ctx: any(v in allowed for v in ctx.values(field_id) if isinstance(v, str)),
        inputs=frozenset({field_id}),
        label=f"{field_id} in {sorted(allowed)}",
    )


def value_is(field_id: str, code: str) -> Predicate:
    pred = value_in(field_id, (code,))
    return Predicate(fn=pred.fn, inputs=pred.inputs, label=f"{field_id} = {code}")


def contains(field_id: str, code: str) -> Predicate:
    """A list-valued field includes ``code``."""
    return Predicate(
        fn=lambda ctx: any(isinstance(v, list) and code in v for v in ctx.values(field_id)),
        inputs=frozenset({field_id}),
        label=f"{code} in {field_id}",
    )


def present(field_id: str) -> Predicate:
    return Predicate(
        fn=lambda ctx: bool(ctx.values(field_id)),
        inputs=frozenset({field_id}),
        label=f"{field_id} present",
    )


def absent(field_id: str) -> Predicate:
    pred = present(field_id)
    return Predicate(fn=lambda ctx: not pred(ctx), inputs=pred.inputs, label=f"{field_id} absent")

