"""Rule data types and effect merging.

Rules come in three kinds:

- ``Applicability``: the target is relevant only while ``applies_when`` holds.
  A field is applicable iff its own applicability rules and those of every
  enclosing group hold.
- ``Rule``: while ``when`` holds, apply ``effect`` to the target. Effects are
  REQUIRED, FORBIDDEN, RESTRICTED_TO(codes) and CARDINALITY(min, max).
- ``Constraint``: a value comparison producing an Invalid reason code.

Effects from several rules merge without regard to order: restrictions
intersect, cardinality bounds intersect, and REQUIRED together with FORBIDDEN
is a defect in the rule table.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from sii_offerte.errors import InconsistentRuleSet
from sii_offerte.rules.predicates import ALWAYS, Context, Predicate


@dataclass(frozen=True)
class Required:
    pass


@dataclass(frozen=True)
class Forbidden:
    pass


@dataclass(frozen=True)
class RestrictedTo:
    codes: frozenset[str]


@dataclass(frozen=True)
class Cardinality:
    min: int = 0
    max: int | None = None


Effect = Union[Required, Forbidden, RestrictedTo, Cardinality]

REQUIRED = Required()
FORBIDDEN = Forbidden()


@dataclass(frozen=True)
class Applicability:
    name: str
    target: str
    applies_when: Predicate


@dataclass(frozen=True)
class Rule:
    name: str
    target: str
    effect: Effect
    when: Predicate = ALWAYS


@dataclass(frozen=True)
class Constraint:
    """``check(ctx, value)`` returns a reason code or None."""

    name: str
    target: str
    check: Callable[[Context, Any], str | None]
    inputs: frozenset[str] = frozenset()


@dataclass
class EffectSet:
    """Merged effects of every rule firing on one field instance."""

    required_by: list[str] = field(default_factory=list)
    forbidden_by: list[str] = field(default_factory=list)
    allowed: frozenset[str] | None = None
    min_items: int = 0
    max_items: int | None = None

    @property
    def required(self) -> bool:
        return bool(self.required_by)

    @property
    def forbidden(self) -> bool:
        return bool(self.forbidden_by)


def merge_effects(target: str, fired: Iterable[Rule]) -> EffectSet:
    """Combine the effects of the rules that fired for one instance.

    Raises:
        InconsistentRuleSet: if one rule requires and another forbids the field.
    """
    merged = EffectSet()
    for rule in fired:
        effect = rule.effect
        if isinstance(effect, Required):
            merged.required_by.append(rule.name)
        elif isinstance(effect, Forbidden):
            merged.forbidden_by.append(rule.name)
        elif isinstance(effect, RestrictedTo):
            merged.allowed = effect.codes if merged.allowed is None else merged.allowed & effect.codes
        elif isinstance(effect, Cardinality):
            merged.min_items = max(merged.min_items, effect.min)
            if effect.max is not None:
                merged.max_items = effect.max if merged.max_items is None else min(merged.max_items, effect.max)

    if merged.required and merged.forbidden:
        raise InconsistentRuleSet(target, merged.required_by[0], merged.forbidden_by[0])
    return merged
