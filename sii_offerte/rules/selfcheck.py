"""Static consistency check of the rule table.

Run once at startup (and in the test suite), never against user data:

1. every rule target and every field a trigger reads is in the catalog;
2. no REQUIRED rule and FORBIDDEN rule on the same target can fire together;
3. no two cardinality rules on the same target can fire together with an
   empty range.

Overlap is decided by evaluating both triggers over every combination of the
values that can drive them: each enum code plus "absent", a one-element list
per code for code lists, and present/absent for everything else.
"""

from __future__ import annotations

import itertools
import logging
from datetime import date
from typing import Any

from sii_offerte.catalog.fields import ancestors, describe, is_repeated
from sii_offerte.catalog.paths import set_value
from sii_offerte.catalog.shapes import (
    ArrayOf,
    BooleanShape,
    BoundedString,
    DateShape,
    EnumShape,
    FieldShape,
    Group,
    Numeric,
)
from sii_offerte.errors import InconsistentRuleSet
from sii_offerte.rules.effects import Cardinality, Forbidden, Required, Rule
from sii_offerte.rules.predicates import Context
from sii_offerte.rules.table import RULE_SET, RuleSet

logger = logging.getLogger(__name__)

_ABSENT = object()


def _sample(shape: FieldShape) -> Any:
    if isinstance(shape, BoundedString):
        return "X" * shape.min_len
    if isinstance(shape, Numeric):
        return int(shape.minimum) if shape.minimum is not None else 0
    if isinstance(shape, EnumShape):
        return min(shape.codes)
    if isinstance(shape, BooleanShape):
        return True
    if isinstance(shape, DateShape):
        return date(2024, 1, 1).isoformat()
    if isinstance(shape, ArrayOf):
        return [_sample(shape.item)]
    return [{"sample": 1}] if isinstance(shape, Group) and shape.repeated else {"sample": 1}


def _domain(field_id: str) -> list[Any]:
    """Values worth trying for one trigger input."""
    shape = describe(field_id)
    if isinstance(shape, EnumShape):
        return [*sorted(shape.codes), _ABSENT]
    if isinstance(shape, ArrayOf) and isinstance(shape.item, EnumShape):
        return [*([code] for code in sorted(shape.item.codes)), _ABSENT]
    return [_sample(shape), _ABSENT]


def _scenarios(inputs: frozenset[str]):
    """Synthetic records covering every combination of input values."""
    ordered = sorted(inputs)
    for combo in itertools.product(*(_domain(fid) for fid in ordered)):
        record: dict[str, Any] = {}
        for fid, value in zip(ordered, combo):
            if value is not _ABSENT:
                set_value(record, fid, value)
        yield dict(zip(ordered, combo)), record


def _bindings_for(target: str) -> dict[str, int]:
    """Focus the first entry of every repeated group enclosing the target."""
    return {group: 0 for group in ancestors(target) if is_repeated(group)}


def _overlap(first: Rule, second: Rule) -> dict[str, Any] | None:
    """A sample assignment under which both triggers hold, if any."""
    bindings = _bindings_for(first.target)
    for assignment, record in _scenarios(first.when.inputs | second.when.inputs):
        ctx = Context(record=record, bindings=bindings)
        if first.when(ctx) and second.when(ctx):
            return {k: v for k, v in assignment.items() if v is not _ABSENT}
    return None


def _check_references(rule_set: RuleSet) -> None:
    for a in rule_set.applicability:
        describe(a.target)
        for fid in a.applies_when.inputs:
            describe(fid)
    for r in rule_set.rules:
        describe(r.target)
        for fid in r.when.inputs:
            describe(fid)
    for c in rule_set.constraints:
        describe(c.target)
        for fid in c.inputs:
            describe(fid)


def check_rule_set(rule_set: RuleSet = RULE_SET) -> int:
    """Validate the rule table; returns the number of rules checked.

    Raises:
        UnknownField: a rule references an id missing from the catalog.
        InconsistentRuleSet: two rules can give contradictory verdicts together.
    """
    _check_references(rule_set)

    for target in sorted(rule_set.targets()):
        rules = rule_set.rules_for(target)
        required = [r for r in rules if isinstance(r.effect, Required)]
        forbidden = [r for r in rules if isinstance(r.effect, Forbidden)]
        for req, forb in itertools.product(required, forbidden):
            sample = _overlap(req, forb)
            if sample is not None:
                raise InconsistentRuleSet(target, req.name, forb.name, sample)

        bounds = [r for r in rules if isinstance(r.effect, Cardinality)]
        for first, second in itertools.combinations(bounds, 2):
            lows = max(first.effect.min, second.effect.min)
            highs = [e.max for e in (first.effect, second.effect) if e.max is not None]
            if highs and lows > min(highs):
                sample = _overlap(first, second)
                if sample is not None:
                    raise InconsistentRuleSet(target, first.name, second.name, sample)

    logger.debug("Rule set consistent: %d rules over %d targets", len(rule_set), len(rule_set.targets()))
    return len(rule_set)
