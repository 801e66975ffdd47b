"""Conditional Rule Set — cross-field dependencies as data."""

from sii_offerte.rules.effects import (
    FORBIDDEN,
    REQUIRED,
    Applicability,
    Cardinality,
    Constraint,
    EffectSet,
    Forbidden,
    Required,
    RestrictedTo,
    Rule,
    merge_effects,
)
from sii_offerte.rules.predicates import ALWAYS, Context, Predicate
from sii_offerte.rules.selfcheck import check_rule_set
from sii_offerte.rules.table import RULE_SET, RuleSet

__all__ = [
    "ALWAYS",
    "FORBIDDEN",
    "REQUIRED",
    "RULE_SET",
    "Applicability",
    "Cardinality",
    "Constraint",
    "Context",
    "EffectSet",
    "Forbidden",
    "Predicate",
    "Required",
    "RestrictedTo",
    "Rule",
    "RuleSet",
    "check_rule_set",
    "merge_effects",
]
