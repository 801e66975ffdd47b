"""Tests for the rule table, effect merging and the static self-check."""

from __future__ import annotations

import pytest

from sii_offerte.errors import InconsistentRuleSet, UnknownField
from sii_offerte.rules import (
    FORBIDDEN,
    REQUIRED,
    RULE_SET,
    Applicability,
    Cardinality,
    RestrictedTo,
    Rule,
    RuleSet,
    check_rule_set,
    merge_effects,
)
from sii_offerte.rules.predicates import Context, absent, contains, present, value_in, value_is
from sii_offerte.rules.table import APPLICABILITY, CONSTRAINTS, RULES


class TestShippedRuleSet:
    def test_self_check_passes(self):
        assert check_rule_set(RULE_SET) == len(RULE_SET)

    def test_every_rule_has_a_unique_name(self):
        names = [r.name for r in RULE_SET.rules]
        assert len(names) == len(set(names))

    def test_len_counts_all_kinds(self):
        assert len(RULE_SET) == len(APPLICABILITY) + len(RULES) + len(CONSTRAINTS)


class TestConflictDetection:
    def test_overlapping_required_and_forbidden(self):
        rule_set = RuleSet(
            applicability=[],
            rules=[
                Rule("name-for-gas", "OfferDetails.name", REQUIRED, value_is("OfferDetails.marketType", "02")),
                Rule(
                    "no-name-unless-electricity", "OfferDetails.name", FORBIDDEN,
                    ~value_is("OfferDetails.marketType", "01"),
                ),
            ],
            constraints=[],
        )
        with pytest.raises(InconsistentRuleSet) as exc_info:
            check_rule_set(rule_set)
        assert exc_info.value.rules == ("name-for-gas", "no-name-unless-electricity")
        assert exc_info.value.sample == {"OfferDetails.marketType": "02"}

    def test_disjoint_triggers_are_fine(self):
        rule_set = RuleSet(
            applicability=[],
            rules=[
                Rule("a", "OfferDetails.name", REQUIRED, value_is("OfferDetails.marketType", "02")),
                Rule("b", "OfferDetails.name", FORBIDDEN, value_is("OfferDetails.marketType", "01")),
            ],
            constraints=[],
        )
        assert check_rule_set(rule_set) == 2

    def test_empty_cardinality_range(self):
        rule_set = RuleSet(
            applicability=[],
            rules=[
                Rule("at-least-two", "PaymentMethods", Cardinality(min=2), value_is("OfferDetails.marketType", "01")),
                Rule("at-most-one", "PaymentMethods", Cardinality(max=1)),
            ],
            constraints=[],
        )
        with pytest.raises(InconsistentRuleSet):
            check_rule_set(rule_set)

    def test_unknown_target(self):
        rule_set = RuleSet(applicability=[], rules=[Rule("typo", "Contacts.fax", REQUIRED)], constraints=[])
        with pytest.raises(UnknownField):
            check_rule_set(rule_set)

    def test_unknown_trigger_input(self):
        rule_set = RuleSet(
            applicability=[Applicability("typo", "Contacts.phone", value_is("OfferDetails.market", "01"))],
            rules=[],
            constraints=[],
        )
        with pytest.raises(UnknownField):
            check_rule_set(rule_set)


class TestMergeEffects:
    def test_restrictions_intersect(self):
        merged = merge_effects("x", [
            Rule("a", "x", RestrictedTo(frozenset({"01", "02", "03"}))),
            Rule("b", "x", RestrictedTo(frozenset({"02", "03", "04"}))),
        ])
        assert merged.allowed == {"02", "03"}

    def test_cardinality_bounds_intersect(self):
        merged = merge_effects("x", [
            Rule("a", "x", Cardinality(min=1)),
            Rule("b", "x", Cardinality(min=2, max=5)),
            Rule("c", "x", Cardinality(max=3)),
        ])
        assert merged.min_items == 2
        assert merged.max_items == 3

    def test_order_does_not_matter(self):
        rules = [
            Rule("a", "x", RestrictedTo(frozenset({"01", "02"}))),
            Rule("b", "x", REQUIRED),
            Rule("c", "x", RestrictedTo(frozenset({"02"}))),
        ]
        forward = merge_effects("x", rules)
        backward = merge_effects("x", list(reversed(rules)))
        assert forward.allowed == backward.allowed == {"02"}
        assert forward.required and backward.required

    def test_required_and_forbidden_raise(self):
        with pytest.raises(InconsistentRuleSet):
            merge_effects("x", [Rule("a", "x", REQUIRED), Rule("b", "x", FORBIDDEN)])


class TestPredicates:
    @pytest.fixture()
    def ctx(self):
        record = {
            "OfferDetails": {"marketType": "01"},
            "ActivationMethods": {"methods": ["01", "99"]},
            "OfferZones": {},
            "Discounts": [
                {"prices": [{"discountType": "01"}]},
                {"prices": [{"discountType": "04"}]},
            ],
        }
        return Context(record=record)

    def test_value_is(self, ctx):
        assert value_is("OfferDetails.marketType", "01")(ctx)
        assert not value_is("OfferDetails.marketType", "02")(ctx)

    def test_any_semantics_without_bindings(self, ctx):
        assert value_is("Discounts[].prices[].discountType", "04")(ctx)

    def test_bindings_focus_one_entry(self, ctx):
        focused = Context(record=ctx.record, bindings={"Discounts": 0})
        assert not value_is("Discounts[].prices[].discountType", "04")(focused)

    def test_contains(self, ctx):
        assert contains("ActivationMethods.methods", "99")(ctx)

    def test_composition(self, ctx):
        pred = value_in("OfferDetails.marketType", {"01", "03"}) & ~contains("ActivationMethods.methods", "05")
        assert pred(ctx)
        assert pred.inputs == {"OfferDetails.marketType", "ActivationMethods.methods"}

    def test_present_and_absent(self, ctx):
        assert present("ActivationMethods.methods")(ctx)
        assert absent("OfferZones.regions")(ctx)
        assert absent("Contacts.phone")(ctx)
