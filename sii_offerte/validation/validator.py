"""Record validator — evaluates the rule table against one offer record.

Pure Python, deterministic. No I/O, no shared state: the same record always
yields the same verdict. User data never raises; only catalog or rule-table
defects (UnknownField, InconsistentRuleSet) escape.

Per field instance the checks run in this order:

1. applicability (a populated non-applicable field is a stale INVALID);
2. primitive shape of a present value;
3. FORBIDDEN, REQUIRED, RESTRICTED_TO and CARDINALITY effects;
4. value constraints comparing the field with others.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from datetime import date
from typing import Any

from sii_offerte.catalog.fields import SECTIONS, ancestors, describe, fields_in_section, section_of
from sii_offerte.catalog.paths import Bindings, is_blank, iter_instances, normalize
from sii_offerte.config import settings
from sii_offerte.errors import UnknownField
from sii_offerte.rules.effects import EffectSet, merge_effects
from sii_offerte.rules.predicates import Context
from sii_offerte.rules.table import RULE_SET, RuleSet
from sii_offerte.schemas.verdict import (
    STATUS_SEVERITY,
    FieldStatus,
    FieldVerdict,
    FullRecord,
    InstanceVerdict,
    SectionVerdict,
    SingleSection,
    ValidationVerdict,
)
from sii_offerte.validation.messages import message_for
from sii_offerte.validation.primitives import check_value

logger = logging.getLogger(__name__)


class _Evaluator:
    """Evaluates rules for one record snapshot."""

    def __init__(self, record: Mapping[str, Any], rule_set: RuleSet, cutoff: date) -> None:
        self.record = record
        self.rule_set = rule_set
        self.cutoff = cutoff

    def context(self, bindings: Bindings | None = None) -> Context:
        return Context(record=self.record, bindings=bindings or {}, early_withdrawal_cutoff=self.cutoff)

    def is_applicable(self, field_id: str, ctx: Context) -> bool:
        """Applicable iff the field's own rules and every enclosing group's rules hold."""
        for fid in (*ancestors(field_id), field_id):
            for rule in self.rule_set.applicability_for(fid):
                if not rule.applies_when(ctx):
                    return False
        return True

    def effects(self, field_id: str, ctx: Context) -> EffectSet:
        fired = [rule for rule in self.rule_set.rules_for(field_id) if rule.when(ctx)]
        return merge_effects(field_id, fired)

    # ── Instances ─────────────────────────────────────────────────────

    def instance_verdict(self, field_id: str, path: str, bindings: Bindings, value: Any) -> InstanceVerdict:
        ctx = self.context(bindings)
        blank = is_blank(value)

        def verdict(status: FieldStatus, reason: str | None = None, **extra: Any) -> InstanceVerdict:
            return InstanceVerdict(
                field_id=field_id,
                path=path,
                status=status,
                reason=reason,
                message=message_for(status, reason),
                **extra,
            )

        if not self.is_applicable(field_id, ctx):
            if blank:
                return verdict(FieldStatus.NOT_APPLICABLE, applicable=False)
            return verdict(FieldStatus.INVALID, "field-not-applicable", applicable=False, stale=True)

        effects = self.effects(field_id, ctx)
        required = effects.required or effects.min_items > 0

        if not blank:
            reason = check_value(describe(field_id), value)
            if reason is not None:
                return verdict(FieldStatus.INVALID, reason, required=required)
            if effects.forbidden:
                return verdict(FieldStatus.INVALID, "not-allowed-here")

        if effects.required and blank:
            return verdict(FieldStatus.MISSING, required=True)

        if effects.allowed is not None and not blank:
            items = value if isinstance(value, list) else [value]
            if any(item not in effects.allowed for item in items):
                return verdict(FieldStatus.INVALID, "restricted-code", required=required)

        if effects.min_items or effects.max_items is not None:
            count = len(value) if isinstance(value, list) else 0
            if count == 0 and effects.min_items > 0:
                return verdict(FieldStatus.MISSING, required=True)
            if count < effects.min_items:
                return verdict(FieldStatus.INVALID, "too-few-items", required=required)
            if effects.max_items is not None and count > effects.max_items:
                return verdict(FieldStatus.INVALID, "too-many-items", required=required)

        for constraint in self.rule_set.constraints_for(field_id):
            reason = constraint.check(ctx, value)
            if reason is not None:
                return verdict(FieldStatus.INVALID, reason, required=required)

        return verdict(FieldStatus.OK, required=required)

    # ── Fields and sections ───────────────────────────────────────────

    def field_verdict(self, field_id: str) -> FieldVerdict:
        section = section_of(field_id)
        instances = [
            self.instance_verdict(field_id, path, bindings, value)
            for path, bindings, value in iter_instances(self.record, field_id)
        ]

        if not instances:
            # Enclosing repeated group has no entries: report the template once
            applicable = self.is_applicable(field_id, self.context())
            return FieldVerdict(
                field_id=field_id,
                section=section,
                status=FieldStatus.OK if applicable else FieldStatus.NOT_APPLICABLE,
                applicable=applicable,
            )

        worst = max(instances, key=lambda inst: STATUS_SEVERITY[inst.status])
        invalid = [inst for inst in instances if inst.status == FieldStatus.INVALID]
        return FieldVerdict(
            field_id=field_id,
            section=section,
            status=worst.status,
            reason=worst.reason,
            message=worst.message,
            required=any(inst.required for inst in instances),
            applicable=any(inst.applicable for inst in instances),
            stale=bool(invalid) and all(inst.stale for inst in invalid),
            instances=instances,
        )

    def section_verdict(self, section: str, fields: dict[str, FieldVerdict]) -> SectionVerdict:
        members = [fv for fv in fields.values() if fv.section == section]
        return SectionVerdict(
            section=section,
            applicable=fields[section].applicable,
            touched=not is_blank(self.record.get(section)),
            is_complete=all(fv.status == FieldStatus.OK for fv in members if fv.required and fv.applicable),
            has_errors=any(fv.status == FieldStatus.INVALID for fv in members),
            has_warnings=any(inst.stale for fv in members for inst in fv.instances),
        )


def _sections_in_scope(scope: FullRecord | SingleSection) -> tuple[str, ...]:
    if isinstance(scope, SingleSection):
        if scope.section not in SECTIONS:
            raise UnknownField(scope.section)
        return (scope.section,)
    return SECTIONS


def validate(
    record: Any,
    scope: FullRecord | SingleSection | None = None,
    *,
    rule_set: RuleSet = RULE_SET,
    early_withdrawal_cutoff: date | None = None,
) -> ValidationVerdict:
    """Validate an offer record (mapping or OfferRecord) within a scope.

    The whole record is always visible to the rules; the scope only restricts
    which fields are reported. Every catalog field in scope gets exactly one
    FieldVerdict.
    """
    scope = scope or FullRecord()
    evaluator = _Evaluator(
        normalize(record),
        rule_set,
        early_withdrawal_cutoff or settings.rules.early_withdrawal_cutoff,
    )

    sections = _sections_in_scope(scope)
    fields: dict[str, FieldVerdict] = {}
    for section in sections:
        for field_id in fields_in_section(section):
            fields[field_id] = evaluator.field_verdict(field_id)

    verdict = ValidationVerdict(
        scope=scope,
        fields=fields,
        sections={section: evaluator.section_verdict(section, fields) for section in sections},
    )

    if logger.isEnabledFor(logging.DEBUG):
        counts = Counter(inst.status.value for inst in verdict.instances())
        logger.debug("Validated %d fields in %d section(s): %s", len(fields), len(sections), dict(counts))
    return verdict


def effects_for(
    record: Any,
    field_id: str,
    bindings: Bindings | None = None,
    *,
    rule_set: RuleSet = RULE_SET,
) -> EffectSet:
    """Merged effects on one field instance, for inspection and tests."""
    describe(field_id)
    evaluator = _Evaluator(normalize(record), rule_set, settings.rules.early_withdrawal_cutoff)
    return evaluator.effects(field_id, evaluator.context(bindings))
