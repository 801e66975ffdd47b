"""SII Offerte — conditional validation engine for SII Trasmissione Offerte v4.5 records."""

from sii_offerte.errors import ExportBlocked, InconsistentRuleSet, SiiOfferteError, UnknownField
from sii_offerte.gate.steps import can_advance, can_export, sections_for_step, step_progress
from sii_offerte.schemas.offer import OfferRecord
from sii_offerte.schemas.verdict import (
    AdvanceResult,
    FieldError,
    FieldStatus,
    FieldVerdict,
    FullRecord,
    SingleSection,
    ValidationVerdict,
)
from sii_offerte.validation.validator import validate

__all__ = [
    "validate",
    "can_advance",
    "can_export",
    "sections_for_step",
    "step_progress",
    "OfferRecord",
    "FullRecord",
    "SingleSection",
    "FieldStatus",
    "FieldVerdict",
    "ValidationVerdict",
    "AdvanceResult",
    "FieldError",
    "SiiOfferteError",
    "UnknownField",
    "InconsistentRuleSet",
    "ExportBlocked",
]
