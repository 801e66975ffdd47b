"""Step gate — maps the wizard's 18 steps onto sections and decides navigation.

Navigation rule: only MISSING values and INVALID values block a step.
Populated-but-not-applicable values left over from an earlier choice are
warnings while navigating, and block only at export time.
"""

from __future__ import annotations

import logging
from typing import Any

from sii_offerte.catalog.fields import SECTIONS
from sii_offerte.errors import UnknownField
from sii_offerte.schemas.verdict import (
    AdvanceResult,
    FieldError,
    FieldStatus,
    FullRecord,
    InstanceVerdict,
    SingleSection,
    StepInfo,
    StepProgress,
    ValidationVerdict,
)
from sii_offerte.validation.validator import validate

logger = logging.getLogger(__name__)

# Step titles shown by the wizard stepper
STEP_TITLES: dict[int, str] = {
    1: "Identificativi Offerta",
    2: "Dettagli Offerta",
    3: "Modalità Attivazione",
    4: "Informazioni Contatto",
    5: "Riferimenti Prezzo Energia",
    6: "Validità Offerta",
    7: "Caratteristiche Offerta",
    8: "Offerta Dual",
    9: "Modalità Pagamento",
    10: "Componenti Regolate",
    11: "Tipo Prezzo/Fasce Orarie",
    12: "Fasce Orarie Settimanali",
    13: "Dispacciamento",
    14: "Componente Impresa",
    15: "Condizioni Contrattuali",
    16: "Zone Offerta",
    17: "Sconti",
    18: "Servizi Aggiuntivi",
}

STEP_SECTIONS: dict[int, tuple[str, ...]] = {step: (section,) for step, section in enumerate(SECTIONS, start=1)}

FIRST_STEP = 1
LAST_STEP = len(STEP_SECTIONS)


def sections_for_step(step_id: int) -> tuple[str, ...]:
    """Sections validated when leaving a step.

    Raises:
        ValueError: if the step id is not 1..18.
    """
    try:
        return STEP_SECTIONS[step_id]
    except KeyError:
        msg = f"Unknown step id: {step_id}. Must be between {FIRST_STEP} and {LAST_STEP}"
        raise ValueError(msg) from None


def step_for_section(section: str) -> int:
    for step, sections in STEP_SECTIONS.items():
        if section in sections:
            return step
    raise UnknownField(section)


def list_steps() -> list[StepInfo]:
    return [
        StepInfo(step_id=step, title=STEP_TITLES[step], sections=list(sections))
        for step, sections in STEP_SECTIONS.items()
    ]


def _as_error(inst: InstanceVerdict) -> FieldError:
    return FieldError(
        field_id=inst.field_id,
        path=inst.path,
        status=inst.status,
        reason=inst.reason,
        message=inst.message,
    )


def _split(verdict: ValidationVerdict, *, stale_blocks: bool) -> AdvanceResult:
    blocking: list[FieldError] = []
    warnings: list[FieldError] = []
    for inst in verdict.instances():
        if inst.status == FieldStatus.MISSING:
            blocking.append(_as_error(inst))
        elif inst.status == FieldStatus.INVALID:
            if inst.stale and not stale_blocks:
                warnings.append(_as_error(inst))
            else:
                blocking.append(_as_error(inst))
    return AdvanceResult(allowed=not blocking, blocking_errors=blocking, warnings=warnings)


def can_advance(record: Any, step_id: int) -> AdvanceResult:
    """Whether the user may leave ``step_id`` forward."""
    sections = sections_for_step(step_id)
    blocking: list[FieldError] = []
    warnings: list[FieldError] = []
    for section in sections:
        partial = _split(validate(record, SingleSection(section=section)), stale_blocks=False)
        blocking.extend(partial.blocking_errors)
        warnings.extend(partial.warnings)

    if blocking:
        logger.debug("Step %d blocked by %d error(s)", step_id, len(blocking))
    return AdvanceResult(allowed=not blocking, blocking_errors=blocking, warnings=warnings)


def can_export(record: Any) -> AdvanceResult:
    """Whether the whole record may be serialized; stale values block here."""
    return _split(validate(record, FullRecord()), stale_blocks=True)


def step_progress(record: Any) -> list[StepProgress]:
    """Per-step summary for the wizard stepper, from one full validation."""
    verdict = validate(record, FullRecord())
    progress: list[StepProgress] = []
    for step, sections in STEP_SECTIONS.items():
        section_verdicts = [verdict.sections[s] for s in sections]
        progress.append(StepProgress(
            step_id=step,
            title=STEP_TITLES[step],
            applicable=any(sv.applicable for sv in section_verdicts),
            complete=all(sv.is_complete and not sv.has_errors for sv in section_verdicts),
            has_errors=any(sv.has_errors for sv in section_verdicts),
            has_warnings=any(sv.has_warnings for sv in section_verdicts),
        ))
    return progress
