"""Pydantic schemas for validation verdicts and step-gate results.

Pure data classes, returned to the wizard UI as JSON.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class FieldStatus(str, Enum):
    """Outcome for one field (instance)."""

    OK = "OK"
    MISSING = "MISSING"
    INVALID = "INVALID"
    NOT_APPLICABLE = "NOT_APPLICABLE"


# Worst status wins when aggregating instances
STATUS_SEVERITY = {
    FieldStatus.NOT_APPLICABLE: 0,
    FieldStatus.OK: 1,
    FieldStatus.MISSING: 2,
    FieldStatus.INVALID: 3,
}


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


class FullRecord(BaseModel):
    """Validate every section (before export)."""

    kind: Literal["full"] = "full"


class SingleSection(BaseModel):
    """Validate one section (while navigating the wizard)."""

    kind: Literal["section"] = "section"
    section: str


Scope = Annotated[Union[FullRecord, SingleSection], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Verdicts
# ---------------------------------------------------------------------------


class InstanceVerdict(BaseModel):
    """Status of one concrete field instance, e.g. ``Discounts[0].prices[1].price``."""

    field_id: str
    path: str
    status: FieldStatus
    reason: str | None = None
    message: str | None = None
    required: bool = False
    applicable: bool = True
    stale: bool = False  # populated although not applicable


class FieldVerdict(BaseModel):
    """Aggregate status of a catalog field over all of its instances."""

    field_id: str
    section: str
    status: FieldStatus
    reason: str | None = None
    message: str | None = None
    required: bool = False
    applicable: bool = True
    stale: bool = False
    instances: list[InstanceVerdict] = Field(default_factory=list)


class SectionVerdict(BaseModel):
    section: str
    applicable: bool = True
    touched: bool = False
    is_complete: bool = True
    has_errors: bool = False
    has_warnings: bool = False


class ValidationVerdict(BaseModel):
    """Total verdict: one FieldVerdict per catalog field in scope."""

    scope: Scope = Field(default_factory=FullRecord)
    fields: dict[str, FieldVerdict] = Field(default_factory=dict)
    sections: dict[str, SectionVerdict] = Field(default_factory=dict)

    def instances(self) -> list[InstanceVerdict]:
        """All instance verdicts in catalog order."""
        return [inst for fv in self.fields.values() for inst in fv.instances]

    def by_path(self) -> dict[str, InstanceVerdict]:
        return {inst.path: inst for inst in self.instances()}

    def problems(self) -> list[InstanceVerdict]:
        """MISSING and INVALID instances."""
        return [
            inst for inst in self.instances()
            if inst.status in (FieldStatus.MISSING, FieldStatus.INVALID)
        ]

    @property
    def is_clean(self) -> bool:
        """No MISSING or INVALID instance anywhere in scope."""
        return not self.problems()


# ---------------------------------------------------------------------------
# Step gate
# ---------------------------------------------------------------------------


class FieldError(BaseModel):
    field_id: str
    path: str
    status: FieldStatus
    reason: str | None = None
    message: str | None = None


class AdvanceResult(BaseModel):
    """Answer to "can the user leave this step forward?"."""

    allowed: bool
    blocking_errors: list[FieldError] = Field(default_factory=list)
    warnings: list[FieldError] = Field(default_factory=list)


class StepInfo(BaseModel):
    step_id: int
    title: str
    sections: list[str]


class StepProgress(BaseModel):
    step_id: int
    title: str
    applicable: bool
    complete: bool
    has_errors: bool
    has_warnings: bool = False
