"""Wizard API — FastAPI router the offer wizard calls on every step.

The server keeps no state: each request carries the whole record as the
wizard currently holds it.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from sii_offerte.catalog.paths import normalize
from sii_offerte.errors import ExportBlocked, UnknownField
from sii_offerte.export.naming import xml_filename
from sii_offerte.export.xml_builder import build_offer_xml
from sii_offerte.gate.steps import can_advance, list_steps, step_progress
from sii_offerte.schemas.verdict import (
    AdvanceResult,
    FullRecord,
    SingleSection,
    StepInfo,
    StepProgress,
    ValidationVerdict,
)
from sii_offerte.validation.validator import validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["offers"])


class RecordRequest(BaseModel):
    record: dict[str, Any] = Field(default_factory=dict)


class ValidateRequest(RecordRequest):
    section: str | None = Field(default=None, description="Limit the verdict to one section")


class ExportRequest(RecordRequest):
    description: str | None = Field(default=None, description="Free text appended to the file name")
    action: str | None = None


# ── Validation ───────────────────────────────────────────────────────


@router.post("/validate", response_model=ValidationVerdict)
async def validate_record(body: ValidateRequest) -> ValidationVerdict:
    """Full or single-section verdict for the submitted record."""
    scope = SingleSection(section=body.section) if body.section else FullRecord()
    try:
        return validate(body.record, scope)
    except UnknownField as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


# ── Steps ────────────────────────────────────────────────────────────


@router.get("/steps", response_model=list[StepInfo])
async def get_steps() -> list[StepInfo]:
    """Step ids, titles and the sections each one validates."""
    return list_steps()


@router.post("/steps/progress", response_model=list[StepProgress])
async def get_progress(body: RecordRequest) -> list[StepProgress]:
    return step_progress(body.record)


@router.post("/steps/{step_id}/advance", response_model=AdvanceResult)
async def advance_step(step_id: int, body: RecordRequest) -> AdvanceResult:
    """Whether the wizard may move forward from ``step_id``."""
    try:
        return can_advance(body.record, step_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


# ── Export ───────────────────────────────────────────────────────────


@router.post("/export", response_model=None)
async def export_xml(body: ExportRequest) -> Response:
    """XML download, or 422 with the blocking errors."""
    try:
        xml = build_offer_xml(body.record)
    except ExportBlocked as exc:
        return JSONResponse(
            status_code=422,
            content={
                "detail": str(exc),
                "blocking_errors": [err.model_dump(mode="json") for err in exc.errors],
            },
        )

    vat = normalize(body.record).get("Identification", {}).get("vatNumber", "")
    filename = xml_filename(str(vat), action=body.action, description=body.description)
    logger.info("Exported offer XML as %s", filename)
    return Response(
        content=xml.encode("utf-8"),
        media_type="application/xml",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
