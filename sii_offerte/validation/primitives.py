"""Primitive checks — does a single present value fit its catalog shape?

Each check returns a reason code, or None when the value fits. Nothing here
raises on user data.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

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
from sii_offerte.validation.dates import parse_date


def check_value(shape: FieldShape, value: Any) -> str | None:
    """Reason code for a value that does not fit ``shape``, else None."""
    if isinstance(shape, BoundedString):
        return _check_string(shape, value)
    if isinstance(shape, Numeric):
        return _check_numeric(shape, value)
    if isinstance(shape, EnumShape):
        if not isinstance(value, str):
            return "type-mismatch"
        return None if value in shape.codes else "invalid-code"
    if isinstance(shape, BooleanShape):
        return None if isinstance(value, bool) else "type-mismatch"
    if isinstance(shape, DateShape):
        if not isinstance(value, str) and parse_date(value) is None:
            return "type-mismatch"
        return None if parse_date(value) is not None else "invalid-date"
    if isinstance(shape, ArrayOf):
        return _check_array(shape, value)
    if isinstance(shape, Group):
        return _check_group(shape, value)
    return "type-mismatch"


def _check_string(shape: BoundedString, value: Any) -> str | None:
    if not isinstance(value, str):
        return "type-mismatch"
    if len(value) < shape.min_len:
        return "too-short"
    if len(value) > shape.max_len:
        return "too-long"
    if shape.pattern and re.match(shape.pattern, value) is None:
        return "pattern-mismatch"
    return None


def to_decimal(value: Any) -> Decimal | None:
    """Exact decimal of a numeric value; None for non-numbers (bool included)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    try:
        number = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _check_numeric(shape: Numeric, value: Any) -> str | None:
    number = to_decimal(value)
    if number is None:
        return "type-mismatch"
    integral = number == number.to_integral_value()
    if shape.integer and not integral:
        return "not-integer"
    if integral and int(number) in shape.sentinels:
        return None
    if shape.minimum is not None and number < shape.minimum:
        return "out-of-range"
    if shape.maximum is not None and number > shape.maximum:
        return "out-of-range"
    if shape.decimals is not None:
        exponent = number.as_tuple().exponent
        if isinstance(exponent, int) and -exponent > shape.decimals:
            return "too-many-decimals"
    return None


def _check_array(shape: ArrayOf, value: Any) -> str | None:
    if not isinstance(value, list):
        return "type-mismatch"
    for item in value:
        reason = check_value(shape.item, item)
        if reason is not None:
            return reason
    if shape.unique:
        seen: set[Any] = set()
        for item in value:
            if item in seen:
                return "duplicate-code"
            seen.add(item)
    if shape.max_items is not None and len(value) > shape.max_items:
        return "too-many-items"
    if value and len(value) < shape.min_items:
        return "too-few-items"
    return None


def _check_group(shape: Group, value: Any) -> str | None:
    if shape.repeated:
        if not isinstance(value, list):
            return "type-mismatch"
        return None if all(isinstance(entry, Mapping) for entry in value) else "type-mismatch"
    return None if isinstance(value, Mapping) else "type-mismatch"


# ── Weekly band schedules ─────────────────────────────────────────────

QUARTER_HOURS_PER_DAY = 96


def check_band_schedule(text: str) -> str | None:
    """Validate an ``XX-Y,XX-Y`` day schedule.

    XX is the last quarter hour (1..96) covered by the segment and must grow
    strictly, ending the day at 96; Y is the band number.
    """
    previous = 0
    for segment in text.split(","):
        end_text, _, band_text = segment.partition("-")
        if not end_text.isdecimal() or not band_text.isdecimal():
            return "pattern-mismatch"
        end = int(end_text)
        if end <= previous or end > QUARTER_HOURS_PER_DAY:
            return "band-schedule-invalid"
        previous = end
    if previous != QUARTER_HOURS_PER_DAY:
        return "band-schedule-invalid"
    return None
