"""Primitive field shapes.

A shape describes what a single value may look like, independent of any other
field in the offer. Cross-field logic lives in the rule table.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Shape(BaseModel):
    model_config = ConfigDict(frozen=True)


class BoundedString(_Shape):
    """Free text bounded in length, optionally matching a regex."""

    kind: Literal["string"] = "string"
    max_len: int
    min_len: int = 1
    pattern: str | None = None


class Numeric(_Shape):
    """Number within [minimum, maximum].

    ``sentinels`` are extra integer values accepted outside the range
    (e.g. -1 for an indeterminate duration).
    """

    kind: Literal["numeric"] = "numeric"
    minimum: Decimal | None = None
    maximum: Decimal | None = None
    decimals: int | None = None
    integer: bool = False
    sentinels: frozenset[int] = frozenset()


class EnumShape(_Shape):
    kind: Literal["enum"] = "enum"
    codes: frozenset[str]


class BooleanShape(_Shape):
    kind: Literal["boolean"] = "boolean"


class DateShape(_Shape):
    """Date or timestamp, as an ISO or SII string or a date object."""

    kind: Literal["date"] = "date"


class ArrayOf(_Shape):
    """List of scalar items sharing one shape."""

    kind: Literal["array"] = "array"
    item: FieldShape
    min_items: int = 0
    max_items: int | None = None
    unique: bool = False


class Group(_Shape):
    """Container: a section, a nested object, or a repeated group of objects."""

    kind: Literal["group"] = "group"
    repeated: bool = False


FieldShape = Annotated[
    Union[BoundedString, Numeric, EnumShape, BooleanShape, DateShape, ArrayOf, Group],
    Field(discriminator="kind"),
]

ArrayOf.model_rebuild()
