"""Field Constraint Catalog — primitive shape of every offer field."""

from sii_offerte.catalog.fields import (
    CATALOG,
    SECTIONS,
    ancestors,
    describe,
    field_ids,
    fields_in_section,
    is_known,
    is_repeated,
    parent_of,
    section_of,
)
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

__all__ = [
    "CATALOG",
    "SECTIONS",
    "ancestors",
    "describe",
    "field_ids",
    "fields_in_section",
    "is_known",
    "is_repeated",
    "parent_of",
    "section_of",
    "ArrayOf",
    "BooleanShape",
    "BoundedString",
    "DateShape",
    "EnumShape",
    "FieldShape",
    "Group",
    "Numeric",
]
