"""SII upload file naming: ``<PIVA>_<AZIONE>[_<DESCRIZIONE>].XML``."""

from __future__ import annotations

import re

from sii_offerte.config import settings

_UNSAFE = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_UNDERSCORES = re.compile(r"_+")


def sanitize_description(description: str | None) -> str:
    """Upper-case, keep word characters, join words with single underscores."""
    if not description:
        return ""
    text = _UNSAFE.sub("", description.strip().upper())
    text = _WHITESPACE.sub("_", text)
    return _UNDERSCORES.sub("_", text).strip("_")


def xml_filename(vat_number: str, action: str | None = None, description: str | None = None) -> str:
    """File name for an offer upload.

    >>> xml_filename("it12345678901", description="Offerta luce verde!")
    'IT12345678901_INSERIMENTO_OFFERTA_LUCE_VERDE.XML'
    """
    parts = [vat_number.strip().upper(), (action or settings.export.default_action).upper()]
    suffix = sanitize_description(description)
    if suffix:
        parts.append(suffix)
    return "_".join(parts) + ".XML"
