"""Tests for SII upload file naming."""

from __future__ import annotations

from sii_offerte.export.naming import sanitize_description, xml_filename


class TestXmlFilename:
    def test_without_description(self):
        assert xml_filename("IT12345678901") == "IT12345678901_INSERIMENTO.XML"

    def test_vat_uppercased(self):
        assert xml_filename("it12345678901") == "IT12345678901_INSERIMENTO.XML"

    def test_with_description(self):
        assert xml_filename("IT12345678901", description="Offerta luce verde!") == (
            "IT12345678901_INSERIMENTO_OFFERTA_LUCE_VERDE.XML"
        )

    def test_custom_action(self):
        assert xml_filename("IT12345678901", action="aggiornamento") == "IT12345678901_AGGIORNAMENTO.XML"

    def test_description_sanitized_to_nothing(self):
        assert xml_filename("IT12345678901", description="  !!! ") == "IT12345678901_INSERIMENTO.XML"


class TestSanitizeDescription:
    def test_collapses_underscores(self):
        assert sanitize_description("  gas   __ casa ") == "GAS_CASA"

    def test_keeps_hyphens(self):
        assert sanitize_description("luce-gas 2025") == "LUCE-GAS_2025"

    def test_strips_non_ascii(self):
        assert sanitize_description("più verde") == "PI_VERDE"

    def test_none(self):
        assert sanitize_description(None) == ""
