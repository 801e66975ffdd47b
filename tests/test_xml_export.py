"""Tests for the SII XML builder."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from sii_offerte.errors import ExportBlocked
from sii_offerte.export.xml_builder import XML_DECLARATION, build_offer_element, build_offer_xml, clean_xml_text


class TestBuildValidOffer:
    @pytest.fixture()
    def result(self, valid_offer):
        return build_offer_xml(valid_offer)

    @pytest.fixture()
    def root(self, result):
        return ET.fromstring(result.split("\n", 1)[1])

    def test_declaration(self, result):
        assert result.startswith(XML_DECLARATION + "\n")

    def test_root_element(self, root):
        assert root.tag == "Offerta"

    def test_section_order(self, root):
        tags = [child.tag for child in root]
        assert tags == [
            "IdentificativiOfferta",
            "DettaglioOfferta",
            "DettaglioOfferta.ModalitaAttivazione",
            "DettaglioOfferta.Contatti",
            "ValiditaOfferta",
            "MetodoPagamento",
            "ComponentiRegolate",
            "TipoPrezzo",
            "Dispacciamento",
            "ComponenteImpresa",
            "ComponenteImpresa",
            "CondizioniContrattuali",
        ]

    def test_identification(self, root):
        assert root.findtext("IdentificativiOfferta/PIVA_UTENTE") == "IT12345678901"
        assert root.findtext("IdentificativiOfferta/COD_OFFERTA") == "LUCEFIX12"

    def test_details_order(self, root):
        tags = [child.tag for child in root.find("DettaglioOfferta")]
        assert tags == [
            "TIPO_MERCATO",
            "OFFERTA_SINGOLA",
            "TIPO_CLIENTE",
            "DOMESTICO_RESIDENTE",
            "TIPO_OFFERTA",
            "TIPOLOGIA_ATT_CONTR",
            "NOME_OFFERTA",
            "DESCRIZIONE",
            "DURATA",
            "GARANZIE",
        ]

    def test_repeated_codes(self, root):
        modes = [el.text for el in root.findall("DettaglioOfferta.ModalitaAttivazione/MODALITA")]
        assert modes == ["01", "03"]

    def test_dates_in_sii_format(self, root):
        assert root.findtext("ValiditaOfferta/DATA_INIZIO") == "01/02/2025_00:00:00"
        assert root.findtext("ValiditaOfferta/DATA_FINE") == "31/12/2025_23:59:59"

    def test_price_intervals(self, root):
        energy = root.findall("ComponenteImpresa")[1]
        assert energy.findtext("MACROAREA") == "04"
        assert energy.findtext("IntervalloPrezzi/FASCIA_COMPONENTE") == "01"
        assert energy.findtext("IntervalloPrezzi/PREZZO") == "0.125"
        assert energy.findtext("IntervalloPrezzi/UNITA_MISURA") == "03"

    def test_four_space_indent(self, result):
        assert "\n    <IdentificativiOfferta>" in result


class TestOptionalSections:
    def test_discount_structure(self, valid_offer):
        valid_offer["Discounts"] = [{
            "name": "Sconto web",
            "description": "Sconto per attivazione online",
            "vatApplicable": "01",
            "validityPeriod": {"duration": 12},
            "applicationCondition": "01",
            "prices": [{"discountType": "01", "unitOfMeasure": "06", "price": 5}],
        }]
        root = build_offer_element(valid_offer)
        discount = root.find("Sconto")
        assert [child.tag for child in discount] == [
            "NOME", "DESCRIZIONE", "IVA_SCONTO", "PeriodoValidita", "Condizione", "PREZZISconto",
        ]
        assert discount.findtext("PeriodoValidita/DURATA") == "12"
        assert discount.findtext("PREZZISconto/PREZZO") == "5"

    def test_empty_zones_omitted(self, valid_offer):
        valid_offer["OfferZones"] = {"regions": [], "provinces": ["015"]}
        root = build_offer_element(valid_offer)
        zones = root.find("ZoneOfferta")
        assert [child.tag for child in zones] == ["PROVINCIA"]

    def test_date_only_start_exported_at_midnight(self, valid_offer):
        valid_offer["Validity"]["startTimestamp"] = "01/02/2025"
        root = ET.fromstring(build_offer_xml(valid_offer).split("\n", 1)[1])
        assert root.findtext("ValiditaOfferta/DATA_INIZIO") == "01/02/2025_00:00:00"

    def test_lowercase_identifiers_uppercased(self, valid_offer):
        valid_offer["Identification"]["offerCode"] = "lucefix12"
        root = build_offer_element(valid_offer)
        assert root.findtext("IdentificativiOfferta/COD_OFFERTA") == "LUCEFIX12"


class TestExportBlocked:
    def test_missing_fields_block(self, valid_offer):
        del valid_offer["Contacts"]
        with pytest.raises(ExportBlocked) as exc_info:
            build_offer_xml(valid_offer)
        assert [e.field_id for e in exc_info.value.errors] == ["Contacts.phone"]

    def test_stale_values_block(self, valid_offer):
        valid_offer["DualOffer"] = {"jointElectricityCodes": ["GASCOMBO1"]}
        with pytest.raises(ExportBlocked):
            build_offer_xml(valid_offer)


class TestCleanText:
    def test_control_characters_removed(self):
        assert clean_xml_text("Offerta\x00 luce\x1f") == "Offerta luce"

    def test_valid_whitespace_kept(self):
        assert clean_xml_text("riga 1\nriga 2\tfine") == "riga 1\nriga 2\tfine"

    def test_unicode_kept(self):
        assert clean_xml_text("Più verde è meglio") == "Più verde è meglio"
