"""XML builder — serializes a validated offer record into the SII <Offerta> document.

Element names and order follow the Trasmissione Offerte v4.5 XSD. Only records
whose full validation verdict has no blocking error are serialized; anything
else raises ExportBlocked with the errors from the step gate.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sii_offerte.catalog.paths import is_blank, normalize
from sii_offerte.config import settings
from sii_offerte.errors import ExportBlocked
from sii_offerte.gate.steps import can_export
from sii_offerte.validation.dates import format_sii_datetime

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# XML 1.0 allows tab, LF, CR and #x20-#xD7FF, #xE000-#xFFFD (+ astral planes)
_INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

# (record key, XML tag) for single-object sections without nesting
_FLAT_SECTIONS: dict[str, tuple[str, tuple[tuple[str, str], ...]]] = {
    "EnergyPriceReference": ("RiferimentiPrezzoEnergia", (
        ("priceIndex", "IDX_PREZZO_ENERGIA"),
        ("otherDescription", "ALTRO"),
    )),
    "Characteristics": ("CaratteristicheOfferta", (
        ("minConsumption", "CONSUMO_MIN"),
        ("maxConsumption", "CONSUMO_MAX"),
        ("minPower", "POTENZA_MIN"),
        ("maxPower", "POTENZA_MAX"),
    )),
    "DualOffer": ("OffertaDUAL", (
        ("jointElectricityCodes", "OFFERTE_CONGIUNTE_EE"),
        ("jointGasCodes", "OFFERTE_CONGIUNTE_GAS"),
    )),
    "RegulatedComponents": ("ComponentiRegolate", (
        ("codes", "CODICE"),
    )),
    "PriceType": ("TipoPrezzo", (
        ("timeBandConfiguration", "TIPOLOGIA_FASCE"),
    )),
    "WeeklyTimeBands": ("FasceOrarieSettimanale", (
        ("monday", "F_LUNEDI"),
        ("tuesday", "F_MARTEDI"),
        ("wednesday", "F_MERCOLEDI"),
        ("thursday", "F_GIOVEDI"),
        ("friday", "F_VENERDI"),
        ("saturday", "F_SABATO"),
        ("sunday", "F_DOMENICA"),
        ("holidays", "F_FESTIVITA"),
    )),
    "OfferZones": ("ZoneOfferta", (
        ("regions", "REGIONE"),
        ("provinces", "PROVINCIA"),
        ("municipalities", "COMUNE"),
    )),
}

_VALIDITY_PERIOD = (
    ("duration", "DURATA"),
    ("validUntil", "VALIDO_FINO"),
    ("months", "MESE_VALIDITA"),
)


# ── Text helpers ─────────────────────────────────────────────────────


def clean_xml_text(text: str) -> str:
    """Drop characters that are not allowed in an XML 1.0 document."""
    return _INVALID_XML_CHARS.sub("", text)


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "SI" if value else "NO"
    if isinstance(value, float):
        value = Decimal(str(value))
    elif isinstance(value, int):
        value = Decimal(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return clean_xml_text(str(value).strip())


def _add(parent: ET.Element, tag: str, value: Any) -> None:
    """Append ``<tag>`` for a scalar, one ``<tag>`` per item for a list; skip blanks."""
    if is_blank(value):
        return
    for item in value if isinstance(value, list) else [value]:
        if is_blank(item):
            continue
        ET.SubElement(parent, tag).text = _format(item)


def _fill(parent: ET.Element, data: Mapping[str, Any], fields: tuple[tuple[str, str], ...]) -> ET.Element:
    for key, tag in fields:
        _add(parent, tag, data.get(key))
    return parent


def _attach_if_filled(root: ET.Element, element: ET.Element) -> None:
    if len(element):
        root.append(element)


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def _entries(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, Mapping) and not is_blank(entry)]


# ── Section builders ─────────────────────────────────────────────────


def _identification(root: ET.Element, data: Mapping[str, Any]) -> None:
    ident = _section(data, "Identification")
    element = ET.SubElement(root, "IdentificativiOfferta")
    _add(element, "PIVA_UTENTE", str(ident.get("vatNumber", "")).upper())
    _add(element, "COD_OFFERTA", str(ident.get("offerCode", "")).upper())


def _offer_details(root: ET.Element, data: Mapping[str, Any]) -> None:
    details = _section(data, "OfferDetails")
    _fill(ET.SubElement(root, "DettaglioOfferta"), details, (
        ("marketType", "TIPO_MERCATO"),
        ("singleOffer", "OFFERTA_SINGOLA"),
        ("clientType", "TIPO_CLIENTE"),
        ("residentialStatus", "DOMESTICO_RESIDENTE"),
        ("offerType", "TIPO_OFFERTA"),
        ("activationTypes", "TIPOLOGIA_ATT_CONTR"),
        ("name", "NOME_OFFERTA"),
        ("description", "DESCRIZIONE"),
        ("durationMonths", "DURATA"),
        ("guarantees", "GARANZIE"),
    ))

    _fill(ET.SubElement(root, "DettaglioOfferta.ModalitaAttivazione"), _section(data, "ActivationMethods"), (
        ("methods", "MODALITA"),
        ("otherDescription", "DESCRIZIONE"),
    ))
    _fill(ET.SubElement(root, "DettaglioOfferta.Contatti"), _section(data, "Contacts"), (
        ("phone", "TELEFONO"),
        ("vendorWebsite", "URL_SITO_VENDITORE"),
        ("offerUrl", "URL_OFFERTA"),
    ))


def _validity(root: ET.Element, data: Mapping[str, Any]) -> None:
    validity = _section(data, "Validity")
    element = ET.SubElement(root, "ValiditaOfferta")
    _add(element, "DATA_INIZIO", format_sii_datetime(validity.get("startTimestamp")))
    _add(element, "DATA_FINE", format_sii_datetime(validity.get("endTimestamp")))


def _payment_methods(root: ET.Element, data: Mapping[str, Any]) -> None:
    for entry in _entries(data, "PaymentMethods"):
        _fill(ET.SubElement(root, "MetodoPagamento"), entry, (
            ("methodType", "MODALITA_PAGAMENTO"),
            ("otherDescription", "DESCRIZIONE"),
        ))


def _flat(root: ET.Element, data: Mapping[str, Any], key: str) -> None:
    tag, fields = _FLAT_SECTIONS[key]
    _attach_if_filled(root, _fill(ET.Element(tag), _section(data, key), fields))


def _dispatching(root: ET.Element, data: Mapping[str, Any]) -> None:
    for entry in _entries(data, "Dispatching"):
        _fill(ET.SubElement(root, "Dispacciamento"), entry, (
            ("type", "TIPO_DISPACCIAMENTO"),
            ("value", "VALORE_DISP"),
            ("name", "NOME"),
            ("description", "DESCRIZIONE"),
        ))


def _validity_period(parent: ET.Element, entry: Mapping[str, Any]) -> None:
    period = _section(entry, "validityPeriod")
    _attach_if_filled(parent, _fill(ET.Element("PeriodoValidita"), period, _VALIDITY_PERIOD))


def _company_components(root: ET.Element, data: Mapping[str, Any]) -> None:
    for component in _entries(data, "CompanyComponents"):
        element = _fill(ET.SubElement(root, "ComponenteImpresa"), component, (
            ("name", "NOME"),
            ("description", "DESCRIZIONE"),
            ("componentClass", "TIPOLOGIA"),
            ("macroArea", "MACROAREA"),
        ))
        for interval in _entries(component, "priceIntervals"):
            interval_el = _fill(ET.SubElement(element, "IntervalloPrezzi"), interval, (
                ("componentBand", "FASCIA_COMPONENTE"),
                ("consumptionFrom", "CONSUMO_DA"),
                ("consumptionTo", "CONSUMO_A"),
                ("price", "PREZZO"),
                ("unitOfMeasure", "UNITA_MISURA"),
            ))
            _validity_period(interval_el, interval)


def _contractual_conditions(root: ET.Element, data: Mapping[str, Any]) -> None:
    for entry in _entries(data, "ContractualConditions"):
        _fill(ET.SubElement(root, "CondizioniContrattuali"), entry, (
            ("conditionType", "TIPOLOGIA_CONDIZIONE"),
            ("otherDescription", "ALTRO"),
            ("description", "DESCRIZIONE"),
            ("isLimiting", "LIMITANTE"),
        ))


def _discounts(root: ET.Element, data: Mapping[str, Any]) -> None:
    for discount in _entries(data, "Discounts"):
        element = _fill(ET.SubElement(root, "Sconto"), discount, (
            ("name", "NOME"),
            ("description", "DESCRIZIONE"),
            ("componentBandCodes", "CODICE_COMPONENTE_FASCIA"),
            ("validity", "VALIDITA"),
            ("vatApplicable", "IVA_SCONTO"),
        ))
        _validity_period(element, discount)
        _fill(ET.SubElement(element, "Condizione"), discount, (
            ("applicationCondition", "CONDIZIONE_APPLICAZIONE"),
            ("conditionDescription", "DESCRIZIONE_CONDIZIONE"),
        ))
        for price in _entries(discount, "prices"):
            _fill(ET.SubElement(element, "PREZZISconto"), price, (
                ("discountType", "TIPOLOGIA"),
                ("validFrom", "VALIDO_DA"),
                ("validTo", "VALIDO_FINO"),
                ("unitOfMeasure", "UNITA_MISURA"),
                ("price", "PREZZO"),
            ))


def _additional_products(root: ET.Element, data: Mapping[str, Any]) -> None:
    for entry in _entries(data, "AdditionalProducts"):
        _fill(ET.SubElement(root, "ProdottiServiziAggiuntivi"), entry, (
            ("name", "NOME"),
            ("detail", "DETTAGLIO"),
            ("macroArea", "MACROAREA"),
            ("macroAreaDetail", "DETTAGLI_MACROAREA"),
        ))


# ── Public API ───────────────────────────────────────────────────────


def build_offer_element(record: Any) -> ET.Element:
    """Build the <Offerta> tree without checking the record first."""
    data = normalize(record)
    root = ET.Element("Offerta")

    _identification(root, data)
    _offer_details(root, data)
    _validity(root, data)
    _payment_methods(root, data)
    _flat(root, data, "EnergyPriceReference")
    _flat(root, data, "Characteristics")
    _flat(root, data, "DualOffer")
    _flat(root, data, "RegulatedComponents")
    _flat(root, data, "PriceType")
    _flat(root, data, "WeeklyTimeBands")
    _dispatching(root, data)
    _company_components(root, data)
    _contractual_conditions(root, data)
    _flat(root, data, "OfferZones")
    _discounts(root, data)
    _additional_products(root, data)
    return root


def build_offer_xml(record: Any, *, pretty: bool | None = None) -> str:
    """Serialize a record to the SII XML document.

    Raises:
        ExportBlocked: if the full verdict still has MISSING or INVALID values
            (stale values from abandoned branches included).
    """
    result = can_export(record)
    if not result.allowed:
        logger.warning("XML export blocked by %d error(s)", len(result.blocking_errors))
        raise ExportBlocked(result.blocking_errors)

    root = build_offer_element(record)
    if settings.export.xml_pretty if pretty is None else pretty:
        ET.indent(root, space="    ")

    body = ET.tostring(root, encoding="unicode")
    logger.debug("Built offer XML (%d bytes)", len(body))
    return f"{XML_DECLARATION}\n{body}\n"
