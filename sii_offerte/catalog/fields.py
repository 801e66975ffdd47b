"""Field Constraint Catalog — every field of an SII v4.5 offer and its primitive shape.

Field ids are dotted paths ``Section.field``; a ``[]`` suffix marks a repeated
group (``CompanyComponents[].priceIntervals[].price``). Sections and nested
objects are registered too, as ``Group`` shapes, so that cardinality and
applicability rules can target them.

The bounds here are the single source of truth: an 11-16 character VAT number
or a 3000 character description is defined once and nowhere else.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from sii_offerte.catalog.shapes import (
    ArrayOf,
    BoundedString,
    DateShape,
    EnumShape,
    FieldShape,
    Group,
    Numeric,
)
from sii_offerte.errors import UnknownField
from sii_offerte.models.enums import (
    DURATION_INDETERMINATE,
    ActivationMethod,
    ClientType,
    CompanyMacroArea,
    ComponentBand,
    ComponentBandCode,
    ComponentClass,
    ConditionType,
    ContractActivationType,
    DiscountCondition,
    DiscountType,
    DiscountValidity,
    DiscountVat,
    DispatchingType,
    Limiting,
    MarketType,
    Month,
    OfferType,
    PaymentMethod,
    PriceIndex,
    RegulatedComponent,
    ResidentialStatus,
    ServiceMacroArea,
    SingleOffer,
    TimeBandConfiguration,
    UnitOfMeasure,
    codes,
)

# ── Primitive bounds ────────────────────────────────────────────────────

UPPER_ALNUM = r"^[A-Z0-9]+$"
PHONE_PATTERN = r"^[0-9 +\-()]+$"
URL_PATTERN = r"^https?://\S+$"
MONTH_YEAR_PATTERN = r"^(0[1-9]|1[0-2])/\d{4}$"
# XX-Y segments: XX = last quarter hour of the segment, Y = band number
WEEKLY_BAND_PATTERN = r"^\d{1,2}-[1-8](,\d{1,2}-[1-8])*$"

MAX_AMOUNT = Decimal("999999999.99")
MAX_CONSUMPTION = Decimal("999999999")
MAX_DISPATCHING_VALUE = Decimal("9999999")
PRICE_DECIMALS = 6

NAME_LEN = 255
TEXT_LEN = 3000
ACTIVATION_OTHER_LEN = 2000
URL_LEN = 100
PHONE_LEN = 15
OFFER_CODE_LEN = 32
WEEKLY_BAND_LEN = 49


def _text(max_len: int, pattern: str | None = None, min_len: int = 1) -> BoundedString:
    return BoundedString(max_len=max_len, min_len=min_len, pattern=pattern)


def _enum(enum_cls: type[Enum]) -> EnumShape:
    return EnumShape(codes=codes(enum_cls))


def _codes(enum_cls: type[Enum]) -> ArrayOf:
    return ArrayOf(item=_enum(enum_cls), unique=True)


def _digits(n: int) -> BoundedString:
    return BoundedString(max_len=n, min_len=n, pattern=rf"^\d{{{n}}}$")


_PRICE = Numeric(minimum=Decimal(0), maximum=MAX_AMOUNT, decimals=PRICE_DECIMALS)
_CONSUMPTION = Numeric(minimum=Decimal(0), maximum=MAX_CONSUMPTION, integer=True)


def _validity_period(prefix: str) -> dict[str, FieldShape]:
    """Shared PeriodoValidita shape used by price intervals and discounts."""
    return {
        prefix: Group(),
        f"{prefix}.duration": Numeric(minimum=Decimal(1), maximum=Decimal(99), integer=True),
        f"{prefix}.validUntil": _text(7, MONTH_YEAR_PATTERN, min_len=7),
        f"{prefix}.months": _codes(Month),
    }


# ── Catalog ─────────────────────────────────────────────────────────────

WEEK_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

CATALOG: dict[str, FieldShape] = {
    # Identification
    "Identification": Group(),
    "Identification.vatNumber": _text(16, UPPER_ALNUM, min_len=11),
    "Identification.offerCode": _text(OFFER_CODE_LEN, UPPER_ALNUM),
    # OfferDetails
    "OfferDetails": Group(),
    "OfferDetails.marketType": _enum(MarketType),
    "OfferDetails.singleOffer": _enum(SingleOffer),
    "OfferDetails.clientType": _enum(ClientType),
    "OfferDetails.residentialStatus": _enum(ResidentialStatus),
    "OfferDetails.offerType": _enum(OfferType),
    "OfferDetails.activationTypes": _codes(ContractActivationType),
    "OfferDetails.name": _text(NAME_LEN),
    "OfferDetails.description": _text(TEXT_LEN),
    "OfferDetails.durationMonths": Numeric(
        minimum=Decimal(1), maximum=Decimal(99), integer=True, sentinels=frozenset({DURATION_INDETERMINATE}),
    ),
    "OfferDetails.guarantees": _text(TEXT_LEN),
    # ActivationMethods
    "ActivationMethods": Group(),
    "ActivationMethods.methods": _codes(ActivationMethod),
    "ActivationMethods.otherDescription": _text(ACTIVATION_OTHER_LEN),
    # Contacts
    "Contacts": Group(),
    "Contacts.phone": _text(PHONE_LEN, PHONE_PATTERN),
    "Contacts.vendorWebsite": _text(URL_LEN, URL_PATTERN),
    "Contacts.offerUrl": _text(URL_LEN, URL_PATTERN),
    # EnergyPriceReference
    "EnergyPriceReference": Group(),
    "EnergyPriceReference.priceIndex": _enum(PriceIndex),
    "EnergyPriceReference.otherDescription": _text(TEXT_LEN),
    # Validity
    "Validity": Group(),
    "Validity.startTimestamp": DateShape(),
    "Validity.endTimestamp": DateShape(),
    # Characteristics
    "Characteristics": Group(),
    "Characteristics.minConsumption": _CONSUMPTION,
    "Characteristics.maxConsumption": _CONSUMPTION,
    "Characteristics.minPower": Numeric(minimum=Decimal(0), maximum=MAX_AMOUNT, decimals=PRICE_DECIMALS),
    "Characteristics.maxPower": Numeric(minimum=Decimal(0), maximum=MAX_AMOUNT, decimals=PRICE_DECIMALS),
    # DualOffer
    "DualOffer": Group(),
    "DualOffer.jointElectricityCodes": ArrayOf(item=_text(OFFER_CODE_LEN, UPPER_ALNUM), unique=True),
    "DualOffer.jointGasCodes": ArrayOf(item=_text(OFFER_CODE_LEN, UPPER_ALNUM), unique=True),
    # PaymentMethods[]
    "PaymentMethods": Group(repeated=True),
    "PaymentMethods[].methodType": _enum(PaymentMethod),
    "PaymentMethods[].otherDescription": _text(TEXT_LEN),
    # RegulatedComponents
    "RegulatedComponents": Group(),
    "RegulatedComponents.codes": _codes(RegulatedComponent),
    # PriceType
    "PriceType": Group(),
    "PriceType.timeBandConfiguration": _enum(TimeBandConfiguration),
    # WeeklyTimeBands
    "WeeklyTimeBands": Group(),
    **{f"WeeklyTimeBands.{day}": _text(WEEKLY_BAND_LEN, WEEKLY_BAND_PATTERN) for day in WEEK_DAYS},
    "WeeklyTimeBands.holidays": _text(WEEKLY_BAND_LEN, WEEKLY_BAND_PATTERN),
    # Dispatching[]
    "Dispatching": Group(repeated=True),
    "Dispatching[].type": _enum(DispatchingType),
    "Dispatching[].value": Numeric(minimum=Decimal(0), maximum=MAX_DISPATCHING_VALUE, decimals=PRICE_DECIMALS),
    "Dispatching[].name": _text(25),
    "Dispatching[].description": _text(NAME_LEN),
    # CompanyComponents[]
    "CompanyComponents": Group(repeated=True),
    "CompanyComponents[].name": _text(NAME_LEN),
    "CompanyComponents[].description": _text(TEXT_LEN),
    "CompanyComponents[].componentClass": _enum(ComponentClass),
    "CompanyComponents[].macroArea": _enum(CompanyMacroArea),
    "CompanyComponents[].priceIntervals": Group(repeated=True),
    "CompanyComponents[].priceIntervals[].componentBand": _enum(ComponentBand),
    "CompanyComponents[].priceIntervals[].consumptionFrom": _CONSUMPTION,
    "CompanyComponents[].priceIntervals[].consumptionTo": _CONSUMPTION,
    "CompanyComponents[].priceIntervals[].price": _PRICE,
    "CompanyComponents[].priceIntervals[].unitOfMeasure": _enum(UnitOfMeasure),
    **_validity_period("CompanyComponents[].priceIntervals[].validityPeriod"),
    # ContractualConditions[]
    "ContractualConditions": Group(repeated=True),
    "ContractualConditions[].conditionType": _enum(ConditionType),
    "ContractualConditions[].otherDescription": _text(TEXT_LEN),
    "ContractualConditions[].description": _text(TEXT_LEN),
    "ContractualConditions[].isLimiting": _enum(Limiting),
    # OfferZones
    "OfferZones": Group(),
    "OfferZones.regions": ArrayOf(item=_digits(2), unique=True),
    "OfferZones.provinces": ArrayOf(item=_digits(3), unique=True),
    "OfferZones.municipalities": ArrayOf(item=_digits(6), unique=True),
    # Discounts[]
    "Discounts": Group(repeated=True),
    "Discounts[].name": _text(NAME_LEN),
    "Discounts[].description": _text(TEXT_LEN),
    "Discounts[].componentBandCodes": _codes(ComponentBandCode),
    "Discounts[].validity": _enum(DiscountValidity),
    "Discounts[].vatApplicable": _enum(DiscountVat),
    **_validity_period("Discounts[].validityPeriod"),
    "Discounts[].applicationCondition": _enum(DiscountCondition),
    "Discounts[].conditionDescription": _text(TEXT_LEN),
    "Discounts[].prices": Group(repeated=True),
    "Discounts[].prices[].discountType": _enum(DiscountType),
    "Discounts[].prices[].validFrom": _CONSUMPTION,
    "Discounts[].prices[].validTo": _CONSUMPTION,
    "Discounts[].prices[].unitOfMeasure": _enum(UnitOfMeasure),
    "Discounts[].prices[].price": _PRICE,
    # AdditionalProducts[]
    "AdditionalProducts": Group(repeated=True),
    "AdditionalProducts[].name": _text(NAME_LEN),
    "AdditionalProducts[].detail": _text(TEXT_LEN),
    "AdditionalProducts[].macroArea": _enum(ServiceMacroArea),
    "AdditionalProducts[].macroAreaDetail": _text(TEXT_LEN),
}

# Wizard order; one section per step
SECTIONS: tuple[str, ...] = tuple(fid for fid in CATALOG if "." not in fid)


# ── Lookups ─────────────────────────────────────────────────────────────


def describe(field_id: str) -> FieldShape:
    """Return the primitive shape of a field.

    Raises:
        UnknownField: if the id is not registered.
    """
    try:
        return CATALOG[field_id]
    except KeyError:
        raise UnknownField(field_id) from None


def is_known(field_id: str) -> bool:
    return field_id in CATALOG


def field_ids() -> tuple[str, ...]:
    """All registered ids, sections and groups included, in wizard order."""
    return tuple(CATALOG)


def section_of(field_id: str) -> str:
    """Top-level section a field belongs to."""
    describe(field_id)
    return field_id.split(".", 1)[0].removesuffix("[]")


def fields_in_section(section: str) -> tuple[str, ...]:
    """Ids belonging to one section, the section itself first."""
    if section not in SECTIONS:
        raise UnknownField(section)
    return tuple(fid for fid in CATALOG if fid.split(".", 1)[0].removesuffix("[]") == section)


def parent_of(field_id: str) -> str | None:
    """Id of the enclosing group, or None for a section."""
    if "." not in field_id:
        return None
    return field_id.rsplit(".", 1)[0].removesuffix("[]")


def ancestors(field_id: str) -> tuple[str, ...]:
    """Enclosing group ids from the section down, excluding the field itself."""
    chain: list[str] = []
    parent = parent_of(field_id)
    while parent is not None:
        chain.append(parent)
        parent = parent_of(parent)
    return tuple(reversed(chain))


def is_repeated(field_id: str) -> bool:
    shape = describe(field_id)
    return isinstance(shape, Group) and shape.repeated
