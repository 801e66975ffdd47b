"""Typed OfferRecord — one pydantic model per wizard section.

Every field is optional, so a half-filled wizard record is representable,
but validation is strict: codes must already be strings and numbers must be
int, float or Decimal. Nothing is coerced, so a typed record gets the same
verdict as its raw mapping. Mappings holding wrongly typed values are
rejected here and should be validated as plain mappings. Serialized keys
match the catalog: PascalCase sections (``OfferDetails``) holding camelCase
fields (``vatNumber``).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal

Number = Union[int, float, Decimal]
DateLike = Union[datetime, date, str]


class _Section(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", strict=True)


# ---------------------------------------------------------------------------
# Single-object sections
# ---------------------------------------------------------------------------


class Identification(_Section):
    vat_number: str | None = None       # PIVA_UTENTE
    offer_code: str | None = None       # COD_OFFERTA


class OfferDetails(_Section):
    market_type: str | None = None
    single_offer: str | None = None
    client_type: str | None = None
    residential_status: str | None = None
    offer_type: str | None = None
    activation_types: list[str] = Field(default_factory=list)
    name: str | None = None
    description: str | None = None
    duration_months: Number | None = None  # -1 = indeterminate
    guarantees: str | None = None


class ActivationMethods(_Section):
    methods: list[str] = Field(default_factory=list)
    other_description: str | None = None


class Contacts(_Section):
    phone: str | None = None
    vendor_website: str | None = None
    offer_url: str | None = None


class EnergyPriceReference(_Section):
    price_index: str | None = None
    other_description: str | None = None


class Validity(_Section):
    start_timestamp: DateLike | None = None
    end_timestamp: DateLike | None = None


class Characteristics(_Section):
    min_consumption: Number | None = None
    max_consumption: Number | None = None
    min_power: Number | None = None
    max_power: Number | None = None


class DualOffer(_Section):
    joint_electricity_codes: list[str] = Field(default_factory=list)
    joint_gas_codes: list[str] = Field(default_factory=list)


class RegulatedComponents(_Section):
    codes: list[str] = Field(default_factory=list)


class PriceType(_Section):
    time_band_configuration: str | None = None


class WeeklyTimeBands(_Section):
    monday: str | None = None
    tuesday: str | None = None
    wednesday: str | None = None
    thursday: str | None = None
    friday: str | None = None
    saturday: str | None = None
    sunday: str | None = None
    holidays: str | None = None


class OfferZones(_Section):
    regions: list[str] = Field(default_factory=list)
    provinces: list[str] = Field(default_factory=list)
    municipalities: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Repeated sections
# ---------------------------------------------------------------------------


class PaymentMethodEntry(_Section):
    method_type: str | None = None
    other_description: str | None = None


class DispatchingEntry(_Section):
    type: str | None = None
    value: Number | None = None
    name: str | None = None
    description: str | None = None


class ValidityPeriod(_Section):
    """PeriodoValidita, shared by price intervals and discounts."""

    duration: Number | None = None
    valid_until: str | None = None      # MM/YYYY
    months: list[str] = Field(default_factory=list)


class PriceInterval(_Section):
    component_band: str | None = None
    consumption_from: Number | None = None
    consumption_to: Number | None = None
    price: Number | None = None
    unit_of_measure: str | None = None
    validity_period: ValidityPeriod | None = None


class CompanyComponent(_Section):
    name: str | None = None
    description: str | None = None
    component_class: str | None = None
    macro_area: str | None = None
    price_intervals: list[PriceInterval] = Field(default_factory=list)


class ContractualCondition(_Section):
    condition_type: str | None = None
    other_description: str | None = None
    description: str | None = None
    is_limiting: str | None = None


class DiscountPrice(_Section):
    discount_type: str | None = None
    valid_from: Number | None = None
    valid_to: Number | None = None
    unit_of_measure: str | None = None
    price: Number | None = None


class Discount(_Section):
    name: str | None = None
    description: str | None = None
    component_band_codes: list[str] = Field(default_factory=list)
    validity: str | None = None
    vat_applicable: str | None = None
    validity_period: ValidityPeriod | None = None
    application_condition: str | None = None
    condition_description: str | None = None
    prices: list[DiscountPrice] = Field(default_factory=list)


class AdditionalProduct(_Section):
    name: str | None = None
    detail: str | None = None
    macro_area: str | None = None
    macro_area_detail: str | None = None


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


class OfferRecord(BaseModel):
    """The whole offer, one attribute per wizard section. Absent sections are None."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore", strict=True)

    identification: Identification | None = None
    offer_details: OfferDetails | None = None
    activation_methods: ActivationMethods | None = None
    contacts: Contacts | None = None
    energy_price_reference: EnergyPriceReference | None = None
    validity: Validity | None = None
    characteristics: Characteristics | None = None
    dual_offer: DualOffer | None = None
    payment_methods: list[PaymentMethodEntry] | None = None
    regulated_components: RegulatedComponents | None = None
    price_type: PriceType | None = None
    weekly_time_bands: WeeklyTimeBands | None = None
    dispatching: list[DispatchingEntry] | None = None
    company_components: list[CompanyComponent] | None = None
    contractual_conditions: list[ContractualCondition] | None = None
    offer_zones: OfferZones | None = None
    discounts: list[Discount] | None = None
    additional_products: list[AdditionalProduct] | None = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> OfferRecord:
        """Build from the nested mapping the wizard sends (section keys in PascalCase).

        Raises:
            pydantic.ValidationError: a value does not have the field's type.
        """
        return cls.model_validate(data)

    def to_mapping(self) -> dict[str, Any]:
        """Nested mapping keyed like the catalog, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)
