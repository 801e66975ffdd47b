"""Conditional rule table for SII Trasmissione Offerte v4.5.

Every cross-field dependency of the offer lives here as data. The validator
evaluates the table generically; nothing about individual sections is coded
in the engine itself.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from sii_offerte.catalog.fields import WEEK_DAYS
from sii_offerte.catalog.paths import is_blank
from sii_offerte.config import settings
from sii_offerte.models.enums import (
    BANDS_BY_CONFIGURATION,
    ELECTRICITY_BAND_CODES,
    ELECTRICITY_REGULATED,
    ELECTRICITY_UNITS,
    GAS_BAND_CODES,
    GAS_REGULATED,
    GAS_UNITS,
    OTHER,
    WEEKLY_BANDS_OPTIONAL,
    WEEKLY_BANDS_REQUIRED,
    ClientType,
    CompanyMacroArea,
    ConditionType,
    DiscountType,
    MarketType,
    OfferType,
    UnitOfMeasure,
)
from sii_offerte.rules.effects import (
    FORBIDDEN,
    REQUIRED,
    Applicability,
    Cardinality,
    Constraint,
    RestrictedTo,
    Rule,
)
from sii_offerte.rules.predicates import (
    Context,
    Predicate,
    absent,
    contains,
    value_in,
    value_is,
)
from sii_offerte.validation.dates import as_date, as_datetime
from sii_offerte.validation.primitives import check_band_schedule, to_decimal

# ── Driving selectors ───────────────────────────────────────────────────

MARKET = "OfferDetails.marketType"
OFFER_TYPE = "OfferDetails.offerType"
CLIENT_TYPE = "OfferDetails.clientType"
BAND_CONFIGURATION = "PriceType.timeBandConfiguration"
START = "Validity.startTimestamp"

ELECTRICITY = value_is(MARKET, MarketType.ELECTRICITY.value)
GAS = value_is(MARKET, MarketType.GAS.value)
DUAL_FUEL = value_is(MARKET, MarketType.DUAL_FUEL.value)
VARIABLE = value_is(OFFER_TYPE, OfferType.VARIABLE.value)
FLAT = value_is(OFFER_TYPE, OfferType.FLAT.value)
REGULATED_PRICE_DISCOUNT = value_is("Discounts[].prices[].discountType", DiscountType.REGULATED_PRICE.value)

INTERVAL = "CompanyComponents[].priceIntervals[]"
MACRO_AREA = "CompanyComponents[].macroArea"

SINGLE_PRICE_AREAS = frozenset({CompanyMacroArea.FIXED_FEE.value, CompanyMacroArea.ONE_OFF.value})
BANDED_AREAS = frozenset({
    CompanyMacroArea.POWER_FEE.value,
    CompanyMacroArea.ENERGY_FEE.value,
    CompanyMacroArea.RENEWABLE.value,
})
# Energy prices in €/kWh for electricity are quoted per time band
BANDED = ELECTRICITY & value_in(MACRO_AREA, BANDED_AREAS) & value_is(f"{INTERVAL}.unitOfMeasure", UnitOfMeasure.EUR_PER_KWH.value)


# ── Applicability ───────────────────────────────────────────────────────

APPLICABILITY: tuple[Applicability, ...] = (
    Applicability("single-offer-not-for-dual-fuel", "OfferDetails.singleOffer", ~DUAL_FUEL),
    Applicability(
        "residential-status-domestic-only", "OfferDetails.residentialStatus",
        value_is(CLIENT_TYPE, ClientType.DOMESTIC.value),
    ),
    Applicability("price-reference-variable-only", "EnergyPriceReference", VARIABLE),
    Applicability("min-power-not-for-gas", "Characteristics.minPower", ~GAS),
    Applicability("max-power-not-for-gas", "Characteristics.maxPower", ~GAS),
    Applicability("dual-offer-dual-fuel-only", "DualOffer", DUAL_FUEL),
    Applicability("price-type-electricity-only", "PriceType", ELECTRICITY),
    Applicability("weekly-bands-electricity-only", "WeeklyTimeBands", ELECTRICITY),
    Applicability("dispatching-electricity-only", "Dispatching", ELECTRICITY),
)


# ── Effects ─────────────────────────────────────────────────────────────

ALWAYS_REQUIRED: tuple[str, ...] = (
    "Identification.vatNumber",
    "Identification.offerCode",
    "OfferDetails.marketType",
    "OfferDetails.singleOffer",
    "OfferDetails.clientType",
    "OfferDetails.offerType",
    "OfferDetails.activationTypes",
    "OfferDetails.name",
    "OfferDetails.description",
    "OfferDetails.durationMonths",
    "OfferDetails.guarantees",
    "ActivationMethods.methods",
    "Contacts.phone",
    "Validity.startTimestamp",
    "PaymentMethods[].methodType",
    "Dispatching[].type",
    "Dispatching[].name",
    "CompanyComponents[].name",
    "CompanyComponents[].description",
    "CompanyComponents[].componentClass",
    "CompanyComponents[].macroArea",
    f"{INTERVAL}.price",
    f"{INTERVAL}.unitOfMeasure",
    "ContractualConditions[].conditionType",
    "ContractualConditions[].description",
    "ContractualConditions[].isLimiting",
    "Discounts[].name",
    "Discounts[].description",
    "Discounts[].vatApplicable",
    "Discounts[].applicationCondition",
    "Discounts[].prices[].discountType",
    "Discounts[].prices[].unitOfMeasure",
    "Discounts[].prices[].price",
    "AdditionalProducts[].name",
    "AdditionalProducts[].detail",
)


def _present_iff(name: str, target: str, trigger: Predicate) -> list[Rule]:
    """Field required while ``trigger`` holds and forbidden otherwise."""
    return [
        Rule(f"{name}-required", target, REQUIRED, trigger),
        Rule(f"{name}-forbidden", target, FORBIDDEN, ~trigger),
    ]


def _weekly_band_rules() -> list[Rule]:
    bands_required = value_in(BAND_CONFIGURATION, WEEKLY_BANDS_REQUIRED)
    bands_allowed = value_in(BAND_CONFIGURATION, WEEKLY_BANDS_REQUIRED | WEEKLY_BANDS_OPTIONAL)
    rules = [Rule(f"weekly-{day}-required", f"WeeklyTimeBands.{day}", REQUIRED, bands_required) for day in WEEK_DAYS]
    rules += [
        Rule(f"weekly-{day}-forbidden", f"WeeklyTimeBands.{day}", FORBIDDEN, ~bands_allowed)
        for day in (*WEEK_DAYS, "holidays")
    ]
    return rules


def _band_configuration_rules() -> list[Rule]:
    """One interval per band, each tagged with a band of the chosen configuration."""
    rules: list[Rule] = []
    for configuration, bands in sorted(BANDS_BY_CONFIGURATION.items()):
        trigger = BANDED & value_is(BAND_CONFIGURATION, configuration)
        rules.append(Rule(
            f"intervals-per-band-{configuration}", "CompanyComponents[].priceIntervals",
            Cardinality(min=len(bands)), trigger,
        ))
        rules.append(Rule(
            f"interval-bands-{configuration}", f"{INTERVAL}.componentBand", RestrictedTo(bands), trigger,
        ))
    return rules


RULES: tuple[Rule, ...] = (
    *(Rule(f"{fid}-required", fid, REQUIRED) for fid in ALWAYS_REQUIRED),
    # OfferDetails
    Rule("residential-status-electricity", "OfferDetails.residentialStatus", REQUIRED, ELECTRICITY),
    Rule(
        "client-type-electricity", CLIENT_TYPE,
        RestrictedTo(frozenset({ClientType.DOMESTIC.value, ClientType.OTHER_USES.value})), ELECTRICITY,
    ),
    # ActivationMethods
    *_present_iff(
        "activation-other", "ActivationMethods.otherDescription", contains("ActivationMethods.methods", OTHER),
    ),
    # EnergyPriceReference
    Rule("price-index-unless-regulated-discount", "EnergyPriceReference.priceIndex", REQUIRED, ~REGULATED_PRICE_DISCOUNT),
    *_present_iff(
        "price-index-other", "EnergyPriceReference.otherDescription",
        value_is("EnergyPriceReference.priceIndex", OTHER),
    ),
    # Characteristics
    *_present_iff("flat-min-consumption", "Characteristics.minConsumption", FLAT),
    *_present_iff("flat-max-consumption", "Characteristics.maxConsumption", FLAT),
    # DualOffer
    Rule("dual-electricity-codes", "DualOffer.jointElectricityCodes", Cardinality(min=1)),
    Rule("dual-gas-codes", "DualOffer.jointGasCodes", Cardinality(min=1)),
    # PaymentMethods
    Rule("payment-methods-at-least-one", "PaymentMethods", Cardinality(min=1)),
    *_present_iff(
        "payment-other", "PaymentMethods[].otherDescription", value_is("PaymentMethods[].methodType", OTHER),
    ),
    # RegulatedComponents
    Rule("regulated-electricity-codes", "RegulatedComponents.codes", RestrictedTo(ELECTRICITY_REGULATED), ELECTRICITY),
    Rule("regulated-gas-codes", "RegulatedComponents.codes", RestrictedTo(GAS_REGULATED), GAS),
    # PriceType / WeeklyTimeBands
    Rule("band-configuration-unless-flat", BAND_CONFIGURATION, REQUIRED, ~FLAT),
    *_weekly_band_rules(),
    # Dispatching
    Rule("dispatching-at-least-one", "Dispatching", Cardinality(min=1)),
    Rule("dispatching-other-value", "Dispatching[].value", REQUIRED, value_is("Dispatching[].type", OTHER)),
    # CompanyComponents
    Rule("intervals-at-least-one", "CompanyComponents[].priceIntervals", Cardinality(min=1)),
    Rule("electricity-units", f"{INTERVAL}.unitOfMeasure", RestrictedTo(ELECTRICITY_UNITS), ELECTRICITY),
    Rule("gas-units", f"{INTERVAL}.unitOfMeasure", RestrictedTo(GAS_UNITS), GAS),
    Rule(
        "fixed-fee-unit", f"{INTERVAL}.unitOfMeasure",
        RestrictedTo(frozenset({UnitOfMeasure.EUR_PER_YEAR.value})),
        value_is(MACRO_AREA, CompanyMacroArea.FIXED_FEE.value),
    ),
    Rule(
        "one-off-unit", f"{INTERVAL}.unitOfMeasure",
        RestrictedTo(frozenset({UnitOfMeasure.EUR.value})),
        value_is(MACRO_AREA, CompanyMacroArea.ONE_OFF.value),
    ),
    Rule(
        "single-price-interval", "CompanyComponents[].priceIntervals",
        Cardinality(min=1, max=1), value_in(MACRO_AREA, SINGLE_PRICE_AREAS),
    ),
    Rule("single-price-no-band", f"{INTERVAL}.componentBand", FORBIDDEN, value_in(MACRO_AREA, SINGLE_PRICE_AREAS)),
    Rule("gas-no-band", f"{INTERVAL}.componentBand", FORBIDDEN, GAS),
    Rule("banded-interval-band", f"{INTERVAL}.componentBand", REQUIRED, BANDED),
    *_band_configuration_rules(),
    # ContractualConditions
    *_present_iff(
        "condition-other", "ContractualConditions[].otherDescription",
        value_is("ContractualConditions[].conditionType", OTHER),
    ),
    # Discounts
    Rule("discount-prices-at-least-one", "Discounts[].prices", Cardinality(min=1)),
    Rule("discount-validity-without-period", "Discounts[].validity", REQUIRED, absent("Discounts[].validityPeriod")),
    *_present_iff(
        "discount-condition-other", "Discounts[].conditionDescription",
        value_is("Discounts[].applicationCondition", OTHER),
    ),
    Rule(
        "discount-electricity-bands", "Discounts[].componentBandCodes",
        RestrictedTo(ELECTRICITY_BAND_CODES), ELECTRICITY,
    ),
    Rule("discount-gas-bands", "Discounts[].componentBandCodes", RestrictedTo(GAS_BAND_CODES), GAS),
    # AdditionalProducts
    *_present_iff(
        "service-macro-area-other", "AdditionalProducts[].macroAreaDetail",
        value_is("AdditionalProducts[].macroArea", OTHER),
    ),
)


# ── Value constraints ───────────────────────────────────────────────────


def _range(lower_id: str, upper_id: str, *, strict: bool = False) -> Constraint:
    """The upper field must not be below (or, if strict, must exceed) the lower one."""

    def check(ctx: Context, value: Any) -> str | None:
        upper = to_decimal(value)
        lower = to_decimal(ctx.value(lower_id))
        if upper is None or lower is None:
            return None
        if upper < lower or (strict and upper == lower):
            return "range-inverted"
        return None

    return Constraint(f"{upper_id}-not-below-{lower_id}", upper_id, check, frozenset({lower_id}))


def _end_after_start(ctx: Context, value: Any) -> str | None:
    end = as_datetime(value)
    start = as_datetime(ctx.value(START))
    if end is None or start is None:
        return None
    return "end-before-start" if end < start else None


def _percentage(unit_id: str) -> Constraint:
    def check(ctx: Context, value: Any) -> str | None:
        if ctx.value(unit_id) != UnitOfMeasure.PERCENTAGE.value:
            return None
        number = to_decimal(value)
        if number is None:
            return None
        return "percentage-out-of-range" if not 0 <= number <= 100 else None

    price_id = unit_id.rsplit(".", 1)[0] + ".price"
    return Constraint(f"{price_id}-percentage", price_id, check, frozenset({unit_id}))


def _early_withdrawal_start(ctx: Context, value: Any) -> str | None:
    """Early-withdrawal charges may only be declared by offers starting on/after the cutoff."""
    if value != ConditionType.EARLY_WITHDRAWAL_CHARGE.value:
        return None
    start = as_date(ctx.value(START))
    if start is None:
        return "effective-date-missing"
    cutoff = ctx.early_withdrawal_cutoff or settings.rules.early_withdrawal_cutoff
    return "effective-date-too-early" if start < cutoff else None


def _band_schedule(ctx: Context, value: Any) -> str | None:
    if not isinstance(value, str) or is_blank(value):
        return None
    return check_band_schedule(value)


CONSTRAINTS: tuple[Constraint, ...] = (
    Constraint("validity-end-after-start", "Validity.endTimestamp", _end_after_start, frozenset({START})),
    _range("Characteristics.minConsumption", "Characteristics.maxConsumption"),
    _range("Characteristics.minPower", "Characteristics.maxPower"),
    _range(f"{INTERVAL}.consumptionFrom", f"{INTERVAL}.consumptionTo", strict=True),
    _percentage(f"{INTERVAL}.unitOfMeasure"),
    _range("Discounts[].prices[].validFrom", "Discounts[].prices[].validTo", strict=True),
    _percentage("Discounts[].prices[].unitOfMeasure"),
    Constraint(
        "early-withdrawal-cutoff", "ContractualConditions[].conditionType", _early_withdrawal_start,
        frozenset({START}),
    ),
    *(
        Constraint(f"weekly-{day}-schedule", f"WeeklyTimeBands.{day}", _band_schedule)
        for day in (*WEEK_DAYS, "holidays")
    ),
)


# ── Rule set ────────────────────────────────────────────────────────────


class RuleSet:
    """Indexed view of the applicability rules, effect rules and constraints."""

    def __init__(
        self,
        applicability: Iterable[Applicability],
        rules: Iterable[Rule],
        constraints: Iterable[Constraint],
    ) -> None:
        self.applicability = tuple(applicability)
        self.rules = tuple(rules)
        self.constraints = tuple(constraints)
        self._applicability: dict[str, list[Applicability]] = defaultdict(list)
        self._rules: dict[str, list[Rule]] = defaultdict(list)
        self._constraints: dict[str, list[Constraint]] = defaultdict(list)
        for a in self.applicability:
            self._applicability[a.target].append(a)
        for r in self.rules:
            self._rules[r.target].append(r)
        for c in self.constraints:
            self._constraints[c.target].append(c)

    def __len__(self) -> int:
        return len(self.applicability) + len(self.rules) + len(self.constraints)

    def applicability_for(self, target: str) -> list[Applicability]:
        return self._applicability.get(target, [])

    def rules_for(self, target: str) -> list[Rule]:
        return self._rules.get(target, [])

    def constraints_for(self, target: str) -> list[Constraint]:
        return self._constraints.get(target, [])

    def targets(self) -> set[str]:
        return set(self._applicability) | set(self._rules) | set(self._constraints)


RULE_SET = RuleSet(APPLICABILITY, RULES, CONSTRAINTS)
