"""SII Trasmissione Offerte v4.5 code lists.

All enums use the str mixin so that members compare equal to the wire codes
found in offer records and in the generated XML.
"""

from __future__ import annotations

from enum import Enum

# Sentinels shared by several fields
DURATION_INDETERMINATE = -1
OTHER = "99"


class MarketType(str, Enum):
    """TIPO_MERCATO — drives most applicability rules."""

    ELECTRICITY = "01"
    GAS = "02"
    DUAL_FUEL = "03"


class SingleOffer(str, Enum):
    """OFFERTA_SINGOLA — offer can be subscribed on its own."""

    SI = "SI"
    NO = "NO"


class ClientType(str, Enum):
    """TIPO_CLIENTE."""

    DOMESTIC = "01"
    OTHER_USES = "02"
    RESIDENTIAL_CONDOMINIUM = "03"  # gas only


class ResidentialStatus(str, Enum):
    """DOMESTICO_RESIDENTE."""

    RESIDENT = "01"
    NON_RESIDENT = "02"
    ALL = "03"


class OfferType(str, Enum):
    """TIPO_OFFERTA."""

    FIXED = "01"
    VARIABLE = "02"
    FLAT = "03"


class ContractActivationType(str, Enum):
    """TIPOLOGIA_ATT_CONTR."""

    SUPPLIER_CHANGE = "01"
    FIRST_ACTIVATION = "02"
    REACTIVATION = "03"
    CONTRACT_TRANSFER = "04"
    ALWAYS = "99"


class ActivationMethod(str, Enum):
    """MODALITA — channels through which the offer can be activated."""

    WEB = "01"
    ANY_CHANNEL = "02"
    POINT_OF_SALE = "03"
    TELESELLING = "04"
    AGENCY = "05"
    OTHER = "99"


class PriceIndex(str, Enum):
    """IDX_PREZZO_ENERGIA — index a variable price is pegged to."""

    PUN_QUARTERLY = "01"
    TTF_QUARTERLY = "02"
    PSV_QUARTERLY = "03"
    PSBIL_QUARTERLY = "04"
    PE_QUARTERLY = "05"
    CMEM_QUARTERLY = "06"
    PFOR_QUARTERLY = "07"
    PUN_BIMONTHLY = "08"
    TTF_BIMONTHLY = "09"
    PSV_BIMONTHLY = "10"
    PSBIL_BIMONTHLY = "11"
    PUN_MONTHLY = "12"
    TTF_MONTHLY = "13"
    PSV_MONTHLY = "14"
    PSBIL_MONTHLY = "15"
    OTHER = "99"


class TimeBandConfiguration(str, Enum):
    """TIPOLOGIA_FASCE."""

    MONORARIO = "01"
    F1_F2 = "02"
    F1_F2_F3 = "03"
    F1_F2_F3_F4 = "04"
    F1_TO_F5 = "05"
    F1_TO_F6 = "06"
    PEAK_OFFPEAK = "07"
    BIORARIO_F1_F23 = "91"
    BIORARIO_F2_F13 = "92"
    BIORARIO_F3_F12 = "93"


class ComponentBand(str, Enum):
    """FASCIA_COMPONENTE — band a price interval refers to."""

    MONORARIO_F1 = "01"
    F2 = "02"
    F3 = "03"
    F4 = "04"
    F5 = "05"
    F6 = "06"
    PEAK = "07"
    OFF_PEAK = "08"
    F23 = "91"
    F13 = "92"
    F12 = "93"


class DispatchingType(str, Enum):
    """TIPO_DISPACCIAMENTO."""

    DISP_DEL_111_06 = "01"
    PD = "02"
    MSD = "03"
    WIND_MODULATION = "04"
    ESSENTIAL_UNITS = "05"
    TERNA_OPERATION = "06"
    PRODUCTION_CAPACITY = "07"
    INTERRUPTIBILITY = "08"
    CAPACITY_MARKET_STG = "09"
    CAPACITY_MARKET_MT = "10"
    SAFEGUARD_REINTEGRATION = "11"
    GRADUAL_PROTECTION_REINTEGRATION = "12"
    DISP_BT = "13"
    OTHER = "99"


class PaymentMethod(str, Enum):
    """MODALITA_PAGAMENTO."""

    BANK_DIRECT_DEBIT = "01"
    POSTAL_DIRECT_DEBIT = "02"
    CREDIT_CARD_DIRECT_DEBIT = "03"
    PRE_FILLED_SLIP = "04"
    OTHER = "99"


class RegulatedComponent(str, Enum):
    """CODICE of ComponentiRegolate."""

    PCV = "01"
    PPE = "02"
    CCR = "03"
    CPR = "04"
    GRAD = "05"
    QTI = "06"
    QT_PSV = "07"
    QVD_FIXED = "09"
    QVD_VARIABLE = "10"


class ComponentClass(str, Enum):
    """TIPOLOGIA of a company component."""

    STANDARD = "01"
    OPTIONAL = "02"


class CompanyMacroArea(str, Enum):
    """MACROAREA of a company component."""

    FIXED_FEE = "01"
    POWER_FEE = "02"
    ENERGY_FEE = "04"
    ONE_OFF = "05"
    RENEWABLE = "06"


class UnitOfMeasure(str, Enum):
    """UNITA_MISURA."""

    EUR_PER_YEAR = "01"
    EUR_PER_KW = "02"
    EUR_PER_KWH = "03"
    EUR_PER_SMC = "04"
    EUR = "05"
    PERCENTAGE = "06"


class ConditionType(str, Enum):
    """TIPOLOGIA_CONDIZIONE of a contractual condition."""

    ACTIVATION = "01"
    DEACTIVATION = "02"
    WITHDRAWAL = "03"
    MULTI_YEAR = "04"
    EARLY_WITHDRAWAL_CHARGE = "05"
    OTHER = "99"


class Limiting(str, Enum):
    """LIMITANTE."""

    YES = "01"
    NO = "02"


class DiscountValidity(str, Enum):
    """VALIDITA of a discount."""

    ON_ENTRY = "01"
    UNDER_12_MONTHS = "02"
    OVER_12_MONTHS = "03"


class DiscountVat(str, Enum):
    """IVA_SCONTO."""

    YES = "01"
    NO = "02"


class DiscountCondition(str, Enum):
    """CONDIZIONE_APPLICAZIONE."""

    NONE = "00"
    ELECTRONIC_BILLING = "01"
    ONLINE_MANAGEMENT = "02"
    ELECTRONIC_BILLING_AND_DIRECT_DEBIT = "03"
    OTHER = "99"


class DiscountType(str, Enum):
    """TIPOLOGIA of a discount price."""

    FIXED_DISCOUNT = "01"
    POWER_DISCOUNT = "02"
    SALES_DISCOUNT = "03"
    REGULATED_PRICE = "04"


class ComponentBandCode(str, Enum):
    """CODICE_COMPONENTE_FASCIA — component/band pairs a discount applies to."""

    PCV = "01"
    PPE = "02"
    CCR = "03"
    CPR = "04"
    GRAD = "05"
    QTI = "06"
    QT_PSV = "07"
    QVD_FIXED = "09"
    QVD_VARIABLE = "10"
    F1 = "11"
    F2 = "12"
    F3 = "13"
    F4 = "14"
    F5 = "15"
    F6 = "16"
    PEAK = "17"
    OFF_PEAK = "18"
    F23 = "91"
    F13 = "92"
    F12 = "93"


class ServiceMacroArea(str, Enum):
    """MACROAREA of an additional product or service."""

    BOILER = "01"
    MOBILITY = "02"
    SOLAR_THERMAL = "03"
    PHOTOVOLTAIC = "04"
    AIR_CONDITIONING = "05"
    INSURANCE = "06"
    OTHER = "99"


class Month(str, Enum):
    """MESE_VALIDITA."""

    JANUARY = "01"
    FEBRUARY = "02"
    MARCH = "03"
    APRIL = "04"
    MAY = "05"
    JUNE = "06"
    JULY = "07"
    AUGUST = "08"
    SEPTEMBER = "09"
    OCTOBER = "10"
    NOVEMBER = "11"
    DECEMBER = "12"


def codes(enum_cls: type[Enum], *members: Enum) -> frozenset[str]:
    """Wire codes of the given members, or of the whole enum when none are given."""
    chosen = members or tuple(enum_cls)
    return frozenset(m.value for m in chosen)


# ── Market-dependent code subsets ─────────────────────────────────────

ELECTRICITY_REGULATED = codes(RegulatedComponent, RegulatedComponent.PCV, RegulatedComponent.PPE)
GAS_REGULATED = codes(RegulatedComponent) - ELECTRICITY_REGULATED

ELECTRICITY_UNITS = codes(
    UnitOfMeasure,
    UnitOfMeasure.EUR_PER_YEAR,
    UnitOfMeasure.EUR_PER_KW,
    UnitOfMeasure.EUR_PER_KWH,
    UnitOfMeasure.EUR,
    UnitOfMeasure.PERCENTAGE,
)
GAS_UNITS = codes(
    UnitOfMeasure,
    UnitOfMeasure.EUR_PER_YEAR,
    UnitOfMeasure.EUR_PER_SMC,
    UnitOfMeasure.EUR,
    UnitOfMeasure.PERCENTAGE,
)

ELECTRICITY_BAND_CODES = frozenset({"01", "02", "11", "12", "13", "14", "15", "16", "17", "18", "91", "92", "93"})
GAS_BAND_CODES = frozenset({"03", "04", "05", "06", "07", "09", "10"})

# Bands a price interval may carry for each time-band configuration
BANDS_BY_CONFIGURATION: dict[str, frozenset[str]] = {
    TimeBandConfiguration.MONORARIO.value: frozenset({"01"}),
    TimeBandConfiguration.F1_F2.value: frozenset({"01", "02"}),
    TimeBandConfiguration.F1_F2_F3.value: frozenset({"01", "02", "03"}),
    TimeBandConfiguration.F1_F2_F3_F4.value: frozenset({"01", "02", "03", "04"}),
    TimeBandConfiguration.F1_TO_F5.value: frozenset({"01", "02", "03", "04", "05"}),
    TimeBandConfiguration.F1_TO_F6.value: frozenset({"01", "02", "03", "04", "05", "06"}),
    TimeBandConfiguration.PEAK_OFFPEAK.value: frozenset({"07", "08"}),
    TimeBandConfiguration.BIORARIO_F1_F23.value: frozenset({"01", "91"}),
    TimeBandConfiguration.BIORARIO_F2_F13.value: frozenset({"02", "92"}),
    TimeBandConfiguration.BIORARIO_F3_F12.value: frozenset({"03", "93"}),
}

# Weekly schedules are mandatory, optional or forbidden depending on the configuration
WEEKLY_BANDS_REQUIRED = frozenset({"02", "04", "05", "06"})
WEEKLY_BANDS_OPTIONAL = frozenset({"03", "07", "91", "92", "93"})
