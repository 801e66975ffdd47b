"""Tests for the field catalog and record path helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from sii_offerte.catalog import (
    CATALOG,
    SECTIONS,
    ArrayOf,
    BoundedString,
    EnumShape,
    Group,
    Numeric,
    ancestors,
    describe,
    fields_in_section,
    is_known,
    is_repeated,
    parent_of,
    section_of,
)
from sii_offerte.catalog.paths import is_blank, iter_instances, lookup, normalize, set_value
from sii_offerte.errors import UnknownField
from sii_offerte.models.enums import MarketType, OfferType
from sii_offerte.schemas.offer import OfferDetails, OfferRecord


class TestSections:
    def test_eighteen_sections_in_wizard_order(self):
        assert len(SECTIONS) == 18
        assert SECTIONS[0] == "Identification"
        assert SECTIONS[-1] == "AdditionalProducts"

    def test_every_section_is_a_group(self):
        for section in SECTIONS:
            assert isinstance(CATALOG[section], Group)

    def test_repeated_sections(self):
        repeated = {s for s in SECTIONS if is_repeated(s)}
        assert repeated == {
            "PaymentMethods",
            "Dispatching",
            "CompanyComponents",
            "ContractualConditions",
            "Discounts",
            "AdditionalProducts",
        }

    def test_fields_in_section_starts_with_section(self):
        ids = fields_in_section("Discounts")
        assert ids[0] == "Discounts"
        assert "Discounts[].prices[].price" in ids
        assert all(section_of(fid) == "Discounts" for fid in ids)

    def test_fields_in_unknown_section(self):
        with pytest.raises(UnknownField):
            fields_in_section("Nowhere")


class TestDescribe:
    def test_vat_number_bounds(self):
        shape = describe("Identification.vatNumber")
        assert isinstance(shape, BoundedString)
        assert shape.min_len == 11
        assert shape.max_len == 16

    def test_duration_accepts_indeterminate_sentinel(self):
        shape = describe("OfferDetails.durationMonths")
        assert isinstance(shape, Numeric)
        assert -1 in shape.sentinels
        assert shape.integer is True

    def test_price_has_six_decimals(self):
        shape = describe("CompanyComponents[].priceIntervals[].price")
        assert isinstance(shape, Numeric)
        assert shape.decimals == 6
        assert shape.minimum == Decimal(0)

    def test_market_type_codes(self):
        shape = describe("OfferDetails.marketType")
        assert isinstance(shape, EnumShape)
        assert shape.codes == {"01", "02", "03"}

    def test_code_list_is_unique_array(self):
        shape = describe("ActivationMethods.methods")
        assert isinstance(shape, ArrayOf)
        assert shape.unique is True

    def test_unknown_field_raises(self):
        with pytest.raises(UnknownField) as exc_info:
            describe("OfferDetails.colour")
        assert exc_info.value.field_id == "OfferDetails.colour"
        assert isinstance(exc_info.value, KeyError)

    def test_is_known(self):
        assert is_known("Contacts.phone")
        assert not is_known("Contacts.fax")


class TestHierarchy:
    def test_parent_of_nested_field(self):
        assert parent_of("Discounts[].prices[].price") == "Discounts[].prices"
        assert parent_of("Discounts[].prices") == "Discounts"
        assert parent_of("Discounts") is None

    def test_ancestors(self):
        assert ancestors("CompanyComponents[].priceIntervals[].validityPeriod.months") == (
            "CompanyComponents",
            "CompanyComponents[].priceIntervals",
            "CompanyComponents[].priceIntervals[].validityPeriod",
        )

    def test_section_of(self):
        assert section_of("CompanyComponents[].priceIntervals[].price") == "CompanyComponents"


class TestPaths:
    @pytest.fixture()
    def record(self):
        return {
            "Discounts": [
                {"name": "A", "prices": [{"price": 1}, {"price": 2}]},
                {"name": "B", "prices": []},
            ],
        }

    def test_iter_instances_expands_repeated_groups(self, record):
        found = list(iter_instances(record, "Discounts[].prices[].price"))
        assert [path for path, _, _ in found] == [
            "Discounts[0].prices[0].price",
            "Discounts[0].prices[1].price",
        ]
        assert found[1][1] == {"Discounts": 0, "Discounts[].prices": 1}

    def test_iter_instances_missing_single_section(self):
        found = list(iter_instances({}, "Contacts.phone"))
        assert found == [("Contacts.phone", {}, None)]

    def test_lookup_respects_bindings(self, record):
        assert lookup(record, "Discounts[].name", {"Discounts": 1}) == ["B"]
        assert lookup(record, "Discounts[].name") == ["A", "B"]

    def test_set_value_creates_first_entries(self):
        record: dict = {}
        set_value(record, "CompanyComponents[].priceIntervals[].price", 5)
        assert record == {"CompanyComponents": [{"priceIntervals": [{"price": 5}]}]}

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("   ")
        assert is_blank([])
        assert is_blank({"a": None, "b": ""})
        assert not is_blank(0)
        assert not is_blank(["01"])


class TestNormalize:
    def test_enum_members_become_codes(self):
        record = {"OfferDetails": {"marketType": MarketType.GAS, "activationTypes": ("01",)}}
        assert normalize(record) == {"OfferDetails": {"marketType": "02", "activationTypes": ["01"]}}

    def test_offer_record_model(self):
        offer = OfferRecord(offer_details=OfferDetails(market_type="01", offer_type=OfferType.FLAT.value))
        data = normalize(offer)
        assert data["OfferDetails"]["marketType"] == "01"
        assert data["OfferDetails"]["offerType"] == "03"

    def test_non_mapping_is_empty_record(self):
        assert normalize("not a record") == {}
        assert normalize(None) == {}

    def test_snapshot_is_detached(self):
        record = {"PaymentMethods": [{"methodType": "01"}]}
        data = normalize(record)
        data["PaymentMethods"][0]["methodType"] = "99"
        assert record["PaymentMethods"][0]["methodType"] == "01"
