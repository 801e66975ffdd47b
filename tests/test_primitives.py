"""Tests for primitive value checks — construct shapes directly, no records."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sii_offerte.catalog import describe
from sii_offerte.catalog.shapes import ArrayOf, BooleanShape, BoundedString, DateShape, EnumShape, Group, Numeric
from sii_offerte.validation.dates import as_date, format_sii_datetime, parse_date
from sii_offerte.validation.primitives import check_band_schedule, check_value, to_decimal


class TestStrings:
    shape = BoundedString(max_len=5, min_len=2, pattern=r"^[A-Z]+$")

    def test_ok(self):
        assert check_value(self.shape, "ABC") is None

    def test_too_short(self):
        assert check_value(self.shape, "A") == "too-short"

    def test_too_long(self):
        assert check_value(self.shape, "ABCDEF") == "too-long"

    def test_pattern(self):
        assert check_value(self.shape, "abc") == "pattern-mismatch"

    def test_type(self):
        assert check_value(self.shape, 12) == "type-mismatch"

    def test_lowercase_vat_number_rejected(self):
        assert check_value(describe("Identification.vatNumber"), "it12345678901") == "pattern-mismatch"


class TestNumbers:
    price = Numeric(minimum=Decimal(0), maximum=Decimal("999999999.99"), decimals=6)
    months = Numeric(minimum=Decimal(1), maximum=Decimal(99), integer=True, sentinels=frozenset({-1}))

    def test_price_ok(self):
        assert check_value(self.price, Decimal("0.123456")) is None
        assert check_value(self.price, 0.1) is None

    def test_too_many_decimals(self):
        assert check_value(self.price, Decimal("0.1234567")) == "too-many-decimals"

    def test_negative_price(self):
        assert check_value(self.price, -1) == "out-of-range"

    def test_not_integer(self):
        assert check_value(self.months, 1.5) == "not-integer"

    def test_sentinel_accepted(self):
        assert check_value(self.months, -1) is None

    def test_other_negative_rejected(self):
        assert check_value(self.months, -2) == "out-of-range"

    def test_bool_is_not_a_number(self):
        assert check_value(self.months, True) == "type-mismatch"

    def test_string_is_not_a_number(self):
        assert check_value(self.price, "12") == "type-mismatch"

    def test_huge_integer_out_of_range(self):
        assert check_value(self.months, 10**5000) == "out-of-range"

    def test_to_decimal(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(float("nan")) is None
        assert to_decimal(False) is None
        assert to_decimal(10**5000) == Decimal("1E5000")


class TestEnumsAndArrays:
    market = EnumShape(codes=frozenset({"01", "02", "03"}))
    methods = ArrayOf(item=EnumShape(codes=frozenset({"01", "99"})), unique=True, max_items=2)

    def test_valid_code(self):
        assert check_value(self.market, "02") is None

    def test_invalid_code(self):
        assert check_value(self.market, "04") == "invalid-code"

    def test_code_must_be_text(self):
        assert check_value(self.market, 1) == "type-mismatch"

    def test_array_ok(self):
        assert check_value(self.methods, ["01", "99"]) is None

    def test_array_bad_item(self):
        assert check_value(self.methods, ["01", "05"]) == "invalid-code"

    def test_array_duplicates(self):
        assert check_value(self.methods, ["01", "01"]) == "duplicate-code"

    def test_array_too_many(self):
        shape = ArrayOf(item=BoundedString(max_len=2), max_items=2)
        assert check_value(shape, ["a", "b", "c"]) == "too-many-items"

    def test_array_type(self):
        assert check_value(self.methods, "01") == "type-mismatch"


class TestOtherShapes:
    def test_boolean(self):
        assert check_value(BooleanShape(), False) is None
        assert check_value(BooleanShape(), "false") == "type-mismatch"

    def test_date(self):
        shape = DateShape()
        assert check_value(shape, "2025-01-01T00:00:00") is None
        assert check_value(shape, "01/01/2025_00:00:00") is None
        assert check_value(shape, "01/01/2025") is None
        assert check_value(shape, date(2025, 1, 1)) is None
        assert check_value(shape, "31/02/2025") == "invalid-date"
        assert check_value(shape, 20250101) == "type-mismatch"

    def test_groups(self):
        assert check_value(Group(), {"a": 1}) is None
        assert check_value(Group(), [1]) == "type-mismatch"
        assert check_value(Group(repeated=True), [{"a": 1}]) is None
        assert check_value(Group(repeated=True), [{"a": 1}, "x"]) == "type-mismatch"


class TestBandSchedule:
    def test_full_day(self):
        assert check_band_schedule("28-3,76-1,92-2,96-3") is None

    def test_single_band(self):
        assert check_band_schedule("96-1") is None

    def test_must_end_at_96(self):
        assert check_band_schedule("28-3,76-1") == "band-schedule-invalid"

    def test_must_increase(self):
        assert check_band_schedule("76-1,28-3,96-2") == "band-schedule-invalid"

    def test_beyond_day(self):
        assert check_band_schedule("97-1") == "band-schedule-invalid"

    def test_garbage(self):
        assert check_band_schedule("x-1") == "pattern-mismatch"

    def test_non_ascii_digits(self):
        assert check_band_schedule("\u00b2-1") == "pattern-mismatch"


class TestDates:
    def test_sii_format(self):
        assert parse_date("01/02/2025_10:30:00") == datetime(2025, 2, 1, 10, 30)

    def test_iso_date(self):
        assert as_date("2023-12-31") == date(2023, 12, 31)

    def test_unparseable(self):
        assert parse_date("domani") is None
        assert parse_date(None) is None

    def test_format_sii_datetime(self):
        assert format_sii_datetime(date(2025, 2, 1)) == "01/02/2025_00:00:00"
        assert format_sii_datetime("2025-12-31T23:59:59") == "31/12/2025_23:59:59"
