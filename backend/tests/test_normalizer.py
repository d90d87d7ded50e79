"""Tests for price parsing and discount computation."""

from decimal import Decimal

import pytest

from pharmatrack.scrapers.utils.normalizer import PriceNormalizer, discount_percentage, parse_price


class TestParsePrice:
    """Romanian-formatted price strings."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("123,45 Lei", Decimal("123.45")),
            ("123.45 RON", Decimal("123.45")),
            ("45,90", Decimal("45.90")),
            ("  29,99 lei  ", Decimal("29.99")),
            ("Pret: 12,50 RON", Decimal("12.50")),
            ("100", Decimal("100")),
        ],
    )
    def test_parses_common_formats(self, raw, expected):
        assert parse_price(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "N/A", "Lei", "   "])
    def test_returns_none_without_digits(self, raw):
        assert parse_price(raw) is None

    def test_thousands_separator_reads_leading_number_only(self):
        # Only the leading numeric prefix is read after the first comma is swapped
        assert parse_price("1.234,56") == Decimal("1.234")

    def test_result_is_decimal(self):
        assert isinstance(parse_price("9,99 Lei"), Decimal)


class TestToDecimal:
    def test_numbers(self):
        assert PriceNormalizer.to_decimal(45.9) == Decimal("45.9")
        assert PriceNormalizer.to_decimal(12) == Decimal("12")

    def test_strings_go_through_price_parsing(self):
        assert PriceNormalizer.to_decimal("45,90") == Decimal("45.90")

    def test_rejects_bool_and_none(self):
        assert PriceNormalizer.to_decimal(True) is None
        assert PriceNormalizer.to_decimal(None) is None

    def test_rejects_non_finite(self):
        assert PriceNormalizer.to_decimal(float("inf")) is None


class TestDiscountPercentage:
    def test_quarter_off(self):
        assert discount_percentage(Decimal("75"), Decimal("100")) == Decimal("25.00")

    def test_rounds_to_two_decimals(self):
        assert discount_percentage(Decimal("100"), Decimal("150")) == Decimal("33.33")

    def test_half_cent_rounds_up(self):
        assert discount_percentage(Decimal("999.75"), Decimal("1000")) == Decimal("0.03")
        assert discount_percentage(Decimal("199.99"), Decimal("200")) == Decimal("0.01")

    def test_none_when_original_not_higher(self):
        assert discount_percentage(Decimal("100"), Decimal("100")) is None
        assert discount_percentage(Decimal("100"), Decimal("90")) is None

    def test_none_when_missing_or_zero(self):
        assert discount_percentage(None, Decimal("100")) is None
        assert discount_percentage(Decimal("50"), None) is None
        assert discount_percentage(Decimal("0"), Decimal("100")) is None
        assert discount_percentage(Decimal("50"), Decimal("0")) is None
