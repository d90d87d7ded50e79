"""Price parsing and discount computation for Romanian-formatted prices."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

Number = Union[Decimal, int, float]

# Leading numeric prefix, the way a browser's parseFloat reads a string
_NUMBER_PREFIX = re.compile(r"\d*\.?\d+")


class PriceNormalizer:
    """Price parsing utilities.

    Romanian shops print prices as "123,45 Lei" or "1.234,50 RON": the comma
    is the decimal separator and the currency is a trailing word.
    """

    @staticmethod
    def clean_price_string(raw: Optional[str]) -> Optional[Decimal]:
        """Parse a price string and extract numeric value.

        Handles formats such as:
        - "123,45 Lei" -> 123.45
        - "123.45 RON" -> 123.45
        - "45,90" -> 45.90
        - "N/A" -> None

        Everything except digits, comma and period is dropped, then the first
        comma becomes the decimal point. Only the leading number is read, so
        "1.234,56" yields 1.234.

        Args:
            raw: Raw price string

        Returns:
            Decimal price value, or None if parsing fails
        """
        if not raw:
            return None

        cleaned = re.sub(r"[^\d.,]", "", raw)
        if not cleaned:
            return None

        normalized = cleaned.replace(",", ".", 1)
        match = _NUMBER_PREFIX.match(normalized)
        if not match:
            return None

        try:
            value = Decimal(match.group(0))
        except InvalidOperation:
            return None

        if not value.is_finite():
            return None
        return value

    @staticmethod
    def to_decimal(value: object) -> Optional[Decimal]:
        """Coerce a structured-data price (number or string) to Decimal.

        Args:
            value: Raw value from JSON-LD or an attribute

        Returns:
            Decimal value, or None if it is not a usable number
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal)):
            try:
                result = Decimal(str(value))
            except InvalidOperation:
                return None
            return result if result.is_finite() else None
        return PriceNormalizer.clean_price_string(str(value))

    @staticmethod
    def discount_percentage(
        current: Optional[Number], original: Optional[Number]
    ) -> Optional[Decimal]:
        """Calculate the discount of ``current`` relative to ``original``.

        Args:
            current: Current/sale price
            original: Original price before the promotion

        Returns:
            Discount percentage rounded half up to 2 decimal places, or None
        """
        if not current or not original:
            return None
        current = Decimal(str(current))
        original = Decimal(str(original))
        if original <= current:
            return None
        discount = (original - current) / original * 100
        return discount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_price(text: Optional[str]) -> Optional[Decimal]:
    """Module-level shortcut for :meth:`PriceNormalizer.clean_price_string`."""
    return PriceNormalizer.clean_price_string(text)


def discount_percentage(
    current: Optional[Number], original: Optional[Number]
) -> Optional[Decimal]:
    """Module-level shortcut for :meth:`PriceNormalizer.discount_percentage`."""
    return PriceNormalizer.discount_percentage(current, original)
