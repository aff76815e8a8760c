"""
Domain services - currency conversion and display formatting.
Conversion fails open: a missing rate returns the amount unchanged and logs a warning.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP, localcontext
from functools import lru_cache
from typing import AbstractSet, Mapping, Union

from django.conf import settings

from apps.currency.domain.constants import (
    CURRENCY_SYMBOLS,
    DEFAULT_SPREAD,
    ZERO_DECIMAL_CURRENCIES,
)
from apps.currency.domain.models import ConversionResult, RateTable
from apps.currency.infrastructure.providers.registry import load_rate_table

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]

CENTS = Decimal("0.01")
UNITS = Decimal("1")


def to_decimal(value: Number) -> Decimal:
    """Coerce an int, float or Decimal to Decimal via its shortest string form."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"amount must be a number, got {type(value).__name__}")
    return Decimal(str(value))


def round_half_up(value: Decimal, exponent: Decimal) -> Decimal:
    """Quantize with enough precision to keep every integer digit of value."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def _non_finite_display(value: Decimal) -> str:
    if value.is_nan():
        return "NaN"
    return "-∞" if value.is_signed() else "∞"


def format_currency(
    amount: Number,
    currency: str,
    symbols: Mapping[str, str] = CURRENCY_SYMBOLS,
    zero_decimal_currencies: AbstractSet[str] = ZERO_DECIMAL_CURRENCIES,
) -> str:
    """
    Format an amount for display.

    Uses the currency symbol (or the upper-cased code when unknown) followed by
    the amount with ',' thousands separators. Zero-decimal currencies are
    rounded to whole units, everything else shows exactly two decimals.

    Example:
        >>> format_currency(1234.5, "usd")
        '$1,234.50'
        >>> format_currency(1234.5, "JPY")
        '¥1,235'
    """
    code = currency.upper()
    symbol = symbols.get(code) or code
    value = to_decimal(amount)

    if not value.is_finite():
        return f"{symbol}{_non_finite_display(value)}"

    if code in zero_decimal_currencies:
        return f"{symbol}{round_half_up(value, UNITS):,.0f}"

    return f"{symbol}{round_half_up(value, CENTS):,.2f}"


class CurrencyConverter:
    """
    Converts amounts between currencies through the base currency of a rate table,
    adding a spread to cover exchange charges.
    """

    def __init__(
        self,
        rate_table: RateTable,
        spread: Number = DEFAULT_SPREAD,
        fold_identity_case: bool = False,
        symbols: Mapping[str, str] = CURRENCY_SYMBOLS,
        zero_decimal_currencies: AbstractSet[str] = ZERO_DECIMAL_CURRENCIES,
    ):
        self.rate_table = rate_table
        self.spread = to_decimal(spread)
        self.fold_identity_case = fold_identity_case
        self.symbols = symbols
        self.zero_decimal_currencies = zero_decimal_currencies

    def _is_identity(self, source_currency: str, exchanged_currency: str) -> bool:
        if source_currency == exchanged_currency:
            return True
        return self.fold_identity_case and source_currency.upper() == exchanged_currency.upper()

    def convert_detailed(
        self,
        amount: Number,
        source_currency: str,
        exchanged_currency: str,
        spread: Number | None = None,
    ) -> ConversionResult:
        """
        Convert an amount and report whether a conversion actually happened.

        Args:
            amount: Amount in source_currency
            source_currency: Source currency code (case-insensitive for lookup)
            exchanged_currency: Target currency code (case-insensitive for lookup)
            spread: Fraction added on top of the converted amount
                (defaults to the converter's spread)

        Returns:
            ConversionResult. When the codes are identical, a rate is missing or
            the amount is not finite, converted_amount equals amount and
            converted is False.

        Example:
            >>> converter = CurrencyConverter(RateTable(EXCHANGE_RATES))
            >>> converter.convert_detailed(100, "USD", "EUR").converted_amount
            Decimal('86.70')
        """
        amount_value = to_decimal(amount)
        spread_value = self.spread if spread is None else to_decimal(spread)

        def pass_through(source_rate=None, exchanged_rate=None) -> ConversionResult:
            return ConversionResult(
                source_currency=source_currency,
                exchanged_currency=exchanged_currency,
                amount=amount_value,
                converted_amount=amount_value,
                spread=spread_value,
                converted=False,
                source_rate=source_rate,
                exchanged_rate=exchanged_rate,
            )

        if self._is_identity(source_currency, exchanged_currency):
            return pass_through()

        source_rate = self.rate_table.get_rate(source_currency)
        exchanged_rate = self.rate_table.get_rate(exchanged_currency)

        if source_rate is None or exchanged_rate is None:
            logger.warning(
                "Exchange rate not found for %s or %s, returning amount unconverted",
                source_currency,
                exchanged_currency,
            )
            return pass_through(source_rate, exchanged_rate)

        if not amount_value.is_finite():
            logger.warning("Cannot convert non-finite amount %s, returning it unconverted", amount_value)
            return pass_through(source_rate, exchanged_rate)

        if source_currency.upper() == exchanged_currency.upper():
            logger.warning(
                "%s and %s name the same currency; spread %s is still applied",
                source_currency,
                exchanged_currency,
                spread_value,
            )

        try:
            base_amount = amount_value / source_rate
            converted_amount = base_amount * exchanged_rate
            final_amount = round_half_up(converted_amount * (1 + spread_value), CENTS)
        except ArithmeticError as e:
            logger.warning(
                "Cannot convert %s %s to %s (%s), returning it unconverted",
                amount_value,
                source_currency,
                exchanged_currency,
                e,
            )
            return pass_through(source_rate, exchanged_rate)

        return ConversionResult(
            source_currency=source_currency,
            exchanged_currency=exchanged_currency,
            amount=amount_value,
            converted_amount=final_amount,
            spread=spread_value,
            converted=True,
            source_rate=source_rate,
            exchanged_rate=exchanged_rate,
        )

    def convert(
        self,
        amount: Number,
        source_currency: str,
        exchanged_currency: str,
        spread: Number | None = None,
    ) -> Decimal:
        return self.convert_detailed(amount, source_currency, exchanged_currency, spread).converted_amount

    def format(self, amount: Number, currency: str) -> str:
        return format_currency(
            amount,
            currency,
            symbols=self.symbols,
            zero_decimal_currencies=self.zero_decimal_currencies,
        )


@lru_cache(maxsize=1)
def get_default_converter() -> CurrencyConverter:
    """
    Process-wide converter built once from the configured rate providers.
    The rate table is not refreshed afterwards.
    """
    return CurrencyConverter(
        load_rate_table(),
        spread=Decimal(str(getattr(settings, "CURRENCY_DEFAULT_SPREAD", DEFAULT_SPREAD))),
        fold_identity_case=getattr(settings, "CURRENCY_FOLD_CASE_IDENTITY", False),
    )


def convert_currency(
    amount: Number,
    from_currency: str,
    to_currency: str,
    spread: Number = DEFAULT_SPREAD,
) -> Decimal:
    """Convert with the default converter. See CurrencyConverter.convert_detailed."""
    return get_default_converter().convert(amount, from_currency, to_currency, spread)
