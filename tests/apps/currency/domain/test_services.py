import logging
import math
from decimal import Decimal

import pytest

from apps.currency.domain.constants import EXCHANGE_RATES
from apps.currency.domain.models import RateTable
from apps.currency.domain.services import (
    CurrencyConverter,
    convert_currency,
    format_currency,
    get_default_converter,
    to_decimal,
)


class TestConvertCurrency:
    """Tests for the conversion contract."""

    def test_same_currency_returns_amount(self):
        """
        Test that converting to the same currency returns the amount unchanged.
        """
        assert convert_currency(100, "USD", "USD") == 100

    @pytest.mark.parametrize("code", sorted(EXCHANGE_RATES))
    def test_same_currency_ignores_spread(self, code):
        """
        Test that no spread is charged for an identity conversion, for every supported currency.
        """
        assert convert_currency(Decimal("42.5"), code, code, spread=Decimal("0.5")) == Decimal("42.5")

    def test_usd_to_eur_with_spread(self):
        """
        Test 100 USD -> 85 EUR plus a 2% spread gives 86.70.
        """
        result = convert_currency(100, "USD", "EUR", 0.02)

        assert result == Decimal("86.70")
        assert isinstance(result, Decimal)

    def test_default_spread_is_two_percent(self):
        """
        Test that convert_currency applies 2% when no spread is given.
        """
        assert convert_currency(100, "USD", "EUR") == Decimal("86.70")

    def test_lookup_is_case_insensitive(self):
        """
        Test that lower-case codes resolve to the same rates.
        """
        assert convert_currency(100, "usd", "eur") == Decimal("86.70")

    def test_cross_rate_through_base_currency(self):
        """
        Test GBP -> EUR goes through USD: 100 / 0.73 * 0.85.
        """
        assert convert_currency(100, "GBP", "EUR", 0) == Decimal("116.44")

    def test_rounds_to_cents(self):
        """
        Test that results are rounded to two decimal places.
        """
        assert convert_currency(100, "EUR", "USD", 0) == Decimal("117.65")

    def test_float_amount(self):
        """
        Test that float amounts convert through their decimal representation.
        """
        assert convert_currency(19.99, "USD", "GBP", 0) == Decimal("14.59")

    def test_weaker_to_stronger_increases_nominal_amount(self):
        """
        Test that with no spread, moving to a larger base-relative rate increases the amount.
        """
        assert convert_currency(100, "USD", "JPY", 0) == Decimal("11000.00")
        assert convert_currency(100, "JPY", "USD", 0) < 100
        assert convert_currency(100, "EUR", "HUF", 0) > convert_currency(100, "EUR", "USD", 0)

    def test_unknown_currency_returns_amount(self, caplog):
        """
        Test that an unknown code returns the amount unchanged and logs a warning.
        """
        with caplog.at_level(logging.WARNING):
            result = convert_currency(100, "USD", "ZZZ")

        assert result == 100
        assert "Exchange rate not found for USD or ZZZ" in caplog.text

    def test_unknown_source_currency_returns_amount(self):
        """
        Test that a missing source rate also fails open.
        """
        assert convert_currency(Decimal("55.55"), "ABC", "EUR") == Decimal("55.55")

    def test_huge_amount(self):
        """
        Test that amounts beyond the default 28-digit precision keep every cent.
        """
        assert convert_currency(1e30, "USD", "KRW", 0) == Decimal("1.15E+33")
        assert convert_currency(1e30, "USD", "KRW") == Decimal("1.173E+33")
        assert convert_currency(1e25, "USD", "KRW") == Decimal("1.173E+28")


class TestCurrencyConverter:
    """Tests for CurrencyConverter with an injected rate table."""

    def test_convert_detailed_success(self, converter):
        """
        Test that a successful conversion reports the rates used.
        """
        result = converter.convert_detailed(100, "USD", "EUR")

        assert result.converted is True
        assert result.converted_amount == Decimal("86.70")
        assert result.amount == Decimal("100")
        assert result.spread == Decimal("0.02")
        assert result.source_rate == Decimal("1.0")
        assert result.exchanged_rate == Decimal("0.85")
        assert result.rate == Decimal("0.85")

    def test_convert_detailed_identity(self, converter):
        """
        Test that an identity conversion is reported as not converted.
        """
        result = converter.convert_detailed(100, "EUR", "EUR")

        assert result.converted is False
        assert result.converted_amount == Decimal("100")
        assert result.rate is None

    def test_convert_detailed_missing_rate(self, converter):
        """
        Test that a missing rate is reported as not converted.
        """
        result = converter.convert_detailed(100, "USD", "ZZZ")

        assert result.converted is False
        assert result.converted_amount == Decimal("100")
        assert result.source_rate == Decimal("1.0")
        assert result.exchanged_rate is None

    def test_injected_rate_table(self):
        """
        Test that conversion uses the table it was given, not the static one.
        """
        converter = CurrencyConverter(RateTable({"USD": "1", "EUR": "0.5"}), spread=0)

        assert converter.convert(10, "USD", "EUR") == Decimal("5.00")

    def test_half_cent_rounds_up(self):
        """
        Test half-up rounding on the cent boundary.
        """
        converter = CurrencyConverter(RateTable({"USD": "1", "AAA": "0.5"}), spread=0)

        assert converter.convert(Decimal("0.01"), "USD", "AAA") == Decimal("0.01")

    def test_spread_argument_overrides_default(self, converter):
        """
        Test that an explicit spread replaces the converter's spread.
        """
        assert converter.convert(100, "USD", "EUR", spread=0) == Decimal("85.00")
        assert converter.convert(100, "USD", "EUR", spread=Decimal("0.1")) == Decimal("93.50")

    def test_case_only_difference_applies_spread(self, converter, caplog):
        """
        Test that codes differing only in case take the conversion path by default.
        """
        with caplog.at_level(logging.WARNING):
            result = converter.convert_detailed(100, "Usd", "USD")

        assert result.converted is True
        assert result.converted_amount == Decimal("102.00")
        assert "name the same currency" in caplog.text

    def test_fold_identity_case(self, rate_table):
        """
        Test that fold_identity_case treats case variants as the same currency.
        """
        converter = CurrencyConverter(rate_table, fold_identity_case=True)

        result = converter.convert_detailed(100, "Usd", "USD")

        assert result.converted is False
        assert result.converted_amount == Decimal("100")

    def test_non_finite_amount_passes_through(self, converter):
        """
        Test that NaN is returned unconverted instead of raising.
        """
        result = converter.convert_detailed(float("nan"), "USD", "EUR")

        assert result.converted is False
        assert result.converted_amount.is_nan()

    def test_overflowing_amount_passes_through(self, converter, caplog):
        """
        Test that an amount whose conversion overflows Decimal is returned unconverted.
        """
        amount = Decimal("9E+999999")

        with caplog.at_level(logging.WARNING):
            result = converter.convert_detailed(amount, "USD", "KRW")

        assert result.converted is False
        assert result.converted_amount == amount
        assert "Cannot convert" in caplog.text

    def test_format_uses_converter_tables(self, rate_table):
        """
        Test that format honours the converter's symbol table.
        """
        converter = CurrencyConverter(rate_table, symbols={"EUR": "EUR "})

        assert converter.format(5, "eur") == "EUR 5.00"


class TestFormatCurrency:
    """Tests for display formatting."""

    def test_usd(self):
        assert format_currency(1234.5, "USD") == "$1,234.50"

    def test_zero_decimal_currency_rounds(self):
        assert format_currency(1234.5, "JPY") == "¥1,235"

    def test_unknown_currency_uses_code(self):
        assert format_currency(10, "ZZZ") == "ZZZ10.00"

    def test_unknown_currency_is_upper_cased(self):
        assert format_currency(10, "zzz") == "ZZZ10.00"

    def test_large_amount(self):
        assert format_currency(Decimal("1234567.891"), "EUR") == "€1,234,567.89"

    def test_half_cent_rounds_up(self):
        assert format_currency(Decimal("0.005"), "GBP") == "£0.01"

    def test_huge_amount(self):
        assert format_currency(1e30, "USD") == "$1" + ",000" * 10 + ".00"
        assert format_currency(1e30, "KRW") == "₩1" + ",000" * 10
        assert format_currency(Decimal("-1E+27"), "EUR") == "€-1" + ",000" * 9 + ".00"

    def test_negative_amount(self):
        assert format_currency(-1234.5, "USD") == "$-1,234.50"

    def test_krw_thousands(self):
        assert format_currency(1500000, "krw") == "₩1,500,000"

    def test_multi_character_symbol(self):
        assert format_currency(5, "CHF") == "CHF5.00"
        assert format_currency(5, "HKD") == "HK$5.00"

    def test_non_finite_amounts(self):
        assert format_currency(math.inf, "USD") == "$∞"
        assert format_currency(-math.inf, "USD") == "$-∞"
        assert format_currency(math.nan, "EUR") == "€NaN"

    def test_idempotent(self):
        assert format_currency(99.999, "SEK") == format_currency(99.999, "SEK") == "kr100.00"


class TestDefaultConverter:
    """Tests for the process-wide converter."""

    def test_built_once(self):
        """
        Test that the default converter is cached.
        """
        assert get_default_converter() is get_default_converter()

    def test_uses_configured_spread(self, settings):
        """
        Test that CURRENCY_DEFAULT_SPREAD becomes the converter's spread.
        """
        settings.CURRENCY_DEFAULT_SPREAD = Decimal("0.05")

        converter = get_default_converter()

        assert converter.spread == Decimal("0.05")
        assert converter.convert(100, "USD", "EUR") == Decimal("89.25")

    def test_uses_configured_case_folding(self, settings):
        settings.CURRENCY_FOLD_CASE_IDENTITY = True

        assert get_default_converter().fold_identity_case is True
        assert convert_currency(100, "usd", "USD") == 100

    def test_live_rates_loaded_once(self, settings, mocker):
        """
        Test that live rates are fetched when the converter is built and not again.
        """
        settings.CURRENCY_RATE_PROVIDERS = ["exchange_rate", "static"]
        mock_response = mocker.Mock()
        mock_response.json.return_value = {"base": "USD", "rates": {"USD": 1, "EUR": 0.5}}
        mock_get = mocker.patch("requests.get", return_value=mock_response)

        assert convert_currency(100, "USD", "EUR", 0) == Decimal("50.00")
        assert convert_currency(10, "USD", "EUR", 0) == Decimal("5.00")
        assert convert_currency(10, "USD", "GBP", 0) == Decimal("10")
        mock_get.assert_called_once()

    def test_rate_table_is_read_only(self):
        with pytest.raises(TypeError):
            get_default_converter().rate_table.rates["USD"] = Decimal("2")


class TestToDecimal:

    def test_float_uses_shortest_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_rejects_non_numbers(self):
        with pytest.raises(TypeError):
            to_decimal("100")
        with pytest.raises(TypeError):
            to_decimal(True)
