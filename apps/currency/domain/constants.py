"""
Static currency tables.
Rates are expressed relative to BASE_CURRENCY and are not refreshed at runtime.
"""

from decimal import Decimal

BASE_CURRENCY = "USD"

DEFAULT_SPREAD = Decimal("0.02")

EXCHANGE_RATES = {
    "USD": Decimal("1.0"),
    "EUR": Decimal("0.85"),
    "GBP": Decimal("0.73"),
    "CAD": Decimal("1.25"),
    "AUD": Decimal("1.35"),
    "JPY": Decimal("110.0"),
    "CHF": Decimal("0.92"),
    "CNY": Decimal("6.45"),
    "INR": Decimal("74.5"),
    "BRL": Decimal("5.2"),
    "MXN": Decimal("20.5"),
    "SGD": Decimal("1.35"),
    "HKD": Decimal("7.8"),
    "KRW": Decimal("1150.0"),
    "SEK": Decimal("8.5"),
    "NOK": Decimal("8.8"),
    "DKK": Decimal("6.3"),
    "PLN": Decimal("3.8"),
    "CZK": Decimal("21.5"),
    "HUF": Decimal("300.0"),
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "C$",
    "AUD": "A$",
    "JPY": "¥",
    "CHF": "CHF",
    "CNY": "¥",
    "INR": "₹",
    "BRL": "R$",
    "MXN": "$",
    "SGD": "S$",
    "HKD": "HK$",
    "KRW": "₩",
    "SEK": "kr",
    "NOK": "kr",
    "DKK": "kr",
    "PLN": "zł",
    "CZK": "Kč",
    "HUF": "Ft",
}

# Displayed without fractional units
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW", "HUF"})

# Largest amount accepted from the API and the CLI
MAX_AMOUNT = Decimal("1000000000000000")
