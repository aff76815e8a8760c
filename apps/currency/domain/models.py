"""
Pure domain entities (POPOs).
No dependency on Django.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class RateTable:
    """
    Read-only mapping of currency code to a rate relative to the base currency.

    Codes are stored upper-cased. The wrapped mapping cannot be mutated once
    the table is built.
    """

    rates: Mapping[str, Decimal] = field(default_factory=dict)
    base_currency: str = "USD"

    def __post_init__(self):
        normalized = {}
        for code, rate in self.rates.items():
            if not isinstance(code, str) or len(code) != 3 or not (code.isascii() and code.isalpha()):
                raise ValueError(f"Currency code must be exactly 3 letters, got '{code}'")
            try:
                rate_value = Decimal(str(rate))
            except InvalidOperation:
                raise ValueError(f"rate for {code} must be a number, got {rate!r}")
            if not rate_value.is_finite() or rate_value <= 0:
                raise ValueError(f"rate for {code} must be positive, got {rate}")
            normalized[code.upper()] = rate_value

        object.__setattr__(self, "rates", MappingProxyType(normalized))
        object.__setattr__(self, "base_currency", self.base_currency.upper())

    def get_rate(self, currency_code: str) -> Optional[Decimal]:
        return self.rates.get(currency_code.upper())

    def __contains__(self, currency_code: str) -> bool:
        return currency_code.upper() in self.rates

    def __len__(self) -> int:
        return len(self.rates)

    def codes(self) -> list[str]:
        return sorted(self.rates)


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of a conversion.

    ``converted`` is False when the amount was passed through unchanged,
    either because both codes were identical or because a rate was missing.
    """

    source_currency: str
    exchanged_currency: str
    amount: Decimal
    converted_amount: Decimal
    spread: Decimal
    converted: bool
    source_rate: Optional[Decimal] = None
    exchanged_rate: Optional[Decimal] = None

    @property
    def rate(self) -> Optional[Decimal]:
        """Cross rate before spread, or None when no lookup happened."""
        if self.source_rate is None or self.exchanged_rate is None:
            return None
        return self.exchanged_rate / self.source_rate
