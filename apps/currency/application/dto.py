"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass
class CurrencyDTO:
    """Row of the rate table as exposed to clients."""
    code: str
    symbol: str
    rate: Decimal
    zero_decimal: bool


@dataclass
class ConversionResultDTO:
    """Result DTO for currency conversion."""
    source_currency: str
    exchanged_currency: str
    amount: Decimal
    converted_amount: Decimal
    spread: Decimal
    converted: bool
    formatted: str


@dataclass
class QuoteLineDTO:
    """Priced item of a booking quote (flight seat, hotel room night, transfer, ticket)."""
    description: str
    unit_price: Decimal
    currency: str
    quantity: int = 1
    category: str = "other"


@dataclass
class QuoteLineResultDTO:
    """Quote line expressed in the preferred currency."""
    description: str
    category: str
    quantity: int
    original_unit_price: Decimal
    original_currency: str
    unit_price: Decimal
    subtotal: Decimal
    converted: bool
    formatted_unit_price: str
    formatted_subtotal: str


@dataclass
class QuoteResultDTO:
    """Result DTO for a booking quote."""
    preferred_currency: str
    spread: Decimal
    lines: List[QuoteLineResultDTO]
    total: Decimal
    formatted_total: str
    unconverted_lines: List[str] = field(default_factory=list)
