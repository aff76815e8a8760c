"""
Booking quote totals.
Each priced line is converted into the traveller's preferred currency before it is multiplied out and summed.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from apps.currency.application.dto import QuoteLineDTO, QuoteLineResultDTO, QuoteResultDTO
from apps.currency.domain.services import CurrencyConverter, get_default_converter

logger = logging.getLogger(__name__)


def build_quote(
    preferred_currency: str,
    lines: Iterable[QuoteLineDTO],
    spread: Optional[Decimal] = None,
    converter: Optional[CurrencyConverter] = None,
) -> QuoteResultDTO:
    """
    Price a booking quote in the preferred currency.

    Args:
        preferred_currency: Currency the traveller is quoted in
        lines: Priced items in their supplier currencies
        spread: Spread for every conversion (defaults to the converter's)
        converter: Converter to use (defaults to the process-wide one)

    Returns:
        QuoteResultDTO. Lines whose currency has no rate keep their original
        price, still count towards the total and are listed in unconverted_lines.
    """
    converter = converter or get_default_converter()
    preferred = preferred_currency.upper()
    applied_spread = converter.spread if spread is None else spread

    line_results = []
    unconverted = []
    total = Decimal("0")

    for line in lines:
        if line.quantity < 0:
            raise ValueError(f"quantity must not be negative, got {line.quantity} for '{line.description}'")

        line_currency = line.currency.upper()
        result = converter.convert_detailed(line.unit_price, line_currency, preferred, applied_spread)
        subtotal = result.converted_amount * line.quantity

        if not result.converted and line_currency != preferred:
            unconverted.append(line.description)

        line_results.append(
            QuoteLineResultDTO(
                description=line.description,
                category=line.category,
                quantity=line.quantity,
                original_unit_price=result.amount,
                original_currency=line_currency,
                unit_price=result.converted_amount,
                subtotal=subtotal,
                converted=result.converted,
                formatted_unit_price=converter.format(result.converted_amount, preferred),
                formatted_subtotal=converter.format(subtotal, preferred),
            )
        )
        total += subtotal

    if unconverted:
        logger.warning("Quote in %s has unconverted lines: %s", preferred, ", ".join(unconverted))

    return QuoteResultDTO(
        preferred_currency=preferred,
        spread=Decimal(str(applied_spread)),
        lines=line_results,
        total=total,
        formatted_total=converter.format(total, preferred),
        unconverted_lines=unconverted,
    )
