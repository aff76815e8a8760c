"""
Static provider serving the built-in rate table.
Always available; used as the final fallback.
"""

from decimal import Decimal

from apps.currency.domain.constants import EXCHANGE_RATES
from apps.currency.domain.interfaces import BaseRateTableProvider


class StaticRateProvider(BaseRateTableProvider):
    """
    Provider backed by EXCHANGE_RATES. Useful for:
    - Running without network access
    - Tests with predictable rates
    - Fallback when the live provider fails
    """

    def __init__(self, rates: dict[str, Decimal] | None = None):
        self.rates = EXCHANGE_RATES if rates is None else rates

    def get_rates(self) -> dict[str, Decimal] | None:
        return dict(self.rates)
