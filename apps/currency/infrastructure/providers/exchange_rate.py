import logging
from decimal import Decimal, InvalidOperation

import requests
from django.conf import settings

from apps.currency.domain.constants import BASE_CURRENCY
from apps.currency.domain.interfaces import BaseRateTableProvider

logger = logging.getLogger(__name__)


class ExchangeRateApiProvider(BaseRateTableProvider):
    """
    ExchangeRate API provider.
    Uses the /latest/{BASE} endpoint to fetch every rate relative to the base currency.
    """

    def __init__(self, base_currency: str = BASE_CURRENCY):
        self.base_currency = base_currency.upper()

    def get_rates(self) -> dict[str, Decimal] | None:
        """
        Fetch the latest rate table from ExchangeRate API.

        Returns:
            Mapping of currency code to Decimal rate relative to base_currency,
            or None if the request fails or the payload holds no usable rates
        """
        base_url = getattr(settings, "EXCHANGE_RATE_API_URL", "")
        timeout = getattr(settings, "EXCHANGE_RATE_API_TIMEOUT", 10)

        if not base_url:
            logger.warning("EXCHANGE_RATE_API_URL is not configured. Cannot fetch exchange rates.")
            return None

        # Format: https://api.exchangerate-api.com/v4/latest/USD
        url = f"{base_url.rstrip('/')}/{self.base_currency}"

        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
            data = response.json()

            # Response format: {"base": "USD", "rates": {"EUR": 0.85, ...}}
            raw_rates = data["rates"]
            rates = self._parse_rates(raw_rates)

        except requests.exceptions.Timeout:
            logger.warning("Timeout calling ExchangeRate API for base %s", self.base_currency)
            return None
        except requests.exceptions.HTTPError as e:
            logger.warning("HTTP error from ExchangeRate API: %s", e)
            return None
        except requests.exceptions.RequestException as e:
            logger.warning("Request to ExchangeRate API failed: %s", e)
            return None
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Invalid response from ExchangeRate API: %s", e)
            return None

        if not rates:
            logger.warning("ExchangeRate API returned no usable rates for base %s", self.base_currency)
            return None

        return rates

    @staticmethod
    def _parse_rates(raw_rates: dict) -> dict[str, Decimal]:
        rates = {}
        for code, value in raw_rates.items():
            if not isinstance(code, str) or len(code) != 3 or not (code.isascii() and code.isalpha()):
                continue
            try:
                rate = Decimal(str(value))
            except InvalidOperation:
                continue
            if rate.is_finite() and rate > 0:
                rates[code.upper()] = rate
        return rates
