from decimal import Decimal

import pytest

from apps.currency.domain.constants import EXCHANGE_RATES
from apps.currency.domain.models import RateTable
from apps.currency.domain.services import CurrencyConverter, get_default_converter


@pytest.fixture(autouse=True)
def currency_settings(settings):
    """Pin the currency settings so tests never depend on the environment."""
    settings.CURRENCY_RATE_PROVIDERS = ["static"]
    settings.CURRENCY_DEFAULT_SPREAD = Decimal("0.02")
    settings.CURRENCY_FOLD_CASE_IDENTITY = False
    settings.EXCHANGE_RATE_API_URL = "https://api.exchangerate-api.com/v4/latest"
    settings.EXCHANGE_RATE_API_TIMEOUT = 10
    return settings


@pytest.fixture(autouse=True)
def reset_default_converter():
    """The default converter is cached per process; rebuild it for every test."""
    get_default_converter.cache_clear()
    yield
    get_default_converter.cache_clear()


@pytest.fixture
def rate_table():
    return RateTable(EXCHANGE_RATES)


@pytest.fixture
def converter(rate_table):
    return CurrencyConverter(rate_table)
