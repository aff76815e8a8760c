"""
Provider Registry - Maps ProviderName to adapter classes.
The CURRENCY_RATE_PROVIDERS setting lists provider names in priority order.
"""

import logging

from django.conf import settings
from django.db import models

from apps.currency.domain.constants import BASE_CURRENCY
from apps.currency.domain.interfaces import BaseRateTableProvider
from apps.currency.domain.models import RateTable
from apps.currency.infrastructure.providers.exchange_rate import ExchangeRateApiProvider
from apps.currency.infrastructure.providers.static import StaticRateProvider

logger = logging.getLogger(__name__)


class ProviderName(models.TextChoices):
    """
    Available rate-table providers.
    To add a new provider:
    1. Add an entry here
    2. Implement the BaseRateTableProvider interface
    3. Register in PROVIDER_REGISTRY
    """

    STATIC = "static", "Static"
    EXCHANGE_RATE = "exchange_rate", "ExchangeRate"


PROVIDER_REGISTRY: dict[str, type[BaseRateTableProvider]] = {
    ProviderName.STATIC: StaticRateProvider,
    ProviderName.EXCHANGE_RATE: ExchangeRateApiProvider,
}


def get_provider_instance(provider_name: str) -> BaseRateTableProvider | None:
    """
    Get an instance of a provider by its name.

    Returns:
        Instance of the provider adapter, or None if not found
    """
    provider_class = PROVIDER_REGISTRY.get(provider_name)

    if provider_class is None:
        logger.warning("Provider '%s' not found in registry", provider_name)
        return None

    return provider_class()


def get_configured_providers_ordered() -> list[BaseRateTableProvider]:
    """
    Instantiate the providers named in CURRENCY_RATE_PROVIDERS, keeping their order.
    Unknown names are skipped.
    """
    provider_names = getattr(settings, "CURRENCY_RATE_PROVIDERS", [ProviderName.STATIC])

    provider_instances = []
    for provider_name in provider_names:
        instance = get_provider_instance(provider_name.strip())
        if instance is not None:
            provider_instances.append(instance)

    return provider_instances


def load_rate_table() -> RateTable:
    """
    Build a RateTable from the first configured provider that returns rates.

    Fallback strategy:
    1. Query providers in priority order
    2. If a provider fails or returns nothing, try the next one
    3. If every provider fails, use the static table
    """
    for provider in get_configured_providers_ordered():
        provider_name = provider.__class__.__name__
        rates = provider.get_rates()

        if rates:
            logger.info("Loaded %d exchange rates from %s", len(rates), provider_name)
            return RateTable(rates, base_currency=BASE_CURRENCY)

        logger.warning("%s returned no rates, trying next provider", provider_name)

    logger.warning("All configured rate providers failed, using static exchange rates")
    return RateTable(StaticRateProvider().get_rates(), base_currency=BASE_CURRENCY)
