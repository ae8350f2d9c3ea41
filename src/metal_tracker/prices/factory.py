"""Build the configured PriceSource."""

from __future__ import annotations

from metal_tracker.core.config import SourceConfig
from metal_tracker.core.exceptions import ConfigError
from metal_tracker.core.models import SourceProvider
from metal_tracker.prices.goldapi import GoldApiPriceSource
from metal_tracker.prices.mock import MockPriceSource
from metal_tracker.prices.provider import PriceSource


def create_source(config: SourceConfig) -> PriceSource:
    """Instantiate the price source named by ``config.provider``."""
    if config.provider == SourceProvider.MOCK:
        return MockPriceSource(
            quote_delay=config.quote_delay,
            history_delay=config.history_delay,
            currency=config.currency,
        )
    if config.provider == SourceProvider.GOLDAPI:
        if not config.api_key:
            raise ConfigError(
                "api_key is required for the goldapi provider",
                context={"field": "source.api_key", "value": None},
            )
        return GoldApiPriceSource(
            api_key=config.api_key,
            currency=config.currency,
            timeout=config.request_timeout,
            base_url=config.base_url,
        )
    raise ConfigError(
        f"Unsupported price source: {config.provider}",
        context={"field": "source.provider", "value": str(config.provider)},
    )
