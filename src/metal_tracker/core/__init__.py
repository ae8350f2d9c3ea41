"""metal_tracker.core — Foundation types, config, catalog, and exceptions."""

from metal_tracker.core.catalog import (
    METALS,
    MetalInfo,
    default_metals,
    metal_by_id,
    metal_by_symbol,
    require_metal,
)
from metal_tracker.core.config import (
    CacheConfig,
    SourceConfig,
    TrackerConfig,
    load_config,
)
from metal_tracker.core.exceptions import (
    ConfigError,
    MetalTrackerError,
    UnknownMetalError,
    UpstreamError,
)
from metal_tracker.core.models import (
    AppState,
    HistoricalDataPoint,
    HistoricalSeries,
    MetalData,
    MetalId,
    MetalPrice,
    MetalSymbol,
    SourceProvider,
    Timeframe,
)

__all__ = [
    # Type aliases
    "MetalId",
    "HistoricalSeries",
    # Enums
    "MetalSymbol",
    "Timeframe",
    "SourceProvider",
    # Models
    "MetalPrice",
    "HistoricalDataPoint",
    "MetalData",
    "AppState",
    # Catalog
    "METALS",
    "MetalInfo",
    "default_metals",
    "metal_by_id",
    "metal_by_symbol",
    "require_metal",
    # Config
    "TrackerConfig",
    "SourceConfig",
    "CacheConfig",
    "load_config",
    # Exceptions
    "MetalTrackerError",
    "ConfigError",
    "UpstreamError",
    "UnknownMetalError",
]
