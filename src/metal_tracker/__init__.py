"""metal-tracker: near-real-time precious metal prices and trends."""

__version__ = "0.1.0"
