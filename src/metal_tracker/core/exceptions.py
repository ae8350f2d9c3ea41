"""Custom exception hierarchy for metal-tracker."""

from typing import Any


class MetalTrackerError(Exception):
    """Base exception for all metal-tracker errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(MetalTrackerError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        field: str — the config field that failed validation
        value: Any — the invalid value (redacted for secrets)
    """


class UpstreamError(MetalTrackerError):
    """A price source call failed (network, parsing, or no data for symbol).

    Policy: always recoverable. The store captures the message in the
    item's `error` field; it never escapes refresh_all() or fetch_history().

    Context keys:
        symbol: str — the metal symbol being fetched
        timeframe: str | None — set for historical requests
        status_code: int | None — HTTP status code if applicable
        url: str | None — the URL that was being fetched
    """


class UnknownMetalError(MetalTrackerError):
    """A metal id is not part of the tracked catalog.

    Policy: only raised where a hard failure is wanted (CLI arguments).
    Store lookups return None instead.

    Context keys:
        metal_id: str — the id that was requested
    """
