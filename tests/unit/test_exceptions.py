"""Tests for metal_tracker.core.exceptions."""

import pytest

from metal_tracker.core.exceptions import (
    ConfigError,
    MetalTrackerError,
    UnknownMetalError,
    UpstreamError,
)


class TestExceptionHierarchy:
    """Verify the exception class hierarchy."""

    def test_config_is_subclass(self):
        assert issubclass(ConfigError, MetalTrackerError)

    def test_upstream_is_subclass(self):
        assert issubclass(UpstreamError, MetalTrackerError)

    def test_unknown_metal_is_subclass(self):
        assert issubclass(UnknownMetalError, MetalTrackerError)


class TestExceptionContext:
    """Verify context dict behavior."""

    def test_context_preserved(self):
        exc = UpstreamError(
            "timeout",
            context={"symbol": "XPD", "url": "https://example.com"},
        )
        assert exc.context["symbol"] == "XPD"
        assert exc.context["url"] == "https://example.com"

    def test_default_context_is_empty_dict(self):
        exc = MetalTrackerError("boom")
        assert exc.context == {}

    def test_message_is_str(self):
        assert str(UpstreamError("timeout")) == "timeout"

    def test_catchable_as_base(self):
        with pytest.raises(MetalTrackerError):
            raise UpstreamError("no data")
