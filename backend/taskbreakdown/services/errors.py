"""Exceptions raised by the breakdown services."""
from __future__ import annotations


class BreakdownError(Exception):
    """Base class for failures surfaced to API callers."""


class PlanSizeError(BreakdownError):
    """The requested plan is larger than the service will generate."""


class UpstreamModelError(BreakdownError):
    """The language-model API call failed."""


class LLMConfigurationError(UpstreamModelError):
    """The language-model client is not configured (e.g. missing API key)."""


class BreakdownParseError(BreakdownError):
    """No usable plan unit could be recovered from the model response."""
