"""
Error taxonomy for Hydro Search Params.
Boundary code maps these to HTTP status codes; FieldParseFailure never leaves the extractor.
"""
from __future__ import annotations


class HydroSearchError(Exception):
    """Base class for all pipeline errors."""


class InvalidRequest(HydroSearchError):
    """Raised when the query text is missing, blank, or a placeholder."""


class CatalogUnavailable(HydroSearchError):
    """Raised when the bundled collection catalog cannot be read."""


class MalformedModelResponse(HydroSearchError):
    """Raised when the parameter-extraction reply is not a JSON object."""


class FieldParseFailure(HydroSearchError):
    """A single bbox/date field was present but unusable."""

    def __init__(self, field: str, value, reason: str):
        super().__init__(f"{field}: {reason} (got {value!r})")
        self.field = field
        self.value = value
        self.reason = reason


class UpstreamUnavailable(HydroSearchError):
    """Raised when an upstream service (LLM provider, STAC API) call fails."""


class ConfigurationError(HydroSearchError):
    """Raised at startup when no usable API key can be resolved."""


__all__ = [
    "HydroSearchError",
    "InvalidRequest",
    "CatalogUnavailable",
    "MalformedModelResponse",
    "FieldParseFailure",
    "UpstreamUnavailable",
    "ConfigurationError",
]
