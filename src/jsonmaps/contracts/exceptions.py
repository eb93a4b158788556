"""Exception hierarchy for jsonmaps."""

from __future__ import annotations


class JsonMapsError(Exception):
    """Base exception for all jsonmaps errors."""


class ConfigError(JsonMapsError):
    """Configuration loading or validation failure."""


class SpecLoadError(JsonMapsError):
    """Spec file reading/parsing failure."""


class SpecValidationError(JsonMapsError):
    """Structurally malformed map spec.

    Attributes:
        errors: Individual ``path: message`` issues.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        joined = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Map spec validation failed:\n{joined}")


class PatchParseError(JsonMapsError):
    """A streamed line is not a usable patch operation."""

    def __init__(self, message: str, *, line: str) -> None:
        super().__init__(message)
        self.line = line


class FetchError(JsonMapsError):
    """Network or upstream-status failure retrieving a remote resource."""

    def __init__(self, message: str, *, url: str, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class DecodeError(JsonMapsError):
    """Malformed binary geospatial payload."""


class RoutingError(JsonMapsError):
    """Routing provider could not resolve a route."""


class ReconcileError(JsonMapsError):
    """Engine-level reconciliation failure."""
