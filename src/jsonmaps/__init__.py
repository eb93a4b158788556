"""Public API surface for jsonmaps."""

__version__ = "0.1.0"

from jsonmaps.config import load_config
from jsonmaps.contracts.config import JsonMapsConfig
from jsonmaps.contracts.exceptions import (
    ConfigError,
    DecodeError,
    FetchError,
    JsonMapsError,
    PatchParseError,
    ReconcileError,
    RoutingError,
    SpecLoadError,
    SpecValidationError,
)
from jsonmaps.contracts.operations import OperationKind, ReconcileResult, RenderOperation
from jsonmaps.contracts.renderer import MapRenderer
from jsonmaps.contracts.routing import RouteRequest, RoutingProvider
from jsonmaps.contracts.spec import MapSpec
from jsonmaps.contracts.stream import Patch, SpecSnapshot, StreamNotice, TokenUsage, UsageReport
from jsonmaps.engine import MapReconciler, NullReconcileListener, ReconcileListener, plan_operations, reconcile
from jsonmaps.ingest import TableCache, TableFetcher, decode_geoparquet, load_table
from jsonmaps.patch import PatchStream, apply_patch, apply_stream, parse_line, parse_pointer
from jsonmaps.renderers import InMemoryRenderer
from jsonmaps.routing import OsrmRoutingProvider
from jsonmaps.session import MapSession, StreamOutcome
from jsonmaps.spec import format_spec_issues, load_spec, read_spec_document, validate

__all__ = [
    "ConfigError",
    "DecodeError",
    "FetchError",
    "InMemoryRenderer",
    "JsonMapsConfig",
    "JsonMapsError",
    "MapReconciler",
    "MapRenderer",
    "MapSession",
    "MapSpec",
    "NullReconcileListener",
    "OperationKind",
    "OsrmRoutingProvider",
    "Patch",
    "PatchParseError",
    "PatchStream",
    "ReconcileError",
    "ReconcileListener",
    "ReconcileResult",
    "RenderOperation",
    "RouteRequest",
    "RoutingError",
    "RoutingProvider",
    "SpecLoadError",
    "SpecSnapshot",
    "SpecValidationError",
    "StreamNotice",
    "StreamOutcome",
    "TableCache",
    "TableFetcher",
    "TokenUsage",
    "UsageReport",
    "apply_patch",
    "apply_stream",
    "decode_geoparquet",
    "format_spec_issues",
    "load_config",
    "load_spec",
    "load_table",
    "parse_line",
    "parse_pointer",
    "plan_operations",
    "read_spec_document",
    "reconcile",
    "validate",
]
