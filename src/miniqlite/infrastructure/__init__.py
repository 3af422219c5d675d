"""Infrastructure layer - cross-cutting concerns."""

from miniqlite.infrastructure.config import (
    Config,
    ObservabilityConfig,
    StorageConfig,
    get_config,
)
from miniqlite.infrastructure.logging import setup_logging, get_logger
from miniqlite.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from miniqlite.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "StorageConfig",
    "ObservabilityConfig",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
