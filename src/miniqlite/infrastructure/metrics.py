"""Prometheus metrics for MiniQLite."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all MiniQLite metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Command metrics
        self.commands_total = Counter(
            "miniqlite_commands_total",
            "Total number of commands executed",
            ["statement", "status"],  # status: success, error
            registry=self._registry,
        )

        self.command_latency_seconds = Histogram(
            "miniqlite_command_latency_seconds",
            "Command latency in seconds",
            ["statement"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self._registry,
        )

        self.rows_affected_total = Counter(
            "miniqlite_rows_affected_total",
            "Total rows inserted, updated or deleted",
            ["operation"],  # insert, update, delete
            registry=self._registry,
        )

        # Catalog metrics
        self.tables = Gauge(
            "miniqlite_tables",
            "Number of tables in the database",
            registry=self._registry,
        )

        # Persistence metrics
        self.persistence_bytes_total = Counter(
            "miniqlite_persistence_bytes_total",
            "Total bytes written by save or read by load",
            ["direction", "format"],  # direction: save, load
            registry=self._registry,
        )

        self.persistence_latency_seconds = Histogram(
            "miniqlite_persistence_latency_seconds",
            "Save/load latency in seconds",
            ["direction"],
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        self.info = Info(
            "miniqlite",
            "MiniQLite information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from miniqlite import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
