"""Pytest configuration and fixtures for miniqlite tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from miniqlite.application import DatabaseEngine
from miniqlite.domain.entities import Database, DatabaseSettings
from miniqlite.domain.services import StorageEngine
from miniqlite.domain.value_objects import PersistenceFormat, StorageLayout
from miniqlite.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture(params=[StorageLayout.ROW_MAJOR, StorageLayout.COLUMN_MAJOR], ids=["row", "column"])
def layout(request: pytest.FixtureRequest) -> StorageLayout:
    """Run the test once per storage layout."""
    return request.param


@pytest.fixture
def storage_engine(layout: StorageLayout) -> StorageEngine:
    """Provide an empty storage engine creating tables in `layout`."""
    return StorageEngine(Database(settings=DatabaseSettings(active_layout=layout)))


@pytest.fixture
def engine_factory(
    metrics_registry: MetricsRegistry,
) -> Callable[..., DatabaseEngine]:
    """Build DatabaseEngines sharing the test's metrics registry."""

    def factory(
        layout: StorageLayout = StorageLayout.ROW_MAJOR,
        fmt: PersistenceFormat = PersistenceFormat.TEXT,
        enforce_types: bool = True,
    ) -> DatabaseEngine:
        settings = DatabaseSettings(
            active_layout=layout,
            persistence_format=fmt,
            enforce_types=enforce_types,
        )
        return DatabaseEngine(settings=settings, metrics=metrics_registry)

    return factory


@pytest.fixture
def db(engine_factory: Callable[..., DatabaseEngine], layout: StorageLayout) -> DatabaseEngine:
    """Provide a DatabaseEngine creating tables in `layout`."""
    return engine_factory(layout=layout)


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
