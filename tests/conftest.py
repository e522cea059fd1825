"""Shared pytest fixtures for floe-faker tests."""

from __future__ import annotations

import sys
from typing import Any

import pytest
import structlog

from floe_faker import (
    FakerSettings,
    GeneratorRegistry,
    InMemoryStore,
    ModelFaker,
    ModelGraph,
)
from tests.doubles import RecordingStore
from tests.models import office_graph


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep FLOE_FAKER_* variables and .env files out of the tests."""
    for name in (
        "FLOE_FAKER_SEED",
        "FLOE_FAKER_LOCALE",
        "FLOE_FAKER_KEY_COLUMN",
        "FLOE_FAKER_TEXT_LENGTH",
        "FLOE_FAKER_EAGER_VALIDATION",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def graph() -> ModelGraph:
    return office_graph()


@pytest.fixture
def generators() -> GeneratorRegistry:
    return GeneratorRegistry(seed=42)


@pytest.fixture
def faker(graph: ModelGraph, generators: GeneratorRegistry) -> ModelFaker:
    return ModelFaker(graph, generators=generators, settings=FakerSettings())


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()
