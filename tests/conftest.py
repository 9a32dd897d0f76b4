"""
Shared pytest fixtures and configuration for slotrun tests.

This module provides:
- Temporary runtime settings rooted under ``tmp_path``
- A sample instruction set covering output, return values, tabular output,
  faults and parameters
- Repository, store, engine and operation-context fixtures wired to them
- A fixed clock so archive slugs are deterministic
"""

import logging
import os
from datetime import UTC, datetime
from pathlib import Path

import pytest
import structlog

from slotrun.core.settings import RuntimeSettings
from slotrun.execution.engine import BatchEngine
from slotrun.execution.in_process import InProcessStrategy
from slotrun.ops.context import OperationContext
from slotrun.slots.repository import InstructionSetRepository
from slotrun.storage.shard import ShardStore

FIXED_NOW = datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=UTC)

SAMPLE_SET = """\
# slot 0
print("hello")

# slot 1
return 40 + 2

// command 2
print("a,b")
print("1,2")

# slot 3
raise ValueError("boom")

# slot 5
name = params.get("name", "world")
echo("hi ", name)
"""


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        # HTTP and CLI tests cross the transport boundary
        if test_path.parts[0] in {"api", "cli"} or "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep ambient SLOTRUN_* variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("SLOTRUN_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers bound to captured streams once a test is done."""
    yield
    structlog.reset_defaults()
    for handler in list(logging.root.handlers):
        if type(handler) is logging.StreamHandler:
            logging.root.removeHandler(handler)


# =============================================================================
# Runtime fixtures
# =============================================================================


@pytest.fixture
def settings(tmp_path) -> RuntimeSettings:
    return RuntimeSettings(data_dir=tmp_path / "data")


@pytest.fixture
def repository(settings) -> InstructionSetRepository:
    repo = InstructionSetRepository(settings.sets_dir)
    repo.ensure_directory()
    return repo


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_SET


@pytest.fixture
def sample_set(repository) -> str:
    """Write ``demo.txt`` and return its name."""
    (repository.sets_dir / "demo.txt").write_text(SAMPLE_SET, encoding="utf-8")
    return "demo.txt"


@pytest.fixture
def store(settings) -> ShardStore:
    return ShardStore.from_settings(settings)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def engine(repository, store) -> BatchEngine:
    return BatchEngine(repository, InProcessStrategy(), store, clock=lambda: FIXED_NOW)


@pytest.fixture
def ctx(settings, repository, store, engine) -> OperationContext:
    return OperationContext(repository=repository, store=store, engine=engine, caller="test")
