"""Pytest configuration and shared fixtures for workbench tests"""

from typing import AsyncGenerator

import pytest

from query_workbench.core import (
    EngineSession,
    SchemaReflector,
    StatementExecutor,
    Workbench,
)
from query_workbench.models.config import LayoutConfig, WorkbenchConfig

# ==================== Configuration Fixtures ====================


@pytest.fixture
def config() -> WorkbenchConfig:
    """Default in-memory configuration with the seed dataset"""
    return WorkbenchConfig()


@pytest.fixture
def empty_config() -> WorkbenchConfig:
    """In-memory configuration without the seed dataset"""
    return WorkbenchConfig(load_seed=False)


@pytest.fixture
def layout_config() -> LayoutConfig:
    """Round-number geometry for layout assertions"""
    return LayoutConfig(
        canvas_width=1200, canvas_height=800, node_width=200, node_height=200
    )


# ==================== Session Fixtures ====================


@pytest.fixture
async def session(config: WorkbenchConfig) -> AsyncGenerator[EngineSession, None]:
    """Initialized, seeded session with proper cleanup"""
    engine_session = EngineSession(config)
    await engine_session.initialize()
    try:
        yield engine_session
    finally:
        await engine_session.dispose()


@pytest.fixture
async def empty_session(
    empty_config: WorkbenchConfig,
) -> AsyncGenerator[EngineSession, None]:
    """Initialized session with no tables"""
    engine_session = EngineSession(empty_config)
    await engine_session.initialize()
    try:
        yield engine_session
    finally:
        await engine_session.dispose()


@pytest.fixture
async def fresh_session(
    config: WorkbenchConfig,
) -> AsyncGenerator[EngineSession, None]:
    """Session that has not been initialized yet"""
    engine_session = EngineSession(config)
    try:
        yield engine_session
    finally:
        await engine_session.dispose()


@pytest.fixture
def executor(session: EngineSession) -> StatementExecutor:
    """Statement executor on the seeded session"""
    return StatementExecutor(session)


@pytest.fixture
def empty_executor(empty_session: EngineSession) -> StatementExecutor:
    """Statement executor on the empty session"""
    return StatementExecutor(empty_session)


@pytest.fixture
def reflector(session: EngineSession) -> SchemaReflector:
    """Schema reflector on the seeded session"""
    return SchemaReflector(session)


@pytest.fixture
async def workbench(config: WorkbenchConfig) -> AsyncGenerator[Workbench, None]:
    """Initialized workbench facade"""
    async with Workbench(config) as wb:
        yield wb


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Pure logic tests without a database")
    config.addinivalue_line(
        "markers", "integration: Tests running against a live in-memory session"
    )
