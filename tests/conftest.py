"""Pytest configuration and fixtures for Ping Manager tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from unittest.mock import AsyncMock, Mock, patch

import pytest
import pytest_asyncio

from ping_manager.coordinator import PingManagerCoordinator
from ping_manager.dispatcher import CommandDispatcher
from ping_manager.models import Occupancy, PingConfig

# ruff: noqa: SLF001


@pytest.fixture
def mock_client() -> Mock:
    """Create a mock CRCON client that accepts every write."""
    client = Mock()
    client.async_get_max_ping = AsyncMock(return_value=2000)
    client.async_set_max_ping = AsyncMock(side_effect=lambda max_ms: max_ms)
    client.async_get_occupancy = AsyncMock(return_value=Occupancy(allied=0, axis=0))
    return client


@pytest.fixture
def mock_store() -> Mock:
    """Create a mock config store that loads the defaults."""
    store = Mock()
    store.async_load = AsyncMock(return_value=PingConfig())
    store.async_save = AsyncMock()
    return store


@pytest.fixture
def mock_renderer() -> Mock:
    """Create a mock status renderer."""
    renderer = Mock()
    renderer.async_render = AsyncMock()
    return renderer


@pytest.fixture
def mock_track_interval() -> Generator[Mock]:
    """Replace the interval timers with mocks returning fresh cancel handles."""
    tracker = Mock(side_effect=lambda *args, **kwargs: Mock(name="cancel_timer"))
    with (
        patch("ping_manager.ping_cycle.async_track_time_interval", tracker),
        patch("ping_manager.watchdog.async_track_time_interval", tracker),
    ):
        yield tracker


@pytest.fixture
def mock_sleep() -> Generator[AsyncMock]:
    """Make the ping cycle hold window return immediately."""
    sleep = AsyncMock()
    with patch("ping_manager.ping_cycle.asyncio", Mock(sleep=sleep)):
        yield sleep


@pytest_asyncio.fixture
async def coordinator(
    mock_client: Mock,
    mock_store: Mock,
    mock_renderer: Mock,
    mock_track_interval: Mock,
    mock_sleep: AsyncMock,
) -> AsyncGenerator[PingManagerCoordinator]:
    """Create a coordinator wired to mocks, shut down after the test."""
    coordinator = PingManagerCoordinator(mock_client, mock_store, mock_renderer)
    yield coordinator
    await coordinator.queue.async_stop()


@pytest.fixture
def dispatcher(coordinator: PingManagerCoordinator) -> CommandDispatcher:
    """Create a command dispatcher for the coordinator."""
    return CommandDispatcher(coordinator)
