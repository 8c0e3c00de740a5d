"""Tests for the ping cycle controller."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock, call

import pytest

from ping_manager.coordinator import PingManagerCoordinator
from ping_manager.exceptions import RemoteError

# ruff: noqa: SLF001


class TestPingCycleTimer:
    """Test arming and cancelling the cycle timer."""

    @pytest.mark.asyncio
    async def test_initially_idle(self, coordinator: PingManagerCoordinator) -> None:
        """Test a new controller has no timer."""
        assert not coordinator.ping_cycle.armed

    @pytest.mark.asyncio
    async def test_stop_when_idle_is_noop(
        self, coordinator: PingManagerCoordinator, mock_track_interval: Mock
    ) -> None:
        """Test stop() without a timer does nothing."""
        coordinator.ping_cycle.stop()
        assert not coordinator.ping_cycle.armed
        mock_track_interval.assert_not_called()

    @pytest.mark.asyncio
    async def test_start_arms_timer_and_queues_cycle(
        self,
        coordinator: PingManagerCoordinator,
        mock_track_interval: Mock,
        mock_client: Mock,
        mock_sleep: AsyncMock,
    ) -> None:
        """Test start() runs a cycle now and arms the interval timer."""
        coordinator.config.interval_minutes = 20

        coordinator.ping_cycle.start()
        assert coordinator.ping_cycle.armed

        mock_track_interval.assert_called_once()
        args, kwargs = mock_track_interval.call_args
        assert args[0] == coordinator.ping_cycle._handle_interval_timer
        assert args[1] == timedelta(minutes=20)

        await coordinator.queue.async_stop()
        assert mock_client.async_set_max_ping.await_args_list == [call(180), call(2000)]

    @pytest.mark.asyncio
    async def test_start_twice_leaves_one_timer(
        self,
        coordinator: PingManagerCoordinator,
        mock_track_interval: Mock,
        mock_sleep: AsyncMock,
    ) -> None:
        """Test the first handle is cancelled before the second is created."""
        first_cancel = Mock(name="first")
        second_cancel = Mock(name="second")
        order: list[str] = []
        first_cancel.side_effect = lambda: order.append("cancel first")

        def _track(*args, **kwargs):
            order.append("create")
            return [first_cancel, second_cancel][mock_track_interval.call_count - 1]

        mock_track_interval.side_effect = _track

        coordinator.ping_cycle.start()
        coordinator.ping_cycle.start()

        assert order == ["create", "cancel first", "create"]
        first_cancel.assert_called_once()
        second_cancel.assert_not_called()
        assert coordinator.ping_cycle._interval_timer is second_cancel

    @pytest.mark.asyncio
    async def test_unrepresentable_interval_keeps_old_timer(
        self,
        coordinator: PingManagerCoordinator,
        mock_track_interval: Mock,
    ) -> None:
        """Test a restart that cannot build its interval leaves the cycle armed."""
        coordinator.ping_cycle.start()
        timer = coordinator.ping_cycle._interval_timer
        coordinator.config.interval_minutes = 10**13

        with pytest.raises(OverflowError):
            coordinator.ping_cycle.start()

        timer.assert_not_called()
        assert coordinator.ping_cycle._interval_timer is timer
        assert mock_track_interval.call_count == 1

    @pytest.mark.asyncio
    async def test_stop_cancels_timer(
        self,
        coordinator: PingManagerCoordinator,
        mock_track_interval: Mock,
        mock_sleep: AsyncMock,
        mock_client: Mock,
    ) -> None:
        """Test stop() cancels the handle without restoring the default."""
        coordinator.ping_cycle.start()
        cancel = coordinator.ping_cycle._interval_timer
        await coordinator.queue.async_stop()
        mock_client.async_set_max_ping.reset_mock()

        coordinator.ping_cycle.stop()

        cancel.assert_called_once()
        assert not coordinator.ping_cycle.armed
        mock_client.async_set_max_ping.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tick_submits_cycle(
        self,
        coordinator: PingManagerCoordinator,
        mock_client: Mock,
        mock_sleep: AsyncMock,
    ) -> None:
        """Test an interval tick queues a cycle instead of running it."""
        coordinator.ping_cycle._handle_interval_timer(datetime.now(timezone.utc))
        mock_client.async_set_max_ping.assert_not_awaited()

        await coordinator.queue.async_stop()
        assert mock_client.async_set_max_ping.await_count == 2


class TestPingCycleRun:
    """Test the body of one cycle."""

    @pytest.mark.asyncio
    async def test_lower_wait_restore(
        self,
        coordinator: PingManagerCoordinator,
        mock_client: Mock,
        mock_sleep: AsyncMock,
    ) -> None:
        """Test the target is written, held for the duration, then restored."""
        coordinator.config.target_threshold = 150
        coordinator.config.duration_seconds = 8
        coordinator.config.default_threshold = 1800

        await coordinator.ping_cycle.async_run_cycle()

        assert mock_client.async_set_max_ping.await_args_list == [call(150), call(1800)]
        mock_sleep.assert_awaited_once_with(8)
        assert not coordinator.ping_cycle.cycle_in_flight

    @pytest.mark.asyncio
    async def test_default_read_at_restore_time(
        self,
        coordinator: PingManagerCoordinator,
        mock_client: Mock,
        mock_sleep: AsyncMock,
    ) -> None:
        """Test a default changed during the hold is the one restored."""

        async def _change_default(seconds: int) -> None:
            coordinator.config.default_threshold = 2500

        mock_sleep.side_effect = _change_default

        await coordinator.ping_cycle.async_run_cycle()

        assert mock_client.async_set_max_ping.await_args_list == [call(180), call(2500)]

    @pytest.mark.asyncio
    async def test_lowering_failure_skips_restore(
        self,
        coordinator: PingManagerCoordinator,
        mock_client: Mock,
        mock_sleep: AsyncMock,
    ) -> None:
        """Test a failed lowering write ends the cycle without a restore."""
        mock_client.async_set_max_ping.side_effect = RemoteError(500, "HTTP error!")

        await coordinator.ping_cycle.async_run_cycle()

        mock_client.async_set_max_ping.assert_awaited_once_with(180)
        mock_sleep.assert_not_awaited()
        assert not coordinator.ping_cycle.cycle_in_flight

    @pytest.mark.asyncio
    async def test_restore_failure_is_logged(
        self,
        coordinator: PingManagerCoordinator,
        mock_client: Mock,
        mock_sleep: AsyncMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a failed restore is logged and does not raise."""
        mock_client.async_set_max_ping.side_effect = [180, RemoteError(None, "timeout")]

        await coordinator.ping_cycle.async_run_cycle()

        assert "Error restoring max ping to 2000ms" in caplog.text
        assert not coordinator.ping_cycle.cycle_in_flight

    @pytest.mark.asyncio
    async def test_remote_error_keeps_timer_armed(
        self,
        coordinator: PingManagerCoordinator,
        mock_client: Mock,
        mock_sleep: AsyncMock,
    ) -> None:
        """Test cycle failures do not disarm the controller."""
        mock_client.async_set_max_ping.side_effect = RemoteError(503, "HTTP error!")

        coordinator.ping_cycle.start()
        await coordinator.queue.async_stop()

        assert coordinator.ping_cycle.armed

    @pytest.mark.asyncio
    async def test_overlapping_call_is_skipped(
        self,
        coordinator: PingManagerCoordinator,
        mock_client: Mock,
        mock_sleep: AsyncMock,
    ) -> None:
        """Test a second cycle while one is holding does nothing."""
        entered = asyncio.Event()
        release = asyncio.Event()

        async def _hold(seconds: int) -> None:
            entered.set()
            await release.wait()

        mock_sleep.side_effect = _hold

        first = asyncio.create_task(coordinator.ping_cycle.async_run_cycle())
        await entered.wait()
        assert coordinator.ping_cycle.cycle_in_flight

        await coordinator.ping_cycle.async_run_cycle()
        assert mock_client.async_set_max_ping.await_count == 1

        release.set()
        await first
        assert mock_client.async_set_max_ping.await_count == 2
