"""Tests for the periodic background task."""

import asyncio

import pytest

from walletauth.core.periodic import PeriodicTask


async def test_runs_callback_repeatedly():
    calls = []
    task = PeriodicTask("counter", 0.01, lambda: calls.append(1))
    task.start()
    await asyncio.sleep(0.08)
    await task.stop()
    assert len(calls) >= 2


async def test_start_is_idempotent():
    task = PeriodicTask("noop", 10, lambda: None)
    task.start()
    first = task._task
    task.start()
    assert task._task is first
    await task.stop()
    assert not task.running


async def test_stop_without_start():
    task = PeriodicTask("noop", 10, lambda: None)
    await task.stop()
    assert not task.running


async def test_failing_callback_keeps_running():
    calls = []

    def flaky():
        calls.append(1)
        raise RuntimeError("boom")

    task = PeriodicTask("flaky", 0.01, flaky)
    task.start()
    await asyncio.sleep(0.08)
    assert task.running
    await task.stop()
    assert len(calls) >= 2


def test_interval_must_be_positive():
    with pytest.raises(ValueError, match="positive"):
        PeriodicTask("bad", 0, lambda: None)
