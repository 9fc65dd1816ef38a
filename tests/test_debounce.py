"""Tests for the debounce helper."""

import asyncio

import pytest

from jotter.debounce import Debouncer


@pytest.mark.asyncio
async def test_burst_runs_once_with_last_arguments() -> None:
    calls: list[str] = []
    debounced = Debouncer(calls.append, 0.2)

    for text in ("h", "he", "hel", "hello"):
        debounced(text)
        await asyncio.sleep(0.01)

    assert calls == []
    assert debounced.pending

    await asyncio.sleep(0.4)
    assert calls == ["hello"]
    assert not debounced.pending


@pytest.mark.asyncio
async def test_separate_bursts_each_run() -> None:
    calls: list[int] = []
    debounced = Debouncer(calls.append, 0.01)

    debounced(1)
    await asyncio.sleep(0.04)
    debounced(2)
    await asyncio.sleep(0.04)

    assert calls == [1, 2]


@pytest.mark.asyncio
async def test_cancel_drops_pending_call() -> None:
    calls: list[str] = []
    debounced = Debouncer(calls.append, 0.01)

    debounced("discarded")
    debounced.cancel()
    await asyncio.sleep(0.04)

    assert calls == []
    assert not debounced.pending
