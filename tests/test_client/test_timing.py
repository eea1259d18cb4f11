"""Tests for the latency meter."""

from __future__ import annotations

import asyncio
import math

import pytest

from storefront.client.timing import LatencyMeter

pytestmark = pytest.mark.asyncio


async def test_unmeasured_meter_has_no_value() -> None:
    assert LatencyMeter().ms is None


async def test_returns_producer_result_and_records_duration() -> None:
    meter = LatencyMeter()

    async def producer() -> list[int]:
        await asyncio.sleep(0.01)
        return [1, 2, 3]

    assert await meter.measure(producer) == [1, 2, 3]
    assert meter.ms is not None
    assert math.isfinite(meter.ms)
    assert meter.ms >= 5


async def test_failure_propagates_unchanged_and_is_still_timed() -> None:
    meter = LatencyMeter()
    boom = RuntimeError("boom")

    async def producer() -> None:
        raise boom

    with pytest.raises(RuntimeError) as exc_info:
        await meter.measure(producer)
    assert exc_info.value is boom
    assert meter.ms is not None and meter.ms >= 0


async def test_each_call_overwrites_previous_timing() -> None:
    meter = LatencyMeter()

    async def slow() -> None:
        await asyncio.sleep(0.05)

    async def fast() -> None:
        return None

    await meter.measure(slow)
    first = meter.ms
    await meter.measure(fast)
    assert meter.ms is not None and first is not None
    assert meter.ms < first


async def test_ms_set_only_after_settlement() -> None:
    meter = LatencyMeter()
    seen_during: list[object] = []

    async def producer() -> str:
        seen_during.append(meter.ms)
        return "ok"

    await meter.measure(producer)
    assert seen_during == [None]
    assert meter.ms is not None


async def test_meters_are_independent() -> None:
    list_meter = LatencyMeter()
    quote_meter = LatencyMeter()

    async def producer() -> None:
        return None

    await list_meter.measure(producer)
    assert list_meter.ms is not None
    assert quote_meter.ms is None
