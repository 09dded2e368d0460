"""Tests for the async helpers, Result and the singleton registry."""

from __future__ import annotations

import asyncio

import pytest

from app.relay.util.async_helpers import bounded, run_sync
from app.relay.util.result import Result
from app.relay.util.singletons import _reset_fns, register_singleton, reset_all_singletons


class TestAsyncHelpers:
    @pytest.mark.asyncio
    async def test_run_sync_kwargs(self) -> None:
        def greet(name: str, prefix: str = "Hello") -> str:
            return f"{prefix}, {name}"

        assert await run_sync(greet, "World", prefix="Hi") == "Hi, World"

    @pytest.mark.asyncio
    async def test_run_sync_exception(self) -> None:
        def boom() -> None:
            raise ValueError("fail")

        with pytest.raises(ValueError, match="fail"):
            await run_sync(boom)

    @pytest.mark.asyncio
    async def test_bounded_times_out(self) -> None:
        with pytest.raises(asyncio.TimeoutError):
            await bounded(asyncio.sleep(10), 0.01)

    @pytest.mark.asyncio
    async def test_bounded_without_timeout(self) -> None:
        async def value() -> int:
            return 7

        assert await bounded(value(), None) == 7
        assert await bounded(value(), 0) == 7


class TestResult:
    def test_ok(self) -> None:
        r = Result.ok("sent", subject="42")
        assert r
        assert r.subject == "42"

    def test_fail_keeps_error(self) -> None:
        exc = RuntimeError("nope")
        r = Result.fail("nope", subject="42", error=exc)
        assert not r
        assert r.error is exc

    def test_unpacking(self) -> None:
        ok, msg = Result.fail("boom")
        assert (ok, msg) == (False, "boom")


class TestSingletonRegistry:
    def setup_method(self) -> None:
        self._original = list(_reset_fns)

    def teardown_method(self) -> None:
        _reset_fns.clear()
        _reset_fns.extend(self._original)

    def test_reset_all_invokes_every_resetter(self) -> None:
        calls: list[int] = []

        @register_singleton
        def _r1() -> None:
            calls.append(1)

        register_singleton(lambda: calls.append(2))
        reset_all_singletons()
        assert 1 in calls and 2 in calls

    def test_register_is_idempotent(self) -> None:
        def _reset() -> None:
            pass

        register_singleton(_reset)
        register_singleton(_reset)
        assert _reset_fns.count(_reset) == 1
