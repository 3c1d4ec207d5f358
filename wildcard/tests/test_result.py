"""
Tests for Result and ResultAsync.

Tests:
- Success/Failure composition
- Exceptions inside callbacks become Failure
- Observers never change the outcome
- Async steps run in order
"""

import pytest

from ..engine_core.result import Result, ResultAsync, Success, Failure
from ..engine_core.errors import NotYourTurnError


class TestResult:
    """Tests for the synchronous Result."""

    def test_map_transforms_success(self):
        assert Result.success(2).map(lambda v: v * 3) == Success(6)

    def test_map_skips_failure(self):
        error = NotYourTurnError()
        result = Result.failure(error).map(lambda v: v * 3)
        assert result.is_failure
        assert result.error is error

    def test_map_captures_exception(self):
        result = Result.success(1).map(lambda v: 1 / 0)
        assert isinstance(result.error, ZeroDivisionError)

    def test_chain_short_circuits(self):
        calls = []

        def step(v):
            calls.append(v)
            return Result.success(v)

        result = Result.failure(NotYourTurnError()).chain(step)
        assert result.is_failure
        assert calls == []

    def test_chain_requires_result(self):
        result = Result.success(1).chain(lambda v: v + 1)
        assert isinstance(result.error, TypeError)

    def test_failure_from_string_wraps_exception(self):
        result = Result.failure("boom")
        assert isinstance(result.error, Exception)
        assert str(result.error) == "boom"

    def test_tap_observer_exception_is_ignored(self):
        def observer(_):
            raise RuntimeError("observer broke")

        assert Result.success(5).tap(observer) == Success(5)

    def test_tap_error_sees_error(self):
        seen = []
        error = NotYourTurnError()
        Result.failure(error).tap_error(seen.append)
        assert seen == [error]

    def test_tap_error_observer_exception_is_ignored(self):
        error = NotYourTurnError()

        def observer(_):
            raise RuntimeError("observer broke")

        result = Result.failure(error).tap_error(observer)
        assert result.error is error

    def test_map_error_and_recover(self):
        result = Result.failure(ValueError("bad")).map_error(lambda e: KeyError(str(e)))
        assert isinstance(result.error, KeyError)
        assert Result.failure(ValueError("bad")).recover(lambda e: 0) == Success(0)

    def test_fold(self):
        assert Result.success(3).fold(lambda e: "err", lambda v: v + 1) == 4
        assert Result.failure("x").fold(lambda e: "err", lambda v: v + 1) == "err"

    def test_get_or_else(self):
        assert Result.success(1).get_or_else(9) == 1
        assert Result.failure("x").get_or_else(9) == 9
        assert Result.failure("x").get_or_else(lambda e: str(e)) == "x"

    def test_get_or_throw(self):
        with pytest.raises(NotYourTurnError):
            Result.failure(NotYourTurnError()).get_or_throw()

    def test_from_callable(self):
        assert Result.from_callable(lambda: 4) == Success(4)
        assert isinstance(Result.from_callable(lambda: {}["k"]).error, KeyError)


class TestResultAsync:
    """Tests for the awaitable Result."""

    async def test_await_resolves_to_result(self):
        result = await ResultAsync.success(1)
        assert result == Success(1)

    async def test_async_map_and_chain(self):
        async def double(v):
            return v * 2

        async def check(v):
            return Result.success(v) if v > 2 else Result.failure("too small")

        result = await ResultAsync.success(2).map(double).chain(check)
        assert result == Success(4)

    async def test_chain_accepts_result_async(self):
        result = await ResultAsync.success(1).chain(lambda v: ResultAsync.success(v + 1))
        assert result == Success(2)

    async def test_steps_run_in_order(self):
        order = []

        async def step(name):
            order.append(name)
            return name

        await (
            ResultAsync.success("a")
            .map(step)
            .map(lambda _: step("b"))
            .tap(lambda _: step("c"))
        )
        assert order == ["a", "b", "c"]

    async def test_failure_skips_later_steps(self):
        calls = []
        result = await (
            ResultAsync.failure(NotYourTurnError())
            .map(calls.append)
            .chain(lambda v: Result.success(calls.append(v)))
        )
        assert isinstance(result, Failure)
        assert calls == []

    async def test_async_exception_becomes_failure(self):
        async def explode(_):
            raise RuntimeError("store down")

        result = await ResultAsync.success(1).map(explode)
        assert isinstance(result.error, RuntimeError)

    async def test_from_awaitable(self):
        async def value():
            return 7

        assert await ResultAsync.from_awaitable(value()) == Success(7)

    async def test_async_tap_error_observer_is_ignored(self):
        async def observer(_):
            raise RuntimeError("observer broke")

        error = NotYourTurnError()
        result = await ResultAsync.failure(error).tap_error(observer)
        assert result.error is error

    async def test_fold_and_getters(self):
        assert await ResultAsync.success(1).fold(lambda e: 0, lambda v: v + 1) == 2
        assert await ResultAsync.failure("x").get_or_else(5) == 5
        with pytest.raises(NotYourTurnError):
            await ResultAsync.failure(NotYourTurnError()).get_or_throw()

    async def test_to_async(self):
        assert await Result.success(3).to_async().map(lambda v: v + 1) == Success(4)
