"""
Result - Success-or-failure container used by every rule pipeline.

A Result is exactly one of:
- Success(value)
- Failure(error)

Pipelines are built by composing small steps:

    load(session_id).chain(validate_is_active).map(advance).fold(on_err, on_ok)

Expected rule violations travel as Failure values. Exceptions raised inside
map/chain callbacks are caught and turned into Failure. Observers passed to
tap/tap_error never change the outcome, even when they raise.

ResultAsync wraps an awaitable Result and offers the same operations. Each
step is awaited before the next one starts.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable
import inspect
import logging

logger = logging.getLogger(__name__)


def _as_exception(error: Any) -> BaseException:
    if isinstance(error, BaseException):
        return error
    return Exception(str(error))


class Result(ABC):
    """Base type for Success and Failure."""

    @staticmethod
    def success(value: Any = None) -> Success:
        return Success(value)

    @staticmethod
    def failure(error: Any) -> Failure:
        return Failure(_as_exception(error))

    @staticmethod
    def from_callable(fn: Callable[[], Any]) -> Result:
        """Run fn and capture its return value or raised exception."""
        try:
            return Success(fn())
        except Exception as e:
            return Failure(e)

    @property
    @abstractmethod
    def is_success(self) -> bool:
        ...

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @abstractmethod
    def map(self, fn: Callable[[Any], Any]) -> Result:
        ...

    @abstractmethod
    def chain(self, fn: Callable[[Any], Result]) -> Result:
        ...

    @abstractmethod
    def tap(self, fn: Callable[[Any], Any]) -> Result:
        ...

    @abstractmethod
    def tap_error(self, fn: Callable[[BaseException], Any]) -> Result:
        ...

    @abstractmethod
    def map_error(self, fn: Callable[[BaseException], Any]) -> Result:
        ...

    @abstractmethod
    def recover(self, fn: Callable[[BaseException], Any]) -> Result:
        ...

    @abstractmethod
    def fold(
        self,
        on_failure: Callable[[BaseException], Any],
        on_success: Callable[[Any], Any],
    ) -> Any:
        ...

    @abstractmethod
    def get_or_else(self, default: Any) -> Any:
        ...

    @abstractmethod
    def get_or_throw(self) -> Any:
        ...

    def to_async(self) -> ResultAsync:
        return ResultAsync.of(self)


class Success(Result):
    """Successful outcome holding a value."""

    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    @property
    def error(self) -> None:
        return None

    @property
    def is_success(self) -> bool:
        return True

    def map(self, fn):
        try:
            return Success(fn(self.value))
        except Exception as e:
            return Failure(e)

    def chain(self, fn):
        try:
            result = fn(self.value)
        except Exception as e:
            return Failure(e)
        if not isinstance(result, Result):
            return Failure(TypeError(
                f"chain callback must return a Result, got {type(result).__name__}"
            ))
        return result

    def tap(self, fn):
        try:
            fn(self.value)
        except Exception:
            logger.debug("Ignored exception in tap observer", exc_info=True)
        return self

    def tap_error(self, fn):
        return self

    def map_error(self, fn):
        return self

    def recover(self, fn):
        return self

    def fold(self, on_failure, on_success):
        return on_success(self.value)

    def get_or_else(self, default):
        return self.value

    def get_or_throw(self):
        return self.value

    def __eq__(self, other):
        return isinstance(other, Success) and other.value == self.value

    def __repr__(self):
        return f"Success({self.value!r})"


class Failure(Result):
    """Failed outcome holding an exception."""

    __slots__ = ("error",)

    def __init__(self, error: BaseException):
        self.error = _as_exception(error)

    @property
    def value(self) -> None:
        return None

    @property
    def is_success(self) -> bool:
        return False

    def map(self, fn):
        return self

    def chain(self, fn):
        return self

    def tap(self, fn):
        return self

    def tap_error(self, fn):
        try:
            fn(self.error)
        except Exception:
            logger.debug("Ignored exception in tap_error observer", exc_info=True)
        return self

    def map_error(self, fn):
        try:
            return Failure(_as_exception(fn(self.error)))
        except Exception as e:
            return Failure(e)

    def recover(self, fn):
        try:
            return Success(fn(self.error))
        except Exception as e:
            return Failure(e)

    def fold(self, on_failure, on_success):
        return on_failure(self.error)

    def get_or_else(self, default):
        if callable(default):
            return default(self.error)
        return default

    def get_or_throw(self):
        raise self.error

    def __eq__(self, other):
        return isinstance(other, Failure) and other.error is self.error

    def __repr__(self):
        return f"Failure({self.error!r})"


class ResultAsync:
    """
    An awaitable Result.

    Callbacks may be plain functions or coroutine functions; anything
    awaitable they return is awaited before the next step runs.

    Usage:
        result = await (
            ResultAsync.from_async(lambda: store.load(session_id))
            .chain(validate_is_active)
            .map(advance)
        )
    """

    def __init__(self, awaitable: Awaitable[Result]):
        self._awaitable = awaitable

    @classmethod
    def of(cls, result: Result) -> ResultAsync:
        async def _resolved() -> Result:
            return result
        return cls(_resolved())

    @classmethod
    def success(cls, value: Any = None) -> ResultAsync:
        return cls.of(Result.success(value))

    @classmethod
    def failure(cls, error: Any) -> ResultAsync:
        return cls.of(Result.failure(error))

    @classmethod
    def from_awaitable(cls, awaitable: Awaitable[Any]) -> ResultAsync:
        """Await a plain value; a raised exception becomes Failure."""
        async def _run() -> Result:
            try:
                return Success(await awaitable)
            except Exception as e:
                return Failure(e)
        return cls(_run())

    @classmethod
    def from_async(cls, fn: Callable[[], Any]) -> ResultAsync:
        """Call fn (sync or async) lazily and capture value or exception."""
        async def _run() -> Result:
            try:
                value = fn()
                if inspect.isawaitable(value):
                    value = await value
                return Success(value)
            except Exception as e:
                return Failure(e)
        return cls(_run())

    def __await__(self):
        return self._resolve().__await__()

    async def _resolve(self) -> Result:
        try:
            result = await self._awaitable
        except Exception as e:
            return Failure(e)
        if isinstance(result, ResultAsync):
            return await result
        return result

    def _then(self, step: Callable[[Result], Awaitable[Result]]) -> ResultAsync:
        async def _run() -> Result:
            return await step(await self._resolve())
        return ResultAsync(_run())

    def map(self, fn: Callable[[Any], Any]) -> ResultAsync:
        async def step(result: Result) -> Result:
            if result.is_failure:
                return result
            try:
                value = fn(result.value)
                if inspect.isawaitable(value):
                    value = await value
                return Success(value)
            except Exception as e:
                return Failure(e)
        return self._then(step)

    def chain(self, fn: Callable[[Any], Any]) -> ResultAsync:
        async def step(result: Result) -> Result:
            if result.is_failure:
                return result
            try:
                nxt = fn(result.value)
                if isinstance(nxt, ResultAsync):
                    return await nxt
                if inspect.isawaitable(nxt):
                    nxt = await nxt
            except Exception as e:
                return Failure(e)
            if not isinstance(nxt, Result):
                return Failure(TypeError(
                    f"chain callback must return a Result, got {type(nxt).__name__}"
                ))
            return nxt
        return self._then(step)

    def tap(self, fn: Callable[[Any], Any]) -> ResultAsync:
        async def step(result: Result) -> Result:
            if result.is_success:
                try:
                    out = fn(result.value)
                    if inspect.isawaitable(out):
                        await out
                except Exception:
                    logger.debug("Ignored exception in tap observer", exc_info=True)
            return result
        return self._then(step)

    def tap_error(self, fn: Callable[[BaseException], Any]) -> ResultAsync:
        async def step(result: Result) -> Result:
            if result.is_failure:
                try:
                    out = fn(result.error)
                    if inspect.isawaitable(out):
                        await out
                except Exception:
                    logger.debug("Ignored exception in tap_error observer", exc_info=True)
            return result
        return self._then(step)

    def map_error(self, fn: Callable[[BaseException], Any]) -> ResultAsync:
        async def step(result: Result) -> Result:
            if result.is_success:
                return result
            try:
                err = fn(result.error)
                if inspect.isawaitable(err):
                    err = await err
                return Failure(_as_exception(err))
            except Exception as e:
                return Failure(e)
        return self._then(step)

    def recover(self, fn: Callable[[BaseException], Any]) -> ResultAsync:
        async def step(result: Result) -> Result:
            if result.is_success:
                return result
            try:
                value = fn(result.error)
                if inspect.isawaitable(value):
                    value = await value
                return Success(value)
            except Exception as e:
                return Failure(e)
        return self._then(step)

    async def fold(
        self,
        on_failure: Callable[[BaseException], Any],
        on_success: Callable[[Any], Any],
    ) -> Any:
        out = (await self._resolve()).fold(on_failure, on_success)
        if inspect.isawaitable(out):
            out = await out
        return out

    async def get_or_else(self, default: Any) -> Any:
        return (await self._resolve()).get_or_else(default)

    async def get_or_throw(self) -> Any:
        return (await self._resolve()).get_or_throw()
