"""Tests for autoroute.server.dispatch — handler outcomes forwarded to next."""

from typing import Any

import pytest

from autoroute.server.dispatch import Failure, Success, capture, forward, wrap_error_handler, wrap_handler


class _Next:
    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, error: Any = None) -> None:
        self.calls.append(error)


class TestCapture:
    @pytest.mark.asyncio
    async def test_sync_success(self) -> None:
        assert await capture(lambda: 1) == Success(1)

    @pytest.mark.asyncio
    async def test_async_success(self) -> None:
        async def handler() -> int:
            return 2

        assert await capture(handler) == Success(2)

    @pytest.mark.asyncio
    async def test_sync_failure(self) -> None:
        error = ValueError("boom")

        def handler() -> None:
            raise error

        outcome = await capture(handler)
        assert isinstance(outcome, Failure)
        assert outcome.error is error

    @pytest.mark.asyncio
    async def test_async_failure(self) -> None:
        async def handler() -> None:
            raise KeyError("late")

        outcome = await capture(handler)
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, KeyError)


class TestForward:
    def test_failure_reaches_next(self) -> None:
        next = _Next()
        error = RuntimeError("x")
        forward(Failure(error), next)
        assert next.calls == [error]

    def test_success_is_silent(self) -> None:
        next = _Next()
        forward(Success("value"), next)
        assert next.calls == []


class TestWrapHandler:
    @pytest.mark.asyncio
    async def test_passes_only_declared_arguments(self) -> None:
        seen: list[tuple[Any, ...]] = []

        def handler(request) -> None:
            seen.append((request,))

        await wrap_handler(handler)("req", "res", _Next())
        assert seen == [("req",)]

    @pytest.mark.asyncio
    async def test_async_rejection_forwarded(self) -> None:
        async def handler(request, response) -> None:
            raise ValueError("nope")

        next = _Next()
        await wrap_handler(handler)("req", "res", next)
        assert len(next.calls) == 1
        assert isinstance(next.calls[0], ValueError)

    @pytest.mark.asyncio
    async def test_next_passed_through(self) -> None:
        def handler(request, response, next) -> None:
            next()

        next = _Next()
        await wrap_handler(handler)("req", "res", next)
        assert next.calls == [None]

    def test_keeps_name(self) -> None:
        def save(request, response) -> None: ...

        wrapped = wrap_handler(save)
        assert wrapped.__name__ == "save"
        assert not hasattr(wrapped, "__wrapped__")


class TestWrapErrorHandler:
    @pytest.mark.asyncio
    async def test_failure_forwarded(self) -> None:
        def handler(error, request, response, next) -> None:
            raise RuntimeError("in error handler")

        next = _Next()
        await wrap_error_handler(handler)(ValueError(), "req", "res", next)
        assert isinstance(next.calls[0], RuntimeError)
