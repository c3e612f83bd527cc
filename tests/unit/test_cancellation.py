"""Tests for CancellationToken and with_cancellation."""

from __future__ import annotations

import asyncio

import pytest

from railkit import CancellationToken, with_cancellation


class TestCancellationToken:
    def test_fresh_token_is_not_cancelled(self):
        assert not CancellationToken().is_cancellation_requested
        assert not CancellationToken.none().is_cancellation_requested

    def test_cancel_is_idempotent(self):
        token = CancellationToken()
        token.cancel()
        token.cancel()
        assert token.is_cancellation_requested

    def test_raise_if_cancellation_requested(self):
        CancellationToken().raise_if_cancellation_requested()
        with pytest.raises(asyncio.CancelledError):
            CancellationToken.cancelled().raise_if_cancellation_requested()

    def test_repr(self):
        assert repr(CancellationToken.cancelled()) == "CancellationToken(cancelled=True)"


class TestWithCancellation:
    @pytest.mark.asyncio
    async def test_without_token_is_plain_await(self):
        async def answer():
            return 42

        assert await with_cancellation(answer(), None) == 42

    @pytest.mark.asyncio
    async def test_completes_when_not_cancelled(self):
        async def answer():
            await asyncio.sleep(0)
            return 42

        assert await with_cancellation(answer(), CancellationToken()) == 42

    @pytest.mark.asyncio
    async def test_pre_cancelled_token_never_starts_step(self):
        started = []

        async def step():
            started.append(True)

        with pytest.raises(asyncio.CancelledError):
            await with_cancellation(step(), CancellationToken.cancelled())
        assert started == []

    @pytest.mark.asyncio
    async def test_step_exceptions_propagate(self):
        async def broken():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await with_cancellation(broken(), CancellationToken())

    @pytest.mark.asyncio
    async def test_token_wins_race(self):
        token = CancellationToken()

        async def slow():
            await asyncio.sleep(10)

        async def cancel_soon():
            await asyncio.sleep(0)
            token.cancel()

        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(asyncio.CancelledError):
            await with_cancellation(slow(), token)
        await canceller
