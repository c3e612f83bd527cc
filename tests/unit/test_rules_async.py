"""Tests for evaluate_async and cancellation of rule evaluation."""

from __future__ import annotations

import asyncio

import pytest
from structlog.testing import capture_logs

from railkit import CancellationToken, Error, UnitResult
from railkit.rules import all_of, any_of, as_rule, conditional, evaluate, evaluate_async, linear

E1 = Error.validation("E1", "first")
E2 = Error.validation("E2", "second")


class AsyncSpy:
    """An async rule object with a fixed outcome that counts its evaluations."""

    def __init__(self, outcome: UnitResult, delay: float = 0) -> None:
        self.outcome = outcome
        self.delay = delay
        self.calls = 0
        self.finished = 0

    async def evaluate_async(self, context, token=None) -> UnitResult:
        self.calls += 1
        await asyncio.sleep(self.delay)
        self.finished += 1
        return self.outcome


class TestEvaluateAsync:
    @pytest.mark.asyncio
    async def test_coroutine_function_rule(self):
        async def is_registered(user):
            await asyncio.sleep(0)
            return user == "ada"

        assert (await evaluate_async(is_registered, "ada")).is_success
        assert (await evaluate_async(is_registered, "bob")).is_failure

    @pytest.mark.asyncio
    async def test_sync_rules_work_too(self):
        assert (await evaluate_async(lambda ctx: True, "ctx")).is_success

    @pytest.mark.asyncio
    async def test_and_short_circuits(self):
        first, second, third = (
            AsyncSpy(UnitResult.failure(E1)),
            AsyncSpy(UnitResult.success()),
            AsyncSpy(UnitResult.failure(E2)),
        )
        result = await evaluate_async(all_of(first, second, third), "ctx")
        assert result.errors == (E1,)
        assert (first.calls, second.calls, third.calls) == (1, 0, 0)

    @pytest.mark.asyncio
    async def test_or_aggregates_in_order(self):
        result = await evaluate_async(
            any_of(AsyncSpy(UnitResult.failure(E1)), AsyncSpy(UnitResult.failure(E2))),
            "ctx",
        )
        assert result.errors == (E1, E2)

    @pytest.mark.asyncio
    async def test_or_stops_at_first_success(self):
        second = AsyncSpy(UnitResult.failure(E1))
        result = await evaluate_async(any_of(AsyncSpy(UnitResult.success()), second), "ctx")
        assert result.is_success
        assert second.calls == 0

    @pytest.mark.asyncio
    async def test_linear_and_conditional(self):
        nxt = AsyncSpy(UnitResult.success())
        chain = linear(AsyncSpy(UnitResult.failure(E1)), nxt)
        assert (await evaluate_async(chain, "ctx")).errors == (E1,)
        assert nxt.calls == 0

        branch = conditional(
            AsyncSpy(UnitResult.failure(E1)),
            success=AsyncSpy(UnitResult.failure(E2)),
            failure=AsyncSpy(UnitResult.success()),
        )
        assert (await evaluate_async(branch, "ctx")).is_success

    @pytest.mark.asyncio
    async def test_none_context_is_rejected(self):
        with pytest.raises(TypeError):
            await evaluate_async(AsyncSpy(UnitResult.success()), None)


class TestSyncEngineRejectsAsyncRules:
    def test_async_rule_object(self):
        with pytest.raises(TypeError, match="evaluate_async"):
            evaluate(AsyncSpy(UnitResult.success()), "ctx")

    def test_coroutine_function(self):
        async def check(ctx):
            return True

        with pytest.raises(TypeError, match="evaluate_async"):
            evaluate(as_rule(check), "ctx")


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_before_start_evaluates_nothing(self):
        rule = AsyncSpy(UnitResult.success())
        with pytest.raises(asyncio.CancelledError):
            await evaluate_async(all_of(rule), "ctx", CancellationToken.cancelled())
        assert rule.calls == 0

    @pytest.mark.asyncio
    async def test_cancellation_during_child_stops_composite(self):
        """
        GIVEN an And rule whose first child is slow
        WHEN the token is cancelled while that child is in flight
        THEN evaluation aborts and the remaining children never run
        """
        token = CancellationToken()
        slow = AsyncSpy(UnitResult.success(), delay=10)
        later = AsyncSpy(UnitResult.success())

        task = asyncio.create_task(evaluate_async(all_of(slow, later), "ctx", token))
        while slow.calls == 0:
            await asyncio.sleep(0)
        token.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert slow.finished == 0
        assert later.calls == 0

    @pytest.mark.asyncio
    async def test_cancellation_is_logged(self):
        with capture_logs() as logs:
            with pytest.raises(asyncio.CancelledError):
                await evaluate_async(
                    AsyncSpy(UnitResult.success()), "ctx", CancellationToken.cancelled()
                )
        assert [entry["event"] for entry in logs] == ["rule.cancelled"]

    @pytest.mark.asyncio
    async def test_token_reaches_function_rules(self):
        seen = []

        async def rule(ctx, token):
            seen.append(token)
            return True

        token = CancellationToken()
        await evaluate_async(rule, "ctx", token)
        assert seen == [token]
