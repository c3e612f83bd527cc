"""
Cooperative cancellation for the asynchronous combinators.

A CancellationToken is an opaque signal handed in by the caller. railkit only
asks "has cancellation been requested?" before each asynchronous step and
watches the token while a caller-supplied step is awaited. A cancelled step
surfaces as asyncio.CancelledError and no later step runs.

    token = CancellationToken()
    task = asyncio.create_task(evaluate_async(rules, order, token))
    token.cancel()
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


class CancellationToken:
    """A one-shot, idempotent cancellation flag that asyncio code can wait on."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @staticmethod
    def none() -> CancellationToken:
        """A fresh token nobody will ever cancel."""
        return CancellationToken()

    @staticmethod
    def cancelled() -> CancellationToken:
        """A token that is already cancelled."""
        token = CancellationToken()
        token.cancel()
        return token

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancellation_requested(self) -> None:
        if self._event.is_set():
            raise asyncio.CancelledError("Cancellation was requested")

    async def wait(self) -> None:
        """Suspend until cancellation is requested."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancellation_requested})"


async def with_cancellation(awaitable: Awaitable[T], token: CancellationToken | None) -> T:
    """
    Await `awaitable`, aborting it if `token` is cancelled first.

    Without a token this is a plain await. With one, the token is checked up
    front and then raced against the awaitable; if the token wins, the
    in-flight step is cancelled and asyncio.CancelledError is raised.
    """
    if token is None:
        return await awaitable
    if token.is_cancellation_requested:
        discard(awaitable)
        raise asyncio.CancelledError("Cancellation was requested")

    step = asyncio.ensure_future(awaitable)
    watcher = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({step, watcher}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        step.cancel()
        raise
    finally:
        watcher.cancel()

    if step.done():
        return step.result()
    step.cancel()
    raise asyncio.CancelledError("Cancellation was requested")


def discard(awaitable: Awaitable[object]) -> None:
    """Close a coroutine that will never be awaited."""
    close = getattr(awaitable, "close", None)
    if asyncio.iscoroutine(awaitable) and close is not None:
        close()


def check_cancellation(token: CancellationToken | None) -> None:
    """Raise asyncio.CancelledError if `token` has been cancelled."""
    if token is not None:
        token.raise_if_cancellation_requested()


async def resolve(outcome: T | Awaitable[T], token: CancellationToken | None) -> T:
    """Await `outcome` under `token` when it is awaitable, else return it as is."""
    if inspect.isawaitable(outcome):
        return await with_cancellation(outcome, token)
    return outcome
