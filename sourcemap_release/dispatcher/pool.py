"""Concurrency-limited dispatcher for independent async units of work.

A supply callable hands out units one at a time and returns None once
there is no more work. `dispatch()` starts up to `concurrency` worker
loops; each loop claims a unit, awaits it, then claims the next, and
exits when the supply is exhausted. With `concurrency=None` the supply
is drained up front and every unit runs at once.

Failure policy:
  - The first failure stops further claims. Units already in flight
    are awaited to completion; unclaimed units never run.
  - Once everything in flight has settled, a `DispatchError` carrying
    every observed failure is raised.
  - A raising supply counts as a failure. When unbounded, units drawn
    before it raised are closed without being started.

There is no cancellation or timeout here. Cancelling the awaiting task
propagates through asyncio as usual.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from inspect import iscoroutine
from typing import Any, Optional, TypeVar

from sourcemap_release.dispatcher.types import DispatchResult, TaskQueue
from sourcemap_release.errors import DispatchError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Supply = Callable[[], Optional[Awaitable[Any]]]


class _DispatchState:
    def __init__(self) -> None:
        self.in_flight = 0
        self.peak_in_flight = 0
        self.completed = 0
        self.failures: list[BaseException] = []

    def result(self) -> DispatchResult:
        return DispatchResult(
            completed=self.completed,
            peak_in_flight=self.peak_in_flight,
        )


def _validate_concurrency(concurrency: Optional[int]) -> None:
    if concurrency is None:
        return
    if isinstance(concurrency, bool) or not isinstance(concurrency, int):
        raise ValueError(f"concurrency must be a positive integer or None, got {concurrency!r}")
    if concurrency < 1:
        raise ValueError(f"concurrency must be a positive integer or None, got {concurrency}")


async def _run_unit(unit: Awaitable[Any], state: _DispatchState) -> None:
    state.in_flight += 1
    state.peak_in_flight = max(state.peak_in_flight, state.in_flight)
    try:
        await unit
    except Exception as exc:
        state.failures.append(exc)
    else:
        state.completed += 1
    finally:
        state.in_flight -= 1


async def _worker(supply: Supply, state: _DispatchState) -> None:
    while not state.failures:
        unit = supply()
        if unit is None:
            return
        await _run_unit(unit, state)


async def _dispatch_workers(supply: Supply, workers: int, state: _DispatchState) -> None:
    outcomes = await asyncio.gather(
        *(_worker(supply, state) for _ in range(workers)),
        return_exceptions=True,
    )
    for outcome in outcomes:
        # Only a raising supply() escapes a worker; unit errors are recorded.
        if isinstance(outcome, Exception):
            state.failures.append(outcome)
        elif isinstance(outcome, BaseException):
            raise outcome


async def _dispatch_unbounded(supply: Supply, state: _DispatchState) -> None:
    units: list[Awaitable[Any]] = []
    try:
        while (unit := supply()) is not None:
            units.append(unit)
    except Exception as exc:
        for pending in units:
            if iscoroutine(pending):
                pending.close()
        state.failures.append(exc)
        return

    await asyncio.gather(*(_run_unit(unit, state) for unit in units))


def _finish(state: _DispatchState) -> DispatchResult:
    if state.failures:
        logger.error(
            "Dispatch failed: %d unit(s) failed, %d completed",
            len(state.failures), state.completed,
        )
        raise DispatchError(state.failures)

    logger.debug(
        "Dispatch complete: %d unit(s), peak concurrency %d",
        state.completed, state.peak_in_flight,
    )
    return state.result()


async def dispatch(supply: Supply, concurrency: Optional[int] = None) -> DispatchResult:
    """Run every unit produced by `supply` with at most `concurrency` in flight.

    Args:
        supply: Returns the next awaitable unit, or None when exhausted.
        concurrency: Positive worker count, or None for unbounded.

    Returns:
        DispatchResult with the completed count and observed peak.

    Raises:
        ValueError: If concurrency is not a positive integer or None.
        DispatchError: If any unit (or the supply itself) failed.
    """
    _validate_concurrency(concurrency)
    state = _DispatchState()

    if concurrency is None:
        await _dispatch_unbounded(supply, state)
    else:
        await _dispatch_workers(supply, concurrency, state)

    return _finish(state)


class BoundedDispatcher:
    """Maps an async handler over a fixed list of items.

    Items are drained from a `TaskQueue`; at most
    min(len(items), concurrency) workers are started. Items must not be
    None, since None marks an exhausted queue.
    """

    def __init__(self, concurrency: Optional[int] = None):
        _validate_concurrency(concurrency)
        self.concurrency = concurrency

    async def map(
        self,
        items: Iterable[T],
        handler: Callable[[T], Awaitable[Any]],
    ) -> DispatchResult:
        queue: TaskQueue[T] = TaskQueue(items)

        def supply() -> Optional[Awaitable[Any]]:
            item = queue.claim()
            if item is None:
                return None
            return handler(item)

        if self.concurrency is None:
            return await dispatch(supply)

        workers = min(len(queue), self.concurrency)
        if workers == 0:
            return DispatchResult()

        state = _DispatchState()
        await _dispatch_workers(supply, workers, state)
        return _finish(state)
