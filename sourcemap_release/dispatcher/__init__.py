"""Concurrency-limited dispatch of independent async units.

Public API:
    dispatch(supply, concurrency) -> DispatchResult
    BoundedDispatcher(concurrency).map(items, handler) -> DispatchResult
"""

from sourcemap_release.dispatcher.pool import BoundedDispatcher, dispatch
from sourcemap_release.dispatcher.types import DispatchResult, TaskQueue

__all__ = ["BoundedDispatcher", "DispatchResult", "TaskQueue", "dispatch"]
