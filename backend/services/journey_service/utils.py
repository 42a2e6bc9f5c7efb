"""
Utility Functions for Journey Service.

This module provides small helpers shared by the record store clients and the
journey engine: running blocking client calls off the event loop,
order-preserving de-duplication and fail-fast concurrent gathering.
"""

import asyncio
from collections.abc import Awaitable, Hashable, Iterable
from typing import Any, Callable, TypeVar

T = TypeVar("T", bound=Hashable)


async def run_sync_in_executor(func: Callable[..., Any], *args, **kwargs) -> Any:
    """
    Execute synchronous function asynchronously using thread executor.

    Used for the blocking supabase client so that concurrent journey builds
    are not serialized on the event loop.

    Args:
        func: The synchronous function to execute
        *args: Positional arguments for the function
        **kwargs: Keyword arguments for the function

    Returns:
        The result of the function call
    """
    loop = asyncio.get_running_loop()
    if kwargs:
        return await loop.run_in_executor(None, lambda: func(*args, **kwargs))
    return await loop.run_in_executor(None, func, *args)


def unique_in_order(values: Iterable[T | None]) -> list[T]:
    """
    Return the distinct, non-empty values in order of first appearance.

    Example:
        ```python
        unique_in_order(["b", None, "a", "b", ""])  # ["b", "a"]
        ```
    """
    seen: set[T] = set()
    unique: list[T] = []
    for value in values:
        if value is None or value == "" or value in seen:
            continue
        seen.add(value)
        unique.append(value)
    return unique


async def gather_or_cancel(*coros: Awaitable[Any]) -> list[Any]:
    """
    Run awaitables concurrently and return their results in order.

    Unlike a bare ``asyncio.gather``, the first failure cancels every sibling
    still running and waits for them to finish before re-raising, so no query
    outlives the caller that gave up on it.

    Raises:
        The first exception raised by any awaitable, or CancelledError when
        the caller itself is cancelled.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
