"""
Internal utility functions for coopswl.
"""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

R = TypeVar("R")


def run_async(
    async_fn: Callable[..., Awaitable[R]], *args: Any, **kwargs: Any
) -> R:
    """
    Run an async function to completion from synchronous code.

    Raises:
        RuntimeError: If called from within a running event loop
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(async_fn(*args, **kwargs))  # type: ignore[arg-type]

    raise RuntimeError(
        "Cannot use sync version from within an existing asyncio event loop. "
        "Use the async version instead."
    )


def add_sync_version(
    async_fn: Callable[..., Awaitable[R]],
) -> Callable[..., Awaitable[R]]:
    """
    A decorator that adds a .sync attribute to an async function, allowing it
    to be called synchronously.

    Example:
        >>> @add_sync_version
        ... async def my_async_func(x):
        ...     return x * 2

        >>> # Async usage
        >>> result = await my_async_func(5)

        >>> # Sync usage
        >>> result = my_async_func.sync(5)
    """

    def sync_wrapper(*args: Any, **kwargs: Any) -> R:
        """Synchronous wrapper for the async function."""
        return run_async(async_fn, *args, **kwargs)

    async_fn.sync = sync_wrapper  # type: ignore
    return async_fn
