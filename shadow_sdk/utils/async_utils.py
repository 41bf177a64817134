# shadow_sdk/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
from typing import Any, Awaitable, Callable, Coroutine, Iterable, List, TypeVar

T = TypeVar('T')
R = TypeVar('R')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, create new thread
        import threading

        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                new_loop = asyncio.new_event_loop()
                asyncio.set_event_loop(new_loop)
                result = new_loop.run_until_complete(coro)
                new_loop.close()
            except BaseException as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        # No running loop, use asyncio.run
        return asyncio.run(coro)


async def gather_limited(items: Iterable[T],
                         processor: Callable[[T], Awaitable[R]],
                         max_concurrency: int = 16) -> List[R]:
    """
    Run processor over items concurrently with a concurrency cap

    Results come back in input order regardless of completion order.
    The first exception cancels nothing and is re-raised after all
    tasks settle.

    Args:
        items: Items to process
        processor: Async processor function
        max_concurrency: Maximum number of in-flight coroutines

    Returns:
        List of results
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def wrapped(item: T) -> R:
        async with semaphore:
            return await processor(item)

    results = await asyncio.gather(
        *[wrapped(item) for item in items],
        return_exceptions=True
    )

    for result in results:
        if isinstance(result, BaseException):
            raise result

    return results
