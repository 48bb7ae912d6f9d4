# file: utils/concurrency.py

import asyncio
from typing import Any, Awaitable, Iterable, List, TypeVar

T = TypeVar("T")


async def run_bounded(semaphore: asyncio.Semaphore, awaitable: Awaitable[T]) -> T:
    async with semaphore:
        return await awaitable


async def gather_bounded(awaitables: Iterable[Awaitable[Any]], limit: int) -> List[Any]:
    """
    Runs the awaitables with at most `limit` in flight at once.

    Results come back in input order. A failed task yields its exception
    object in place of a result instead of aborting the others.
    """
    semaphore = asyncio.Semaphore(max(1, limit))
    return await asyncio.gather(
        *(run_bounded(semaphore, aw) for aw in awaitables),
        return_exceptions=True,
    )


def first_error(results: List[Any]) -> BaseException | None:
    for result in results:
        if isinstance(result, BaseException):
            return result
    return None
