"""Fan-out helpers for the query flow."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Executor
from typing import Callable, Dict, Hashable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class CancellationToken:
    """Set once by the caller; checked before results are published."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


async def fan_out(
    items: Iterable[T],
    key_fn: Callable[[T], Hashable],
    fn: Callable[[T], R],
    executor: Optional[Executor] = None,
) -> Dict[Hashable, Optional[R]]:
    """Run ``fn`` for every item concurrently and join once.

    A failing item maps to None; it never cancels its siblings.
    """
    loop = asyncio.get_running_loop()
    items = list(items)

    async def run_one(item: T) -> Optional[R]:
        try:
            return await loop.run_in_executor(executor, fn, item)
        except Exception as exc:
            logger.warning("Fan-out item %s failed: %s", key_fn(item), exc)
            return None

    results = await asyncio.gather(*(run_one(item) for item in items))
    return {key_fn(item): result for item, result in zip(items, results)}
