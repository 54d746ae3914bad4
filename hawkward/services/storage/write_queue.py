"""
Write serializer for the document store.

Two near-simultaneous saves (a table edit and an auto-save, say) must
not read-modify-write the file out of order, or one of them is lost.
Every mutation is therefore run through a single queue.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar


T = TypeVar("T")


class WriteQueue:
    """
    Runs submitted write functions one at a time, in submission order.

    Backed by an asyncio.Lock, whose waiters are woken first-in
    first-out. A failing write releases the queue for the next one and
    re-raises to its own submitter only.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._pending = 0

    @property
    def pending(self) -> int:
        """Number of writes queued or running."""
        return self._pending

    async def enqueue(self, write_fn: Callable[[], Awaitable[T]]) -> T:
        """Wait for every earlier write, then run ``write_fn``."""
        self._pending += 1
        try:
            async with self._lock:
                return await write_fn()
        finally:
            self._pending -= 1
