"""
Single-slot handoff between the ingestion and decision tasks.

A mutex-guarded slot with a condition signal. Delivery is exactly-once
and in order: the producer waits while the slot is occupied, the
consumer waits while it is empty. Nothing is ever dropped.
"""

import asyncio
import logging
from typing import Generic, TypeVar

from triarb.core.errors import FeedUnavailableError, HandoffClosedError


logger = logging.getLogger(__name__)


T = TypeVar("T")


class Handoff(Generic[T]):
    """
    Blocking single-producer/single-consumer handoff of depth one.

    ``close()`` wakes both sides. After close, ``put`` raises
    HandoffClosedError; ``get`` still returns a pending item, then
    raises FeedUnavailableError with the close reason.
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._slot: T | None = None
        self._occupied = False
        self._closed = False
        self._reason = ""
        self._put_count = 0
        self._get_count = 0

    async def put(self, item: T) -> None:
        """
        Hand an item to the consumer.

        Blocks until the previous item has been taken.

        Raises:
            HandoffClosedError: If the handoff is closed.
        """
        async with self._cond:
            await self._cond.wait_for(lambda: not self._occupied or self._closed)

            if self._closed:
                raise HandoffClosedError(f"Handoff closed: {self._reason}")

            self._slot = item
            self._occupied = True
            self._put_count += 1
            self._cond.notify_all()

    async def get(self) -> T:
        """
        Take the next item.

        Blocks until an item is available.

        Raises:
            FeedUnavailableError: If the handoff is closed and drained.
        """
        async with self._cond:
            await self._cond.wait_for(lambda: self._occupied or self._closed)

            if not self._occupied:
                raise FeedUnavailableError(self._reason)

            item = self._slot
            self._slot = None
            self._occupied = False
            self._get_count += 1
            self._cond.notify_all()

        return item  # type: ignore[return-value]

    async def close(self, reason: str = "closed") -> None:
        """
        Close the handoff and wake any waiters.

        Only the first reason is kept.
        """
        async with self._cond:
            if not self._closed:
                self._closed = True
                self._reason = reason
                logger.debug(f"Handoff closed: {reason}")
            self._cond.notify_all()

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_pending(self) -> bool:
        """Whether an item is waiting to be taken."""
        return self._occupied

    @property
    def reason(self) -> str:
        """Why the handoff was closed (empty while open)."""
        return self._reason

    @property
    def put_count(self) -> int:
        return self._put_count

    @property
    def get_count(self) -> int:
        return self._get_count
