"""Reader-writer lock for asyncio tasks.

Shared access for readers, exclusive access for a single writer. Writers
are preferred: once a writer is waiting, new readers queue behind it so a
token refresh cannot be starved by a steady stream of readers.

Releasing never suspends, so a task cancelled while holding the lock
always gives it back. Cancelling a task that is still waiting leaves the
lock state untouched.
"""

import asyncio
import contextlib
import logging
from typing import AsyncIterator, Set

logger = logging.getLogger(__name__)


class ReaderWriterLock:
    """Simple writer-preferring shared/exclusive lock."""

    def __init__(self) -> None:
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
        self._waiters: Set[asyncio.Future] = set()

    @property
    def readers(self) -> int:
        """Number of tasks currently holding shared access."""
        return self._readers

    @property
    def writer_active(self) -> bool:
        return self._writer

    def locked(self) -> bool:
        return self._writer or self._readers > 0

    def _notify_all(self) -> None:
        waiters, self._waiters = self._waiters, set()
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    async def _wait_for_change(self) -> None:
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.add(waiter)
        try:
            await waiter
        finally:
            self._waiters.discard(waiter)

    async def acquire_read(self) -> None:
        while self._writer or self._waiting_writers:
            await self._wait_for_change()
        self._readers += 1

    def release_read(self) -> None:
        if self._readers <= 0:
            raise RuntimeError("release_read() called without a matching acquire_read().")
        self._readers -= 1
        if self._readers == 0:
            self._notify_all()

    async def acquire_write(self) -> None:
        self._waiting_writers += 1
        try:
            while self._writer or self._readers:
                await self._wait_for_change()
        except BaseException:
            # Readers parked behind this writer must re-check.
            self._waiting_writers -= 1
            self._notify_all()
            raise
        self._waiting_writers -= 1
        self._writer = True

    def release_write(self) -> None:
        if not self._writer:
            raise RuntimeError("release_write() called without a matching acquire_write().")
        self._writer = False
        self._notify_all()

    @contextlib.asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        """Holds shared access for the duration of the ``async with`` block."""
        await self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextlib.asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        """Holds exclusive access for the duration of the ``async with`` block."""
        await self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
