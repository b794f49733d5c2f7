import asyncio

import pytest

from findapi.infrastructure.concurrency.rw_lock import ReaderWriterLock


async def _spin(times: int = 5) -> None:
    for _ in range(times):
        await asyncio.sleep(0)


def test_readers_share_access():
    async def scenario():
        lock = ReaderWriterLock()
        async with lock.read():
            async with lock.read():
                assert lock.readers == 2
        assert not lock.locked()

    asyncio.run(scenario())


def test_writer_excludes_readers():
    async def scenario():
        lock = ReaderWriterLock()
        order = []

        async def reader():
            async with lock.read():
                order.append("read")

        await lock.acquire_write()
        task = asyncio.create_task(reader())
        await _spin()
        assert order == []
        lock.release_write()
        await task
        assert order == ["read"]

    asyncio.run(scenario())


def test_waiting_writer_blocks_new_readers():
    async def scenario():
        lock = ReaderWriterLock()
        order = []

        async def writer():
            async with lock.write():
                order.append("write")

        async def late_reader():
            async with lock.read():
                order.append("late-read")

        await lock.acquire_read()
        writer_task = asyncio.create_task(writer())
        await _spin()
        reader_task = asyncio.create_task(late_reader())
        await _spin()
        assert order == []

        lock.release_read()
        await asyncio.gather(writer_task, reader_task)
        assert order == ["write", "late-read"]

    asyncio.run(scenario())


def test_cancelled_waiting_writer_releases_parked_readers():
    async def scenario():
        lock = ReaderWriterLock()
        order = []

        async def reader():
            async with lock.read():
                order.append("read")

        await lock.acquire_read()
        writer_task = asyncio.create_task(lock.acquire_write())
        await _spin()
        reader_task = asyncio.create_task(reader())
        await _spin()

        writer_task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await writer_task
        await reader_task

        assert order == ["read"]
        lock.release_read()
        assert not lock.locked()

    asyncio.run(scenario())


def test_lock_released_when_holder_is_cancelled():
    async def scenario():
        lock = ReaderWriterLock()
        entered = asyncio.Event()

        async def holder():
            async with lock.write():
                entered.set()
                await asyncio.sleep(3600)

        task = asyncio.create_task(holder())
        await entered.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert not lock.locked()
        async with lock.read():
            pass

    asyncio.run(scenario())


def test_unmatched_release_raises():
    lock = ReaderWriterLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
