"""Tests for the readers-writer lock guarding catalog caches and resolver state.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time

import pytest

from pluralexengine.core import RWLock

# ============================================================================
# SINGLE THREAD
# ============================================================================


class TestRWLockSingleThread:
    """Test lock bookkeeping and misuse detection within one thread."""

    def test_read_is_reentrant(self) -> None:
        """A thread may nest read locks."""
        lock = RWLock()

        with lock.read(), lock.read():
            assert lock.reader_count == 1
        assert lock.reader_count == 0

    def test_write_sets_active(self) -> None:
        """writer_active reflects the write lock."""
        lock = RWLock()

        with lock.write():
            assert lock.writer_active
        assert not lock.writer_active

    def test_upgrade_rejected(self) -> None:
        """Acquiring write while holding read raises instead of deadlocking."""
        lock = RWLock()

        with lock.read(), pytest.raises(RuntimeError, match="upgrade"), lock.write():
            pass

        assert lock.reader_count == 0

    def test_downgrade_rejected(self) -> None:
        """Acquiring read while holding write raises."""
        lock = RWLock()

        with lock.write(), pytest.raises(RuntimeError, match="holding write lock"), lock.read():
            pass

        assert not lock.writer_active

    def test_write_not_reentrant(self) -> None:
        """Nested write locks raise."""
        lock = RWLock()

        with lock.write(), pytest.raises(RuntimeError, match="not reentrant"), lock.write():
            pass

    def test_lock_released_on_exception(self) -> None:
        """Exceptions inside a block release the lock."""
        lock = RWLock()

        with pytest.raises(KeyError), lock.write():
            raise KeyError("x")

        with lock.read():
            assert not lock.writer_active


# ============================================================================
# CONCURRENCY
# ============================================================================


class TestRWLockConcurrency:
    """Test shared and exclusive access across threads."""

    def test_readers_share(self) -> None:
        """Several threads hold the read lock at once."""
        lock = RWLock()
        inside = threading.Barrier(3, timeout=5)

        def reader() -> None:
            with lock.read():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert not any(thread.is_alive() for thread in threads)

    def test_writer_excludes_readers(self) -> None:
        """A reader waits until the writer releases."""
        lock = RWLock()
        events: list[str] = []
        writer_holding = threading.Event()

        def reader() -> None:
            writer_holding.wait()
            with lock.read():
                events.append("read")

        thread = threading.Thread(target=reader)
        thread.start()
        with lock.write():
            writer_holding.set()
            time.sleep(0.05)
            events.append("write-done")
        thread.join(timeout=5)

        assert events == ["write-done", "read"]

    def test_waiting_writer_blocks_new_readers(self) -> None:
        """Once a writer waits, new readers queue behind it."""
        lock = RWLock()
        events: list[str] = []

        def writer() -> None:
            with lock.write():
                events.append("write")

        def late_reader() -> None:
            with lock.read():
                events.append("late-read")

        with lock.read():
            writer_thread = threading.Thread(target=writer)
            writer_thread.start()
            while not lock._writers_waiting:
                time.sleep(0.001)
            reader_thread = threading.Thread(target=late_reader)
            reader_thread.start()
            time.sleep(0.05)
            assert events == []

        writer_thread.join(timeout=5)
        reader_thread.join(timeout=5)

        assert events == ["write", "late-read"]

    def test_counter_consistency(self) -> None:
        """Writes under the lock are never lost."""
        lock = RWLock()
        counter = {"value": 0}

        def increment() -> None:
            for _ in range(200):
                with lock.write():
                    counter["value"] += 1

        threads = [threading.Thread(target=increment) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter["value"] == 800
