"""
Tests for the reader/writer lock.
"""

import threading
import time

import pytest

from src.utils.locks import ReadWriteLock


@pytest.mark.unit
class TestReadWriteLock:
    """Shared and exclusive access."""

    def test_readers_share(self):
        """Several readers hold the lock at once."""
        lock = ReadWriteLock()
        inside = threading.Barrier(3, timeout=2)

        def reader():
            with lock.read():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert not inside.broken

    def test_writer_excludes_readers(self):
        """A reader waits until the writer releases."""
        lock = ReadWriteLock()
        events: list[str] = []

        def reader():
            with lock.read():
                events.append("read")

        with lock.write():
            thread = threading.Thread(target=reader)
            thread.start()
            time.sleep(0.05)
            events.append("write done")
        thread.join(timeout=5)

        assert events == ["write done", "read"]

    def test_writers_are_exclusive(self):
        """Concurrent writers never overlap."""
        lock = ReadWriteLock()
        counter = {"value": 0, "max_active": 0, "active": 0}

        def writer():
            for _ in range(200):
                with lock.write():
                    counter["active"] += 1
                    counter["max_active"] = max(counter["max_active"], counter["active"])
                    counter["value"] += 1
                    counter["active"] -= 1

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert counter["value"] == 800
        assert counter["max_active"] == 1

    def test_released_after_exception(self):
        """Leaving a block by exception releases the lock."""
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            with lock.write():
                raise RuntimeError("boom")

        with lock.write():
            pass
