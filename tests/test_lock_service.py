"""
Cart lock backends. Redis is replaced by a mock client.
"""
import threading
import time
from unittest.mock import MagicMock

import pytest
import redis

from storefront.domain.errors import StorageUnavailable
from storefront.services.lock_service import (
    LocalLockService,
    RedisLockService,
    build_lock_service,
    cart_lock_key,
)


class TestLocalLockService:
    def test_same_user_is_serialized(self):
        locks = LocalLockService(timeout=5)
        events = []

        def worker(name):
            with locks.cart_lock("u-1"):
                events.append(f"{name}-in")
                time.sleep(0.05)
                events.append(f"{name}-out")

        threads = [threading.Thread(target=worker, args=(n,)) for n in ("a", "b")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # no interleaving: every "in" is directly followed by its own "out"
        assert events[0][0] == events[1][0]
        assert events[2][0] == events[3][0]

    def test_different_users_do_not_block(self):
        locks = LocalLockService(timeout=0.1)

        with locks.cart_lock("u-1"):
            with locks.cart_lock("u-2"):
                pass

    def test_timeout_raises_storage_unavailable(self):
        locks = LocalLockService(timeout=0.05)
        held = threading.Event()
        release = threading.Event()

        def holder():
            with locks.cart_lock("u-1"):
                held.set()
                release.wait(2)

        t = threading.Thread(target=holder)
        t.start()
        held.wait(2)
        try:
            with pytest.raises(StorageUnavailable, match="busy"):
                with locks.cart_lock("u-1"):
                    pass
        finally:
            release.set()
            t.join()

    def test_lock_is_released_on_error(self):
        locks = LocalLockService(timeout=0.1)

        with pytest.raises(RuntimeError):
            with locks.cart_lock("u-1"):
                raise RuntimeError("boom")

        with locks.cart_lock("u-1"):
            pass

    def test_lock_table_is_emptied_after_use(self):
        locks = LocalLockService(timeout=0.1)

        for n in range(50):
            with locks.cart_lock(f"u-{n}"):
                pass

        assert locks._locks == {}

    def test_lock_table_is_emptied_after_timeout(self):
        locks = LocalLockService(timeout=0.05)
        held = threading.Event()
        release = threading.Event()

        def holder():
            with locks.cart_lock("u-1"):
                held.set()
                release.wait(2)

        t = threading.Thread(target=holder)
        t.start()
        held.wait(2)
        try:
            with pytest.raises(StorageUnavailable):
                with locks.cart_lock("u-1"):
                    pass
            # the holder still owns its entry
            assert "u-1" in locks._locks
        finally:
            release.set()
            t.join()

        assert locks._locks == {}


class TestRedisLockService:
    def make(self, acquire):
        client = MagicMock()
        lock = MagicMock()
        if isinstance(acquire, Exception):
            lock.acquire.side_effect = acquire
        else:
            lock.acquire.return_value = acquire
        client.lock.return_value = lock
        return RedisLockService(client=client, ttl=30, timeout=1), client, lock

    def test_acquire_and_release(self):
        service, client, lock = self.make(True)

        with service.cart_lock("u-1"):
            lock.release.assert_not_called()

        client.lock.assert_called_once_with(cart_lock_key("u-1"), timeout=30)
        lock.acquire.assert_called_once_with(blocking=True, blocking_timeout=1)
        lock.release.assert_called_once()

    def test_not_acquired_in_time(self):
        service, _, lock = self.make(False)

        with pytest.raises(StorageUnavailable, match="busy"):
            with service.cart_lock("u-1"):
                pass

        lock.release.assert_not_called()

    def test_redis_down_after_retries(self):
        service, _, lock = self.make(redis.ConnectionError("refused"))

        with pytest.raises(StorageUnavailable, match="unavailable"):
            with service.cart_lock("u-1"):
                pass

        assert lock.acquire.call_count == 3

    def test_expired_lock_on_release_is_logged_not_raised(self):
        service, _, lock = self.make(True)
        lock.release.side_effect = redis.exceptions.LockNotOwnedError("expired")

        with service.cart_lock("u-1"):
            pass


def test_build_lock_service():
    assert isinstance(build_lock_service("local"), LocalLockService)
    with pytest.raises(ValueError):
        build_lock_service("zookeeper")
