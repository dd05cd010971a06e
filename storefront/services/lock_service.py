import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List

import redis
from redis.exceptions import LockError

from storefront.domain.errors import StorageUnavailable
from storefront.utils.logging import get_logger
from storefront.utils.retry import redis_retry
from storefront.utils.settings import (
    CART_LOCK_TIMEOUT_SECONDS,
    CART_LOCK_TTL_SECONDS,
    LOCK_BACKEND,
    REDIS_URL,
)

logger = get_logger(__name__)


def cart_lock_key(user_id: str) -> str:
    return f"cart:{user_id}:lock"


class LockService(ABC):
    """
    Per-user serialization of cart mutations.

    ``cart_lock(user_id)`` is a context manager; two holders for the same
    user never overlap. Waiting longer than the configured timeout raises
    StorageUnavailable.
    """

    @abstractmethod
    def cart_lock(self, user_id: str):
        pass


class LocalLockService(LockService):
    """
    One threading.Lock per user, for a single process.

    An entry lives only while someone holds or waits for it, so the
    table does not grow with the number of users ever seen.
    """

    def __init__(self, timeout: float = CART_LOCK_TIMEOUT_SECONDS):
        self.timeout = timeout
        self._guard = threading.Lock()
        # user_id -> [lock, holders and waiters]
        self._locks: Dict[str, List] = {}

    def _claim(self, user_id: str) -> threading.Lock:
        with self._guard:
            entry = self._locks.setdefault(user_id, [threading.Lock(), 0])
            entry[1] += 1
            return entry[0]

    def _unclaim(self, user_id: str) -> None:
        with self._guard:
            entry = self._locks[user_id]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[user_id]

    @contextmanager
    def cart_lock(self, user_id: str) -> Iterator[None]:
        lock = self._claim(user_id)
        try:
            if not lock.acquire(timeout=self.timeout):
                logger.error(f"Timed out waiting for {cart_lock_key(user_id)}")
                raise StorageUnavailable("Cart is busy, try again")
            try:
                yield
            finally:
                lock.release()
        finally:
            self._unclaim(user_id)


class RedisLockService(LockService):
    """
    Redis lock per user, shared by every API process.

    The lock has a TTL so a crashed holder cannot block the cart forever.
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = CART_LOCK_TTL_SECONDS,
        timeout: float = CART_LOCK_TIMEOUT_SECONDS,
    ):
        self.redis = client or redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.ttl = ttl
        self.timeout = timeout

    @redis_retry()
    def _acquire(self, lock) -> bool:
        return lock.acquire(blocking=True, blocking_timeout=self.timeout)

    @contextmanager
    def cart_lock(self, user_id: str) -> Iterator[None]:
        key = cart_lock_key(user_id)
        lock = self.redis.lock(key, timeout=self.ttl)

        try:
            acquired = self._acquire(lock)
        except redis.RedisError as e:
            logger.error(f"Redis unavailable while locking {key}: {e}")
            raise StorageUnavailable("Lock service unavailable") from e

        if not acquired:
            logger.error(f"Timed out waiting for {key}")
            raise StorageUnavailable("Cart is busy, try again")

        logger.debug(f"Acquired {key}")
        try:
            yield
        finally:
            try:
                lock.release()
            except LockError as e:
                # TTL expired before we finished; someone else may hold it now
                logger.warning(f"Lock {key} expired before release: {e}")


def build_lock_service(backend: str | None = None) -> LockService:
    backend = (backend or LOCK_BACKEND).lower()
    if backend == "redis":
        return RedisLockService()
    if backend == "local":
        return LocalLockService()
    raise ValueError(f"Unknown lock backend: {backend}")
