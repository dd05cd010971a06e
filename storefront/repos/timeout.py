# storefront/repos/timeout.py
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Any, Iterable, List

from storefront.domain.errors import StorageUnavailable
from storefront.repos.base import Record, Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class TimeoutStorage(Storage):
    """
    Bounds every call of the wrapped backend.

    The call runs on a small worker pool and the caller waits at most
    ``timeout`` seconds; after that StorageUnavailable is raised. A call
    that hangs keeps its worker busy but no longer blocks the request.
    """

    def __init__(self, inner: Storage, timeout: float, max_workers: int = 8):
        super().__init__(inner.ids)
        self.inner = inner
        self.timeout = timeout
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="storage")

    def _call(self, name: str, *args: Any, **kwargs: Any):
        future = self._pool.submit(getattr(self.inner, name), *args, **kwargs)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout as e:
            future.cancel()
            logger.error(f"Storage call {name} timed out after {self.timeout}s")
            raise StorageUnavailable(f"Storage call {name} timed out") from e

    def open(self) -> None:
        self._call("open")

    def close(self) -> None:
        try:
            self._call("close")
        finally:
            self._pool.shutdown(wait=False, cancel_futures=True)

    def insert(self, collection: str, record: Record) -> Record:
        return self._call("insert", collection, record)

    def insert_many(self, collection: str, records: Iterable[Record]) -> List[Record]:
        return self._call("insert_many", collection, list(records))

    def find_all(self, collection: str) -> List[Record]:
        return self._call("find_all", collection)

    def find_by_id(self, collection: str, record_id: str) -> Record:
        return self._call("find_by_id", collection, record_id)

    def find_one(self, collection: str, **criteria: Any) -> Record | None:
        return self._call("find_one", collection, **criteria)

    def update(self, collection: str, record_id: str, patch: Record) -> Record:
        return self._call("update", collection, record_id, patch)

    def delete(self, collection: str, record_id: str) -> bool:
        return self._call("delete", collection, record_id)
