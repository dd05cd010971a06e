# storefront/repos/memory.py
import copy
import threading
from typing import Any, Dict, Iterable, List

from storefront.domain.errors import NotFound
from storefront.repos.base import Collection, Record, Storage


class MemoryStorage(Storage):
    """Process-memory backend; the test default."""

    def __init__(self, ids=None):
        super().__init__(ids)
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Record]] = {c: {} for c in Collection.ALL}

    def close(self) -> None:
        with self._lock:
            self._data = {c: {} for c in Collection.ALL}

    def insert(self, collection: str, record: Record) -> Record:
        return self.insert_many(collection, [record])[0]

    def insert_many(self, collection: str, records: Iterable[Record]) -> List[Record]:
        self._check_collection(collection)
        prepared = [self._with_id(copy.deepcopy(r)) for r in records]
        with self._lock:
            table = self._data[collection]
            for rec in prepared:
                table[rec["id"]] = rec
        return copy.deepcopy(prepared)

    def find_all(self, collection: str) -> List[Record]:
        self._check_collection(collection)
        with self._lock:
            return copy.deepcopy(list(self._data[collection].values()))

    def find_by_id(self, collection: str, record_id: str) -> Record:
        self._check_collection(collection)
        with self._lock:
            rec = self._data[collection].get(record_id)
            if rec is None:
                raise NotFound(f"{collection}: {record_id} not found")
            return copy.deepcopy(rec)

    def find_one(self, collection: str, **criteria: Any) -> Record | None:
        self._check_collection(collection)
        with self._lock:
            for rec in self._data[collection].values():
                if self._matches(rec, criteria):
                    return copy.deepcopy(rec)
        return None

    def update(self, collection: str, record_id: str, patch: Record) -> Record:
        self._check_collection(collection)
        with self._lock:
            rec = self._data[collection].get(record_id)
            if rec is None:
                raise NotFound(f"{collection}: {record_id} not found")
            # id is immutable
            rec.update({k: copy.deepcopy(v) for k, v in patch.items() if k != "id"})
            return copy.deepcopy(rec)

    def delete(self, collection: str, record_id: str) -> bool:
        self._check_collection(collection)
        with self._lock:
            if self._data[collection].pop(record_id, None) is None:
                raise NotFound(f"{collection}: {record_id} not found")
        return True
