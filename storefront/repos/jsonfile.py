# storefront/repos/jsonfile.py
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Iterable, List

from storefront.domain.errors import NotFound, StorageUnavailable
from storefront.repos.base import Record, Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class JsonFileStorage(Storage):
    """
    One JSON array per collection (``products.json``, ``carts.json``, ...).

    Each write replaces the whole file via a temp file and ``os.replace``,
    so a reader never sees a half-written catalog and a failed batch leaves
    the previous file in place.
    """

    def __init__(self, data_dir: str | os.PathLike, ids=None):
        super().__init__(ids)
        self.data_dir = Path(data_dir)
        self._lock = threading.RLock()

    def open(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create data dir {self.data_dir}: {e}") from e
        logger.info(f"JSON storage opened at {self.data_dir}")

    def _path(self, collection: str) -> Path:
        self._check_collection(collection)
        return self.data_dir / f"{collection}.json"

    def _read(self, collection: str) -> List[Record]:
        path = self._path(collection)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise StorageUnavailable(f"Cannot read {collection}") from e

    def _write(self, collection: str, records: List[Record]) -> None:
        path = self._path(collection)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{collection}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Failed to write {path}: {e}")
            raise StorageUnavailable(f"Cannot write {collection}") from e

    def insert(self, collection: str, record: Record) -> Record:
        return self.insert_many(collection, [record])[0]

    def insert_many(self, collection: str, records: Iterable[Record]) -> List[Record]:
        prepared = [self._with_id(r) for r in records]
        with self._lock:
            current = self._read(collection)
            self._write(collection, current + prepared)
        return prepared

    def find_all(self, collection: str) -> List[Record]:
        with self._lock:
            return self._read(collection)

    def find_by_id(self, collection: str, record_id: str) -> Record:
        with self._lock:
            for rec in self._read(collection):
                if rec.get("id") == record_id:
                    return rec
        raise NotFound(f"{collection}: {record_id} not found")

    def find_one(self, collection: str, **criteria: Any) -> Record | None:
        with self._lock:
            for rec in self._read(collection):
                if self._matches(rec, criteria):
                    return rec
        return None

    def update(self, collection: str, record_id: str, patch: Record) -> Record:
        with self._lock:
            records = self._read(collection)
            for rec in records:
                if rec.get("id") == record_id:
                    rec.update({k: v for k, v in patch.items() if k != "id"})
                    self._write(collection, records)
                    return rec
        raise NotFound(f"{collection}: {record_id} not found")

    def delete(self, collection: str, record_id: str) -> bool:
        with self._lock:
            records = self._read(collection)
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                raise NotFound(f"{collection}: {record_id} not found")
            self._write(collection, remaining)
        return True
