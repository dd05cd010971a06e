# storefront/repos/__init__.py
from storefront.repos.base import Collection, Record, Storage
from storefront.repos.jsonfile import JsonFileStorage
from storefront.repos.memory import MemoryStorage
from storefront.repos.sql import SqlStorage
from storefront.repos.timeout import TimeoutStorage
from storefront.utils import settings
from storefront.utils.ids import IdGenerator


def build_storage(backend: str | None = None, ids: IdGenerator | None = None) -> Storage:
    """Storage selected by STORAGE_BACKEND, bounded by STORAGE_TIMEOUT_SECONDS."""
    backend = (backend or settings.STORAGE_BACKEND).lower()
    if backend == "memory":
        inner = MemoryStorage(ids=ids)
    elif backend == "json":
        inner = JsonFileStorage(settings.DATA_DIR, ids=ids)
    elif backend == "sql":
        inner = SqlStorage(settings.DATABASE_URL, ids=ids)
    else:
        raise ValueError(f"Unknown storage backend: {backend}")
    return TimeoutStorage(inner, timeout=settings.STORAGE_TIMEOUT_SECONDS)


__all__ = [
    "Collection",
    "Record",
    "Storage",
    "MemoryStorage",
    "JsonFileStorage",
    "SqlStorage",
    "TimeoutStorage",
    "build_storage",
]
