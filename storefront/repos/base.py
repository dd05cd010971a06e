# storefront/repos/base.py
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

from storefront.utils.ids import IdGenerator, uuid_ids

Record = Dict[str, Any]


class Collection:
    USERS = "users"
    PRODUCTS = "products"
    CARTS = "carts"
    ORDERS = "orders"

    ALL = (USERS, PRODUCTS, CARTS, ORDERS)


class Storage(ABC):
    """
    Uniform record store over the four named collections.

    Records are plain dicts with an ``id`` key. Implementations hand out
    copies, never their internal objects. ``NotFound`` is raised for
    missing ids and ``StorageUnavailable`` when the medium fails.
    """

    def __init__(self, ids: IdGenerator | None = None):
        self.ids = ids or uuid_ids

    def open(self) -> None:
        """Acquire the backing medium. Called once at application startup."""

    def close(self) -> None:
        """Release the backing medium. Called once at application shutdown."""

    @abstractmethod
    def insert(self, collection: str, record: Record) -> Record:
        pass

    @abstractmethod
    def insert_many(self, collection: str, records: Iterable[Record]) -> List[Record]:
        """Stores every record or none of them."""

    @abstractmethod
    def find_all(self, collection: str) -> List[Record]:
        pass

    @abstractmethod
    def find_by_id(self, collection: str, record_id: str) -> Record:
        pass

    @abstractmethod
    def find_one(self, collection: str, **criteria: Any) -> Record | None:
        pass

    @abstractmethod
    def update(self, collection: str, record_id: str, patch: Record) -> Record:
        pass

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> bool:
        pass

    # helpers shared by the backends
    @staticmethod
    def _check_collection(collection: str) -> None:
        if collection not in Collection.ALL:
            raise ValueError(f"Unknown collection: {collection}")

    def _with_id(self, record: Record) -> Record:
        new = dict(record)
        if not new.get("id"):
            new["id"] = self.ids()
        return new

    @staticmethod
    def _matches(record: Record, criteria: Dict[str, Any]) -> bool:
        return all(record.get(k) == v for k, v in criteria.items())
