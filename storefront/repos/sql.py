# storefront/repos/sql.py
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterable, List

from sqlalchemy import DateTime, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import Base, make_engine, make_session_factory
from storefront.data.models import CartModel, OrderModel, ProductModel, UserModel
from storefront.domain.errors import NotFound, StorageUnavailable
from storefront.repos.base import Collection, Record, Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MODELS = {
    Collection.USERS: UserModel,
    Collection.PRODUCTS: ProductModel,
    Collection.CARTS: CartModel,
    Collection.ORDERS: OrderModel,
}


class SqlStorage(Storage):
    """
    Relational backend over the SQLAlchemy ORM models.

    One session per call; ``insert_many`` commits a single transaction.
    Any SQLAlchemyError surfaces as StorageUnavailable.
    """

    def __init__(self, url: str | None = None, engine: Engine | None = None, ids=None):
        super().__init__(ids)
        self.engine = engine or make_engine(url)
        self.SessionLocal = make_session_factory(self.engine)

    def open(self) -> None:
        with self._guard("create tables"):
            Base.metadata.create_all(bind=self.engine)
        logger.info(f"SQL storage ready, tables: {list(Base.metadata.tables.keys())}")

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _guard(self, what: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Database error during {what}: {e}")
            raise StorageUnavailable(f"Database error during {what}") from e

    @contextmanager
    def _session(self, what: str):
        with self._guard(what):
            with self.SessionLocal() as db:
                try:
                    yield db
                except Exception:
                    db.rollback()
                    raise

    @staticmethod
    def _model(collection: str):
        Storage._check_collection(collection)
        return MODELS[collection]

    @staticmethod
    def _to_record(obj) -> Record:
        out = {}
        for column in obj.__table__.columns:
            value = getattr(obj, column.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, list):
                value = list(value)
            out[column.name] = value
        return out

    @staticmethod
    def _column_values(model, record: Record) -> Record:
        values = {}
        columns = model.__table__.columns
        for key, value in record.items():
            if key not in columns:
                continue
            if isinstance(columns[key].type, DateTime) and isinstance(value, str):
                value = datetime.fromisoformat(value)
            values[key] = value
        return values

    def _get(self, db: Session, collection: str, record_id: str):
        obj = db.get(self._model(collection), record_id)
        if obj is None:
            raise NotFound(f"{collection}: {record_id} not found")
        return obj

    def insert(self, collection: str, record: Record) -> Record:
        return self.insert_many(collection, [record])[0]

    def insert_many(self, collection: str, records: Iterable[Record]) -> List[Record]:
        model = self._model(collection)
        with self._session(f"insert into {collection}") as db:
            objs = [model(**self._column_values(model, self._with_id(r))) for r in records]
            db.add_all(objs)
            db.commit()
            return [self._to_record(o) for o in objs]

    def find_all(self, collection: str) -> List[Record]:
        model = self._model(collection)
        with self._session(f"select from {collection}") as db:
            return [self._to_record(o) for o in db.execute(select(model)).scalars().all()]

    def find_by_id(self, collection: str, record_id: str) -> Record:
        with self._session(f"get from {collection}") as db:
            return self._to_record(self._get(db, collection, record_id))

    def find_one(self, collection: str, **criteria: Any) -> Record | None:
        model = self._model(collection)
        with self._session(f"find in {collection}") as db:
            stmt = select(model).filter_by(**criteria).limit(1)
            obj = db.execute(stmt).scalar_one_or_none()
            return self._to_record(obj) if obj is not None else None

    def update(self, collection: str, record_id: str, patch: Record) -> Record:
        model = self._model(collection)
        with self._session(f"update {collection}") as db:
            obj = self._get(db, collection, record_id)
            for key, value in self._column_values(model, patch).items():
                if key != "id":
                    setattr(obj, key, value)
            db.commit()
            return self._to_record(obj)

    def delete(self, collection: str, record_id: str) -> bool:
        with self._session(f"delete from {collection}") as db:
            db.delete(self._get(db, collection, record_id))
            db.commit()
        return True
