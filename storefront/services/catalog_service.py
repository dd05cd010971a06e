# storefront/services/catalog_service.py
import csv
import io
import math
from typing import Any, Dict, Iterable, List

from storefront.domain.errors import FeedError
from storefront.repos.base import Collection, Record, Storage
from storefront.utils.ids import IdGenerator
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

FEED_FIELDS = ("name", "description", "category", "price")


def parse_csv_feed(text: str) -> List[Dict[str, str]]:
    """
    Rows of a CSV feed with a header line. Column names are matched
    case-insensitively; a feed missing one of FEED_FIELDS is rejected.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    header = [h.strip().lower() for h in (reader.fieldnames or [])]
    missing = [f for f in FEED_FIELDS if f not in header]
    if missing:
        raise FeedError(f"Feed is missing columns: {', '.join(missing)}")

    try:
        return [
            # extra cells land under the None key and are dropped
            {k.strip().lower(): (v or "").strip() for k, v in row.items() if k is not None}
            for row in reader
        ]
    except csv.Error as e:
        raise FeedError(f"Malformed feed at line {reader.line_num}: {e}") from e


class CatalogService:
    """
    Product catalog: browsing, single creates and bulk imports.
    """

    def __init__(self, storage: Storage, ids: IdGenerator | None = None):
        self.storage = storage
        self.ids = ids or storage.ids

    # query
    def list_products(self) -> List[Record]:
        return self.storage.find_all(Collection.PRODUCTS)

    def get_product(self, product_id: str) -> Record:
        return self.storage.find_by_id(Collection.PRODUCTS, product_id)

    # commands
    def create_product(self, name: str, description: str, category: str, price: Any) -> Record:
        product = self.storage.insert(
            Collection.PRODUCTS,
            {
                "id": self.ids(),
                "name": name,
                "description": description,
                "category": category,
                "price": price,
            },
        )
        logger.info(f"Created product {product['id']} ({name})")
        return product

    def update_product(self, product_id: str, patch: Dict[str, Any]) -> Record:
        changes = {k: v for k, v in patch.items() if k in FEED_FIELDS and v is not None}
        if not changes:
            return self.get_product(product_id)
        product = self.storage.update(Collection.PRODUCTS, product_id, changes)
        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return product

    def delete_product(self, product_id: str) -> bool:
        self.storage.delete(Collection.PRODUCTS, product_id)
        logger.info(f"Deleted product {product_id}")
        return True

    def import_products(self, rows: Iterable[Dict[str, Any]], source: str = "feed") -> List[Record]:
        """
        Parses every row first, then appends the whole batch in one
        ``insert_many``; a storage failure leaves the catalog as it was.
        Rows with a missing field, an unparsable price or a price that is
        not a finite non-negative number are skipped.
        """
        logger.info(f"Product import from {source} started")

        batch = []
        skipped = 0
        for line_no, row in enumerate(rows, start=1):
            if any(row.get(f) is None for f in FEED_FIELDS):
                logger.warning(f"Import {source}: row {line_no} skipped, missing fields")
                skipped += 1
                continue
            try:
                price = float(row["price"])
            except (TypeError, ValueError):
                logger.warning(f"Import {source}: row {line_no} skipped, bad price {row['price']!r}")
                skipped += 1
                continue
            if not math.isfinite(price) or price < 0:
                logger.warning(f"Import {source}: row {line_no} skipped, price out of range {row['price']!r}")
                skipped += 1
                continue
            batch.append(
                {
                    "id": self.ids(),
                    "name": row["name"],
                    "description": row["description"],
                    "category": row["category"],
                    "price": price,
                }
            )

        try:
            imported = self.storage.insert_many(Collection.PRODUCTS, batch) if batch else []
        except Exception as e:
            logger.error(f"Product import from {source} failed, nothing imported: {e}")
            raise

        logger.info(f"Product import from {source} finished: {len(imported)} imported, {skipped} skipped")
        return imported
