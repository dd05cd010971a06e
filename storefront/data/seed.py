# storefront/data/seed.py
from storefront.repos.base import Collection, Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_PRODUCTS = [
    {"name": "Keyboard", "description": "Mechanical keyboard", "category": "Peripherals", "price": 199.99},
    {"name": "Mouse", "description": "Wireless mouse", "category": "Peripherals", "price": 49.50},
    {"name": "Monitor", "description": "27 inch IPS monitor", "category": "Displays", "price": 899.00},
]


def seed(storage: Storage) -> int:
    """Inserts the sample products into an empty catalog. Returns how many were added."""
    # not forcing: only seed if empty
    if storage.find_all(Collection.PRODUCTS):
        return 0
    created = storage.insert_many(Collection.PRODUCTS, SAMPLE_PRODUCTS)
    logger.info(f"Seeded {len(created)} sample products")
    return len(created)
