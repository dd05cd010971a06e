from typing import Any, Dict

from storefront.domain.errors import NotFound
from storefront.repos.base import Collection, Record, Storage
from storefront.services.lock_service import LockService
from storefront.utils.ids import IdGenerator
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SNAPSHOT_FIELDS = ("id", "name", "description", "category", "price")


def product_snapshot(product: Record) -> Dict[str, Any]:
    """Copy of the product as it was when it entered the cart."""
    return {k: product.get(k) for k in SNAPSHOT_FIELDS}


class CartService:
    """
    Per-user cart. Commands (add, remove) run under the user's cart lock,
    so concurrent requests for one user cannot lose an update; the query
    (get) reads without locking.
    """

    def __init__(self, storage: Storage, lock_service: LockService, ids: IdGenerator | None = None):
        self.storage = storage
        self.lock_service = lock_service
        self.ids = ids or storage.ids

    # query
    def get_cart(self, user_id: str) -> Record:
        cart = self.find_cart(user_id)
        if cart is None:
            raise NotFound(f"User {user_id} has no cart")
        return cart

    def find_cart(self, user_id: str) -> Record | None:
        return self.storage.find_one(Collection.CARTS, user_id=user_id)

    # commands
    def add_to_cart(self, user_id: str, product_id: str) -> Record:
        product = self.storage.find_by_id(Collection.PRODUCTS, product_id)

        with self.lock_service.cart_lock(user_id):
            cart = self.find_cart(user_id)

            if cart is None:
                cart = self.storage.insert(
                    Collection.CARTS,
                    {"id": self.ids(), "user_id": user_id, "products": []},
                )
                logger.info(f"Created cart {cart['id']} for user {user_id}")

            products = cart["products"] + [product_snapshot(product)]
            updated = self.storage.update(Collection.CARTS, cart["id"], {"products": products})

        logger.info(f"Product {product_id} added to cart {cart['id']}, {len(products)} item(s)")
        return updated

    def remove_from_cart(self, user_id: str, product_id: str) -> Record:
        with self.lock_service.cart_lock(user_id):
            cart = self.get_cart(user_id)

            remaining = [p for p in cart["products"] if p.get("id") != product_id]
            if len(remaining) == len(cart["products"]):
                # nothing to remove
                return cart

            updated = self.storage.update(Collection.CARTS, cart["id"], {"products": remaining})

        logger.info(
            f"Product {product_id} removed from cart {cart['id']}, "
            f"{len(cart['products']) - len(remaining)} entries dropped"
        )
        return updated
