# storefront/services/order_service.py
from datetime import datetime, timezone
from typing import List

from storefront.domain.errors import EmptyCart, NotFound
from storefront.repos.base import Collection, Record, Storage
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.utils.ids import IdGenerator
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Checkout and order lookups.
    Kept apart from CartService; the two only share the cart lock.
    """

    def __init__(
        self,
        storage: Storage,
        lock_service: LockService,
        ids: IdGenerator | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.storage = storage
        self.lock_service = lock_service
        self.ids = ids or storage.ids
        self.notification_service = notification_service or NotificationService()

    def checkout(self, user_id: str) -> Record:
        """
        1. Checks the user's cart is not empty
        2. Sums the product prices
        3. Empties the cart (same cart id)
        4. Stores the order; if that fails the cart contents are put back
        5. Queues the order notification

        A failure never leaves both a stored order and a full cart.
        """
        with self.lock_service.cart_lock(user_id):
            cart = self.storage.find_one(Collection.CARTS, user_id=user_id)

            if cart is None or not cart["products"]:
                raise EmptyCart("Cart is empty")

            products = cart["products"]
            total = sum(float(p["price"]) for p in products)

            self.storage.update(Collection.CARTS, cart["id"], {"products": []})

            try:
                order = self.storage.insert(
                    Collection.ORDERS,
                    {
                        "id": self.ids(),
                        "user_id": user_id,
                        "products": products,
                        "total_price": total,
                        "created_at": datetime.now(timezone.utc).isoformat(),
                    },
                )
            except Exception as e:
                logger.error(f"Checkout for {user_id} failed, restoring cart {cart['id']}: {e}")
                self.storage.update(Collection.CARTS, cart["id"], {"products": products})
                raise

        logger.info(f"Order {order['id']} created from cart {cart['id']}, total {total}")

        try:
            self.notification_service.send_order_notification(user_id, order["id"], total)
        except Exception as e:
            # the order is already stored; a broker outage must not fail the checkout
            logger.warning(f"Failed to queue notification for order {order['id']}: {e}")

        return order

    def list_orders(self, user_id: str) -> List[Record]:
        orders = [o for o in self.storage.find_all(Collection.ORDERS) if o["user_id"] == user_id]
        return sorted(orders, key=lambda o: o["created_at"])

    def get_order(self, user_id: str, order_id: str) -> Record:
        order = self.storage.find_by_id(Collection.ORDERS, order_id)

        # do not reveal other users' order ids
        if order["user_id"] != user_id:
            raise NotFound(f"orders: {order_id} not found")

        return order
