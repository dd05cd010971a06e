# import every model so SQLAlchemy registers it in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart import CartModel
from storefront.data.models.order import OrderModel

__all__ = ["UserModel", "ProductModel", "CartModel", "OrderModel"]
