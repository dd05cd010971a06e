# storefront/data/models/cart.py
from sqlalchemy import Column, String, JSON

from storefront.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(String(64), primary_key=True)
    # one cart per user
    user_id = Column(String(64), nullable=False, unique=True, index=True)

    # product snapshots, in insertion order
    products = Column(JSON, nullable=False, default=list)
