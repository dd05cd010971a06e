from sqlalchemy import Column, String, Text, Float

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    price = Column(Float, nullable=False)
