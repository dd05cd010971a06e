from sqlalchemy import Column, String, DateTime, Float, JSON
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)

    products = Column(JSON, nullable=False, default=list)
    total_price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
