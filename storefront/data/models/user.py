from sqlalchemy import Column, String
from storefront.data.database import Base


class UserModel(Base):
    __tablename__ = "users"
    id = Column(String(64), primary_key=True)
    email = Column(String(320), nullable=False, index=True)
    name = Column(String(100), nullable=False)
