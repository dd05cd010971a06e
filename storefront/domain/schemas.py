# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime


class RegisterIn(BaseModel):
    """Registration payload; content rules live in domain.validation."""

    email: str
    name: str
    password: str


class UserOut(BaseModel):
    id: str
    email: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ProductIn(BaseModel):
    """Schema for creating a product."""

    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    category: str = Field("", description="Product category")
    price: float = Field(..., description="Unit price")


class ProductPatch(BaseModel):
    """Partial update; only the fields that are sent are changed."""

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None


class ProductOut(BaseModel):
    id: str
    name: str
    description: str = ""
    category: str = ""
    price: float

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    id: str
    user_id: str
    products: List[ProductOut]

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: str
    user_id: str
    products: List[ProductOut]
    total_price: float
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
