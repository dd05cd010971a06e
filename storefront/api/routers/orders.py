# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_current_user, get_order_service
from storefront.domain.errors import NotFound
from storefront.domain.schemas import OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=List[OrderOut])
def list_orders(
    user: dict = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """
    Orders of the authenticated user, oldest first.
    """
    return service.list_orders(user["id"])


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user: dict = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    try:
        return service.get_order(user["id"], order_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
