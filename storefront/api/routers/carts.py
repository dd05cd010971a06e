# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_cart_service, get_current_user, get_order_service
from storefront.domain.errors import EmptyCart, NotFound
from storefront.domain.schemas import CartOut, OrderOut
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    user: dict = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    try:
        return service.get_cart(user["id"])
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(
    user: dict = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """
    Turns the cart into an order and empties the cart.
    """
    try:
        return service.checkout(user["id"])
    except EmptyCart as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.put("/{product_id}", response_model=CartOut)
def add_to_cart(
    product_id: str,
    user: dict = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    try:
        return service.add_to_cart(user["id"], product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("/{product_id}", response_model=CartOut)
def remove_from_cart(
    product_id: str,
    user: dict = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    try:
        return service.remove_from_cart(user["id"], product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
