# storefront/api/deps.py
from fastapi import Depends, Header, HTTPException, Request

from storefront.domain.errors import Unauthorized
from storefront.repos.base import Record, Storage
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_lock_service(request: Request) -> LockService:
    return request.app.state.lock_service


def get_user_service(request: Request, storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(storage, ids=request.app.state.ids)


def get_catalog_service(request: Request, storage: Storage = Depends(get_storage)) -> CatalogService:
    return CatalogService(storage, ids=request.app.state.ids)


def get_cart_service(
    request: Request,
    storage: Storage = Depends(get_storage),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(storage, lock_service, ids=request.app.state.ids)


def get_order_service(
    request: Request,
    storage: Storage = Depends(get_storage),
    lock_service: LockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(storage, lock_service, ids=request.app.state.ids)


def get_current_user(
    x_user_id: str | None = Header(None),
    users: UserService = Depends(get_user_service),
) -> Record:
    """Bearer auth: the x-user-id header must hold a registered user id."""
    try:
        return users.authenticate(x_user_id)
    except Unauthorized as e:
        raise HTTPException(status_code=401, detail=e.message)
