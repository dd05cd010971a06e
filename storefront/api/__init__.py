# storefront/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.routers import carts, health, orders, products, users
from storefront.domain.errors import StorageUnavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
    # details stay in the log, the client gets a generic 500
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_api(app: FastAPI) -> None:
    app.add_exception_handler(StorageUnavailable, storage_unavailable_handler)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
