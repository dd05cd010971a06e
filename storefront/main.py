# storefront/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from storefront.api import register_api
from storefront.data.seed import seed
from storefront.repos import Storage, build_storage
from storefront.services.lock_service import LockService, build_lock_service
from storefront.utils.ids import IdGenerator
from storefront.utils.logging import get_logger, setup_logging
from storefront.utils.settings import SEED_SAMPLE_PRODUCTS

setup_logging()
logger = get_logger(__name__)


def create_app(
    storage: Storage | None = None,
    lock_service: LockService | None = None,
    ids: IdGenerator | None = None,
    seed_products: bool = SEED_SAMPLE_PRODUCTS,
) -> FastAPI:
    """
    Builds the application around one storage context. The storage is
    opened on startup and closed on shutdown.
    """
    storage = storage or build_storage(ids=ids)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Opening storage {type(storage).__name__}")
        storage.open()
        if seed_products:
            seed(storage)
        try:
            yield
        finally:
            storage.close()
            logger.info("Storage closed")

    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.lock_service = lock_service or build_lock_service()
    app.state.ids = ids or storage.ids

    register_api(app)
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
