# storefront/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile

from storefront.api.deps import get_catalog_service
from storefront.domain.errors import FeedError, NotFound
from storefront.domain.schemas import ProductIn, ProductOut, ProductPatch
from storefront.services.catalog_service import CatalogService, parse_csv_feed
from storefront.services.feed_client import FeedClient

router = APIRouter(prefix="/products", tags=["products"])


def get_feed_client() -> FeedClient:
    return FeedClient()


@router.get("", response_model=List[ProductOut])
def list_products(service: CatalogService = Depends(get_catalog_service)):
    return service.list_products()


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, service: CatalogService = Depends(get_catalog_service)):
    return service.create_product(
        name=payload.name,
        description=payload.description,
        category=payload.category,
        price=payload.price,
    )


@router.post("/import", response_model=List[ProductOut], status_code=201)
def import_products(
    file: Optional[UploadFile] = File(None),
    source_url: Optional[str] = Query(None, description="URL of a CSV feed to download"),
    service: CatalogService = Depends(get_catalog_service),
    feed_client: FeedClient = Depends(get_feed_client),
):
    """
    Appends every parsable row of a CSV feed (name,description,category,price)
    to the catalog, either from an uploaded file or downloaded from source_url.
    """
    if file is None and not source_url:
        raise HTTPException(status_code=422, detail="Upload a CSV file or pass source_url")

    try:
        if file is not None:
            source = file.filename or "upload"
            text = file.file.read().decode("utf-8")
        else:
            source = source_url
            text = feed_client.fetch_csv(source_url)
        return service.import_products(parse_csv_feed(text), source=source)
    except UnicodeDecodeError:
        raise HTTPException(status_code=500, detail="Feed is not valid UTF-8")
    except FeedError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    try:
        return service.get_product(product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    payload: ProductPatch,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return service.update_product(product_id, payload.model_dump(exclude_unset=True))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    try:
        service.delete_product(product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    return Response(status_code=204)
