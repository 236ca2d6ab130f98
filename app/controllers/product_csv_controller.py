from fastapi import APIRouter, Body, Depends, Path, Query, Response, status
from fastapi.responses import JSONResponse
from typing import List, Optional, Union
from app.controllers.product_requests import (
    ID,
    ID_AVAILABILITY,
    PRODUCTS_BASE,
    SORTED_PRICE,
    parse_sort_order,
    validate_count,
    validate_create_request,
    validate_patch_request,
)
from app.core.exceptions import NotFoundError
from app.models.enums import SortOrder
from app.schemas.product_schemas import (
    AvailabilityResponse,
    CreateProductsResponse,
    INT64_MAX,
    INT64_MIN,
    ProductRequest,
    ProductResponse,
    UpsertProductResponse,
)
from app.services.product_csv_service import ProductCsvService, get_product_csv_service


# Plain `def` handlers: FastAPI runs them in its threadpool, so the
# file I/O never blocks the event loop.
router = APIRouter(prefix=PRODUCTS_BASE, tags=["Products (CSV)"])


@router.post("", response_model=CreateProductsResponse, status_code=status.HTTP_201_CREATED)
def create_products(
    products: Optional[List[Optional[ProductRequest]]] = Body(default=None),
    service: ProductCsvService = Depends(get_product_csv_service),
):
    """Create new products in the CSV file; existing ids are counted as duplicates"""
    to_create = validate_create_request(products)
    summary = service.create_products(to_create)
    body = CreateProductsResponse(
        summary=summary,
        items=[ProductResponse.from_product(product) for product in to_create],
    )
    if summary.created == 0:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())
    return body


@router.get("", response_model=Union[ProductResponse, List[ProductResponse]])
def get_products(
    id: Optional[int] = Query(default=None, ge=INT64_MIN, le=INT64_MAX),
    service: ProductCsvService = Depends(get_product_csv_service),
):
    if id is None:
        return [ProductResponse.from_product(product) for product in service.get_all_products()]

    product = service.get_product_by_id(id)
    if product is None:
        raise NotFoundError(f"Product id {id} doesn't exist")
    return ProductResponse.from_product(product)


@router.get(SORTED_PRICE, response_model=List[ProductResponse])
def list_sorted_by_price(
    order: str = Query(default=SortOrder.ASC.value),
    service: ProductCsvService = Depends(get_product_csv_service),
):
    products = service.get_all_sorted_by_price(parse_sort_order(order))
    return [ProductResponse.from_product(product) for product in products]


@router.put(ID, response_model=UpsertProductResponse)
def upsert_product(
    id: int = Path(ge=INT64_MIN, le=INT64_MAX),
    payload: Optional[ProductRequest] = Body(default=None),
    service: ProductCsvService = Depends(get_product_csv_service),
):
    patch = validate_patch_request(id, payload)
    summary, merged = service.patch_products([patch])
    return UpsertProductResponse(summary=summary, item=ProductResponse.from_product(merged[0]))


@router.delete(ID, status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    id: int = Path(ge=INT64_MIN, le=INT64_MAX),
    service: ProductCsvService = Depends(get_product_csv_service),
):
    service.delete_by_id_or_throw(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(ID_AVAILABILITY, response_model=AvailabilityResponse)
def check_availability(
    id: int = Path(ge=INT64_MIN, le=INT64_MAX),
    count: int = Query(default=0),
    service: ProductCsvService = Depends(get_product_csv_service),
):
    validate_count(count)
    available_quantity = service.get_available_quantity(id)
    return AvailabilityResponse(
        id=id,
        requested=count,
        available=service.is_available(id, count),
        available_quantity=available_quantity,
    )
