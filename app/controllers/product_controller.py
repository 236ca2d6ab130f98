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
from app.services.product_service import ProductService, product_service

router = APIRouter(prefix=PRODUCTS_BASE, tags=["Products"])


def get_product_service() -> ProductService:
    return product_service


@router.post("", response_model=CreateProductsResponse, status_code=status.HTTP_201_CREATED)
async def create_products(
    products: Optional[List[Optional[ProductRequest]]] = Body(default=None),
    service: ProductService = Depends(get_product_service),
):
    """Create new products; existing ids are counted as duplicates"""
    to_create = validate_create_request(products)
    summary = await service.create_products(to_create)
    body = CreateProductsResponse(
        summary=summary,
        items=[ProductResponse.from_product(product) for product in to_create],
    )
    if summary.created == 0:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())
    return body


@router.get("", response_model=Union[ProductResponse, List[ProductResponse]])
async def get_products(
    id: Optional[int] = Query(default=None, ge=INT64_MIN, le=INT64_MAX),
    service: ProductService = Depends(get_product_service),
):
    """Get all products, or one product when ?id= is given"""
    if id is None:
        products = await service.get_all_products()
        return [ProductResponse.from_product(product) for product in products]

    product = await service.get_product_by_id(id)
    if product is None:
        raise NotFoundError(f"Product id {id} doesn't exist")
    return ProductResponse.from_product(product)


@router.get(SORTED_PRICE, response_model=List[ProductResponse])
async def list_sorted_by_price(
    order: str = Query(default=SortOrder.ASC.value),
    service: ProductService = Depends(get_product_service),
):
    products = await service.get_all_sorted_by_price(parse_sort_order(order))
    return [ProductResponse.from_product(product) for product in products]


@router.put(ID, response_model=UpsertProductResponse)
async def upsert_product(
    id: int = Path(ge=INT64_MIN, le=INT64_MAX),
    payload: Optional[ProductRequest] = Body(default=None),
    service: ProductService = Depends(get_product_service),
):
    """Merge the non-null fields of the body into product {id}"""
    patch = validate_patch_request(id, payload)
    summary, merged = await service.patch_products([patch])
    return UpsertProductResponse(summary=summary, item=ProductResponse.from_product(merged[0]))


@router.delete(ID, status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    id: int = Path(ge=INT64_MIN, le=INT64_MAX),
    service: ProductService = Depends(get_product_service),
):
    await service.delete_by_id_or_throw(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(ID_AVAILABILITY, response_model=AvailabilityResponse)
async def check_availability(
    id: int = Path(ge=INT64_MIN, le=INT64_MAX),
    count: int = Query(default=0),
    service: ProductService = Depends(get_product_service),
):
    validate_count(count)
    available_quantity = await service.get_available_quantity(id)
    available = await service.is_available(id, count)
    return AvailabilityResponse(
        id=id,
        requested=count,
        available=available,
        available_quantity=available_quantity,
    )
