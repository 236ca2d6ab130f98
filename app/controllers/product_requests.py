"""Request checks shared by the MongoDB and CSV product routers."""

from typing import List, Optional

from app.core.exceptions import BadRequestError
from app.models.enums import SortOrder
from app.models.product import Product
from app.schemas.product_schemas import ProductRequest

PRODUCTS_BASE = "/products"
ID = "/{id}"
ID_AVAILABILITY = "/{id}/availability"
SORTED_PRICE = "/sorted/price"


def validate_create_request(products: Optional[List[Optional[ProductRequest]]]) -> List[Product]:
    if not products:
        raise BadRequestError("Body must be a non-empty array of products")
    if any(product is None or not product.has_create_fields() for product in products):
        raise BadRequestError("Each product requires field(s) [id, name, price, quantity]")
    return [product.to_product() for product in products]


def validate_patch_request(product_id: int, payload: Optional[ProductRequest]) -> Product:
    if payload is None:
        raise BadRequestError("Body must be a product object")
    if payload.id is not None and payload.id != product_id:
        raise BadRequestError("Body id must match path id")
    patch = payload.to_product()
    patch.id = product_id
    return patch


def validate_count(count: int) -> None:
    if count <= 0:
        raise BadRequestError("The value of count field must be positive")


def parse_sort_order(order: str) -> SortOrder:
    try:
        return SortOrder(order)
    except ValueError:
        allowed = ", ".join(member.value for member in SortOrder)
        raise BadRequestError(f"order must be one of: {allowed}")
