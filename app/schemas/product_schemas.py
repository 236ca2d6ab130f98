from pydantic import BaseModel, Field
from typing import Annotated, Optional, List

from app.models.product import Product

# MongoDB stores integers as 8-byte BSON ints
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

Int64 = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class ProductRequest(BaseModel):
    """Incoming product; which fields are required depends on the operation."""

    id: Optional[Int64] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[Int64] = None

    def to_product(self) -> Product:
        return Product(**self.model_dump())

    def has_create_fields(self) -> bool:
        return (
            self.id is not None
            and self.id != 0
            and self.name is not None
            and self.price is not None
            and self.quantity is not None
        )


class ProductResponse(BaseModel):
    id: Optional[int]
    name: Optional[str]
    description: Optional[str]
    price: Optional[float]
    quantity: Optional[int]

    class Config:
        from_attributes = True

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls.model_validate(product)


class SummaryResponse(BaseModel):
    created: int = 0
    updated: int = 0
    duplicates: int = 0
    total: int = 0


class CreateProductsResponse(BaseModel):
    summary: SummaryResponse
    items: List[ProductResponse]


class UpsertProductResponse(BaseModel):
    summary: SummaryResponse
    item: ProductResponse


class AvailabilityResponse(BaseModel):
    id: int
    requested: int
    available: bool
    available_quantity: int = Field(alias="availableQuantity")

    class Config:
        populate_by_name = True
