# Import all models for easy access
from .product import Product, PATCHABLE_FIELDS
from .enums import SortOrder, StorageBackend

__all__ = [
    "Product", "PATCHABLE_FIELDS",
    "SortOrder", "StorageBackend",
]
