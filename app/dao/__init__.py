# Export all DAO classes
from .base_dao import BaseDAO
from .product_dao import ProductDAO, product_dao
from .product_csv_dao import ProductCsvDAO

__all__ = [
    "BaseDAO",
    "ProductDAO",
    "product_dao",
    "ProductCsvDAO",
]
