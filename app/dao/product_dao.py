from typing import List
from pymongo import ASCENDING, DESCENDING
from app.core.config import settings
from app.core.database import get_collection
from app.dao.base_dao import BaseDAO
from app.models.enums import SortOrder
from app.models.product import Product
import structlog

logger = structlog.get_logger()


def _products_collection():
    return get_collection(settings.mongo_products_collection)


class ProductDAO(BaseDAO[Product]):
    def __init__(self, collection_factory=_products_collection):
        super().__init__(Product, collection_factory)

    async def get_sorted_by_price(self, order: SortOrder = SortOrder.ASC) -> List[Product]:
        direction = DESCENDING if order == SortOrder.DESC else ASCENDING
        try:
            return await self.get_multi(sort=[("price", direction), ("_id", direction)])
        except Exception as e:
            logger.error("Error getting products sorted by price", order=order.value, error=str(e))
            raise


product_dao = ProductDAO()
