from typing import List, Optional, Tuple
from app.core.exceptions import NotFoundError
from app.dao.product_dao import ProductDAO, product_dao
from app.models.enums import SortOrder
from app.models.product import Product
from app.schemas.product_schemas import SummaryResponse
from app.services import product_merge
import structlog

logger = structlog.get_logger()


class ProductService:
    """Product operations backed by MongoDB."""

    def __init__(self, dao: Optional[ProductDAO] = None):
        self.product_dao = dao or product_dao

    async def get_all_products(self) -> List[Product]:
        products = await self.product_dao.get_multi()
        logger.info("Retrieved products", count=len(products))
        return products

    async def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return await self.product_dao.get_by_id(product_id)

    async def get_required_product_by_id(self, product_id: int) -> Product:
        product = await self.product_dao.get_by_id(product_id)
        if product is None:
            logger.warning("Product not found", product_id=product_id)
            raise NotFoundError(f"Product id {product_id} doesn't exist")
        return product

    async def create_products(self, products: List[Product]) -> SummaryResponse:
        existing = await self.product_dao.get_by_ids({product.id for product in products})
        new_products, summary = product_merge.split_new(products, {product.id for product in existing})
        if new_products:
            await self.product_dao.create_many(new_products)
        logger.info(
            "Create products finished",
            created=summary.created,
            duplicates=summary.duplicates,
            total=summary.total,
        )
        return summary

    async def update_products(self, products: List[Product]) -> SummaryResponse:
        """Full replace: every incoming product overwrites the stored one."""
        existing = await self.product_dao.get_by_ids({product.id for product in products})
        summary = product_merge.classify_replacements(products, {product.id for product in existing})
        await self.product_dao.upsert_many(products)
        logger.info("Update products finished", created=summary.created, updated=summary.updated)
        return summary

    async def patch_products(self, patches: List[Product]) -> Tuple[SummaryResponse, List[Product]]:
        existing = await self.product_dao.get_by_ids({patch.id for patch in patches})
        merged, summary = product_merge.merge_patches(existing, patches)
        await self.product_dao.upsert_many(list(merged.values()))
        logger.info("Patch products finished", created=summary.created, updated=summary.updated)
        return summary, list(merged.values())

    async def delete_by_id_or_throw(self, product_id: int) -> None:
        deleted = await self.product_dao.delete(id=product_id)
        if not deleted:
            logger.warning("Product not found for deletion", product_id=product_id)
            raise NotFoundError("Requested id not found for deletion")

    async def is_available(self, product_id: int, count: int) -> bool:
        product = await self.get_required_product_by_id(product_id)
        return product.quantity is not None and product.quantity >= count

    async def get_available_quantity(self, product_id: int) -> int:
        product = await self.get_required_product_by_id(product_id)
        return product.quantity if product.quantity is not None else 0

    async def get_all_sorted_by_price(self, order: SortOrder = SortOrder.ASC) -> List[Product]:
        return await self.product_dao.get_sorted_by_price(order)


product_service = ProductService()
