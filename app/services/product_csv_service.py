from typing import List, Optional, Tuple
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.dao.product_csv_dao import ProductCsvDAO
from app.models.enums import SortOrder
from app.models.product import Product
from app.schemas.product_schemas import SummaryResponse
from app.services import product_merge
import structlog

logger = structlog.get_logger()


def _price_sort_key(product: Product):
    # missing prices sort first ascending, like MongoDB nulls; ties break on id
    return (product.price is not None, product.price or 0.0, product.id or 0)


class ProductCsvService:
    """Same operations as ProductService, synchronous, over a CSV file."""

    def __init__(self, csv_path: Optional[str] = None):
        self.csv_dao = ProductCsvDAO(csv_path or settings.csv_path)

    def get_all_products(self) -> List[Product]:
        return self.csv_dao.read_all_products()

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        for product in self.csv_dao.read_all_products():
            if product.id == product_id:
                return product
        return None

    def get_required_product_by_id(self, product_id: int) -> Product:
        product = self.get_product_by_id(product_id)
        if product is None:
            logger.warning("Product not found", product_id=product_id)
            raise NotFoundError(f"Product id {product_id} doesn't exist")
        return product

    def _existing_ids(self) -> set:
        return {product.id for product in self.csv_dao.read_all_products()}

    def create_products(self, products: List[Product]) -> SummaryResponse:
        new_products, summary = product_merge.split_new(products, self._existing_ids())
        if new_products:
            self.csv_dao.create_only_products(new_products)
        logger.info(
            "Create products finished",
            created=summary.created,
            duplicates=summary.duplicates,
            total=summary.total,
        )
        return summary

    def update_products(self, products: List[Product]) -> SummaryResponse:
        summary = product_merge.classify_replacements(products, self._existing_ids())
        self.csv_dao.upsert_products(products)
        logger.info("Update products finished", created=summary.created, updated=summary.updated)
        return summary

    def patch_products(self, patches: List[Product]) -> Tuple[SummaryResponse, List[Product]]:
        merged, summary = product_merge.merge_patches(self.csv_dao.read_all_products(), patches)
        # merged records are complete rows
        self.csv_dao.upsert_products(list(merged.values()))
        logger.info("Patch products finished", created=summary.created, updated=summary.updated)
        return summary, list(merged.values())

    def delete_by_id_or_throw(self, product_id: int) -> None:
        if not self.csv_dao.delete_by_id(product_id):
            logger.warning("Product not found for deletion", product_id=product_id)
            raise NotFoundError("Requested id not found for deletion")

    def is_available(self, product_id: int, count: int) -> bool:
        product = self.get_required_product_by_id(product_id)
        return product.quantity is not None and product.quantity >= count

    def get_available_quantity(self, product_id: int) -> int:
        product = self.get_required_product_by_id(product_id)
        return product.quantity if product.quantity is not None else 0

    def get_all_sorted_by_price(self, order: SortOrder = SortOrder.ASC) -> List[Product]:
        return sorted(
            self.csv_dao.read_all_products(),
            key=_price_sort_key,
            reverse=order == SortOrder.DESC,
        )


def get_product_csv_service() -> ProductCsvService:
    return ProductCsvService(settings.csv_path)
