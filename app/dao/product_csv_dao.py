import csv
import os
from typing import Dict, Iterable, List, Optional
from app.core.exceptions import StorageError
from app.models.product import Product
import structlog

logger = structlog.get_logger()

HEADER = ["id", "name", "description", "price", "quantity"]


def _cell(row: List[str], idx: int) -> str:
    return row[idx] if idx < len(row) else ""


def _parse_int(value: str) -> Optional[int]:
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_float(value: str) -> Optional[float]:
    value = value.strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_row(row: List[str]) -> Product:
    """Build a product from a CSV row; unparseable numbers become None."""
    return Product(
        id=_parse_int(_cell(row, 0)),
        name=_cell(row, 1),
        description=_cell(row, 2),
        price=_parse_float(_cell(row, 3)),
        quantity=_parse_int(_cell(row, 4)),
    )


def format_row(product: Product) -> List[str]:
    return [
        str(product.id if product.id is not None else 0),
        product.name or "",
        product.description or "",
        str(float(product.price) if product.price is not None else 0.0),
        str(product.quantity if product.quantity is not None else 0),
    ]


class ProductCsvDAO:
    """Products stored in a single CSV file.

    Every operation reads the whole file and every write rewrites it. There is
    no locking: concurrent writers can lose updates.
    """

    def __init__(self, csv_path: str):
        self.csv_path = csv_path

    def read_all_products(self) -> List[Product]:
        if not os.path.exists(self.csv_path):
            logger.debug("CSV not found, returning empty list", path=os.path.abspath(self.csv_path))
            return []

        products = []
        try:
            with open(self.csv_path, newline="", encoding="utf-8") as handle:
                reader = csv.reader(handle)
                next(reader, None)  # header
                for row in reader:
                    if not row:
                        continue
                    products.append(parse_row(row))
        except (OSError, csv.Error) as e:
            logger.error("Failed to read CSV", path=self.csv_path, error=str(e))
            raise StorageError(f"Failed to read CSV: {self.csv_path}", path=self.csv_path) from e

        logger.info("Loaded products from CSV", count=len(products), path=self.csv_path)
        return products

    def upsert_products(self, incoming: Iterable[Product]) -> None:
        self._merge_and_write(incoming, is_patch=False)

    def patch_products(self, patches: Iterable[Product]) -> None:
        self._merge_and_write(patches, is_patch=True)

    def create_only_products(self, to_create: Iterable[Product]) -> int:
        self._ensure_parent_directory()
        id_to_product = self._load_by_id()
        created = 0
        for product in to_create:
            if product is None or product.id is None:
                continue
            if product.id not in id_to_product:
                id_to_product[product.id] = product
                created += 1
        logger.info("Writing products to CSV after create-only", count=len(id_to_product), created=created)
        self.write_all(list(id_to_product.values()))
        return created

    def delete_by_id(self, product_id: int) -> bool:
        products = self.read_all_products()
        kept = [product for product in products if product.id != product_id]
        if len(kept) == len(products):
            logger.debug("No product found to delete", id=product_id)
            return False
        logger.info("Deleting product from CSV", id=product_id, remaining=len(kept))
        self.write_all(kept)
        return True

    def write_all(self, products: List[Product]) -> None:
        self._ensure_parent_directory()
        try:
            with open(self.csv_path, "w", newline="", encoding="utf-8") as handle:
                writer = csv.writer(handle)
                writer.writerow(HEADER)
                for product in products:
                    writer.writerow(format_row(product))
        except (OSError, csv.Error) as e:
            logger.error("Failed to write CSV", path=self.csv_path, error=str(e))
            raise StorageError(f"Failed to write CSV: {self.csv_path}", path=self.csv_path) from e
        logger.debug("Finished writing CSV", path=os.path.abspath(self.csv_path), count=len(products))

    def _load_by_id(self) -> Dict[Optional[int], Product]:
        return {product.id: product for product in self.read_all_products()}

    def _merge_and_write(self, incoming: Iterable[Product], is_patch: bool) -> None:
        self._ensure_parent_directory()
        id_to_product = self._load_by_id()
        for product in incoming:
            if product is None or product.id is None:
                continue
            current = id_to_product.get(product.id)
            if current is not None and is_patch:
                id_to_product[product.id] = current.merge_from(product)
            else:
                id_to_product[product.id] = product
        logger.info(
            "Writing products to CSV",
            count=len(id_to_product),
            operation="patch" if is_patch else "upsert",
        )
        self.write_all(list(id_to_product.values()))

    def _ensure_parent_directory(self) -> None:
        parent = os.path.dirname(os.path.abspath(self.csv_path))
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create directory for CSV", path=parent, error=str(e))
            raise StorageError(f"Failed to create directory for CSV: {parent}", path=parent) from e
