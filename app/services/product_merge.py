"""
Created/updated/duplicate classification shared by both product services.

Nothing here touches storage: callers look up the existing records, pass them
in, and persist whatever comes back.
"""

from typing import Dict, Iterable, List, Set, Tuple

from app.models.product import Product
from app.schemas.product_schemas import SummaryResponse


def split_new(products: List[Product], existing_ids: Set[int]) -> Tuple[List[Product], SummaryResponse]:
    """Keep only products whose id is not stored yet.

    A repeated id inside the same batch counts as a duplicate after its first
    occurrence.
    """
    seen = set(existing_ids)
    new_products = []
    for product in products:
        if product.id in seen:
            continue
        seen.add(product.id)
        new_products.append(product)
    created = len(new_products)
    summary = SummaryResponse(
        created=created,
        updated=0,
        duplicates=len(products) - created,
        total=len(products),
    )
    return new_products, summary


def classify_replacements(products: List[Product], existing_ids: Set[int]) -> SummaryResponse:
    updated = sum(1 for product in products if product.id in existing_ids)
    return SummaryResponse(
        created=len(products) - updated,
        updated=updated,
        duplicates=0,
        total=len(products),
    )


def merge_patches(
    existing: Iterable[Product], patches: List[Product]
) -> Tuple[Dict[int, Product], SummaryResponse]:
    """Apply each patch onto the stored record with the same id.

    Returns every touched record keyed by id, in patch order. A patch whose id
    is unknown becomes a new record as-is.
    """
    stored = {product.id: product for product in existing}
    merged: Dict[int, Product] = {}
    created = updated = 0
    for patch in patches:
        current = merged.get(patch.id) or stored.get(patch.id)
        if current is not None:
            merged[patch.id] = current.merge_from(patch)
            updated += 1
        else:
            merged[patch.id] = patch
            created += 1
    summary = SummaryResponse(created=created, updated=updated, duplicates=0, total=len(patches))
    return merged, summary
