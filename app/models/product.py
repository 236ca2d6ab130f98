from pydantic import BaseModel
from typing import Any, Dict, Optional


PATCHABLE_FIELDS = ("name", "description", "price", "quantity")


class Product(BaseModel):
    """A stored product. ``id`` is the only key and never changes."""

    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None

    def merge_from(self, patch: "Product") -> "Product":
        """Copy every non-null field of ``patch`` (except id) onto this product."""
        for field in PATCHABLE_FIELDS:
            value = getattr(patch, field)
            if value is not None:
                setattr(self, field, value)
        return self

    def to_document(self) -> Dict[str, Any]:
        document = self.model_dump(exclude={"id"})
        document["_id"] = self.id
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Product":
        data = dict(document)
        data["id"] = data.pop("_id", data.get("id"))
        return cls.model_validate(data)
