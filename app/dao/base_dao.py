from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar
from pydantic import BaseModel
from pymongo import ReplaceOne
from pymongo.asynchronous.collection import AsyncCollection
import structlog

logger = structlog.get_logger()

ModelType = TypeVar("ModelType", bound=BaseModel)

SortSpec = Sequence[Tuple[str, int]]


class BaseDAO(Generic[ModelType]):
    """Async CRUD over one MongoDB collection keyed by ``_id``.

    ``collection_factory`` is called on every operation so the shared client
    can be created lazily (and swapped out in tests).
    """

    def __init__(self, model: Type[ModelType], collection_factory: Callable[[], AsyncCollection]):
        self.model = model
        self._collection_factory = collection_factory

    @property
    def collection(self) -> AsyncCollection:
        return self._collection_factory()

    def _to_model(self, document: dict) -> ModelType:
        return self.model.from_document(document)

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        try:
            document = await self.collection.find_one({"_id": id})
            return self._to_model(document) if document else None
        except Exception as e:
            logger.error(f"Error getting {self.model.__name__} by id", id=str(id), error=str(e))
            raise

    async def get_by_ids(self, ids: Iterable[Any]) -> List[ModelType]:
        ids = list(ids)
        if not ids:
            return []
        try:
            cursor = self.collection.find({"_id": {"$in": ids}})
            return [self._to_model(document) async for document in cursor]
        except Exception as e:
            logger.error(f"Error getting {self.model.__name__} by ids", count=len(ids), error=str(e))
            raise

    async def get_multi(self, *, sort: Optional[SortSpec] = None) -> List[ModelType]:
        try:
            cursor = self.collection.find({}, sort=list(sort) if sort else None)
            return [self._to_model(document) async for document in cursor]
        except Exception as e:
            logger.error(f"Error getting multiple {self.model.__name__}", error=str(e))
            raise

    async def create_many(self, objs_in: List[ModelType]) -> int:
        if not objs_in:
            return 0
        try:
            result = await self.collection.insert_many([obj.to_document() for obj in objs_in])
            logger.info(f"Created {self.model.__name__} records", count=len(result.inserted_ids))
            return len(result.inserted_ids)
        except Exception as e:
            logger.error(f"Error creating {self.model.__name__} records", error=str(e))
            raise

    async def upsert_many(self, objs_in: List[ModelType]) -> None:
        """Replace each document by ``_id``, inserting the ones that do not exist."""
        if not objs_in:
            return
        try:
            operations = []
            for obj in objs_in:
                document = obj.to_document()
                operations.append(ReplaceOne({"_id": document["_id"]}, document, upsert=True))
            result = await self.collection.bulk_write(operations, ordered=True)
            logger.info(
                f"Upserted {self.model.__name__} records",
                matched=result.matched_count,
                upserted=result.upserted_count,
            )
        except Exception as e:
            logger.error(f"Error upserting {self.model.__name__} records", error=str(e))
            raise

    async def delete(self, *, id: Any) -> bool:
        try:
            result = await self.collection.delete_one({"_id": id})
            if result.deleted_count:
                logger.info(f"Deleted {self.model.__name__}", id=str(id))
            return result.deleted_count > 0
        except Exception as e:
            logger.error(f"Error deleting {self.model.__name__}", id=str(id), error=str(e))
            raise
