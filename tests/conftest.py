"""Shared fixtures: an in-memory stand-in for the MongoDB collection and
TestClients wired to either storage backend."""

import copy
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from app.controllers import product_controller, product_csv_controller
from app.dao.product_dao import ProductDAO
from app.main import create_app
from app.models.enums import StorageBackend
from app.services.product_csv_service import ProductCsvService
from app.services.product_service import ProductService


def _matches(document, query):
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict) and "$in" in condition:
            if value not in condition["$in"]:
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    def __aiter__(self):
        self._iter = iter(self._documents)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """Implements the subset of AsyncCollection the DAOs call."""

    def __init__(self, documents=None):
        self.documents = {doc["_id"]: copy.deepcopy(doc) for doc in documents or []}
        self.calls = []

    def find(self, query=None, sort=None):
        self.calls.append(("find", query, sort))
        documents = [copy.deepcopy(doc) for doc in self.documents.values() if _matches(doc, query or {})]
        for key, direction in reversed(sort or []):
            # MongoDB orders null/missing before any number
            documents.sort(
                key=lambda doc: (doc.get(key) is not None, doc.get(key) or 0),
                reverse=direction < 0,
            )
        return FakeCursor(documents)

    async def find_one(self, query):
        self.calls.append(("find_one", query))
        for doc in self.documents.values():
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_many(self, documents):
        self.calls.append(("insert_many", documents))
        for doc in documents:
            if doc["_id"] in self.documents:
                raise DuplicateKeyError(f"duplicate key: {doc['_id']}")
            self.documents[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_ids=[doc["_id"] for doc in documents])

    async def bulk_write(self, operations, ordered=True):
        self.calls.append(("bulk_write", operations))
        matched = upserted = 0
        for operation in operations:
            _id = operation._filter["_id"]
            if _id in self.documents:
                matched += 1
            else:
                upserted += 1
            self.documents[_id] = copy.deepcopy(operation._doc)
        return SimpleNamespace(matched_count=matched, upserted_count=upserted)

    async def delete_one(self, query):
        self.calls.append(("delete_one", query))
        for _id, doc in list(self.documents.items()):
            if _matches(doc, query):
                del self.documents[_id]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def product_dao(fake_collection):
    return ProductDAO(collection_factory=lambda: fake_collection)


@pytest.fixture
def mongo_service(product_dao):
    return ProductService(product_dao)


@pytest.fixture
def csv_path(tmp_path):
    return str(tmp_path / "store" / "products.csv")


@pytest.fixture
def csv_service(csv_path):
    return ProductCsvService(csv_path)


@pytest.fixture
def mongo_client(mongo_service):
    app = create_app(StorageBackend.MONGO)
    app.dependency_overrides[product_controller.get_product_service] = lambda: mongo_service
    return TestClient(app)


@pytest.fixture
def csv_client(csv_service):
    app = create_app(StorageBackend.CSV)
    app.dependency_overrides[product_csv_controller.get_product_csv_service] = lambda: csv_service
    return TestClient(app)


@pytest.fixture(params=["mongo", "csv"])
def client(request):
    """The same HTTP contract, once per storage backend."""
    return request.getfixturevalue(f"{request.param}_client")
