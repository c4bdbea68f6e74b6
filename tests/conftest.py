"""Фикстуры тестов: база на mongomock и клиент FastAPI с подмененными зависимостями."""

from datetime import datetime, timezone

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.database import get_db
from app.db.models import categories, products
from app.main import app
from app.services.storage_service import StorageService, get_storage


@pytest.fixture
def db():
    return mongomock.MongoClient()["next-shop-test"]


@pytest.fixture
def test_settings():
    return Settings(
        S3_BUCKET_NAME="product-images",
        S3_ENDPOINT_URL="http://localhost:9000",
        S3_PUBLIC_URL="https://cdn.example.com/product-images",
        AWS_ACCESS_KEY_ID="test-key",
        AWS_SECRET_ACCESS_KEY="test-secret",
    )


@pytest.fixture
def storage(test_settings):
    return StorageService(test_settings)


@pytest.fixture(name="client")
def client_fixture(db, storage):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_category(db):
    def _add(name, slug, description=None):
        now = datetime.now(timezone.utc)
        doc = {"name": name, "slug": slug, "createdAt": now, "updatedAt": now}
        if description:
            doc["description"] = description
        return categories(db).insert_one(doc).inserted_id

    return _add


@pytest.fixture
def add_product(db):
    def _add(name, slug, category_ids, price=10.0, stock=5, description="", **extra):
        now = datetime.now(timezone.utc)
        doc = {
            "name": name,
            "slug": slug,
            "description": description,
            "categoryIds": list(category_ids),
            "price": price,
            "stock": stock,
            "images": [],
            "options": [],
            "variants": [],
            "createdAt": now,
            "updatedAt": now,
            **extra,
        }
        return products(db).insert_one(doc).inserted_id

    return _add
