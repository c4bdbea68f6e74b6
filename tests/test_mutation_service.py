from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from app.db.models import categories, products
from app.schemas.form import FormInput
from app.schemas.form_state import FailureKind
from app.services import mutation_service


@pytest.fixture
def clock(monkeypatch):
    """Подменяет текущее время, чтобы createdAt и updatedAt были предсказуемы."""
    moments = []

    def set_time(*values):
        moments.extend(values)

    monkeypatch.setattr(mutation_service, "_now", lambda: moments.pop(0))
    return set_time


def category_form(name="Shoes", slug="shoes", description=""):
    return FormInput.from_mapping({"name": name, "slug": slug, "description": description})


def product_form(category_ids, **overrides):
    data = {
        "name": "Classic Shirt",
        "slug": "classic-shirt",
        "description": "Plain cotton shirt",
        "categoryIds": [str(i) for i in category_ids],
        "price": "19.99",
        "stock": "10",
    }
    data.update(overrides)
    return FormInput.from_mapping(data)


# ==================== КАТЕГОРИИ ====================


def test_create_category(db, clock):
    created = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    clock(created)

    assert mutation_service.create_category(db, category_form()) is None

    doc = categories(db).find_one({"slug": "shoes"})
    assert doc["name"] == "Shoes"
    assert "description" not in doc
    assert doc["createdAt"].replace(tzinfo=None) == created.replace(tzinfo=None)
    assert doc["updatedAt"] == doc["createdAt"]


def test_create_category_name_collision(db):
    assert mutation_service.create_category(db, category_form()) is None

    state = mutation_service.create_category(db, category_form(slug="shoes-2"))
    assert state.kind == FailureKind.COLLISION
    assert state.error == 'Category with name "Shoes" already exists'
    assert state.data["slug"] == "shoes-2"
    assert state.status_code == 409


def test_create_category_slug_collision(db):
    mutation_service.create_category(db, category_form())
    state = mutation_service.create_category(db, category_form(name="Footwear"))
    assert state.error == 'Category with slug "shoes" already exists'


def test_create_category_validation_failure(db):
    state = mutation_service.create_category(db, category_form(slug="Not A Slug"))
    assert state.kind == FailureKind.VALIDATION
    assert state.error.startswith("slug must match")
    assert state.data == {"name": "Shoes", "slug": "Not A Slug", "description": ""}
    assert categories(db).count_documents({}) == 0


def test_update_category_keeps_created_at(db, clock):
    created = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    updated = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)
    clock(created, updated)
    mutation_service.create_category(db, category_form())
    category_id = categories(db).find_one({"slug": "shoes"})["_id"]
    before = categories(db).find_one({"_id": category_id})

    state = mutation_service.update_category(
        db, str(category_id), category_form(slug="sneakers", description="All sneakers")
    )

    assert state is None
    after = categories(db).find_one({"_id": category_id})
    assert after["slug"] == "sneakers"
    assert after["description"] == "All sneakers"
    assert after["createdAt"] == before["createdAt"]
    assert after["updatedAt"] != before["updatedAt"]


def test_update_category_clears_blank_description(db):
    mutation_service.create_category(db, category_form(description="Old text"))
    category_id = categories(db).find_one({"slug": "shoes"})["_id"]

    state = mutation_service.update_category(db, str(category_id), category_form(description=""))

    assert state is None
    assert "description" not in categories(db).find_one({"_id": category_id})


def test_update_category_without_description_field_keeps_it(db):
    mutation_service.create_category(db, category_form(description="Old text"))
    category_id = categories(db).find_one({"slug": "shoes"})["_id"]

    form = FormInput.from_mapping({"name": "Shoes", "slug": "shoes"})
    assert mutation_service.update_category(db, str(category_id), form) is None
    assert categories(db).find_one({"_id": category_id})["description"] == "Old text"


def test_update_category_may_keep_own_name(db):
    mutation_service.create_category(db, category_form())
    category_id = categories(db).find_one({"slug": "shoes"})["_id"]
    assert mutation_service.update_category(db, str(category_id), category_form()) is None


def test_update_category_collides_with_other(db):
    mutation_service.create_category(db, category_form())
    mutation_service.create_category(db, category_form(name="Boots", slug="boots"))
    boots_id = categories(db).find_one({"slug": "boots"})["_id"]

    state = mutation_service.update_category(db, str(boots_id), category_form(name="Boots"))
    assert state.kind == FailureKind.COLLISION
    assert state.error == 'Category with slug "shoes" already exists'


@pytest.mark.parametrize("category_id", [str(ObjectId()), "not-an-id"])
def test_update_category_not_found(db, category_id):
    state = mutation_service.update_category(db, category_id, category_form())
    assert state.kind == FailureKind.NOT_FOUND
    assert state.error == "Category not found"


def test_database_error_is_reported_as_server_error(db, monkeypatch):
    collection = MagicMock()
    collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")
    monkeypatch.setattr(mutation_service, "categories", lambda _db: collection)

    state = mutation_service.create_category(db, category_form())
    assert state.kind == FailureKind.SERVER_ERROR
    assert state.error == mutation_service.SERVER_ERROR_MESSAGE
    assert state.status_code == 500


def test_unique_index_race_is_a_collision(db, monkeypatch):
    collection = MagicMock()
    collection.find_one.return_value = None
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
    monkeypatch.setattr(mutation_service, "categories", lambda _db: collection)

    state = mutation_service.create_category(db, category_form())
    assert state.kind == FailureKind.COLLISION


# ==================== ТОВАРЫ ====================


def test_create_product_with_variants(db, add_category):
    shoes = add_category("Shoes", "shoes")
    form = product_form([shoes, shoes], optionNames=["Size", "Color"], optionValues=["S,M", "Red"])

    assert mutation_service.create_product(db, form) is None

    doc = products(db).find_one({"slug": "classic-shirt"})
    assert doc["categoryIds"] == [shoes]
    assert doc["price"] == 19.99
    assert doc["options"] == [
        {"name": "Size", "values": ["S", "M"]},
        {"name": "Color", "values": ["Red"]},
    ]
    assert [v["optionValues"] for v in doc["variants"]] == [["S", "Red"], ["M", "Red"]]
    assert all(v["price"] == 19.99 and v["stock"] == 10 for v in doc["variants"])


def test_create_product_unknown_category(db, add_category):
    add_category("Shoes", "shoes")
    state = mutation_service.create_product(db, product_form([ObjectId()]))
    assert state.kind == FailureKind.VALIDATION
    assert state.error == "categoryIds must reference existing categories"
    assert products(db).count_documents({}) == 0


def test_create_product_malformed_image_url(db, add_category):
    shoes = add_category("Shoes", "shoes")
    state = mutation_service.create_product(db, product_form([shoes], imageUrls="http://[::1"))
    assert state.kind == FailureKind.VALIDATION
    assert 'imageUrls must contain absolute URLs (was "http://[::1")' in state.error
    assert state.data["imageUrls"] == "http://[::1"
    assert products(db).count_documents({}) == 0


def test_create_product_collision(db, add_category, add_product):
    shoes = add_category("Shoes", "shoes")
    add_product("Classic Shirt", "other-slug", [shoes])

    state = mutation_service.create_product(db, product_form([shoes]))
    assert state.kind == FailureKind.COLLISION
    assert state.error == 'Product with name "Classic Shirt" already exists'


def test_update_product_keeps_matching_variants(db, add_category):
    shoes = add_category("Shoes", "shoes")
    mutation_service.create_product(
        db, product_form([shoes], optionNames="Size", optionValues="S,M")
    )
    product_id = products(db).find_one({"slug": "classic-shirt"})["_id"]
    products(db).update_one(
        {"_id": product_id},
        {"$set": {"variants.0.price": 25.0, "variants.0.sku": "CS-S"}},
    )

    state = mutation_service.update_product(
        db,
        str(product_id),
        product_form([shoes], price="30", optionNames="Size", optionValues="S,L"),
    )

    assert state is None
    doc = products(db).find_one({"_id": product_id})
    assert doc["price"] == 30.0
    assert doc["variants"][0] == {
        "optionValues": ["S"], "price": 25.0, "sku": "CS-S", "stock": 10, "images": [],
    }
    assert doc["variants"][1]["optionValues"] == ["L"]
    assert doc["variants"][1]["price"] == 30.0


def test_update_product_clears_options(db, add_category):
    shoes = add_category("Shoes", "shoes")
    mutation_service.create_product(
        db, product_form([shoes], optionNames="Size", optionValues="S,M")
    )
    product_id = products(db).find_one({"slug": "classic-shirt"})["_id"]

    assert mutation_service.update_product(db, str(product_id), product_form([shoes])) is None

    doc = products(db).find_one({"_id": product_id})
    assert doc["options"] == []
    assert doc["variants"] == []


def test_update_product_not_found(db, add_category):
    shoes = add_category("Shoes", "shoes")
    state = mutation_service.update_product(db, str(ObjectId()), product_form([shoes]))
    assert state.kind == FailureKind.NOT_FOUND
    assert state.error == "Product not found"
