"""
Служебные операции админки: очистка, индексы, тестовые данные.
"""

import logging
from datetime import datetime, timezone
from typing import List

from pymongo.database import Database

from app.db.indexes import IndexManager, IndexReport
from app.db.models import categories, products
from app.services.variants import generate_variants

logger = logging.getLogger(__name__)


class SeedRefused(Exception):
    """База уже содержит данные, заполнение не выполняется."""


SAMPLE_CATEGORIES = [
    {"name": "T-Shirts", "slug": "t-shirts", "description": "Casual cotton t-shirts"},
    {"name": "Shoes", "slug": "shoes", "description": "Sneakers, boots and sandals"},
    {"name": "Electronics", "slug": "electronics", "description": "Gadgets and accessories"},
    {"name": "Accessories", "slug": "accessories"},
]

SAMPLE_PRODUCTS = [
    {
        "name": "Classic White Shirt",
        "slug": "classic-white-shirt",
        "description": "Plain white cotton shirt with a relaxed fit",
        "categories": ["t-shirts"],
        "price": 19.99,
        "stock": 120,
        "options": [
            {"name": "Size", "values": ["S", "M", "L", "XL"]},
            {"name": "Color", "values": ["White"]},
        ],
    },
    {
        "name": "Graphic Tee",
        "slug": "graphic-tee",
        "description": "Printed t-shirt made from organic cotton",
        "categories": ["t-shirts"],
        "price": 24.5,
        "stock": 8,
        "options": [{"name": "Size", "values": ["S", "M", "L"]}],
    },
    {
        "name": "Running Sneakers",
        "slug": "running-sneakers",
        "description": "Lightweight shoes for daily running",
        "categories": ["shoes"],
        "price": 89.0,
        "stock": 35,
        "options": [
            {"name": "Size", "values": ["40", "41", "42", "43"]},
            {"name": "Color", "values": ["Black", "Blue"]},
        ],
    },
    {
        "name": "Leather Boots",
        "slug": "leather-boots",
        "description": "Waterproof leather boots",
        "categories": ["shoes"],
        "price": 149.99,
        "stock": 5,
    },
    {
        "name": "Wireless Headphones",
        "slug": "wireless-headphones",
        "description": "Bluetooth over-ear headphones with noise cancellation",
        "categories": ["electronics", "accessories"],
        "price": 199.0,
        "stock": 42,
    },
    {
        "name": "Phone Charger",
        "slug": "phone-charger",
        "description": "Fast USB-C charger",
        "categories": ["electronics", "accessories"],
        "price": 15.75,
        "stock": 300,
    },
]


def clear_database(db: Database) -> None:
    """Удалить все категории и товары."""
    removed_products = products(db).delete_many({}).deleted_count
    removed_categories = categories(db).delete_many({}).deleted_count
    logger.info(
        f"Database cleared: {removed_products} products, {removed_categories} categories"
    )


def create_indexes(db: Database) -> IndexReport:
    return IndexManager(db).create_all()


def drop_indexes(db: Database) -> None:
    IndexManager(db).drop_all()


def seed_database(db: Database) -> List[str]:
    """
    Заполнить пустую базу тестовыми категориями и товарами.

    Returns:
        List[str]: Slug созданных товаров

    Raises:
        SeedRefused: Если категории или товары уже есть
    """
    if categories(db).count_documents({}) or products(db).count_documents({}):
        raise SeedRefused("Database already contains data")

    now = datetime.now(timezone.utc)
    category_ids = {}
    for category in SAMPLE_CATEGORIES:
        result = categories(db).insert_one({**category, "createdAt": now, "updatedAt": now})
        category_ids[category["slug"]] = result.inserted_id

    documents = []
    for sample in SAMPLE_PRODUCTS:
        options = sample.get("options", [])
        documents.append(
            {
                "name": sample["name"],
                "slug": sample["slug"],
                "description": sample["description"],
                "categoryIds": [category_ids[slug] for slug in sample["categories"]],
                "price": sample["price"],
                "stock": sample["stock"],
                "images": [],
                "options": options,
                "variants": generate_variants(options, sample["price"], sample["stock"]),
                "createdAt": now,
                "updatedAt": now,
            }
        )
    products(db).insert_many(documents)
    logger.info(f"Database seeded: {len(category_ids)} categories, {len(documents)} products")
    return [doc["slug"] for doc in documents]
