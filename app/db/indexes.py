"""
Управление индексами коллекций.

Создание и удаление индексов уникальности, сортировки и полнотекстового
поиска, а также проверка наличия текстового индекса товаров.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel
from pymongo.database import Database
from pymongo.errors import OperationFailure, PyMongoError

from app.db.models import CATEGORIES, PRODUCTS

logger = logging.getLogger(__name__)

PRODUCT_TEXT_INDEX = "products_text_search"
CATEGORY_TEXT_INDEX = "categories_text_search"

# Код ошибки MongoDB для отсутствующей коллекции
NAMESPACE_NOT_FOUND = 26

INDEXES: Dict[str, List[IndexModel]] = {
    CATEGORIES: [
        IndexModel([("name", ASCENDING)], name="categories_name_unique", unique=True),
        IndexModel([("slug", ASCENDING)], name="categories_slug_unique", unique=True),
        IndexModel([("createdAt", DESCENDING)], name="categories_created_at"),
        IndexModel(
            [("name", TEXT), ("description", TEXT)],
            name=CATEGORY_TEXT_INDEX,
            weights={"name": 10, "description": 2},
        ),
    ],
    PRODUCTS: [
        IndexModel([("name", ASCENDING)], name="products_name_unique", unique=True),
        IndexModel([("slug", ASCENDING)], name="products_slug_unique", unique=True),
        IndexModel([("price", ASCENDING)], name="products_price"),
        IndexModel([("categoryIds", ASCENDING)], name="products_category_ids"),
        IndexModel([("createdAt", DESCENDING)], name="products_created_at"),
        IndexModel(
            [("name", TEXT), ("description", TEXT)],
            name=PRODUCT_TEXT_INDEX,
            weights={"name": 10, "description": 2},
        ),
    ],
}


@dataclass
class IndexReport:
    """
    Итог создания индексов.

    Attributes:
        created: Имена созданных (или уже существовавших) индексов
        failed: Имя индекса -> текст ошибки
    """

    created: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def _is_text_index(index: Dict[str, Any]) -> bool:
    return "_fts" in index.get("key", {})


class IndexManager:
    """Жизненный цикл индексов коллекций categories и products."""

    def __init__(self, db: Database):
        self.db = db

    def create_all(self) -> IndexReport:
        """
        Создать все индексы.

        Повторный вызов безопасен. Ошибка одного индекса логируется и
        попадает в отчет, остальные индексы все равно создаются.
        """
        report = IndexReport()
        for collection_name, models in INDEXES.items():
            collection = self.db[collection_name]
            for model in models:
                name = model.document["name"]
                try:
                    collection.create_indexes([model])
                    report.created.append(name)
                except PyMongoError as e:
                    logger.error(f"Failed to create index {name} on {collection_name}: {e}")
                    report.failed[name] = str(e)
        logger.info(
            f"Indexes initialized: {len(report.created)} created, {len(report.failed)} failed"
        )
        return report

    def drop_all(self) -> None:
        """Удалить все индексы, кроме _id. Отсутствующие коллекции пропускаются."""
        for collection_name in INDEXES:
            try:
                self.db[collection_name].drop_indexes()
            except OperationFailure as e:
                if e.code != NAMESPACE_NOT_FOUND:
                    raise
                logger.info(f"Collection {collection_name} does not exist, nothing to drop")
        logger.info("All indexes dropped")

    def has_product_text_index(self) -> bool:
        """Существует ли полнотекстовый индекс товаров."""
        return any(_is_text_index(index) for index in self.db[PRODUCTS].list_indexes())
