"""
Чтение каталога: витрина, поиск, категории и статистика админки.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from bson import ObjectId
from pymongo.database import Database

from app.db.indexes import IndexManager
from app.db.models import CATEGORIES, categories, products
from app.schemas.category import CategoryOut
from app.schemas.pagination import PageMeta
from app.schemas.product import ProductOut, ProductPage
from app.services.query_builder import build_product_query, build_search_query

logger = logging.getLogger(__name__)


def _run_concurrently(page_call, count_call) -> Tuple[list, int]:
    # страница и подсчет выполняются параллельно, без общего снимка данных
    with ThreadPoolExecutor(max_workers=2) as pool:
        page_future = pool.submit(page_call)
        count_future = pool.submit(count_call)
        return page_future.result(), count_future.result()


def list_products(
    db: Database,
    query: Optional[str],
    category_slug: Optional[str],
    sort: Optional[str],
    page: int,
    page_size: int,
) -> ProductPage:
    """
    Получить страницу витрины товаров.

    Args:
        db: База данных
        query: Поисковая строка
        category_slug: Фильтр по slug категории
        sort: Ключ сортировки
        page: Нормализованный номер страницы
        page_size: Размер страницы

    Returns:
        ProductPage: Товары, метаданные пагинации и признак отсутствия
            текстового индекса
    """
    has_text_index = IndexManager(db).has_product_text_index()
    if query and not has_text_index:
        logger.warning("Product text index is missing, falling back to regex search")
    spec = build_product_query(query, category_slug, sort, page, page_size, has_text_index)
    collection = products(db)

    def count() -> int:
        rows = list(collection.aggregate(spec.count_pipeline))
        return rows[0]["total"] if rows else 0

    docs, total = _run_concurrently(lambda: list(collection.aggregate(spec.pipeline)), count)

    return ProductPage(
        items=[ProductOut.from_document(doc) for doc in docs],
        meta=PageMeta.create(page=spec.page, page_size=page_size, total=total),
        search_index_warning=not has_text_index,
    )


def search_products(db: Database, query: str, page: int, page_size: int) -> ProductPage:
    """Страница поиска: по релевантности при наличии индекса, иначе по имени."""
    has_text_index = IndexManager(db).has_product_text_index()
    spec = build_search_query(query, page, page_size, has_text_index)
    collection = products(db)

    def fetch() -> list:
        cursor = collection.find(spec.filter, spec.projection).sort(spec.sort)
        return list(cursor.skip(spec.skip).limit(spec.limit))

    docs, total = _run_concurrently(fetch, lambda: collection.count_documents(spec.filter))

    return ProductPage(
        items=[ProductOut.from_document(doc) for doc in docs],
        meta=PageMeta.create(page=spec.page, page_size=page_size, total=total),
        search_index_warning=not has_text_index,
    )


def get_product_by_slug(db: Database, slug: str) -> Optional[ProductOut]:
    """Товар по slug вместе с его категориями."""
    pipeline = [
        {"$match": {"slug": slug}},
        {
            "$lookup": {
                "from": CATEGORIES,
                "localField": "categoryIds",
                "foreignField": "_id",
                "as": "categories",
            }
        },
        {"$limit": 1},
    ]
    docs = list(products(db).aggregate(pipeline))
    return ProductOut.from_document(docs[0]) if docs else None


def get_category(db: Database, category_id: str) -> Optional[CategoryOut]:
    if not ObjectId.is_valid(category_id):
        return None
    doc = categories(db).find_one({"_id": ObjectId(category_id)})
    return CategoryOut.from_document(doc) if doc else None


def list_all_categories(db: Database) -> List[CategoryOut]:
    return [CategoryOut.from_document(doc) for doc in categories(db).find().sort("name", 1)]


def get_categories_page(db: Database, page: int, page_size: int) -> Tuple[List[CategoryOut], PageMeta]:
    """Страница категорий для админки, новые сверху."""
    page = max(page, 1)
    collection = categories(db)

    def fetch() -> list:
        cursor = collection.find().sort([("createdAt", -1), ("_id", -1)])
        return list(cursor.skip((page - 1) * page_size).limit(page_size))

    docs, total = _run_concurrently(fetch, lambda: collection.count_documents({}))
    return (
        [CategoryOut.from_document(doc) for doc in docs],
        PageMeta.create(page=page, page_size=page_size, total=total),
    )


LOW_STOCK_THRESHOLD = 10


def dashboard_stats(db: Database) -> dict:
    """
    Статистика для главной страницы админки.

    Returns:
        dict: Количество товаров и категорий, товары с малым остатком
            и без остатка, средняя цена, статус текстового индекса
    """
    collection = products(db)
    averages = list(
        collection.aggregate([{"$group": {"_id": None, "avg": {"$avg": "$price"}}}])
    )
    avg_price = averages[0]["avg"] if averages and averages[0]["avg"] is not None else 0
    return {
        "total_products": collection.count_documents({}),
        "total_categories": categories(db).count_documents({}),
        "low_stock_products": collection.count_documents(
            {"stock": {"$gt": 0, "$lte": LOW_STOCK_THRESHOLD}}
        ),
        "out_of_stock_products": collection.count_documents({"stock": 0}),
        "average_price": round(avg_price, 2),
        "text_index_active": IndexManager(db).has_product_text_index(),
    }
