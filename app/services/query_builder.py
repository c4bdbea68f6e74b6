"""
Построение запросов к коллекции товаров.

Формирует aggregation pipeline для страницы витрины и парный pipeline
подсчета с тем же фильтром, а также запрос для страницы поиска.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from app.db.models import CATEGORIES

# _id фиксирует порядок записей с равными значениями между страницами
SORT_OPTIONS: Dict[str, Dict[str, int]] = {
    "price_asc": {"price": 1, "_id": 1},
    "price_desc": {"price": -1, "_id": 1},
    "name_asc": {"name": 1, "_id": 1},
    "name_desc": {"name": -1, "_id": 1},
}
DEFAULT_SORT = {"name": -1, "_id": 1}
TEXT_SCORE = {"$meta": "textScore"}

LIST_PROJECTION = {
    "name": 1,
    "slug": 1,
    "description": 1,
    "price": 1,
    "stock": 1,
    "images": 1,
    "categoryIds": 1,
    "categories": 1,
}

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def normalize_page(raw: Optional[str]) -> int:
    """
    Номер страницы из параметра запроса.

    Берется ведущее целое число; отсутствующее, нечисловое или
    неположительное значение дает 1.
    """
    if raw is None:
        return 1
    match = _LEADING_INT.match(str(raw))
    if not match:
        return 1
    page = int(match.group())
    return page if page > 0 else 1


def build_text_filter(query: Optional[str], text_index_available: bool) -> Dict[str, Any]:
    """
    Фильтр полнотекстового поиска.

    При наличии текстового индекса используется $text, иначе
    регистронезависимый $regex по name и description. Шаблон не
    экранируется.
    """
    if not query:
        return {}
    if text_index_available:
        return {"$text": {"$search": query}}
    return {
        "$or": [
            {"name": {"$regex": query, "$options": "i"}},
            {"description": {"$regex": query, "$options": "i"}},
        ]
    }


@dataclass
class ProductQuery:
    """
    Пара pipeline для страницы товаров и их общего количества.

    Attributes:
        pipeline: Выборка страницы
        count_pipeline: Подсчет с тем же фильтром, без сортировки и пагинации
        page: Номер страницы
        page_size: Размер страницы
        ranked: Сортировка по релевантности полнотекстового поиска
    """

    pipeline: List[Dict[str, Any]]
    count_pipeline: List[Dict[str, Any]]
    page: int
    page_size: int
    ranked: bool = False

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


def build_product_query(
    query: Optional[str],
    category_slug: Optional[str],
    sort: Optional[str],
    page: int,
    page_size: int,
    text_index_available: bool,
) -> ProductQuery:
    """
    Собрать запрос витрины товаров.

    Args:
        query: Поисковая строка
        category_slug: Slug категории для фильтра
        sort: Ключ сортировки (price_asc, price_desc, name_asc, name_desc)
        page: Номер страницы (с 1)
        page_size: Размер страницы
        text_index_available: Существует ли текстовый индекс товаров

    Returns:
        ProductQuery: pipeline страницы и pipeline подсчета
    """
    query_filter = build_text_filter(query, text_index_available)
    category_filter: Dict[str, Any] = {}
    if category_slug:
        category_filter["categories"] = {"$elemMatch": {"slug": category_slug}}

    # $text допускается только в первой стадии $match
    prefix: List[Dict[str, Any]] = [
        {"$match": query_filter},
        {
            "$lookup": {
                "from": CATEGORIES,
                "localField": "categoryIds",
                "foreignField": "_id",
                "as": "categories",
            }
        },
        {"$match": category_filter},
    ]

    projection = dict(LIST_PROJECTION)
    ranked = False
    if sort in SORT_OPTIONS:
        sort_spec: Dict[str, Any] = dict(SORT_OPTIONS[sort])
    elif query and text_index_available:
        projection["score"] = TEXT_SCORE
        sort_spec = {"score": TEXT_SCORE}
        ranked = True
    else:
        sort_spec = dict(DEFAULT_SORT)

    page = max(page, 1)
    pipeline = prefix + [
        {"$project": projection},
        {"$sort": sort_spec},
        {"$skip": (page - 1) * page_size},
        {"$limit": page_size},
    ]
    count_pipeline = prefix + [{"$count": "total"}]

    return ProductQuery(
        pipeline=pipeline,
        count_pipeline=count_pipeline,
        page=page,
        page_size=page_size,
        ranked=ranked,
    )


@dataclass
class SearchQuery:
    """Запрос страницы поиска (find + count_documents с одним фильтром)."""

    filter: Dict[str, Any]
    sort: List[Tuple[str, Any]]
    projection: Optional[Dict[str, Any]]
    skip: int
    limit: int
    page: int


def build_search_query(
    query: str, page: int, page_size: int, text_index_available: bool
) -> SearchQuery:
    """
    Собрать запрос страницы поиска.

    С текстовым индексом результаты ранжируются по релевантности,
    без него отсортированы по имени по возрастанию.
    """
    page = max(page, 1)
    if text_index_available:
        sort: List[Tuple[str, Any]] = [("score", TEXT_SCORE)]
        projection: Optional[Dict[str, Any]] = {"score": TEXT_SCORE}
    else:
        sort = [("name", 1), ("_id", 1)]
        projection = None
    return SearchQuery(
        filter=build_text_filter(query, text_index_available),
        sort=sort,
        projection=projection,
        skip=(page - 1) * page_size,
        limit=page_size,
        page=page,
    )
