"""
API endpoints витрины товаров.

Список товаров с поиском, фильтром по категории, сортировкой
и пагинацией, а также карточка товара по slug.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo.database import Database

from app.core.config import settings
from app.db.database import get_db
from app.schemas.product import ProductOut, ProductPage
from app.services import catalog_service
from app.services.query_builder import normalize_page

router = APIRouter()


@router.get("", response_model=ProductPage)
def list_products(
    db: Database = Depends(get_db),
    q: Optional[str] = Query(None, description="Поисковый запрос"),
    page: Optional[str] = Query(None, description="Номер страницы (с 1)"),
    category: Optional[str] = Query(None, description="Slug категории"),
    sort: Optional[str] = Query(
        None, description="default, price_asc, price_desc, name_asc или name_desc"
    ),
):
    """
    Получить список товаров с фильтрацией, сортировкой и пагинацией.

    Некорректный или неположительный номер страницы заменяется на 1.
    Если текстовый индекс не создан, поиск идет по подстроке, а в ответе
    выставляется search_index_warning.

    Returns:
        ProductPage: Товары и метаданные пагинации
    """
    return catalog_service.list_products(
        db,
        query=q or None,
        category_slug=category or None,
        sort=sort or None,
        page=normalize_page(page),
        page_size=settings.ITEMS_PER_PAGE,
    )


@router.get("/{slug}", response_model=ProductOut)
def get_product(slug: str, db: Database = Depends(get_db)):
    """
    Получить товар по slug вместе с категориями.

    Raises:
        HTTPException: Если товар не найден
    """
    product = catalog_service.get_product_by_slug(db, slug)
    if not product:
        raise HTTPException(404, detail="Product not found")
    return product
