"""
API endpoint страницы поиска.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo.database import Database

from app.core.config import settings
from app.db.database import get_db
from app.schemas.product import ProductPage
from app.services import catalog_service
from app.services.query_builder import normalize_page

router = APIRouter()


@router.get("", response_model=ProductPage)
def search(
    db: Database = Depends(get_db),
    q: Optional[str] = Query(None, description="Поисковый запрос"),
    page: Optional[str] = Query(None, description="Номер страницы (с 1)"),
):
    """
    Поиск товаров по названию и описанию.

    Raises:
        HTTPException: Если запрос пустой
    """
    if not q:
        raise HTTPException(400, detail="Search query is required")
    return catalog_service.search_products(
        db, q, normalize_page(page), settings.ITEMS_PER_PAGE
    )
