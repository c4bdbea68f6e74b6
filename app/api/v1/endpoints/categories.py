"""
API endpoints для работы с категориями товаров.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pymongo.database import Database

from app.db.database import get_db
from app.schemas.category import CategoryOut
from app.services import catalog_service

router = APIRouter()


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Database = Depends(get_db)):
    """
    Получить список всех категорий, отсортированный по названию.

    Используется фильтром витрины и формой товара.
    """
    return catalog_service.list_all_categories(db)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, db: Database = Depends(get_db)):
    """
    Получить категорию по ID.

    Raises:
        HTTPException: Если ID некорректен или категория не найдена
    """
    category = catalog_service.get_category(db, category_id)
    if not category:
        raise HTTPException(404, detail="Category not found")
    return category
