"""
Pydantic схемы для административной панели.
"""

from typing import Dict, List

from pydantic import BaseModel

from app.schemas.category import CategoryOut
from app.schemas.pagination import PageMeta

# ==================== СТАТИСТИКА ====================


class DashboardStats(BaseModel):
    """Общая статистика дашборда."""

    total_products: int
    total_categories: int
    low_stock_products: int
    out_of_stock_products: int
    average_price: float
    text_index_active: bool


# ==================== КАТЕГОРИИ ====================


class CategoriesPage(BaseModel):
    """Страница категорий в админке."""

    items: List[CategoryOut]
    meta: PageMeta


# ==================== ОБСЛУЖИВАНИЕ БАЗЫ ====================


class IndexReportOut(BaseModel):
    """Результат создания индексов."""

    created: List[str]
    failed: Dict[str, str]


class MaintenanceResult(BaseModel):
    message: str
