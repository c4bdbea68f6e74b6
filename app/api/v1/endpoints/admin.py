"""
API эндпоинты для административной панели.

Формы категорий и товаров принимают данные в формате HTML-форм.
Успешное действие отвечает 303 See Other на страницу списка,
неуспешное возвращает FormState с сообщением и исходными значениями.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, RedirectResponse
from pymongo.database import Database

from app.core.config import settings
from app.db.database import get_db
from app.schemas.admin import (
    CategoriesPage,
    DashboardStats,
    IndexReportOut,
    MaintenanceResult,
)
from app.schemas.form import FormInput
from app.schemas.form_state import FormState
from app.services import catalog_service, maintenance_service, mutation_service
from app.services.query_builder import normalize_page

router = APIRouter()

CATEGORIES_URL = "/admin/categories"
PRODUCTS_URL = "/admin/products"


async def read_form(request: Request) -> FormInput:
    """Прочитать тело формы; повторяющиеся поля становятся списками."""
    form = await request.form()
    return FormInput.from_items(
        (key, value) for key, value in form.multi_items() if isinstance(value, str)
    )


def form_response(state: Optional[FormState], redirect_to: str):
    if state is None:
        return RedirectResponse(redirect_to, status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse(state.model_dump(mode="json"), status_code=state.status_code)


# ==================== СТАТИСТИКА ====================


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Database = Depends(get_db)):
    """
    Статистика дашборда: товары, категории, остатки, средняя цена
    и состояние текстового индекса.
    """
    return catalog_service.dashboard_stats(db)


# ==================== КАТЕГОРИИ ====================


@router.get("/categories", response_model=CategoriesPage)
def list_categories(
    page: Optional[str] = Query(None, description="Номер страницы"),
    db: Database = Depends(get_db),
):
    """Получить страницу категорий, новые сверху."""
    items, meta = catalog_service.get_categories_page(
        db, normalize_page(page), settings.ADMIN_PAGE_SIZE
    )
    return CategoriesPage(items=items, meta=meta)


@router.post("/categories")
async def create_category(request: Request, db: Database = Depends(get_db)):
    """
    Создать категорию.

    Поля формы: name, slug, description.
    """
    form = await read_form(request)
    state = await run_in_threadpool(mutation_service.create_category, db, form)
    return form_response(state, CATEGORIES_URL)


@router.post("/categories/{category_id}")
async def update_category(category_id: str, request: Request, db: Database = Depends(get_db)):
    """Обновить категорию по ID."""
    form = await read_form(request)
    state = await run_in_threadpool(mutation_service.update_category, db, category_id, form)
    return form_response(state, CATEGORIES_URL)


# ==================== ТОВАРЫ ====================


@router.post("/products")
async def create_product(request: Request, db: Database = Depends(get_db)):
    """
    Создать товар.

    Поля формы: name, slug, description, categoryIds (повторяется),
    price, stock, imageUrls (повторяется), optionNames и optionValues
    (по одной паре на опцию, значения через запятую).
    """
    form = await read_form(request)
    state = await run_in_threadpool(mutation_service.create_product, db, form)
    return form_response(state, PRODUCTS_URL)


@router.post("/products/{product_id}")
async def update_product(product_id: str, request: Request, db: Database = Depends(get_db)):
    """Обновить товар по ID; существующие варианты сохраняются."""
    form = await read_form(request)
    state = await run_in_threadpool(mutation_service.update_product, db, product_id, form)
    return form_response(state, PRODUCTS_URL)


# ==================== ОБСЛУЖИВАНИЕ БАЗЫ ====================


@router.post("/maintenance/clear", response_model=MaintenanceResult)
def clear_database(db: Database = Depends(get_db)):
    """Удалить все категории и товары."""
    maintenance_service.clear_database(db)
    return MaintenanceResult(message="Database cleared")


@router.post("/maintenance/create-indexes", response_model=IndexReportOut)
def create_indexes(db: Database = Depends(get_db)):
    """
    Создать индексы.

    Ошибки отдельных индексов не прерывают операцию и перечислены в failed.
    """
    report = maintenance_service.create_indexes(db)
    return IndexReportOut(created=report.created, failed=report.failed)


@router.post("/maintenance/drop-indexes", response_model=MaintenanceResult)
def drop_indexes(db: Database = Depends(get_db)):
    """Удалить все индексы, кроме _id."""
    maintenance_service.drop_indexes(db)
    return MaintenanceResult(message="Indexes dropped")


@router.post("/maintenance/seed", response_model=MaintenanceResult)
def seed_database(db: Database = Depends(get_db)):
    """
    Заполнить пустую базу тестовыми данными.

    Raises:
        HTTPException: Если база уже содержит категории или товары
    """
    try:
        created = maintenance_service.seed_database(db)
    except maintenance_service.SeedRefused as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return MaintenanceResult(message=f"Database seeded with {len(created)} products")
