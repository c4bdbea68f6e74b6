"""
Главный модуль FastAPI приложения Next Shop Catalog API.

Содержит конфигурацию приложения, middleware и роутеры.
Создает пул соединений MongoDB и клиент объектного хранилища.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.routers import api_router
from app.core.config import settings
from app.db.database import MongoPool
from app.services.storage_service import StorageService

# Настройка логирования
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Next Shop Catalog API",
    description="API витрины и админки каталога товаров на MongoDB",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Next Shop Catalog API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    """
    Событие запуска приложения.

    Создает пул MongoDB и клиент хранилища на весь процесс.
    """
    app.state.mongo = MongoPool(settings)
    app.state.storage = StorageService(settings)
    logger.info(f"Using MongoDB database {settings.MONGODB_DB_NAME}")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Событие завершения приложения.

    Закрывает соединения с MongoDB.
    """
    app.state.mongo.close()
