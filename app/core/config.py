"""
Конфигурация приложения.

Содержит настройки для подключения к MongoDB, S3-хранилищу и режима отладки.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Настройки приложения, загружаемые из переменных окружения.

    Attributes:
        MONGODB_URL: URL подключения к MongoDB
        MONGODB_DB_NAME: Имя базы данных магазина
        ITEMS_PER_PAGE: Размер страницы витрины
        DEBUG: Режим отладки
    """

    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="URL подключения к MongoDB",
    )
    MONGODB_DB_NAME: str = Field(default="next-shop", description="Имя базы данных")
    MONGODB_APP_NAME: str = Field(
        default="next-shop.development", description="appName для драйвера MongoDB"
    )
    DEBUG: bool = Field(default=False, description="Режим отладки")

    # Пагинация
    ITEMS_PER_PAGE: int = Field(default=8, description="Товаров на странице витрины")
    ADMIN_PAGE_SIZE: int = Field(default=10, description="Записей на странице админки")

    # Настройки S3 / MinIO
    S3_BUCKET_NAME: str = Field(
        default="product-images", description="Имя S3 bucket для хранения файлов"
    )
    AWS_REGION: str = Field(default="us-east-1", description="AWS регион для S3")
    S3_ENDPOINT_URL: str = Field(
        default="http://localhost:9000",
        description="Кастомный endpoint URL для S3 (для MinIO и т.д.)",
    )
    S3_PUBLIC_URL: str = Field(
        default="",
        description="Публичный базовый URL bucket (по умолчанию endpoint/bucket)",
    )
    AWS_ACCESS_KEY_ID: str = Field(
        default="minioadmin", description="AWS Access Key ID"
    )
    AWS_SECRET_ACCESS_KEY: str = Field(
        default="minioadmin", description="AWS Secret Access Key"
    )
    PRESIGNED_URL_EXPIRES: int = Field(
        default=60, description="Время жизни presigned URL для загрузки (секунды)"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"


# Глобальный экземпляр настроек
settings = Settings()
