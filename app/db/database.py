"""
Подключение к базе данных.

Содержит пул соединений MongoDB и dependency для получения базы.
"""

from typing import Optional

from fastapi import Request
from pymongo import MongoClient
from pymongo.database import Database

from app.core.config import Settings, settings


class MongoPool:
    """
    Пул соединений MongoDB на весь процесс.

    Клиент создается лениво при первом обращении и переиспользуется
    до закрытия приложения.
    """

    def __init__(self, config: Optional[Settings] = None, client: Optional[MongoClient] = None):
        self.config = config or settings
        self._client = client

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(
                self.config.MONGODB_URL,
                appname=self.config.MONGODB_APP_NAME,
                tz_aware=True,
            )
        return self._client

    @property
    def db(self) -> Database:
        return self.client[self.config.MONGODB_DB_NAME]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def get_db(request: Request) -> Database:
    """
    Dependency для получения базы данных магазина.

    Returns:
        Database: База данных из пула, созданного при старте приложения
    """
    return request.app.state.mongo.db
