"""
Документ категории товаров.
"""

from datetime import datetime
from typing import TypedDict

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.database import Database


class CategoryDocument(TypedDict, total=False):
    """
    Документ коллекции categories.

    Attributes:
        _id: Уникальный идентификатор категории
        name: Название категории (уникальное)
        slug: URL-friendly название категории (уникальное)
        description: Описание категории
        createdAt: Время создания
        updatedAt: Время последнего изменения
    """

    _id: ObjectId
    name: str
    slug: str
    description: str
    createdAt: datetime
    updatedAt: datetime


CATEGORIES = "categories"


def categories(db: Database) -> Collection:
    return db[CATEGORIES]
