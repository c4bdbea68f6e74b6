"""
Документ товара.
"""

from datetime import datetime
from typing import List, TypedDict

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.database import Database


class ProductImage(TypedDict, total=False):
    url: str
    alt: str


class ProductOption(TypedDict):
    """Опция товара, например Size: [S, M, L]."""

    name: str
    values: List[str]


class ProductVariant(TypedDict, total=False):
    """
    Конкретная комбинация значений опций со своей ценой и остатком.

    Attributes:
        optionValues: Значения опций в порядке объявления опций
        price: Цена варианта
        stock: Остаток варианта
        sku: Артикул варианта
        images: Изображения варианта
    """

    optionValues: List[str]
    price: float
    stock: int
    sku: str
    images: List[ProductImage]


class ProductDocument(TypedDict, total=False):
    """
    Документ коллекции products.

    Attributes:
        _id: Уникальный идентификатор товара
        name: Название товара (уникальное)
        slug: URL-friendly идентификатор (уникальный)
        description: Описание товара
        categoryIds: Ссылки на документы categories
        price: Базовая цена
        stock: Базовый остаток
        images: Изображения товара
        options: Опции товара
        variants: Варианты, сгенерированные из опций
    """

    _id: ObjectId
    name: str
    slug: str
    description: str
    categoryIds: List[ObjectId]
    price: float
    stock: int
    images: List[ProductImage]
    options: List[ProductOption]
    variants: List[ProductVariant]
    createdAt: datetime
    updatedAt: datetime


PRODUCTS = "products"


def products(db: Database) -> Collection:
    return db[PRODUCTS]
