"""
Модели документов базы данных.

Описывает коллекции магазина и функции доступа к ним.
"""

from .category import CATEGORIES, CategoryDocument, categories
from .product import (
    PRODUCTS,
    ProductDocument,
    ProductImage,
    ProductOption,
    ProductVariant,
    products,
)

__all__ = [
    "CATEGORIES",
    "PRODUCTS",
    "CategoryDocument",
    "ProductDocument",
    "ProductImage",
    "ProductOption",
    "ProductVariant",
    "categories",
    "products",
]
