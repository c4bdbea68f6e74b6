"""
Схемы для пагинации.
"""

import math

from pydantic import BaseModel


class PageMeta(BaseModel):
    """
    Метаданные пагинации.

    Attributes:
        page: Номер текущей страницы (с 1)
        page_size: Размер страницы
        total: Общее количество записей под фильтром
        total_pages: Общее количество страниц
        has_prev: Есть предыдущая страница
        has_next: Есть следующая страница
    """

    page: int
    page_size: int
    total: int
    total_pages: int
    has_prev: bool
    has_next: bool

    @classmethod
    def create(cls, page: int, page_size: int, total: int) -> "PageMeta":
        """
        Создает экземпляр PageMeta с расчетом total_pages.

        Пустая выборка дает 0 страниц.
        """
        total_pages = math.ceil(total / page_size) if page_size > 0 else 0
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=total_pages,
            has_prev=page > 1,
            has_next=page < total_pages,
        )
