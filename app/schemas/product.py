"""
Схемы товаров: валидация формы и вывод.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.category import CategoryOut
from app.schemas.form import FormInput, as_list
from app.schemas.pagination import PageMeta
from app.schemas.validation import (
    SLUG_PATTERN,
    ExclusiveRange,
    FieldError,
    FieldSpec,
    Length,
    MinItems,
    Pattern,
    RecordSchema,
    decode_images,
    decode_int,
    decode_object_ids,
    decode_price,
)

MAX_AMOUNT = 1e9


def _decode_options(form: FormInput, record: Dict[str, Any]) -> List[FieldError]:
    """
    Собрать опции из параллельных полей optionNames и optionValues.

    optionValues содержит значения одной опции через запятую.
    """
    names_raw = form.get("optionNames")
    values_raw = form.get("optionValues")
    names = as_list(names_raw) if names_raw is not None else []
    values = as_list(values_raw) if values_raw is not None else []

    if len(names) != len(values):
        return [
            FieldError(
                "optionValues",
                f"must have one entry per option name ({len(names)} names, {len(values)} value lists)",
            )
        ]

    errors: List[FieldError] = []
    options = []
    for position, (name, joined) in enumerate(zip(names, values), start=1):
        name = name.strip()
        option_values = [v.strip() for v in joined.split(",") if v.strip()]
        if not name:
            errors.append(FieldError("optionNames", f"entry {position} must not be empty"))
        if not option_values:
            errors.append(
                FieldError("optionValues", f"entry {position} must contain at least one value")
            )
        options.append({"name": name, "values": option_values})

    if not errors:
        record["options"] = options
    return errors


PRODUCT_SCHEMA = RecordSchema(
    [
        FieldSpec("name", rules=[Length(3, 127)]),
        FieldSpec("slug", rules=[Length(3, 127), Pattern(SLUG_PATTERN)]),
        FieldSpec(
            "description",
            rules=[Length(0, 2000)],
            required=False,
            blank_is_missing=True,
        ),
        FieldSpec("categoryIds", decode=decode_object_ids, rules=[MinItems(1)]),
        FieldSpec("price", decode=decode_price, rules=[ExclusiveRange(0, MAX_AMOUNT)]),
        FieldSpec("stock", decode=decode_int, rules=[ExclusiveRange(0, MAX_AMOUNT)]),
        FieldSpec(
            "imageUrls",
            decode=decode_images,
            required=False,
            default=list,
            target="images",
        ),
    ],
    post_checks=[_decode_options],
    consumed=("optionNames", "optionValues"),
)


class ImageOut(BaseModel):
    url: str
    alt: Optional[str] = None


class OptionOut(BaseModel):
    name: str
    values: List[str]


class VariantOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    option_values: List[str] = Field(alias="optionValues")
    price: float
    stock: int
    sku: str = ""
    images: List[ImageOut] = []


class ProductOut(BaseModel):
    """Схема для вывода товара."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    price: float
    stock: Optional[int] = None
    category_ids: List[str] = Field(default_factory=list, alias="categoryIds")
    categories: Optional[List[CategoryOut]] = None
    images: List[ImageOut] = []
    options: List[OptionOut] = []
    variants: List[VariantOut] = []
    score: Optional[float] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @classmethod
    def from_document(cls, doc: dict) -> "ProductOut":
        categories = doc.get("categories")
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            slug=doc["slug"],
            description=doc.get("description"),
            price=doc["price"],
            stock=doc.get("stock"),
            categoryIds=[str(c) for c in doc.get("categoryIds", [])],
            categories=(
                [CategoryOut.from_document(c) for c in categories]
                if categories is not None
                else None
            ),
            images=doc.get("images", []),
            options=doc.get("options", []),
            variants=doc.get("variants", []),
            score=doc.get("score"),
            createdAt=doc.get("createdAt"),
            updatedAt=doc.get("updatedAt"),
        )


class ProductPage(BaseModel):
    """
    Страница товаров витрины или поиска.

    Attributes:
        items: Товары текущей страницы
        meta: Метаданные пагинации
        search_index_warning: Текстовый индекс отсутствует, поиск идет
            через регулярные выражения
    """

    items: List[ProductOut]
    meta: PageMeta
    search_index_warning: bool = False
