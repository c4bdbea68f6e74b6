"""
Схемы категорий: валидация формы и вывод.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.validation import SLUG_PATTERN, FieldSpec, Length, Pattern, RecordSchema

CATEGORY_SCHEMA = RecordSchema(
    [
        FieldSpec("name", rules=[Length(3, 50)]),
        FieldSpec("slug", rules=[Length(3, 50), Pattern(SLUG_PATTERN)]),
        FieldSpec(
            "description",
            rules=[Length(0, 2000)],
            required=False,
            blank_is_missing=True,
        ),
    ]
)


class CategoryOut(BaseModel):
    """Схема для вывода категории."""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_document(cls, doc: dict) -> "CategoryOut":
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            slug=doc["slug"],
            description=doc.get("description"),
            createdAt=doc.get("createdAt"),
            updatedAt=doc.get("updatedAt"),
        )
