"""
Создание и обновление категорий и товаров.

Каждое действие: валидация формы -> проверка уникальности name/slug ->
запись с отметками времени. Успех возвращает None, неудача возвращает
FormState с сообщением и исходными значениями формы.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.db.models import categories, products
from app.schemas.category import CATEGORY_SCHEMA
from app.schemas.form import FormInput
from app.schemas.form_state import FailureKind, FormState
from app.schemas.product import PRODUCT_SCHEMA
from app.schemas.validation import RecordSchema, ValidationFailure
from app.services.variants import generate_variants

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error, please try again later"

# Подготовка записи перед сохранением: (db, запись, текущий документ) -> ошибка или None
Prepare = Callable[[Database, Dict[str, Any], Optional[dict]], Optional[str]]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _failure(kind: FailureKind, error: str, form: FormInput) -> FormState:
    return FormState(kind=kind, error=error, data=form.to_raw())


def find_collision(
    collection: Collection,
    label: str,
    record: Dict[str, Any],
    exclude_id: Optional[ObjectId] = None,
) -> Optional[str]:
    """
    Найти запись с тем же name или slug.

    Совпадение по name проверяется раньше совпадения по slug.

    Returns:
        Optional[str]: Сообщение о конфликте или None
    """
    for field in ("name", "slug"):
        query: Dict[str, Any] = {field: record[field]}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        if collection.find_one(query, {"_id": 1}) is not None:
            return f'{label} with {field} "{record[field]}" already exists'
    return None


def _validate(schema: RecordSchema, form: FormInput):
    try:
        return schema.validate(form), None
    except ValidationFailure as e:
        return None, FormState(kind=FailureKind.VALIDATION, error=e.summary(), data=e.data)


def _create(
    db: Database,
    collection: Collection,
    label: str,
    schema: RecordSchema,
    form: FormInput,
    prepare: Optional[Prepare] = None,
) -> Optional[FormState]:
    record, failure = _validate(schema, form)
    if failure:
        return failure

    try:
        collision = find_collision(collection, label, record)
        if collision:
            return _failure(FailureKind.COLLISION, collision, form)

        if prepare:
            error = prepare(db, record, None)
            if error:
                return _failure(FailureKind.VALIDATION, error, form)

        now = _now()
        result = collection.insert_one({**record, "createdAt": now, "updatedAt": now})
    except DuplicateKeyError:
        # гонка с параллельной вставкой, сработал уникальный индекс
        logger.warning(f"{label} insert rejected by unique index")
        return _failure(
            FailureKind.COLLISION, f"{label} with this name or slug already exists", form
        )
    except PyMongoError:
        logger.exception(f"Failed to create {label.lower()}")
        return _failure(FailureKind.SERVER_ERROR, SERVER_ERROR_MESSAGE, form)

    logger.info(f"{label} {result.inserted_id} created")
    return None


def _update(
    db: Database,
    collection: Collection,
    label: str,
    schema: RecordSchema,
    record_id: str,
    form: FormInput,
    prepare: Optional[Prepare] = None,
) -> Optional[FormState]:
    record, failure = _validate(schema, form)
    if failure:
        return failure

    not_found = _failure(FailureKind.NOT_FOUND, f"{label} not found", form)
    if not ObjectId.is_valid(record_id):
        return not_found
    object_id = ObjectId(record_id)

    try:
        current = collection.find_one({"_id": object_id})
        if current is None:
            return not_found

        collision = find_collision(collection, label, record, exclude_id=object_id)
        if collision:
            return _failure(FailureKind.COLLISION, collision, form)

        if prepare:
            error = prepare(db, record, current)
            if error:
                return _failure(FailureKind.VALIDATION, error, form)

        changes: Dict[str, Any] = {"$set": {**record, "updatedAt": _now()}}
        cleared = schema.cleared_fields(form)
        if cleared:
            changes["$unset"] = {name: "" for name in cleared}
        result = collection.update_one({"_id": object_id}, changes)
    except DuplicateKeyError:
        logger.warning(f"{label} {record_id} update rejected by unique index")
        return _failure(
            FailureKind.COLLISION, f"{label} with this name or slug already exists", form
        )
    except PyMongoError:
        logger.exception(f"Failed to update {label.lower()} {record_id}")
        return _failure(FailureKind.SERVER_ERROR, SERVER_ERROR_MESSAGE, form)

    # запись могли удалить между чтением и обновлением
    if result.matched_count == 0:
        return not_found

    logger.info(f"{label} {record_id} updated")
    return None


def _prepare_product(db: Database, record: Dict[str, Any], current: Optional[dict]) -> Optional[str]:
    """
    Проверить ссылки на категории и сгенерировать варианты.

    Варианты текущего документа сохраняются для совпадающих комбинаций.
    """
    category_ids = list(dict.fromkeys(record["categoryIds"]))
    found = categories(db).count_documents({"_id": {"$in": category_ids}})
    if found != len(category_ids):
        return "categoryIds must reference existing categories"
    record["categoryIds"] = category_ids

    record["variants"] = generate_variants(
        record.get("options", []),
        base_price=record["price"],
        base_stock=record["stock"],
        existing=(current or {}).get("variants"),
    )
    return None


def create_category(db: Database, form: FormInput) -> Optional[FormState]:
    """
    Создать категорию.

    Args:
        db: База данных
        form: Данные формы (name, slug, description)

    Returns:
        Optional[FormState]: None при успехе, иначе ошибка с данными формы
    """
    return _create(db, categories(db), "Category", CATEGORY_SCHEMA, form)


def update_category(db: Database, category_id: str, form: FormInput) -> Optional[FormState]:
    """Обновить категорию; createdAt не меняется."""
    return _update(db, categories(db), "Category", CATEGORY_SCHEMA, category_id, form)


def create_product(db: Database, form: FormInput) -> Optional[FormState]:
    """
    Создать товар.

    Помимо уникальности name/slug проверяется, что все categoryIds
    ссылаются на существующие категории.
    """
    return _create(db, products(db), "Product", PRODUCT_SCHEMA, form, _prepare_product)


def update_product(db: Database, product_id: str, form: FormInput) -> Optional[FormState]:
    return _update(
        db, products(db), "Product", PRODUCT_SCHEMA, product_id, form, _prepare_product
    )
