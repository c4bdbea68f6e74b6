"""
Движок валидации записей.

Ограничения полей описываются объектами-правилами (длина, шаблон,
диапазон), которые проверяет общий движок RecordSchema. Движок собирает
все нарушения сразу, а не только первое.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from bson import ObjectId
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from app.schemas.form import DecodeError, FormInput, FormValue, as_list, as_text

DEFAULT_IMAGE_ALT = "Product Image"


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


# ==================== ПРАВИЛА ====================


class Rule:
    """Базовое правило. check() возвращает текст ошибки или None."""

    def check(self, value: Any) -> Optional[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class Length(Rule):
    """Длина строки в границах [min_len, max_len] включительно."""

    min_len: int = 0
    max_len: Optional[int] = None

    def check(self, value: str) -> Optional[str]:
        size = len(value)
        if size < self.min_len:
            return f"must be at least {self.min_len} characters (was {size})"
        if self.max_len is not None and size > self.max_len:
            return f"must be at most {self.max_len} characters (was {size})"
        return None


@dataclass(frozen=True)
class Pattern(Rule):
    """Полное совпадение с регулярным выражением (с учетом регистра)."""

    regex: str

    def check(self, value: str) -> Optional[str]:
        if re.fullmatch(self.regex, value) is None:
            return f'must match {self.regex} (was "{value}")'
        return None


@dataclass(frozen=True)
class ExclusiveRange(Rule):
    """Число строго между low и high."""

    low: float
    high: float

    def check(self, value: float) -> Optional[str]:
        if not value > self.low:
            return f"must be greater than {_fmt(self.low)} (was {value})"
        if not value < self.high:
            return f"must be less than {_fmt(self.high)} (was {value})"
        return None


@dataclass(frozen=True)
class MinItems(Rule):
    count: int

    def check(self, value: Sequence) -> Optional[str]:
        if len(value) < self.count:
            return f"must contain at least {self.count} item(s) (was {len(value)})"
        return None


SLUG_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"


# ==================== ДЕКОДЕРЫ ТИПОВ ====================


def _reject_underscores(raw: str, message: str) -> None:
    # float() и int() принимают "1_000", в полях формы это ошибка
    if "_" in raw:
        raise DecodeError(message)


def decode_price(value: FormValue) -> float:
    raw = as_text(value)
    message = f'must be a number (was "{raw}")'
    _reject_underscores(raw, message)
    try:
        number = float(raw)
    except ValueError:
        raise DecodeError(message)
    return round(number, 2)


def decode_int(value: FormValue) -> int:
    raw = as_text(value)
    message = f'must be an integer (was "{raw}")'
    _reject_underscores(raw, message)
    try:
        return int(raw)
    except ValueError:
        raise DecodeError(message)


def decode_object_ids(value: FormValue) -> List[ObjectId]:
    ids = []
    for raw in as_list(value):
        if not ObjectId.is_valid(raw):
            raise DecodeError(f'must contain valid ids (was "{raw}")')
        ids.append(ObjectId(raw))
    return ids


_HTTP_URL = TypeAdapter(AnyHttpUrl)


def is_absolute_url(raw: str) -> bool:
    """Абсолютный http(s) URL без запрещенных символов в хосте."""
    try:
        _HTTP_URL.validate_python(raw)
    except ValidationError:
        return False
    return True


def decode_images(value: FormValue) -> List[Dict[str, str]]:
    images = []
    for raw in as_list(value):
        url = raw.strip()
        if not is_absolute_url(url):
            raise DecodeError(f'must contain absolute URLs (was "{raw}")')
        images.append({"url": url, "alt": DEFAULT_IMAGE_ALT})
    return images


# ==================== ДВИЖОК ====================


@dataclass
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field} {self.message}"


class ValidationFailure(ValueError):
    """
    Ввод нарушает ограничения схемы.

    Attributes:
        errors: Все найденные нарушения
        data: Исходный ввод для повторного отображения формы
    """

    def __init__(self, errors: List[FieldError], data: Dict[str, Any]):
        super().__init__(self.format(errors))
        self.errors = errors
        self.data = data

    @staticmethod
    def format(errors: List[FieldError]) -> str:
        return "\n".join(str(error) for error in errors)

    def summary(self) -> str:
        return self.format(self.errors)


@dataclass
class FieldSpec:
    """
    Описание поля записи.

    Attributes:
        name: Имя поля формы
        decode: Приведение сырого значения к типу
        rules: Правила для приведенного значения
        required: Поле обязательно
        blank_is_missing: Пустая строка считается отсутствием значения
        default: Фабрика значения по умолчанию для необязательного поля
        target: Имя поля в итоговой записи (по умолчанию совпадает с name)
    """

    name: str
    decode: Callable[[FormValue], Any] = as_text
    rules: List[Rule] = field(default_factory=list)
    required: bool = True
    blank_is_missing: bool = False
    default: Optional[Callable[[], Any]] = None
    target: Optional[str] = None


PostCheck = Callable[[FormInput, Dict[str, Any]], List[FieldError]]


class RecordSchema:
    """
    Схема записи в строгом режиме: неизвестные поля запрещены.

    validate() возвращает типизированную запись или поднимает
    ValidationFailure со всеми нарушениями.
    """

    def __init__(
        self,
        fields: List[FieldSpec],
        post_checks: List[PostCheck] = None,
        consumed: Sequence[str] = (),
    ):
        self.fields = {spec.name: spec for spec in fields}
        self.post_checks = post_checks or []
        # поля, которые разбирают post_checks
        self.consumed = set(consumed)

    def validate(self, form: FormInput) -> Dict[str, Any]:
        errors: List[FieldError] = []
        record: Dict[str, Any] = {}

        for key in form.keys():
            if key not in self.fields and key not in self.consumed:
                errors.append(FieldError(key, "is not an allowed field"))

        for spec in self.fields.values():
            target = spec.target or spec.name
            raw = form.get(spec.name)
            if raw is not None and spec.blank_is_missing and as_list(raw) in ([], [""]):
                raw = None

            if raw is None:
                if spec.required:
                    errors.append(FieldError(spec.name, "is required"))
                elif spec.default is not None:
                    record[target] = spec.default()
                continue

            try:
                value = spec.decode(raw)
            except DecodeError as e:
                errors.append(FieldError(spec.name, str(e)))
                continue

            failed = False
            for rule in spec.rules:
                message = rule.check(value)
                if message:
                    errors.append(FieldError(spec.name, message))
                    failed = True
            if not failed:
                record[target] = value

        for check in self.post_checks:
            errors.extend(check(form, record))

        if errors:
            raise ValidationFailure(errors, form.to_raw())
        return record

    def cleared_fields(self, form: FormInput) -> List[str]:
        """
        Необязательные поля, отправленные пустыми.

        При обновлении такие поля удаляются из документа.
        """
        cleared = []
        for spec in self.fields.values():
            raw = form.get(spec.name)
            if (
                raw is not None
                and not spec.required
                and spec.blank_is_missing
                and as_list(raw) in ([], [""])
            ):
                cleared.append(spec.target or spec.name)
        return cleared
