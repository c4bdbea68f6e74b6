"""
Декодирование данных HTML-форм.

Повторяющиеся имена полей схлопываются в Multi, одиночные остаются Scalar.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple, Union


@dataclass(frozen=True)
class Scalar:
    value: str


@dataclass(frozen=True)
class Multi:
    values: List[str]


FormValue = Union[Scalar, Multi]


class FormInput:
    """
    Сырые данные формы: имя поля -> Scalar | Multi.

    Сохраняет порядок полей, чтобы исходный ввод можно было вернуть
    пользователю без изменений.
    """

    def __init__(self, fields: Dict[str, FormValue] = None):
        self.fields: Dict[str, FormValue] = dict(fields or {})

    @classmethod
    def from_items(cls, items: Iterable[Tuple[str, str]]) -> "FormInput":
        """Собрать ввод из пар (имя, значение), как их отдает multipart/urlencoded."""
        grouped: Dict[str, List[str]] = {}
        for key, value in items:
            grouped.setdefault(key, []).append(value)
        return cls(
            {
                key: Scalar(values[0]) if len(values) == 1 else Multi(values)
                for key, values in grouped.items()
            }
        )

    @classmethod
    def from_mapping(cls, data: Dict[str, Union[str, List[str]]]) -> "FormInput":
        fields: Dict[str, FormValue] = {}
        for key, value in data.items():
            fields[key] = Multi(list(value)) if isinstance(value, (list, tuple)) else Scalar(value)
        return cls(fields)

    def keys(self) -> List[str]:
        return list(self.fields)

    def get(self, name: str) -> Union[FormValue, None]:
        return self.fields.get(name)

    def to_raw(self) -> Dict[str, Union[str, List[str]]]:
        """Исходный ввод в виде, пригодном для повторного отображения формы."""
        return {
            key: value.value if isinstance(value, Scalar) else list(value.values)
            for key, value in self.fields.items()
        }


class DecodeError(ValueError):
    """Значение поля не удалось привести к нужному типу."""


def as_text(value: FormValue) -> str:
    if isinstance(value, Multi):
        if len(value.values) != 1:
            raise DecodeError("must be a single value")
        return value.values[0]
    return value.value


def as_list(value: FormValue) -> List[str]:
    if isinstance(value, Multi):
        return list(value.values)
    return [value.value]
