"""
Результат неуспешной мутации для повторного отображения формы.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel


class FailureKind(str, Enum):
    VALIDATION = "validation"
    COLLISION = "collision"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"


HTTP_STATUS = {
    FailureKind.VALIDATION: 422,
    FailureKind.COLLISION: 409,
    FailureKind.NOT_FOUND: 404,
    FailureKind.SERVER_ERROR: 500,
}


class FormState(BaseModel):
    """
    Состояние формы после неуспешного действия.

    Attributes:
        kind: Тип ошибки
        error: Сообщение для пользователя
        data: Исходные значения формы
    """

    kind: FailureKind
    error: str
    data: Dict[str, Any] = {}

    @property
    def status_code(self) -> int:
        return HTTP_STATUS[self.kind]
