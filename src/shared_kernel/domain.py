"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import datetime
from uuid import uuid4

# Общие типы идентификаторов
EntityId = str


def generate_id() -> EntityId:
    """Генерирует новый строковый идентификатор."""
    return uuid4().hex


def is_blank(value: object) -> bool:
    """Проверяет, что значение отсутствует или является пустой строкой."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class InvalidArgumentException(DomainException, ValueError):
    """Некорректные или нарушающие политику входные данные."""

    pass


class InvalidStateException(DomainException):
    """Операция корректна, но запрещена текущим состоянием сущности."""

    pass


class ConflictException(DomainException):
    """Бронирование пересекается с уже существующим."""

    pass


class NotificationException(DomainException):
    """Ошибка доставки уведомления."""

    pass


class RepositoryException(DomainException):
    """Ошибка хранилища (повреждённые данные и т.п.)."""

    pass


# Общие утилиты
def now() -> datetime:
    """Возвращает текущую дату и время."""
    return datetime.now()
