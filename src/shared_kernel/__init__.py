"""
Общее ядро (Shared Kernel) для системы бронирования переговорных комнат.

Содержит общие типы данных и исключения, используемые контекстом бронирования.
"""

from .domain import (
    ConflictException,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    InvalidArgumentException,
    InvalidStateException,
    NotificationException,
    RepositoryException,
    generate_id,
    is_blank,
    # Утилиты
    now,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "generate_id",
    # Исключения
    "DomainException",
    "InvalidArgumentException",
    "InvalidStateException",
    "ConflictException",
    "NotificationException",
    "RepositoryException",
    # Утилиты
    "is_blank",
    "now",
]
