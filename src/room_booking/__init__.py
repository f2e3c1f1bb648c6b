"""
Модуль контекста бронирования переговорных комнат.

Отвечает за:
- Бронирование комнат на интервалы времени без пересечений
- Поиск свободных комнат
- Отмену бронирований, которые еще не начались
"""

from . import application, config, domain, infrastructure, interfaces
from .application import BookingService
from .domain import Booking, Room

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
    "config",
    "Booking",
    "Room",
    "BookingService",
]
