"""
Конфигурация контекста бронирования.

Настройки читаются из переменных окружения (и, при наличии, из .env файла).
"""

import os
import sys
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, field_validator

ENV_PREFIX = "ROOM_BOOKING_"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class StorageType(str, Enum):
    """Типы хранилища комнат."""

    MEMORY = "memory"
    JSON = "json"


class BookingSettings(BaseModel):
    """Настройки приложения бронирования."""

    log_level: str = "INFO"
    storage: StorageType = StorageType.MEMORY
    rooms_file: str = "data/rooms.json"
    notifications_enabled: bool = True
    seed_sample_rooms: bool = False

    @field_validator("log_level")
    @classmethod
    def log_level_is_known(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings(env_file: Optional[str] = None) -> BookingSettings:
    """Загружает настройки из окружения.

    Args:
        env_file: Путь к .env файлу (опционально). Если файл указан, но не
            существует, он игнорируется, а поиск .env по умолчанию не выполняется.
    """
    if env_file is None:
        load_dotenv()
    elif os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        logger.warning(f".env файл не найден, пропускаем: {env_file}")

    values = {}
    for name in BookingSettings.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            values[name] = raw
    return BookingSettings(**values)


def configure_logging(settings: BookingSettings) -> None:
    """Перенастраивает loguru: один вывод в stderr с уровнем из настроек."""
    logger.remove()
    logger.configure(extra={"component": "room_booking"})
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[component]} | {message}",
    )
