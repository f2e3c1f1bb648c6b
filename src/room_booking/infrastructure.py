"""
Инфраструктурный слой контекста бронирования.

Содержит реализации репозиториев, источников времени, логгера и
сервиса уведомлений, зависимые от конкретных технологий.
"""

import json
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger as loguru_logger
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from shared_kernel import DomainException, EntityId, RepositoryException, now

from . import interfaces as ports
from .domain import Booking, Room


# ---------------------------------------------------------------------------
# Логгер
# ---------------------------------------------------------------------------


class LoguruLogger(ports.ILogger):
    """Логгер на базе loguru. Контекст передается через bind()."""

    def __init__(self, component: str = "room_booking"):
        self._logger = loguru_logger.bind(component=component)

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.bind(**kwargs).info(message)

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.bind(**kwargs).error(message)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.bind(**kwargs).warning(message)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.bind(**kwargs).debug(message)


# ---------------------------------------------------------------------------
# Источники времени
# ---------------------------------------------------------------------------


class SystemTimeProvider(ports.ITimeProvider):
    """Текущее время по системным часам."""

    def now(self) -> datetime:
        return now()


class FixedTimeProvider(ports.ITimeProvider):
    """Управляемое время для тестов и симуляций."""

    def __init__(self, current: datetime):
        self._current = current

    def now(self) -> datetime:
        return self._current

    def set(self, instant: datetime) -> None:
        self._current = instant

    def advance(self, delta: timedelta) -> datetime:
        """Сдвигает текущее время вперед (или назад при отрицательном delta)."""
        self._current = self._current + delta
        return self._current


# ---------------------------------------------------------------------------
# Репозитории
# ---------------------------------------------------------------------------


class InMemoryRoomRepository(ports.IRoomRepository):
    """Реализация репозитория комнат в памяти.

    Порядок find_all() совпадает с порядком добавления комнат.
    """

    def __init__(self, rooms: Optional[Iterable[Room]] = None):
        self._rooms: Dict[EntityId, Room] = {}
        self._lock = threading.Lock()
        for room in rooms or []:
            self._rooms[room.id] = room

    def find_by_id(self, room_id: EntityId) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def find_all(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def save(self, room: Room) -> None:
        """Сохраняет или обновляет комнату."""
        with self._lock:
            self._rooms[room.id] = room


class BookingRecord(BaseModel):
    """Представление бронирования для хранения в JSON."""

    id: EntityId
    room_id: EntityId
    start: datetime
    end: datetime

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingRecord":
        return cls(
            id=booking.id, room_id=booking.room_id, start=booking.start, end=booking.end
        )

    def to_domain(self) -> Booking:
        return Booking(id=self.id, room_id=self.room_id, start=self.start, end=self.end)


class RoomRecord(BaseModel):
    """Представление комнаты для хранения в JSON."""

    id: EntityId
    name: str
    version: int = 0
    bookings: List[BookingRecord] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, room: Room) -> "RoomRecord":
        return cls(
            id=room.id,
            name=room.name,
            version=room.version,
            bookings=[BookingRecord.from_domain(b) for b in room.bookings],
        )

    def to_domain(self) -> Room:
        room = Room(id=self.id, name=self.name)
        # add_booking заново проверяет инварианты агрегата
        for record in self.bookings:
            room.add_booking(record.to_domain())
        room.version = self.version
        return room


class JsonFileRoomRepository(InMemoryRoomRepository):
    """Репозиторий комнат, сохраняющий данные в JSON-файл."""

    _records_adapter = TypeAdapter(List[RoomRecord])

    def __init__(self, file_path: str, rooms: Optional[Iterable[Room]] = None):
        """
        Инициализирует репозиторий.

        Args:
            file_path: Путь к JSON-файлу с данными
            rooms: Начальные комнаты; добавляются только те, которых нет в файле
        """
        super().__init__()
        self._file_path = Path(file_path)
        self._load_data()
        missing = [room for room in rooms or [] if room.id not in self._rooms]
        if missing:
            for room in missing:
                self._rooms[room.id] = room
            self._save_data()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def save(self, room: Room) -> None:
        with self._lock:
            previous = self._rooms.get(room.id)
            self._rooms[room.id] = room
            try:
                self._save_data()
            except Exception:
                # Содержимое памяти не должно расходиться с файлом
                if previous is None:
                    del self._rooms[room.id]
                else:
                    self._rooms[room.id] = previous
                raise

    def _load_data(self) -> None:
        """Загружает данные из JSON-файла."""
        if not self._file_path.exists():
            return

        raw_data = self._file_path.read_text(encoding="utf-8")
        if not raw_data.strip():
            return

        try:
            records = self._records_adapter.validate_json(raw_data)
            rooms = [record.to_domain() for record in records]
        except (ValidationError, DomainException) as e:
            raise RepositoryException(
                f"Cannot load rooms from {self._file_path}: {e}"
            ) from e

        self._rooms = {room.id: room for room in rooms}

    def _save_data(self) -> None:
        """Сохраняет данные в JSON-файл."""
        self._file_path.parent.mkdir(parents=True, exist_ok=True)

        data = [
            RoomRecord.from_domain(room).model_dump(mode="json")
            for room in self._rooms.values()
        ]

        with open(self._file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Уведомления
# ---------------------------------------------------------------------------


class LoggingNotificationService(ports.INotificationService):
    """Сервис уведомлений, который пишет подтверждения в лог."""

    def __init__(self, logger: Optional[ports.ILogger] = None):
        self._logger = logger or LoguruLogger(component="notifications")

    def send_booking_confirmation(self, booking: Booking) -> None:
        self._logger.info(
            f"Booking {booking.id} confirmed",
            room_id=booking.room_id,
            start=booking.start.isoformat(),
            end=booking.end.isoformat(),
        )

    def send_cancellation_confirmation(self, booking: Booking) -> None:
        self._logger.info(
            f"Booking {booking.id} cancelled",
            room_id=booking.room_id,
            start=booking.start.isoformat(),
        )


class NullNotificationService(ports.INotificationService):
    """Отключенные уведомления."""

    def send_booking_confirmation(self, booking: Booking) -> None:
        pass

    def send_cancellation_confirmation(self, booking: Booking) -> None:
        pass
