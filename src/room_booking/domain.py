"""
Доменная модель контекста бронирования.

Содержит сущность бронирования и агрегат "Комната", который
гарантирует отсутствие пересечений между своими бронированиями.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from shared_kernel import (
    ConflictException,
    EntityId,
    InvalidArgumentException,
    is_blank,
)


def intervals_overlap(
    start: datetime, end: datetime, other_start: datetime, other_end: datetime
) -> bool:
    """Проверяет пересечение полуоткрытых интервалов [start, end) и [other_start, other_end).

    Вырожденный интервал (начало совпадает с концом) ни с чем не пересекается.
    """
    if start == end or other_start == other_end:
        return False
    return start < other_end and other_start < end


@dataclass(frozen=True)
class Booking:
    """Бронирование комнаты на интервал времени.

    Атрибуты:
        id: Уникальный идентификатор бронирования
        room_id: Идентификатор забронированной комнаты
        start: Начало бронирования
        end: Окончание бронирования (не раньше начала)
    """

    id: EntityId
    room_id: EntityId
    start: datetime
    end: datetime

    def __post_init__(self):
        if is_blank(self.id) or is_blank(self.room_id):
            raise InvalidArgumentException("booking id and room id are required")
        if self.start is None or self.end is None:
            raise InvalidArgumentException("booking start and end are required")
        if self.end < self.start:
            raise InvalidArgumentException("end time must be after start time")

    @property
    def duration(self) -> timedelta:
        """Длительность бронирования."""
        return self.end - self.start

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Пересекается ли бронирование с интервалом [start, end)."""
        return intervals_overlap(start, end, self.start, self.end)

    def has_id(self, booking_id: EntityId) -> bool:
        return self.id == booking_id


@dataclass(eq=False)
class Room:
    """Агрегат "Комната". Единственный владелец своих бронирований."""

    id: EntityId
    name: str
    _bookings: List[Booking] = field(default_factory=list, init=False, repr=False)
    version: int = 0

    def __post_init__(self):
        if is_blank(self.id):
            raise InvalidArgumentException("room id is required")

    @property
    def bookings(self) -> Tuple[Booking, ...]:
        return tuple(self._bookings)

    def _increment_version(self):
        self.version += 1

    def is_available(self, start: datetime, end: datetime) -> bool:
        """Свободна ли комната на интервал [start, end)."""
        return not any(booking.overlaps(start, end) for booking in self._bookings)

    def add_booking(self, booking: Booking) -> None:
        """Добавляет бронирование с проверкой инвариантов агрегата."""
        if booking.room_id != self.id:
            raise InvalidArgumentException(
                f"booking {booking.id} belongs to room {booking.room_id}, not {self.id}"
            )
        if self.has_booking(booking.id):
            raise InvalidArgumentException(f"booking {booking.id} already exists")
        # Инвариант: бронирования комнаты не пересекаются
        if not self.is_available(booking.start, booking.end):
            raise ConflictException(
                f"booking {booking.id} overlaps an existing booking in room {self.id}"
            )

        self._bookings.append(booking)
        self._increment_version()

    def has_booking(self, booking_id: EntityId) -> bool:
        return self.find_booking(booking_id) is not None

    def find_booking(self, booking_id: EntityId) -> Optional[Booking]:
        for booking in self._bookings:
            if booking.has_id(booking_id):
                return booking
        return None

    def remove_booking(self, booking_id: EntityId) -> Optional[Booking]:
        """Удаляет бронирование, если оно есть. Отсутствие не является ошибкой."""
        booking = self.find_booking(booking_id)
        if booking is None:
            return None

        self._bookings.remove(booking)
        self._increment_version()
        return booking

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if not isinstance(other, Room):
            return NotImplemented
        return self.id == other.id
