"""
Прикладной слой контекста бронирования.

BookingService координирует проверку запроса, временные политики,
агрегат Room, репозиторий и уведомления.
"""

import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from shared_kernel import (
    EntityId,
    InvalidArgumentException,
    InvalidStateException,
    generate_id,
    is_blank,
)

from . import interfaces as ports
from .domain import Booking, Room
from .infrastructure import LoguruLogger

# Сообщения об ошибках являются частью внешнего контракта
BOOKING_FIELDS_REQUIRED = "valid start/end times and a room id are required"
BOOKING_IN_THE_PAST = "cannot book a time in the past"
END_BEFORE_START = "end time must be after start time"
ROOM_NOT_FOUND = "room does not exist"
PERIOD_REQUIRED = "both start and end time are required"
BOOKING_ID_REQUIRED = "booking id cannot be absent"
BOOKING_ALREADY_STARTED = "cannot cancel a booking that has already started or finished"


class BookingService:
    """Сервис приложения для бронирования комнат."""

    def __init__(
        self,
        time_provider: ports.ITimeProvider,
        room_repository: ports.IRoomRepository,
        notification_service: ports.INotificationService,
        logger: Optional[ports.ILogger] = None,
        id_factory: Callable[[], EntityId] = generate_id,
    ):
        self._time_provider = time_provider
        self._room_repository = room_repository
        self._notification_service = notification_service
        self._logger = logger or LoguruLogger()
        self._id_factory = id_factory
        self._locks: Dict[EntityId, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def book_room(self, room_id: EntityId, start: datetime, end: datetime) -> bool:
        """Бронирует комнату на интервал [start, end).

        Возвращает False, если комната занята на этот интервал.
        """
        if is_blank(room_id) or start is None or end is None:
            raise InvalidArgumentException(BOOKING_FIELDS_REQUIRED)
        if start < self._time_provider.now():
            raise InvalidArgumentException(BOOKING_IN_THE_PAST)
        if end < start:
            raise InvalidArgumentException(END_BEFORE_START)

        # Блокировка заводится только для существующих комнат
        if self._room_repository.find_by_id(room_id) is None:
            raise InvalidArgumentException(ROOM_NOT_FOUND)

        with self._room_lock(room_id):
            room = self._room_repository.find_by_id(room_id)
            if room is None:
                raise InvalidArgumentException(ROOM_NOT_FOUND)

            if not room.is_available(start, end):
                self._logger.debug(
                    "Room is not available", room_id=room_id, start=start, end=end
                )
                return False

            booking = Booking(
                id=self._id_factory(), room_id=room.id, start=start, end=end
            )
            room.add_booking(booking)
            try:
                self._room_repository.save(room)
            except Exception:
                room.remove_booking(booking.id)
                raise

        self._logger.info("Room booked", booking_id=booking.id, room_id=room.id)
        self._notify(self._notification_service.send_booking_confirmation, booking)
        return True

    def get_available_rooms(self, start: datetime, end: datetime) -> List[Room]:
        """Возвращает комнаты, свободные на интервал [start, end)."""
        if start is None or end is None:
            raise InvalidArgumentException(PERIOD_REQUIRED)
        if end < start:
            raise InvalidArgumentException(END_BEFORE_START)

        return [
            room
            for room in self._room_repository.find_all()
            if room.is_available(start, end)
        ]

    def cancel_booking(self, booking_id: EntityId) -> bool:
        """Отменяет бронирование.

        Возвращает False, если бронирование не найдено ни в одной комнате.
        """
        if is_blank(booking_id):
            raise InvalidArgumentException(BOOKING_ID_REQUIRED)

        room, booking = self._locate_booking(booking_id)
        if room is None:
            return False

        with self._room_lock(room.id):
            # Бронирование могли отменить, пока мы ждали блокировку
            booking = room.find_booking(booking_id)
            if booking is None:
                return False
            if booking.start < self._time_provider.now():
                raise InvalidStateException(BOOKING_ALREADY_STARTED)

            room.remove_booking(booking_id)
            try:
                self._room_repository.save(room)
            except Exception:
                room.add_booking(booking)
                raise

        self._logger.info("Booking cancelled", booking_id=booking.id, room_id=room.id)
        self._notify(self._notification_service.send_cancellation_confirmation, booking)
        return True

    def _locate_booking(
        self, booking_id: EntityId
    ) -> Tuple[Optional[Room], Optional[Booking]]:
        """Ищет комнату, которой принадлежит бронирование."""
        for room in self._room_repository.find_all():
            booking = room.find_booking(booking_id)
            if booking is not None:
                return room, booking
        return None, None

    def _room_lock(self, room_id: EntityId) -> threading.Lock:
        with self._locks_guard:
            if room_id not in self._locks:
                self._locks[room_id] = threading.Lock()
            return self._locks[room_id]

    def _notify(self, send: Callable[[Booking], None], booking: Booking) -> None:
        """Отправляет уведомление. Ошибка доставки не влияет на результат операции."""
        try:
            send(booking)
        except Exception as e:
            self._logger.debug(
                "Notification failed, ignoring", booking_id=booking.id, error=str(e)
            )
