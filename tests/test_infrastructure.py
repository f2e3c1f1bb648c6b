"""
Тесты для инфраструктурного слоя: репозитории, время, уведомления.
"""

import json
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from room_booking.domain import Booking, Room
from room_booking.infrastructure import (
    FixedTimeProvider,
    InMemoryRoomRepository,
    JsonFileRoomRepository,
    LoggingNotificationService,
    LoguruLogger,
    NullNotificationService,
    SystemTimeProvider,
)
from shared_kernel import RepositoryException


@pytest.fixture
def booked_room() -> Room:
    room = Room(id="room1", name="Небула")
    room.add_booking(
        Booking("b1", "room1", datetime(2026, 2, 5, 10), datetime(2026, 2, 5, 12))
    )
    return room


class TestTimeProviders:
    def test_fixed_time_provider_set_and_advance(self):
        provider = FixedTimeProvider(datetime(2026, 2, 4, 10))
        assert provider.now() == datetime(2026, 2, 4, 10)

        assert provider.advance(timedelta(hours=1)) == datetime(2026, 2, 4, 11)
        assert provider.now() == datetime(2026, 2, 4, 11)

        provider.set(datetime(2030, 1, 1))
        assert provider.now() == datetime(2030, 1, 1)

    def test_system_time_provider_is_close_to_wall_clock(self):
        before = datetime.now()
        value = SystemTimeProvider().now()
        after = datetime.now()
        assert before <= value <= after


class TestInMemoryRoomRepository:
    def test_find_by_id(self, booked_room: Room):
        repo = InMemoryRoomRepository([booked_room])
        assert repo.find_by_id("room1") is booked_room
        assert repo.find_by_id("missing") is None

    def test_find_all_keeps_insertion_order(self):
        rooms = [Room(id=f"room{i}", name=f"Room {i}") for i in (3, 1, 2)]
        repo = InMemoryRoomRepository(rooms)
        assert [r.id for r in repo.find_all()] == ["room3", "room1", "room2"]

    def test_save_adds_and_updates(self):
        repo = InMemoryRoomRepository()
        room = Room(id="room1", name="Room 1")

        repo.save(room)
        repo.save(room)

        assert repo.find_all() == [room]

    def test_find_all_returns_a_new_list(self, booked_room: Room):
        repo = InMemoryRoomRepository([booked_room])
        repo.find_all().clear()
        assert repo.find_all() == [booked_room]


class TestJsonFileRoomRepository:
    def test_missing_file_is_empty_directory(self, tmp_path):
        repo = JsonFileRoomRepository(str(tmp_path / "rooms.json"))
        assert repo.find_all() == []

    def test_empty_file_is_empty_directory(self, tmp_path):
        path = tmp_path / "rooms.json"
        path.write_text("   ", encoding="utf-8")
        assert JsonFileRoomRepository(str(path)).find_all() == []

    def test_save_persists_rooms_and_bookings(self, tmp_path, booked_room: Room):
        path = tmp_path / "nested" / "rooms.json"
        repo = JsonFileRoomRepository(str(path))

        repo.save(booked_room)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["id"] == "room1"
        assert data[0]["name"] == "Небула"
        assert data[0]["bookings"][0]["id"] == "b1"

        reloaded = JsonFileRoomRepository(str(path)).find_by_id("room1")
        assert reloaded is not None
        assert reloaded.bookings == booked_room.bookings
        assert reloaded.version == booked_room.version
        assert not reloaded.is_available(
            datetime(2026, 2, 5, 11), datetime(2026, 2, 5, 13)
        )

    def test_initial_rooms_are_written(self, tmp_path):
        path = tmp_path / "rooms.json"
        JsonFileRoomRepository(str(path), rooms=[Room(id="room1", name="Room 1")])

        assert [r.id for r in JsonFileRoomRepository(str(path)).find_all()] == ["room1"]

    def test_initial_rooms_do_not_overwrite_stored_rooms(
        self, tmp_path, booked_room: Room
    ):
        path = str(tmp_path / "rooms.json")
        JsonFileRoomRepository(path).save(booked_room)

        repo = JsonFileRoomRepository(
            path,
            rooms=[Room(id="room1", name="Пустая"), Room(id="room2", name="Орион")],
        )

        stored = repo.find_by_id("room1")
        assert stored.name == "Небула"
        assert stored.has_booking("b1")
        assert [r.id for r in JsonFileRoomRepository(path).find_all()] == [
            "room1",
            "room2",
        ]

    def test_failed_write_does_not_keep_room_in_memory(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        repo = JsonFileRoomRepository(str(blocker / "rooms.json"))

        with pytest.raises(OSError):
            repo.save(Room(id="room1", name="Room 1"))

        assert repo.find_by_id("room1") is None
        assert repo.find_all() == []

    def test_malformed_file_raises_repository_exception(self, tmp_path):
        path = tmp_path / "rooms.json"
        path.write_text('[{"id": "room1"}]', encoding="utf-8")

        with pytest.raises(RepositoryException):
            JsonFileRoomRepository(str(path))

    def test_overlapping_bookings_in_file_are_rejected(self, tmp_path):
        path = tmp_path / "rooms.json"
        booking = {
            "room_id": "room1",
            "start": "2026-02-05T10:00:00",
            "end": "2026-02-05T12:00:00",
        }
        path.write_text(
            json.dumps(
                [
                    {
                        "id": "room1",
                        "name": "Room 1",
                        "bookings": [dict(booking, id="b1"), dict(booking, id="b2")],
                    }
                ]
            ),
            encoding="utf-8",
        )

        with pytest.raises(RepositoryException):
            JsonFileRoomRepository(str(path))


class TestNotificationServices:
    def test_logging_notification_service_writes_to_logger(self, booked_room: Room):
        logger = MagicMock()
        service = LoggingNotificationService(logger=logger)
        booking = booked_room.bookings[0]

        service.send_booking_confirmation(booking)
        service.send_cancellation_confirmation(booking)

        assert logger.info.call_count == 2
        assert "b1" in logger.info.call_args_list[0][0][0]
        assert logger.info.call_args_list[1][1]["room_id"] == "room1"

    def test_null_notification_service_does_nothing(self, booked_room: Room):
        service = NullNotificationService()
        service.send_booking_confirmation(booked_room.bookings[0])
        service.send_cancellation_confirmation(booked_room.bookings[0])


class TestLoguruLogger:
    def test_messages_carry_bound_context(self):
        from loguru import logger

        records = []
        sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        try:
            LoguruLogger(component="tests").info("Room booked", booking_id="b1")
        finally:
            logger.remove(sink_id)

        assert records[0]["message"] == "Room booked"
        assert records[0]["extra"]["component"] == "tests"
        assert records[0]["extra"]["booking_id"] == "b1"
