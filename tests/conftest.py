"""
Конфигурация тестов для pytest.
Добавляет директорию src в PYTHONPATH и содержит общие фикстуры.
"""
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Добавляем директорию с исходным кодом в PYTHONPATH
src_dir = str(Path(__file__).parent.parent / "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from room_booking.application import BookingService  # noqa: E402
from room_booking.infrastructure import FixedTimeProvider  # noqa: E402
from room_booking.interfaces import (  # noqa: E402
    ILogger,
    INotificationService,
    IRoomRepository,
)


@pytest.fixture
def current_time() -> datetime:
    return datetime(2026, 2, 4, 10, 0)


@pytest.fixture
def future_start() -> datetime:
    return datetime(2026, 2, 5, 10, 0)


@pytest.fixture
def future_end() -> datetime:
    return datetime(2026, 2, 5, 12, 0)


@pytest.fixture
def time_provider(current_time: datetime) -> FixedTimeProvider:
    return FixedTimeProvider(current_time)


@pytest.fixture
def mock_room_repository() -> MagicMock:
    """Фикстура для мокированного репозитория комнат."""
    repo = MagicMock(spec=IRoomRepository)
    repo.find_by_id.return_value = None
    repo.find_all.return_value = []
    return repo


@pytest.fixture
def mock_notification_service() -> MagicMock:
    return MagicMock(spec=INotificationService)


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock(spec=ILogger)


@pytest.fixture
def booking_service(
    time_provider: FixedTimeProvider,
    mock_room_repository: MagicMock,
    mock_notification_service: MagicMock,
    mock_logger: MagicMock,
) -> BookingService:
    """Сервис бронирования с мокированными зависимостями."""
    return BookingService(
        time_provider=time_provider,
        room_repository=mock_room_repository,
        notification_service=mock_notification_service,
        logger=mock_logger,
    )
