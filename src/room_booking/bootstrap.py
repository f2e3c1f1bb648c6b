from typing import Any, Dict, List, Optional

from .application import BookingService
from .config import BookingSettings, StorageType, configure_logging, load_settings
from .domain import Room
from .infrastructure import (
    InMemoryRoomRepository,
    JsonFileRoomRepository,
    LoggingNotificationService,
    LoguruLogger,
    NullNotificationService,
    SystemTimeProvider,
)


def sample_rooms() -> List[Room]:
    """Демонстрационный набор переговорных комнат."""
    return [
        Room(id="room1", name="Небула"),
        Room(id="room2", name="Орион"),
        Room(id="room3", name="Андромеда"),
    ]


def bootstrap_app(settings: Optional[BookingSettings] = None) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or load_settings()
    configure_logging(settings)

    # 1. Хранилище комнат
    initial_rooms = sample_rooms() if settings.seed_sample_rooms else None
    if settings.storage == StorageType.JSON:
        room_repository = JsonFileRoomRepository(
            settings.rooms_file, rooms=initial_rooms
        )
    else:
        room_repository = InMemoryRoomRepository(initial_rooms)

    # 2. Уведомления и время
    if settings.notifications_enabled:
        notification_service = LoggingNotificationService()
    else:
        notification_service = NullNotificationService()
    time_provider = SystemTimeProvider()

    # 3. Сервис бронирования
    booking_service = BookingService(
        time_provider=time_provider,
        room_repository=room_repository,
        notification_service=notification_service,
        logger=LoguruLogger(component="booking_service"),
    )

    return {
        "settings": settings,
        "room_repository": room_repository,
        "time_provider": time_provider,
        "notification_service": notification_service,
        "booking_service": booking_service,
    }
