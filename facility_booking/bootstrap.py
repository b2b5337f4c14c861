"""
Точка сборки приложения: связывает каталог, бронирование и общую инфраструктуру.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional

from .booking.application import BookingApplicationService
from .booking.infrastructure import (
    BookingUnitOfWork,
    CatalogFacilityDirectory,
    InMemoryUserDirectory,
)
from .catalog.application import FacilityApplicationService
from .catalog.infrastructure import InMemoryFacilityRepository, seed_facilities
from .config import SchedulingSettings
from .shared_kernel import now
from .shared_kernel.infrastructure import (
    InMemoryEventBus,
    LoggingAdapter,
    configure_logging,
)


def bootstrap_app(
    settings: Optional[SchedulingSettings] = None,
    clock: Optional[Callable[[], datetime]] = None,
    seed: bool = False,
) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    # 1. Настройки и логирование
    settings = settings or SchedulingSettings.from_env()
    configure_logging(settings.log_level)
    logger = LoggingAdapter("facility_booking")
    event_bus = InMemoryEventBus(logger)

    # 2. Каталог объектов
    facility_repo = InMemoryFacilityRepository()
    if seed:
        seed_facilities(facility_repo, currency=settings.currency)
    facility_service = FacilityApplicationService(
        facility_repo, currency=settings.currency, event_bus=event_bus, logger=logger
    )

    # 3. Бронирование получает каталог через адаптер
    booking_uow = BookingUnitOfWork(event_bus=event_bus, logger=logger)
    user_directory = InMemoryUserDirectory()
    booking_service = BookingApplicationService(
        uow=booking_uow,
        facilities=CatalogFacilityDirectory(facility_repo),
        users=user_directory,
        settings=settings,
        clock=clock or now,
        logger=logger,
    )

    return {
        "settings": settings,
        "facility_service": facility_service,
        "booking_service": booking_service,
        "booking_uow": booking_uow,
        "user_directory": user_directory,
        "event_bus": event_bus,
    }
