"""
Инфраструктурный слой контекста бронирования.

Содержит реализации репозиториев и других интерфейсов,
зависимые от конкретных технологий (БД, внешние сервисы и т.д.).
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from ..catalog.interfaces import IFacilityRepository
from ..shared_kernel import (
    ACTIVE_STATUSES,
    ConcurrencyException,
    EntityId,
    NotFound,
    TimeInterval,
)
from ..shared_kernel.infrastructure import InMemoryEventBus, LoggingAdapter
from ..shared_kernel.interfaces import IEventBus, ILogger
from . import interfaces as ports
from .domain import Booking, FacilityRef


class InMemoryBookingRepository(ports.IBookingRepository):
    """
    Реализация репозитория бронирований в памяти.

    Хранит копии агрегатов, поэтому изменения вне update() не попадают
    в хранилище. update() проверяет версию (оптимистичная блокировка).
    """

    def __init__(self):
        self._bookings: Dict[EntityId, Booking] = {}

    def get_by_id(self, booking_id: EntityId) -> Booking:
        if booking_id not in self._bookings:
            raise NotFound(f"Booking with id {booking_id} not found")
        return self._bookings[booking_id].model_copy(deep=True)

    def add(self, booking: Booking) -> None:
        if booking.id in self._bookings:
            raise ValueError(f"Booking with id {booking.id} already exists")
        self._bookings[booking.id] = self._snapshot(booking)

    def update(self, booking: Booking) -> None:
        stored = self._bookings.get(booking.id)
        if stored is None:
            raise NotFound(f"Booking with id {booking.id} not found")
        if stored.version != booking.version:
            raise ConcurrencyException(
                f"Booking {booking.id} has version {stored.version}, "
                f"got {booking.version}"
            )
        booking.version += 1
        self._bookings[booking.id] = self._snapshot(booking)

    def list(self) -> List[Booking]:
        return [b.model_copy(deep=True) for b in self._bookings.values()]

    def find_by_user(self, user_id: EntityId) -> List[Booking]:
        return [b for b in self.list() if b.user_id == user_id]

    def find_by_facility(self, facility_id: EntityId) -> List[Booking]:
        return [b for b in self.list() if b.facility_id == facility_id]

    def find_active_by_facility(self, facility_id: EntityId) -> List[Booking]:
        return [
            b for b in self.find_by_facility(facility_id) if b.status in ACTIVE_STATUSES
        ]

    def find_active_in_range(
        self, facility_id: EntityId, start: datetime, end: datetime
    ) -> List[Booking]:
        window = TimeInterval(start=start, end=end)
        return [
            b
            for b in self.find_active_by_facility(facility_id)
            if b.interval.overlaps(window)
        ]

    @staticmethod
    def _snapshot(booking: Booking) -> Booking:
        stored = booking.model_copy(deep=True)
        # События публикует сервис приложения, в хранилище они не нужны
        stored.pull_domain_events()
        return stored


class CatalogFacilityDirectory(ports.IFacilityDirectory):
    """Адаптер каталога объектов для контекста бронирования."""

    def __init__(self, facility_repository: IFacilityRepository):
        self._facilities = facility_repository

    def get(self, facility_id: EntityId) -> FacilityRef:
        facility = self._facilities.get_by_id(facility_id)
        return FacilityRef(
            id=facility.id,
            name=facility.name,
            hourly_rate=facility.hourly_rate,
            is_available=facility.is_available,
        )

    def name_of(self, facility_id: EntityId) -> Optional[str]:
        try:
            return self._facilities.get_by_id(facility_id).name
        except NotFound:
            return None


class InMemoryUserDirectory(ports.IUserDirectory):
    """Справочник отображаемых имен пользователей в памяти."""

    def __init__(self, names: Optional[Dict[EntityId, str]] = None):
        self._names: Dict[EntityId, str] = dict(names or {})

    def register(self, user_id: EntityId, display_name: str) -> None:
        self._names[user_id] = display_name

    def display_name(self, user_id: EntityId) -> Optional[str]:
        return self._names.get(user_id)


class BookingUnitOfWork(ports.IBookingUnitOfWork):
    """
    Единица работы для контекста бронирования.

    facility_lock() сериализует проверку конфликтов и вставку для одного
    объекта, разные объекты обрабатываются параллельно.
    """

    def __init__(
        self,
        bookings_repo: Optional[ports.IBookingRepository] = None,
        event_bus: Optional[IEventBus] = None,
        logger: Optional[ILogger] = None,
    ):
        self._bookings = bookings_repo or InMemoryBookingRepository()
        self._logger = logger or LoggingAdapter("facility_booking.uow")
        self._event_bus = event_bus or InMemoryEventBus(self._logger)
        self._locks: Dict[EntityId, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._committed = False

    @property
    def bookings(self) -> ports.IBookingRepository:
        return self._bookings

    @property
    def event_bus(self) -> IEventBus:
        return self._event_bus

    @property
    def committed(self) -> bool:
        return self._committed

    def facility_lock(self, facility_id: EntityId) -> threading.RLock:
        """Возвращает блокировку объекта (создается при первом обращении)."""
        with self._locks_guard:
            lock = self._locks.get(facility_id)
            if lock is None:
                lock = self._locks[facility_id] = threading.RLock()
            return lock

    def commit(self) -> None:
        """Фиксирует все изменения."""
        # В реальном приложении здесь была бы фиксация транзакции
        self._committed = True
        self._logger.debug("BookingUnitOfWork committed")

    def rollback(self) -> None:
        """Откатывает все изменения."""
        self._committed = False
        self._logger.warning("BookingUnitOfWork rolled back")

    def __enter__(self):
        self._committed = False
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False  # Пробрасываем исключение дальше, если оно было
