"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import datetime
from typing import TYPE_CHECKING, Any, List, Optional, Protocol

from ..shared_kernel import EntityId
from ..shared_kernel.interfaces import IEventBus

if TYPE_CHECKING:
    from .domain import Booking, FacilityRef


class IBookingRepository(Protocol):
    """Интерфейс репозитория для бронирований."""

    def add(self, booking: Booking) -> None: ...
    def get_by_id(self, booking_id: EntityId) -> Booking: ...
    def update(self, booking: Booking) -> None: ...
    def list(self) -> List[Booking]: ...
    def find_by_user(self, user_id: EntityId) -> List[Booking]: ...
    def find_by_facility(self, facility_id: EntityId) -> List[Booking]: ...
    def find_active_by_facility(self, facility_id: EntityId) -> List[Booking]: ...
    def find_active_in_range(
        self, facility_id: EntityId, start: datetime, end: datetime
    ) -> List[Booking]: ...


class IFacilityDirectory(Protocol):
    """Доступ к объектам каталога со стороны бронирования."""

    def get(self, facility_id: EntityId) -> FacilityRef: ...
    def name_of(self, facility_id: EntityId) -> Optional[str]: ...


class IUserDirectory(Protocol):
    """Доступ к отображаемым именам пользователей."""

    def display_name(self, user_id: EntityId) -> Optional[str]: ...


class IBookingUnitOfWork(Protocol):
    """Интерфейс Unit of Work для контекста Booking."""

    @property
    def bookings(self) -> IBookingRepository: ...
    @property
    def event_bus(self) -> IEventBus: ...

    def facility_lock(self, facility_id: EntityId) -> AbstractContextManager: ...
    def __enter__(self) -> IBookingUnitOfWork: ...
    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...
