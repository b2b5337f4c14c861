"""
Прикладной слой контекста бронирования.

Содержит сервисы приложения, которые координируют
взаимодействие между внешними интерфейсами и доменной моделью.
"""

from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Callable, List, Optional

from pydantic import BaseModel

from ..config import SchedulingSettings
from ..shared_kernel import (
    AccessDenied,
    Actor,
    BookingStatus,
    EntityId,
    TimeInterval,
    now,
)
from ..shared_kernel.infrastructure import LoggingAdapter
from ..shared_kernel.interfaces import ILogger
from . import interfaces as ports
from .availability import generate_availability
from .domain import Booking, BookingPolicy, BookingService
from .reporting import (
    BookingFilterCriteria,
    BookingSummary,
    filter_bookings,
    summarize_bookings,
)

# DTO (Data Transfer Objects) для входящих данных


class CreateBookingRequest(BaseModel):
    """Запрос на создание бронирования."""

    facility_id: EntityId
    start_time: datetime
    end_time: datetime
    notes: Optional[str] = None


class BlockSlotRequest(BaseModel):
    """Запрос на административную блокировку времени."""

    facility_id: EntityId
    start_time: datetime
    end_time: datetime
    reason: Optional[str] = None


class UpdateBookingStatusRequest(BaseModel):
    """Запрос на смену статуса бронирования."""

    booking_id: EntityId
    status: BookingStatus


# DTO для исходящих данных


class BookingDTO(BaseModel):
    """DTO для представления бронирования."""

    id: EntityId
    facility_id: EntityId
    user_id: EntityId
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    total_price: Decimal
    currency: str
    notes: Optional[str]
    is_blocked_slot: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=booking.id,
            facility_id=booking.facility_id,
            user_id=booking.user_id,
            start_time=booking.interval.start,
            end_time=booking.interval.end,
            status=booking.status,
            total_price=booking.total_price.amount,
            currency=booking.total_price.currency,
            notes=booking.notes,
            is_blocked_slot=booking.is_blocked_slot,
            created_at=booking.created_at,
        )


class SlotDTO(BaseModel):
    """Слот сетки доступности."""

    start_time: datetime
    end_time: datetime
    is_booked: bool


# Сервисы приложения


class BookingApplicationService:
    """Сервис приложения для работы с бронированиями."""

    def __init__(
        self,
        uow: ports.IBookingUnitOfWork,
        facilities: ports.IFacilityDirectory,
        users: Optional[ports.IUserDirectory] = None,
        settings: Optional[SchedulingSettings] = None,
        clock: Callable[[], datetime] = now,
        logger: Optional[ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._uow = uow
        self._facilities = facilities
        self._users = users
        self._settings = settings or SchedulingSettings()
        self._clock = clock
        self._logger = logger or LoggingAdapter("facility_booking.booking")
        self._booking_service = BookingService(self._uow.bookings)

    @property
    def uow(self) -> ports.IBookingUnitOfWork:
        return self._uow

    def create_booking(self, actor: Actor, request: CreateBookingRequest) -> BookingDTO:
        """Создает новое бронирование в статусе PENDING."""
        with self._uow.facility_lock(request.facility_id):
            try:
                interval = TimeInterval(start=request.start_time, end=request.end_time)
                self._check_start(interval)
                facility = self._facilities.get(request.facility_id)
                booking = self._booking_service.create_booking(
                    actor=actor,
                    facility=facility,
                    interval=interval,
                    notes=request.notes,
                )
                self._uow.commit()
            except Exception as e:
                self._uow.rollback()
                self._logger.warning(
                    "Booking rejected",
                    error=type(e).__name__,
                    facility_id=request.facility_id,
                    actor_id=actor.id,
                )
                raise

        self._logger.info(
            "Booking created",
            booking_id=booking.id,
            facility_id=booking.facility_id,
            total_price=booking.total_price.amount,
        )
        self._publish(booking)
        return BookingDTO.from_domain(booking)

    def block_slot(self, actor: Actor, request: BlockSlotRequest) -> BookingDTO:
        """Блокирует время объекта (только сотрудники)."""
        with self._uow.facility_lock(request.facility_id):
            try:
                interval = TimeInterval(start=request.start_time, end=request.end_time)
                self._check_start(interval)
                facility = self._facilities.get(request.facility_id)
                booking = self._booking_service.block_slot(
                    actor=actor,
                    facility=facility,
                    interval=interval,
                    reason=request.reason,
                )
                self._uow.commit()
            except Exception as e:
                self._uow.rollback()
                self._logger.warning(
                    "Slot block rejected",
                    error=type(e).__name__,
                    facility_id=request.facility_id,
                    actor_id=actor.id,
                )
                raise

        self._logger.info(
            "Slot blocked",
            booking_id=booking.id,
            facility_id=booking.facility_id,
            notes=booking.notes,
        )
        self._publish(booking)
        return BookingDTO.from_domain(booking)

    def update_booking_status(
        self, actor: Actor, request: UpdateBookingStatusRequest
    ) -> BookingDTO:
        """Переводит бронирование в новый статус."""
        try:
            booking = self._booking_service.transition_booking(
                actor=actor, booking_id=request.booking_id, target=request.status
            )
            self._uow.commit()
        except Exception as e:
            self._uow.rollback()
            self._logger.warning(
                "Status change rejected",
                error=type(e).__name__,
                booking_id=request.booking_id,
                target=request.status.value,
                actor_id=actor.id,
            )
            raise

        self._logger.info(
            "Booking status changed",
            booking_id=booking.id,
            status=booking.status.value,
            actor_id=actor.id,
        )
        self._publish(booking)
        return BookingDTO.from_domain(booking)

    def cancel_booking(self, actor: Actor, booking_id: EntityId) -> BookingDTO:
        """Отменяет бронирование; физически оно не удаляется."""
        return self.update_booking_status(
            actor,
            UpdateBookingStatusRequest(
                booking_id=booking_id, status=BookingStatus.CANCELLED
            ),
        )

    def get_availability(
        self, facility_id: EntityId, day: date, tz: Optional[tzinfo] = None
    ) -> List[SlotDTO]:
        """
        Возвращает сетку слотов объекта на день.

        Если пояс не задан, сетка строится в поясе активных бронирований
        объекта (наивное время, если осведомленных бронирований нет).
        """
        self._facilities.get(facility_id)
        bookings = self._uow.bookings.find_active_by_facility(facility_id)
        if tz is None:
            tz = next(
                (b.interval.zone for b in bookings if b.interval.zone is not None), None
            )
        grid = generate_availability(
            facility_id=facility_id,
            day=day,
            bookings=bookings,
            granularity_hours=self._settings.slot_granularity_hours,
            day_start_hour=self._settings.day_start_hour,
            day_end_hour=self._settings.day_end_hour,
            tz=tz,
        )
        return [
            SlotDTO(
                start_time=slot.interval.start,
                end_time=slot.interval.end,
                is_booked=slot.is_booked,
            )
            for slot in grid
        ]

    def get_booking(self, actor: Actor, booking_id: EntityId) -> BookingDTO:
        """Возвращает бронирование владельцу или сотруднику."""
        booking = self._uow.bookings.get_by_id(booking_id)
        if not actor.is_staff and not actor.owns(booking.user_id):
            raise AccessDenied("Нет доступа к этому бронированию")
        return BookingDTO.from_domain(booking)

    def list_my_bookings(self, actor: Actor) -> List[BookingDTO]:
        return self._to_dtos(self._uow.bookings.find_by_user(actor.id))

    def list_facility_bookings(self, facility_id: EntityId) -> List[BookingDTO]:
        return self._to_dtos(self._uow.bookings.find_by_facility(facility_id))

    def list_active_bookings_in_range(
        self, facility_id: EntityId, start: datetime, end: datetime
    ) -> List[BookingDTO]:
        """Активные бронирования объекта, пересекающие [start, end)."""
        return self._to_dtos(
            self._uow.bookings.find_active_in_range(facility_id, start, end)
        )

    def list_all_bookings(self, actor: Actor) -> List[BookingDTO]:
        self._require_staff(actor)
        return self._to_dtos(self._uow.bookings.list())

    def filter_bookings(
        self, actor: Actor, criteria: BookingFilterCriteria
    ) -> List[BookingDTO]:
        """Отбор бронирований для панели сотрудников."""
        self._require_staff(actor)
        bookings = self._uow.bookings.list()
        user_names = {}
        facility_names = {}
        for booking in bookings:
            if self._users is not None and booking.user_id not in user_names:
                user_names[booking.user_id] = self._users.display_name(booking.user_id)
            if booking.facility_id not in facility_names:
                facility_names[booking.facility_id] = self._facilities.name_of(
                    booking.facility_id
                )
        return self._to_dtos(
            filter_bookings(bookings, criteria, user_names, facility_names)
        )

    def summarize_bookings(self, actor: Actor) -> BookingSummary:
        self._require_staff(actor)
        return summarize_bookings(self._uow.bookings.list())

    def _check_start(self, interval: TimeInterval) -> None:
        if not self._settings.allow_past_bookings:
            BookingPolicy.validate_starts_in_future(interval, self._clock())

    def _publish(self, booking: Booking) -> None:
        for event in booking.pull_domain_events():
            self._uow.event_bus.publish(event)

    @staticmethod
    def _to_dtos(bookings: List[Booking]) -> List[BookingDTO]:
        return [BookingDTO.from_domain(booking) for booking in bookings]

    @staticmethod
    def _require_staff(actor: Actor) -> None:
        if not actor.is_staff:
            raise AccessDenied("Раздел доступен только сотрудникам")
