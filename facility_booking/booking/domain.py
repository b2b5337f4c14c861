"""
Доменная модель контекста бронирования.

Содержит агрегат бронирования с его жизненным циклом, проверку конфликтов
интервалов, расчет стоимости и доменный сервис, который собирает эти
правила в сценарии создания, смены статуса и административной блокировки.
"""

from datetime import datetime
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..shared_kernel import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    Actor,
    BookingInPast,
    BookingStatus,
    DomainEvent,
    EntityId,
    FacilityUnavailable,
    InvalidTransition,
    Money,
    SlotUnavailable,
    TimeInterval,
    generate_id,
    now,
)
from .interfaces import IBookingRepository

BLOCKED_SLOT_MARKER = "Blocked slot"


class FacilityRef(BaseModel):
    """Сведения об объекте, которые нужны бронированию."""

    model_config = ConfigDict(frozen=True)

    id: EntityId
    name: str = ""
    hourly_rate: Money
    is_available: bool = True


class BookingCreated(DomainEvent):
    """Событие создания бронирования."""

    booking_id: EntityId
    facility_id: EntityId
    user_id: EntityId
    interval: TimeInterval


class BookingStatusChanged(DomainEvent):
    """Событие смены статуса бронирования."""

    booking_id: EntityId
    previous_status: BookingStatus
    new_status: BookingStatus
    actor_id: EntityId


class SlotBlocked(DomainEvent):
    """Событие административной блокировки времени."""

    booking_id: EntityId
    facility_id: EntityId
    interval: TimeInterval
    notes: str


class TransitionRule(NamedTuple):
    """Кто, кроме сотрудников, может выполнить переход."""

    owner_allowed: bool


# Сотрудники и администраторы могут выполнить любой переход из таблицы,
# владелец - только отмену еще не подтвержденного бронирования.
BOOKING_TRANSITIONS: Dict[Tuple[BookingStatus, BookingStatus], TransitionRule] = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED): TransitionRule(False),
    (BookingStatus.PENDING, BookingStatus.CANCELLED): TransitionRule(True),
    (BookingStatus.CONFIRMED, BookingStatus.COMPLETED): TransitionRule(False),
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED): TransitionRule(False),
}


def can_transition(
    actor: Actor,
    owner_id: EntityId,
    current: BookingStatus,
    target: BookingStatus,
) -> bool:
    rule = BOOKING_TRANSITIONS.get((current, target))
    if rule is None:
        return False
    if actor.is_staff:
        return True
    return rule.owner_allowed and actor.owns(owner_id)


def check_conflict(candidate: TimeInterval, existing: Iterable[TimeInterval]) -> bool:
    """
    Проверяет, пересекается ли интервал хотя бы с одним из существующих.

    Фильтрация по объекту и статусу - забота вызывающего
    (см. active_intervals).
    """
    return any(candidate.overlaps(interval) for interval in existing)


def active_intervals(
    bookings: Iterable["Booking"], facility_id: EntityId
) -> List[TimeInterval]:
    """Интервалы активных бронирований объекта."""
    return [
        booking.interval
        for booking in bookings
        if booking.facility_id == facility_id and booking.status in ACTIVE_STATUSES
    ]


def compute_price(hourly_rate: Money, interval: TimeInterval) -> Money:
    """Стоимость = тариф x длительность в часах (дробные часы допустимы)."""
    return (hourly_rate * interval.duration_hours).rounded()


def blocked_slot_notes(reason: Optional[str] = None) -> str:
    reason = (reason or "").strip()
    if not reason:
        return BLOCKED_SLOT_MARKER
    return f"{BLOCKED_SLOT_MARKER}: {reason}"


class Booking(BaseModel):
    """Бронирование объекта на интервал времени."""

    id: EntityId = Field(default_factory=generate_id, frozen=True)
    facility_id: EntityId = Field(..., frozen=True)
    user_id: EntityId = Field(..., frozen=True)
    interval: TimeInterval = Field(..., frozen=True)
    status: BookingStatus = BookingStatus.PENDING
    total_price: Money = Field(..., frozen=True)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=now, frozen=True)
    updated_at: datetime = Field(default_factory=now)
    version: int = 0
    _domain_events: List[DomainEvent] = PrivateAttr(default_factory=list)

    @property
    def domain_events(self) -> List[DomainEvent]:
        """Возвращает список доменных событий."""
        return list(self._domain_events)

    def pull_domain_events(self) -> List[DomainEvent]:
        """Возвращает накопленные события и очищает список."""
        events = list(self._domain_events)
        self._domain_events.clear()
        return events

    @property
    def is_active(self) -> bool:
        """Занимает ли бронирование календарь объекта."""
        return self.status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_blocked_slot(self) -> bool:
        return (self.notes or "").startswith(BLOCKED_SLOT_MARKER)

    def transition_to(self, actor: Actor, target: BookingStatus) -> None:
        """
        Переводит бронирование в новый статус по таблице переходов.

        Проверка выполняется до изменения состояния, поэтому при ошибке
        бронирование остается прежним.
        """
        if not can_transition(actor, self.user_id, self.status, target):
            raise InvalidTransition(
                f"Переход {self.status.value} -> {target.value} недоступен"
            )

        previous = self.status
        self.status = target
        self.updated_at = now()
        self._domain_events.append(
            BookingStatusChanged(
                booking_id=self.id,
                previous_status=previous,
                new_status=target,
                actor_id=actor.id,
            )
        )

    def confirm(self, actor: Actor) -> None:
        """Подтверждает бронирование."""
        self.transition_to(actor, BookingStatus.CONFIRMED)

    def cancel(self, actor: Actor) -> None:
        """Отменяет бронирование."""
        self.transition_to(actor, BookingStatus.CANCELLED)

    def complete(self, actor: Actor) -> None:
        self.transition_to(actor, BookingStatus.COMPLETED)

    @classmethod
    def create(
        cls,
        actor: Actor,
        facility: FacilityRef,
        interval: TimeInterval,
        existing: Iterable[TimeInterval],
        notes: Optional[str] = None,
    ) -> "Booking":
        """
        Создает новое бронирование в статусе PENDING.

        existing - интервалы активных бронирований этого же объекта.
        """
        if not facility.is_available:
            raise FacilityUnavailable(
                f"Объект {facility.name or facility.id} недоступен для бронирования"
            )

        if check_conflict(interval, existing):
            raise SlotUnavailable()

        booking = cls(
            facility_id=facility.id,
            user_id=actor.id,
            interval=interval,
            total_price=compute_price(facility.hourly_rate, interval),
            notes=notes,
        )
        booking._domain_events.append(
            BookingCreated(
                booking_id=booking.id,
                facility_id=facility.id,
                user_id=actor.id,
                interval=interval,
            )
        )
        return booking

    @classmethod
    def create_blocked_slot(
        cls,
        actor: Actor,
        facility: FacilityRef,
        interval: TimeInterval,
        existing: Iterable[TimeInterval],
        reason: Optional[str] = None,
    ) -> "Booking":
        """
        Блокирует время объекта: бронирование создается и сразу подтверждается.

        Подтвердить может только сотрудник, поэтому для участника
        сценарий завершается InvalidTransition и бронирование не возвращается.
        """
        booking = cls.create(
            actor=actor,
            facility=facility,
            interval=interval,
            existing=existing,
            notes=blocked_slot_notes(reason),
        )
        booking.confirm(actor)
        booking._domain_events.append(
            SlotBlocked(
                booking_id=booking.id,
                facility_id=facility.id,
                interval=interval,
                notes=booking.notes,
            )
        )
        return booking


class BookingPolicy:
    """Политики и бизнес-правила для бронирований."""

    @classmethod
    def validate_starts_in_future(
        cls, interval: TimeInterval, current_time: datetime
    ) -> None:
        """Проверяет, что бронирование начинается не в прошлом."""
        current_time = cls._align(current_time, interval.start)
        if interval.start < current_time:
            raise BookingInPast()

    @staticmethod
    def _align(current_time: datetime, reference: datetime) -> datetime:
        # Наивное и осведомленное о поясе время сравнивать нельзя
        if reference.tzinfo is not None and current_time.tzinfo is None:
            return current_time.astimezone(reference.tzinfo)
        if reference.tzinfo is None and current_time.tzinfo is not None:
            return current_time.replace(tzinfo=None)
        return current_time


class BookingService:
    """Доменный сервис для работы с бронированиями."""

    def __init__(self, booking_repository: IBookingRepository):
        self.booking_repository = booking_repository

    def is_slot_free(
        self,
        facility_id: EntityId,
        interval: TimeInterval,
        exclude_booking_id: Optional[EntityId] = None,
    ) -> bool:
        """Проверяет, свободен ли объект на указанный интервал."""
        active = [
            booking
            for booking in self.booking_repository.find_active_by_facility(facility_id)
            if booking.id != exclude_booking_id
        ]
        return not check_conflict(interval, active_intervals(active, facility_id))

    def create_booking(
        self,
        actor: Actor,
        facility: FacilityRef,
        interval: TimeInterval,
        notes: Optional[str] = None,
    ) -> Booking:
        """Создает и сохраняет новое бронирование."""
        booking = Booking.create(
            actor=actor,
            facility=facility,
            interval=interval,
            existing=self._existing(facility.id),
            notes=notes,
        )
        self.booking_repository.add(booking)
        return booking

    def block_slot(
        self,
        actor: Actor,
        facility: FacilityRef,
        interval: TimeInterval,
        reason: Optional[str] = None,
    ) -> Booking:
        """Создает подтвержденную административную блокировку."""
        booking = Booking.create_blocked_slot(
            actor=actor,
            facility=facility,
            interval=interval,
            existing=self._existing(facility.id),
            reason=reason,
        )
        self.booking_repository.add(booking)
        return booking

    def transition_booking(
        self, actor: Actor, booking_id: EntityId, target: BookingStatus
    ) -> Booking:
        """Меняет статус бронирования."""
        booking = self.booking_repository.get_by_id(booking_id)
        booking.transition_to(actor, target)
        self.booking_repository.update(booking)
        return booking

    def _existing(self, facility_id: EntityId) -> List[TimeInterval]:
        return active_intervals(
            self.booking_repository.find_active_by_facility(facility_id), facility_id
        )
