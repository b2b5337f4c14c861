"""
Сетка слотов на день.

Делит рабочий день на слоты фиксированной длины и помечает занятые.
Занятость считается той же функцией check_conflict, что и при создании
бронирования, поэтому отображение и проверка не расходятся.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from ..shared_kernel import (
    BusinessRuleValidationException,
    EntityId,
    InvalidInterval,
    TimeInterval,
)
from .domain import Booking, active_intervals, check_conflict

DEFAULT_GRANULARITY_HOURS = 1
DEFAULT_DAY_START_HOUR = 8
DEFAULT_DAY_END_HOUR = 20


class SlotAvailability(BaseModel):
    """Слот сетки с признаком занятости."""

    model_config = ConfigDict(frozen=True)

    interval: TimeInterval
    is_booked: bool


def generate_slots(
    day: date,
    granularity_hours: float = DEFAULT_GRANULARITY_HOURS,
    day_start_hour: float = DEFAULT_DAY_START_HOUR,
    day_end_hour: float = DEFAULT_DAY_END_HOUR,
    tz: Optional[tzinfo] = None,
) -> List[TimeInterval]:
    """
    Возвращает смежные слоты длиной granularity_hours внутри
    [day_start_hour, day_end_hour).

    Слоты, не помещающиеся целиком до конца дня, не выдаются.
    """
    if granularity_hours <= 0:
        raise BusinessRuleValidationException("Длина слота должна быть положительной")
    if not 0 <= day_start_hour < day_end_hour <= 24:
        raise InvalidInterval("Некорректные границы рабочего дня")

    midnight = datetime.combine(day, time.min, tzinfo=tz)
    step = timedelta(hours=granularity_hours)
    day_close = midnight + timedelta(hours=day_end_hour)

    slots = []
    current = midnight + timedelta(hours=day_start_hour)
    while current + step <= day_close:
        slots.append(TimeInterval(start=current, end=current + step))
        current += step
    return slots


def mark_booked(
    slots: Iterable[TimeInterval], existing: Iterable[TimeInterval]
) -> List[SlotAvailability]:
    existing = list(existing)
    return [
        SlotAvailability(interval=slot, is_booked=check_conflict(slot, existing))
        for slot in slots
    ]


def generate_availability(
    facility_id: EntityId,
    day: date,
    bookings: Iterable[Booking],
    granularity_hours: float = DEFAULT_GRANULARITY_HOURS,
    day_start_hour: float = DEFAULT_DAY_START_HOUR,
    day_end_hour: float = DEFAULT_DAY_END_HOUR,
    tz: Optional[tzinfo] = None,
) -> List[SlotAvailability]:
    """Сетка дня для объекта с учетом его активных бронирований."""
    slots = generate_slots(day, granularity_hours, day_start_hour, day_end_hour, tz)
    return mark_booked(slots, active_intervals(bookings, facility_id))
