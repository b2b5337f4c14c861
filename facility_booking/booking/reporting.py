"""
Отбор и сводка бронирований для панели сотрудников.

Функции работают только на чтение и сохраняют исходный порядок.
"""

from datetime import date, datetime, time
from typing import Iterable, List, Mapping, Optional

from pydantic import BaseModel

from ..shared_kernel import BookingStatus, EntityId
from .domain import Booking


class BookingFilterCriteria(BaseModel):
    """
    Критерии отбора. Пустой критерий ничего не ограничивает,
    заданные объединяются через И.
    """

    status: Optional[BookingStatus] = None
    facility_id: Optional[EntityId] = None
    search: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class BookingSummary(BaseModel):
    """Количество бронирований по статусам."""

    total: int = 0
    pending: int = 0
    confirmed: int = 0
    cancelled: int = 0
    completed: int = 0


def _matches_search(
    booking: Booking,
    needle: str,
    user_names: Mapping[EntityId, str],
    facility_names: Mapping[EntityId, str],
) -> bool:
    haystacks = (
        str(booking.id),
        user_names.get(booking.user_id) or "",
        facility_names.get(booking.facility_id) or "",
    )
    return any(needle in value.lower() for value in haystacks)


def _within_dates(
    booking: Booking, start_date: Optional[date], end_date: Optional[date]
) -> bool:
    tz = booking.interval.start.tzinfo
    if start_date is not None:
        if booking.interval.start < datetime.combine(start_date, time.min, tzinfo=tz):
            return False
    if end_date is not None:
        if booking.interval.end > datetime.combine(end_date, time.max, tzinfo=tz):
            return False
    return True


def filter_bookings(
    bookings: Iterable[Booking],
    criteria: BookingFilterCriteria,
    user_names: Optional[Mapping[EntityId, str]] = None,
    facility_names: Optional[Mapping[EntityId, str]] = None,
) -> List[Booking]:
    """
    Отбирает бронирования по критериям.

    Поиск без учета регистра по id бронирования, имени пользователя
    и названию объекта (достаточно совпадения в любом из полей).
    """
    user_names = user_names or {}
    facility_names = facility_names or {}
    needle = (criteria.search or "").strip().lower()

    result = []
    for booking in bookings:
        if criteria.status is not None and booking.status != criteria.status:
            continue
        if criteria.facility_id is not None and booking.facility_id != criteria.facility_id:
            continue
        if needle and not _matches_search(booking, needle, user_names, facility_names):
            continue
        if not _within_dates(booking, criteria.start_date, criteria.end_date):
            continue
        result.append(booking)
    return result


def summarize_bookings(bookings: Iterable) -> BookingSummary:
    """
    Подсчитывает бронирования по статусам.

    Неизвестный статус учитывается только в total.
    """
    summary = BookingSummary()
    for booking in bookings:
        summary.total += 1
        try:
            status = BookingStatus(getattr(booking, "status", None))
        except ValueError:
            continue
        field = status.value.lower()
        setattr(summary, field, getattr(summary, field) + 1)
    return summary
