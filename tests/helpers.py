"""
Вспомогательные функции для построения тестовых интервалов.
"""

from datetime import datetime

from facility_booking.shared_kernel import TimeInterval

# Фиксированное "сейчас": все бронирования в тестах в будущем
FIXED_NOW = datetime(2030, 1, 1, 9, 0)
DAY = datetime(2030, 5, 10)


def at(hour: int, minute: int = 0) -> datetime:
    """Момент в тестовый день."""
    return DAY.replace(hour=hour, minute=minute)


def interval(start_hour, end_hour, start_minute=0, end_minute=0) -> TimeInterval:
    return TimeInterval(start=at(start_hour, start_minute), end=at(end_hour, end_minute))
