"""
Общее ядро (Shared Kernel) системы бронирования объектов.

Содержит общие типы данных и утилиты, используемые в различных ограниченных контекстах.
"""

from .domain import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    AccessDenied,
    # Основные классы
    Actor,
    BookingInPast,
    # Перечисления
    BookingStatus,
    BusinessRuleValidationException,
    ConcurrencyException,
    DomainEvent,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    FacilityUnavailable,
    InvalidInterval,
    InvalidTransition,
    Money,
    NotFound,
    Role,
    SlotUnavailable,
    TimeInterval,
    contains,
    generate_id,
    # Утилиты
    align,
    now,
    overlaps,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "generate_id",
    # Основные классы
    "Money",
    "TimeInterval",
    "Actor",
    "DomainEvent",
    # Перечисления
    "BookingStatus",
    "Role",
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    # Исключения
    "DomainException",
    "ConcurrencyException",
    "BusinessRuleValidationException",
    "InvalidInterval",
    "BookingInPast",
    "SlotUnavailable",
    "FacilityUnavailable",
    "InvalidTransition",
    "NotFound",
    "AccessDenied",
    # Утилиты
    "overlaps",
    "contains",
    "align",
    "now",
]
