"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import FrozenSet, Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Общие типы идентификаторов
EntityId = UUID

CENT = Decimal("0.01")


def generate_id() -> UUID:
    """Генерирует новый UUID."""
    return uuid4()


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    default_message = "Ошибка предметной области"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ConcurrencyException(DomainException):
    """Исключение при конфликте версий."""

    default_message = "Объект был изменен другим запросом"


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    default_message = "Нарушено бизнес-правило"


class InvalidInterval(BusinessRuleValidationException):
    """Начало интервала не раньше его конца."""

    default_message = "Время окончания должно быть позже времени начала"


class BookingInPast(InvalidInterval):
    """Бронирование начинается в прошлом."""

    default_message = "Бронирование должно начинаться в будущем"


class SlotUnavailable(BusinessRuleValidationException):
    """Интервал пересекается с активным бронированием объекта."""

    default_message = "Выбранное время пересекается с существующим бронированием"


class FacilityUnavailable(BusinessRuleValidationException):
    """Объект закрыт для новых бронирований."""

    default_message = "Объект недоступен для бронирования"


class InvalidTransition(BusinessRuleValidationException):
    """Переход статуса запрещен из текущего состояния или для этой роли."""

    default_message = "Недопустимая смена статуса бронирования"


class NotFound(DomainException):
    """Запрошенный объект или бронирование не существует."""

    default_message = "Объект не найден"


class AccessDenied(DomainException):
    """У пользователя нет прав на операцию."""

    default_message = "Недостаточно прав для выполнения операции"


class Money(BaseModel):
    """Денежная сумма с валютой."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., ge=0, description="Сумма денег")
    currency: str = Field(
        default="USD", min_length=3, max_length=3, description="Код валюты (ISO 4217)"
    )

    @field_validator("currency")
    @classmethod
    def currency_is_upper(cls, v: str) -> str:
        if not v.isalpha() or not v.isupper():
            raise ValueError("Код валюты должен состоять из 3 заглавных букв")
        return v

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        if self.currency != other.currency:
            raise ValueError("Нельзя складывать разные валюты")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __mul__(self, multiplier: Union[int, float, Decimal]) -> "Money":
        if isinstance(multiplier, bool) or not isinstance(
            multiplier, (int, float, Decimal)
        ):
            raise TypeError("Множитель должен быть числом")
        factor = Decimal(str(multiplier))
        if factor < 0:
            raise ValueError("Множитель не может быть отрицательным")
        return Money(amount=self.amount * factor, currency=self.currency)

    def rounded(self) -> "Money":
        """Округляет сумму до центов."""
        return Money(
            amount=self.amount.quantize(CENT, rounding=ROUND_HALF_UP),
            currency=self.currency,
        )

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


def align(instant: datetime, reference: datetime) -> datetime:
    """
    Приводит момент к соглашению reference о часовом поясе.

    Наивное время считается настенным временем в поясе reference.
    """
    if reference.tzinfo is not None and instant.tzinfo is None:
        return instant.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None and instant.tzinfo is not None:
        return instant.replace(tzinfo=None)
    return instant


class TimeInterval(BaseModel):
    """
    Полуоткрытый интервал времени [start, end).

    Соседние интервалы (a.end == b.start) не пересекаются,
    поэтому бронирования можно ставить встык. Интервал с наивным
    и осведомленным концами отклоняется; при сравнении разных
    интервалов другая сторона приводится к поясу этого (см. align).
    """

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def start_before_end(self) -> "TimeInterval":
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise InvalidInterval(
                "Начало и окончание должны быть заданы в одном соглашении о поясе"
            )
        if self.start >= self.end:
            raise InvalidInterval()
        return self

    @property
    def zone(self) -> Optional[tzinfo]:
        return self.start.tzinfo

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_hours(self) -> Decimal:
        """Длительность в часах (дробная)."""
        return Decimal(str(self.duration.total_seconds())) / Decimal(3600)

    def overlaps(self, other: "TimeInterval") -> bool:
        other_start = align(other.start, self.start)
        other_end = align(other.end, self.start)
        return self.start < other_end and other_start < self.end

    def contains(self, instant: datetime) -> bool:
        instant = align(instant, self.start)
        return self.start <= instant < self.end


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Истина, если интервалы имеют общую точку."""
    return a.overlaps(b)


def contains(a: TimeInterval, instant: datetime) -> bool:
    """Истина, если момент лежит внутри полуоткрытого интервала."""
    return a.contains(instant)


class BookingStatus(str, Enum):
    """Статусы бронирования."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})


class Role(str, Enum):
    """Роли пользователей."""

    MEMBER = "MEMBER"
    STAFF = "STAFF"
    ADMIN = "ADMIN"


class Actor(BaseModel):
    """Пользователь, от имени которого выполняется операция."""

    model_config = ConfigDict(frozen=True)

    id: EntityId
    roles: FrozenSet[Role] = frozenset({Role.MEMBER})

    @property
    def is_staff(self) -> bool:
        """Сотрудник или администратор."""
        return bool(self.roles & {Role.STAFF, Role.ADMIN})

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    def owns(self, owner_id: EntityId) -> bool:
        return self.id == owner_id


class DomainEvent(BaseModel):
    """Базовый класс для всех доменных событий."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_on: datetime = Field(default_factory=lambda: now())

    @property
    def event_type(self) -> str:
        return type(self).__name__


# Общие утилиты
def now() -> datetime:
    """Возвращает текущую дату и время."""
    return datetime.now()
