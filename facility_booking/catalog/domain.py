"""
Доменная модель контекста каталога объектов.

Объект (Facility) - бронируемый ресурс: зал, студия, площадка.
Каталог владеет описанием, вместимостью, тарифом и флагом доступности.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from ..shared_kernel import (
    BusinessRuleValidationException,
    DomainEvent,
    EntityId,
    Money,
    generate_id,
    now,
)


class FacilityRegistered(DomainEvent):
    """Событие добавления объекта в каталог."""

    facility_id: EntityId
    name: str


class FacilityUpdated(DomainEvent):
    """Событие изменения объекта."""

    facility_id: EntityId
    is_available: bool


class FacilityRemoved(DomainEvent):
    """Событие удаления объекта из каталога."""

    facility_id: EntityId


class Facility(BaseModel):
    """Бронируемый объект."""

    id: EntityId = Field(default_factory=generate_id)
    name: str
    facility_type: str = ""
    description: str = ""
    capacity: int = Field(..., gt=0)
    hourly_rate: Money
    is_available: bool = True
    image_url: Optional[str] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    _domain_events: List[DomainEvent] = PrivateAttr(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Название объекта не может быть пустым")
        return v.strip()

    @field_validator("hourly_rate")
    @classmethod
    def rate_is_positive(cls, v: Money) -> Money:
        if v.amount <= 0:
            raise ValueError("Почасовой тариф должен быть положительным")
        return v

    @property
    def domain_events(self) -> List[DomainEvent]:
        """Возвращает список доменных событий."""
        return list(self._domain_events)

    def pull_domain_events(self) -> List[DomainEvent]:
        events = list(self._domain_events)
        self._domain_events.clear()
        return events

    @classmethod
    def register(
        cls,
        name: str,
        capacity: int,
        hourly_rate: Money,
        facility_type: str = "",
        description: str = "",
        is_available: bool = True,
        image_url: Optional[str] = None,
    ) -> "Facility":
        """Создает новый объект каталога."""
        facility = cls(
            name=name,
            facility_type=facility_type,
            description=description,
            capacity=capacity,
            hourly_rate=hourly_rate,
            is_available=is_available,
            image_url=image_url,
        )
        facility._domain_events.append(
            FacilityRegistered(facility_id=facility.id, name=facility.name)
        )
        return facility

    def update_details(
        self,
        name: str,
        capacity: int,
        hourly_rate: Money,
        facility_type: str = "",
        description: str = "",
        is_available: bool = True,
        image_url: Optional[str] = None,
    ) -> None:
        """
        Обновляет карточку объекта.

        Существующие бронирования не затрагиваются: новый тариф действует
        только для новых бронирований, а снятие доступности лишь запрещает
        новые.
        """
        if capacity <= 0:
            raise BusinessRuleValidationException("Вместимость должна быть положительной")
        if hourly_rate.amount <= 0:
            raise BusinessRuleValidationException(
                "Почасовой тариф должен быть положительным"
            )
        if not name.strip():
            raise BusinessRuleValidationException("Название объекта не может быть пустым")

        self.name = name.strip()
        self.facility_type = facility_type
        self.description = description
        self.capacity = capacity
        self.hourly_rate = hourly_rate
        self.is_available = is_available
        self.image_url = image_url
        self.updated_at = now()
        self._domain_events.append(
            FacilityUpdated(facility_id=self.id, is_available=self.is_available)
        )

    def mark_removed(self) -> None:
        self._domain_events.append(FacilityRemoved(facility_id=self.id))
