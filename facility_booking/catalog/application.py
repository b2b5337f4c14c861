"""
Прикладной слой контекста каталога.

Просмотр каталога открыт всем, полный список видят сотрудники,
а изменять каталог может только администратор.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from ..shared_kernel import AccessDenied, Actor, EntityId, Money
from ..shared_kernel.infrastructure import LoggingAdapter
from ..shared_kernel.interfaces import IEventBus, ILogger
from . import interfaces as ports
from .domain import Facility

# DTO (Data Transfer Objects) для входящих данных


class FacilityRequest(BaseModel):
    """Запрос на создание или изменение объекта."""

    name: str
    facility_type: str = ""
    description: str = ""
    capacity: int = Field(..., gt=0)
    hourly_rate: Decimal = Field(..., gt=0)
    is_available: bool = True
    image_url: Optional[str] = None


# DTO для исходящих данных


class FacilityDTO(BaseModel):
    """DTO для представления объекта."""

    id: EntityId
    name: str
    facility_type: str
    description: str
    capacity: int
    hourly_rate: Decimal
    currency: str
    is_available: bool
    image_url: Optional[str]

    @classmethod
    def from_domain(cls, facility: Facility) -> "FacilityDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=facility.id,
            name=facility.name,
            facility_type=facility.facility_type,
            description=facility.description,
            capacity=facility.capacity,
            hourly_rate=facility.hourly_rate.amount,
            currency=facility.hourly_rate.currency,
            is_available=facility.is_available,
            image_url=facility.image_url,
        )


class FacilityApplicationService:
    """Сервис приложения для работы с каталогом объектов."""

    def __init__(
        self,
        repository: ports.IFacilityRepository,
        currency: str = "USD",
        event_bus: Optional[IEventBus] = None,
        logger: Optional[ILogger] = None,
    ):
        self._repository = repository
        self._currency = currency
        self._event_bus = event_bus
        self._logger = logger or LoggingAdapter("facility_booking.catalog")

    def list_facilities(self, actor: Actor) -> List[FacilityDTO]:
        """Возвращает все объекты, включая закрытые."""
        if not actor.is_staff:
            raise AccessDenied("Полный каталог доступен только сотрудникам")
        return [FacilityDTO.from_domain(f) for f in self._repository.list()]

    def list_available_facilities(self) -> List[FacilityDTO]:
        """Возвращает объекты, открытые для бронирования."""
        return [FacilityDTO.from_domain(f) for f in self._repository.list_available()]

    def get_facility(self, facility_id: EntityId) -> FacilityDTO:
        return FacilityDTO.from_domain(self._repository.get_by_id(facility_id))

    def register_facility(self, actor: Actor, request: FacilityRequest) -> FacilityDTO:
        """Добавляет объект в каталог."""
        self._require_admin(actor)
        facility = Facility.register(
            name=request.name,
            facility_type=request.facility_type,
            description=request.description,
            capacity=request.capacity,
            hourly_rate=self._money(request.hourly_rate),
            is_available=request.is_available,
            image_url=request.image_url,
        )
        self._repository.add(facility)
        self._logger.info(
            "Facility registered", facility_id=facility.id, actor_id=actor.id
        )
        self._publish(facility)
        return FacilityDTO.from_domain(facility)

    def update_facility(
        self, actor: Actor, facility_id: EntityId, request: FacilityRequest
    ) -> FacilityDTO:
        """Обновляет карточку объекта."""
        self._require_admin(actor)
        facility = self._repository.get_by_id(facility_id)
        facility.update_details(
            name=request.name,
            facility_type=request.facility_type,
            description=request.description,
            capacity=request.capacity,
            hourly_rate=self._money(request.hourly_rate),
            is_available=request.is_available,
            image_url=request.image_url,
        )
        self._repository.update(facility)
        self._logger.info(
            "Facility updated",
            facility_id=facility.id,
            is_available=facility.is_available,
            actor_id=actor.id,
        )
        self._publish(facility)
        return FacilityDTO.from_domain(facility)

    def remove_facility(self, actor: Actor, facility_id: EntityId) -> None:
        """Удаляет объект из каталога."""
        self._require_admin(actor)
        facility = self._repository.get_by_id(facility_id)
        self._repository.remove(facility_id)
        facility.mark_removed()
        self._logger.info("Facility removed", facility_id=facility_id, actor_id=actor.id)
        self._publish(facility)

    def _money(self, amount: Decimal) -> Money:
        return Money(amount=amount, currency=self._currency)

    def _publish(self, facility: Facility) -> None:
        events = facility.pull_domain_events()
        if self._event_bus is None:
            return
        for event in events:
            self._event_bus.publish(event)

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise AccessDenied("Изменять каталог может только администратор")
