"""
Инфраструктурный слой контекста каталога.

Хранилище объектов в памяти и стартовый набор объектов.
"""

from decimal import Decimal
from typing import Dict, List

from ..shared_kernel import EntityId, Money, NotFound
from . import interfaces as ports
from .domain import Facility


class InMemoryFacilityRepository(ports.IFacilityRepository):
    """Реализация репозитория объектов в памяти."""

    def __init__(self) -> None:
        self._facilities: Dict[EntityId, Facility] = {}

    def add(self, facility: Facility) -> None:
        if facility.id in self._facilities:
            raise ValueError(f"Facility with id {facility.id} already exists")
        self._facilities[facility.id] = self._snapshot(facility)

    def get_by_id(self, facility_id: EntityId) -> Facility:
        if facility_id not in self._facilities:
            raise NotFound(f"Facility with id {facility_id} not found")
        return self._facilities[facility_id].model_copy(deep=True)

    def update(self, facility: Facility) -> None:
        if facility.id not in self._facilities:
            raise NotFound(f"Facility with id {facility.id} not found")
        self._facilities[facility.id] = self._snapshot(facility)

    def remove(self, facility_id: EntityId) -> None:
        if self._facilities.pop(facility_id, None) is None:
            raise NotFound(f"Facility with id {facility_id} not found")

    def list(self) -> List[Facility]:
        return [f.model_copy(deep=True) for f in self._facilities.values()]

    def list_available(self) -> List[Facility]:
        return [f for f in self.list() if f.is_available]

    @staticmethod
    def _snapshot(facility: Facility) -> Facility:
        stored = facility.model_copy(deep=True)
        stored.pull_domain_events()
        return stored


def seed_facilities(repository: ports.IFacilityRepository, currency: str = "USD") -> None:
    """Заполняет каталог стандартными объектами центра."""
    samples = [
        ("Main Gymnasium", "Sports Hall", 200, "75.00",
         "Full-size gymnasium with hardwood floor and bleacher seating."),
        ("Movement Studio", "Studio", 40, "45.00",
         "Mirrored studio ideal for yoga, dance, and group fitness classes."),
        ("Community Meeting Room", "Meeting Room", 30, "30.00",
         "Flexible meeting space with conference tables and AV setup."),
        ("Teaching Kitchen", "Kitchen", 20, "55.00",
         "Community kitchen with prep stations, ovens, and seating area."),
    ]
    for name, facility_type, capacity, rate, description in samples:
        repository.add(
            Facility.register(
                name=name,
                facility_type=facility_type,
                capacity=capacity,
                hourly_rate=Money(amount=Decimal(rate), currency=currency),
                description=description,
            )
        )
