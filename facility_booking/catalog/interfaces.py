"""
Интерфейсы (порты) для контекста каталога объектов.
"""

from __future__ import annotations

from typing import List, Protocol

from ..shared_kernel import EntityId
from .domain import Facility


class IFacilityRepository(Protocol):
    """Интерфейс репозитория для объектов."""

    def add(self, facility: Facility) -> None: ...
    def get_by_id(self, facility_id: EntityId) -> Facility: ...
    def update(self, facility: Facility) -> None: ...
    def remove(self, facility_id: EntityId) -> None: ...
    def list(self) -> List[Facility]: ...
    def list_available(self) -> List[Facility]: ...
