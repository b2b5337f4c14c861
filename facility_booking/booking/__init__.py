"""
Модуль контекста бронирования (Booking Context).

Отвечает за бронирование объектов на интервалы времени, включая:
- Проверку пересечений с активными бронированиями
- Сетку доступности на день
- Жизненный цикл бронирования и административные блокировки
- Отбор и сводку бронирований для сотрудников
"""

from . import application, availability, domain, infrastructure, interfaces, reporting

__all__ = [
    "domain",
    "availability",
    "reporting",
    "application",
    "infrastructure",
    "interfaces",
]
