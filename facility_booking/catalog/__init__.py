"""
Модуль контекста каталога объектов (Catalog Context).

Отвечает за учет бронируемых объектов: залов, студий, площадок,
их тарифов и доступности для новых бронирований.
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
