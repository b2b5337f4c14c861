"""
Система бронирования объектов (залов, студий, спортивных площадок).

Ограниченные контексты:
- catalog - каталог бронируемых объектов
- booking - движок расписания и разрешения конфликтов
"""

__version__ = "0.1.0"
