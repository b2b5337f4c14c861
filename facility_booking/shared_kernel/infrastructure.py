"""
Общая инфраструктура: адаптер логирования и шина событий в памяти.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Type

from . import interfaces as ports
from .domain import DomainEvent

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Настраивает корневой логгер приложения."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("facility_booking").setLevel(level)


class LoggingAdapter(ports.ILogger):
    """Логгер поверх стандартного logging; контекст выводится как JSON."""

    def __init__(self, name: str = "facility_booking") -> None:
        self._logger = logging.getLogger(name)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def _log(self, level: int, message: str, context: Dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if context:
            message = f"{message} {json.dumps(context, default=str, sort_keys=True)}"
        self._logger.log(level, message)


class InMemoryEventBus(ports.IEventBus):
    """Реализация шины событий в памяти."""

    def __init__(self, logger: Optional[ports.ILogger] = None):
        self._subscribers: Dict[Type[DomainEvent], List[Callable]] = {}
        self._logger = logger or LoggingAdapter("facility_booking.events")

    def publish(self, event: DomainEvent) -> None:
        """Публикует событие."""
        event_type = type(event)
        handlers = self._subscribers.get(event_type, [])
        if not handlers:
            self._logger.debug(f"No subscribers for event type {event.event_type}")
            return

        self._logger.info(f"Publishing event: {event.event_type}", event_id=event.event_id)

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # Сбой подписчика не отменяет уже зафиксированную операцию
                self._logger.error(
                    f"Error in event handler for {event.event_type}",
                    error=str(e),
                    event=event.model_dump(),
                )

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable) -> None:
        """Подписывает обработчик на события указанного типа."""
        self._subscribers.setdefault(event_type, []).append(handler)
        self._logger.debug(f"Subscribed handler to {event_type.__name__} events")
