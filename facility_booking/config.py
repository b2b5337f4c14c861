"""
Настройки движка бронирования.

Значения по умолчанию повторяют принятую сетку: слоты по 1 часу с 08:00 до 20:00.
Любое поле можно переопределить переменной окружения
FACILITY_BOOKING_<ИМЯ_ПОЛЯ>.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

ENV_PREFIX = "FACILITY_BOOKING_"


class SchedulingSettings(BaseModel):
    """Параметры сетки слотов и политик бронирования."""

    slot_granularity_hours: float = Field(1.0, gt=0)
    day_start_hour: float = Field(8, ge=0, le=24)
    day_end_hour: float = Field(20, ge=0, le=24)
    currency: str = Field("USD", min_length=3, max_length=3)
    allow_past_bookings: bool = False
    log_level: str = "INFO"

    @field_validator("currency")
    @classmethod
    def currency_is_upper(cls, v: str) -> str:
        if not v.isalpha() or not v.isupper():
            raise ValueError("Код валюты должен состоять из 3 заглавных букв")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_is_known(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Неизвестный уровень логирования: {v}")
        return level

    @model_validator(mode="after")
    def day_window_is_valid(self) -> "SchedulingSettings":
        if self.day_start_hour >= self.day_end_hour:
            raise ValueError("Начало рабочего дня должно быть раньше его окончания")
        return self

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "SchedulingSettings":
        """Собирает настройки из переменных окружения."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls(**values)
