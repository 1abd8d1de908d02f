# models and the unit helper, to keep data shapes explicit and reusable across the app
# celsius is the stored unit everywhere, conversion only happens at display time

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import List


@dataclass(frozen=True)
class IntervalSample:
    # one 3-hour forecast slot as delivered by the provider
    timestamp: int
    temperature_c: float
    icon: str | None = None


@dataclass(frozen=True)
class DailySummary:
    # one UTC calendar day reduced from its interval samples
    date: date
    min_temp_c: float
    max_temp_c: float
    icon: str | None = None


@dataclass(frozen=True)
class CurrentConditions:
    city: str
    temperature_c: float
    country: str | None = None
    description: str | None = None
    icon: str | None = None
    humidity: int | None = None
    wind_speed_ms: float | None = None


@dataclass(frozen=True)
class WeatherReport:
    # everything a single successful search produces
    query: str
    current: CurrentConditions
    daily: List[DailySummary] = field(default_factory=list)


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32
