# text presentation of a WeatherReport, the only place the unit toggle applies

from __future__ import annotations
import math
from datetime import date
from typing import List

from .models import CurrentConditions, DailySummary, WeatherReport, celsius_to_fahrenheit

UNITS = ("C", "F")
ICON_URL = "https://openweathermap.org/img/wn/{code}{suffix}.png"


def round_half_up(value: float) -> int:
    # builtin round() is banker's rounding, 2.5 would show as 2
    return math.floor(value + 0.5)


def display_temp(celsius: float, unit: str = "C") -> int:
    if unit not in UNITS:
        raise ValueError(f"unit must be one of {UNITS} (got {unit!r})")
    value = celsius_to_fahrenheit(celsius) if unit == "F" else celsius
    return round_half_up(value)


def icon_url(code: str | None, large: bool = False) -> str | None:
    if not code:
        return None
    return ICON_URL.format(code=code, suffix="@2x" if large else "")


def day_label(day: date) -> str:
    # no zero padding on the day, "Mon, Jan 6"
    return f"{day:%a, %b} {day.day}"


def wind_kmh(speed_ms: float | None) -> int:
    return round_half_up((speed_ms or 0) * 3.6)


def render_current(current: CurrentConditions, unit: str = "C") -> List[str]:
    title = current.city
    if current.country:
        title = f"{title}, {current.country}"
    lines = [title, f"{display_temp(current.temperature_c, unit)}°{unit}"]
    if current.description:
        lines.append(current.description)
    if current.humidity is not None:
        lines.append(f"Humidity: {current.humidity}%")
    lines.append(f"Wind: {wind_kmh(current.wind_speed_ms)} km/h")
    return lines


def render_daily(days: List[DailySummary], unit: str = "C") -> List[str]:
    lines = [f"{len(days)}-Day Forecast"]
    for d in days:
        hi = display_temp(d.max_temp_c, unit)
        lo = display_temp(d.min_temp_c, unit)
        line = f"  {day_label(d.date)}  {hi}° / {lo}°"
        if d.icon:
            line += f"  [{d.icon}]"
        lines.append(line)
    return lines


def render_report(report: WeatherReport, unit: str = "C") -> str:
    lines = render_current(report.current, unit)
    lines.append("")
    lines.extend(render_daily(report.daily, unit))
    return "\n".join(lines)
