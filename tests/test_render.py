from datetime import date

import pytest

from weatheryou.models import CurrentConditions, DailySummary, WeatherReport, celsius_to_fahrenheit
from weatheryou.render import day_label, display_temp, icon_url, render_report, round_half_up, wind_kmh


def test_celsius_to_fahrenheit():
    assert celsius_to_fahrenheit(0) == 32
    assert celsius_to_fahrenheit(100) == 212
    assert celsius_to_fahrenheit(-40) == -40


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(2.49) == 2


def test_display_temp_units():
    assert display_temp(4.5, "C") == 5
    assert display_temp(4.5, "F") == 40
    with pytest.raises(ValueError):
        display_temp(1.0, "K")


def test_icon_url_and_helpers():
    assert icon_url("04d", large=True) == "https://openweathermap.org/img/wn/04d@2x.png"
    assert icon_url("04d") == "https://openweathermap.org/img/wn/04d.png"
    assert icon_url(None) is None
    assert day_label(date(2025, 1, 6)) == "Mon, Jan 6"
    assert day_label(date(2025, 1, 16)) == "Thu, Jan 16"
    assert wind_kmh(4.12) == 15
    assert wind_kmh(None) == 0


@pytest.fixture
def report():
    current = CurrentConditions(
        city="Arlington", temperature_c=4.5, country="US", description="broken clouds",
        icon="04d", humidity=64, wind_speed_ms=4.12,
    )
    daily = [
        DailySummary(date(2025, 1, 6), 0.5, 5.8, "04d"),
        DailySummary(date(2025, 1, 7), -2.4, 7.4, None),
    ]
    return WeatherReport(query="Arlington VA", current=current, daily=daily)


def test_render_celsius(report):
    text = render_report(report, "C")
    lines = text.splitlines()
    assert lines[:5] == ["Arlington, US", "5°C", "broken clouds", "Humidity: 64%", "Wind: 15 km/h"]
    assert "2-Day Forecast" in lines
    assert "  Mon, Jan 6  6° / 1°  [04d]" in lines
    assert "  Tue, Jan 7  7° / -2°" in lines


def test_render_fahrenheit_does_not_touch_stored_values(report):
    text = render_report(report, "F")
    assert "40°F" in text
    assert "  Mon, Jan 6  42° / 33°  [04d]" in text
    assert report.daily[0].max_temp_c == 5.8


def test_render_without_country():
    current = CurrentConditions(city="Somewhere", temperature_c=0.0)
    text = render_report(WeatherReport(query="Somewhere", current=current), "C")
    assert text.splitlines()[0] == "Somewhere"
    assert "0-Day Forecast" in text
