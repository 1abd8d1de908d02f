# pure transformations for the forecast endpoint
# provider payload -> interval samples -> daily summaries, no i/o anywhere in this module

from __future__ import annotations
import logging
import math
from datetime import date, datetime, timezone
from numbers import Integral, Real
from typing import Any, Dict, Iterable, List

from .models import DailySummary, IntervalSample

logger = logging.getLogger(__name__)

DEFAULT_MAX_DAYS = 5


class InvalidSampleError(ValueError):
    # malformed interval data, a contract violation rather than a user-facing condition
    pass


def _temperature(sample: IntervalSample) -> float:
    value = sample.temperature_c
    # bool is an int subclass but never a temperature
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidSampleError(f"temperature must be a number (got {value!r})")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidSampleError(f"temperature must be finite (got {value!r})")
    return value


def _utc_day(sample: IntervalSample) -> date:
    ts = sample.timestamp
    if isinstance(ts, bool) or not isinstance(ts, Real):
        raise InvalidSampleError(f"timestamp must be a number (got {ts!r})")
    if not isinstance(ts, Integral) and not float(ts).is_integer():
        # NaN and +/-inf land here as well
        raise InvalidSampleError(f"timestamp must be whole seconds (got {ts!r})")
    try:
        return datetime.fromtimestamp(int(ts), tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidSampleError(f"timestamp {ts!r} is not a valid calendar date") from exc


# reduce interval samples into per-day min/max summaries, keyed by UTC date
# days come out in the order they are first seen, not calendar order, and a day keeps its first icon
# samples of any day past the first max_days distinct days are ignored
# a bad sample raises InvalidSampleError and nothing is returned
def aggregate_daily(samples: Iterable[IntervalSample], max_days: int = DEFAULT_MAX_DAYS) -> List[DailySummary]:
    if max_days < 0:
        raise ValueError(f"'max_days' must be >= 0 (got {max_days})")

    # dict keeps insertion order, which is the first-seen order we emit
    by_day: Dict[date, List[Any]] = {}
    for sample in samples:
        day = _utc_day(sample)
        temp = _temperature(sample)
        acc = by_day.get(day)
        if acc is None:
            if len(by_day) >= max_days:
                continue
            by_day[day] = [temp, temp, sample.icon]
        else:
            acc[0] = min(acc[0], temp)
            acc[1] = max(acc[1], temp)

    summaries = [
        DailySummary(date=day, min_temp_c=lo, max_temp_c=hi, icon=icon)
        for day, (lo, hi, icon) in by_day.items()
    ]
    logger.debug("aggregated %d daily summaries", len(summaries))
    return summaries


def parse_interval_samples(data) -> List[IntervalSample]:
    # openweathermap shape: data["list"][i] -> {"dt": ..., "main": {"temp": ...}, "weather": [{"icon": ...}]}
    try:
        items = data["list"]
    except (KeyError, TypeError) as exc:
        raise InvalidSampleError("forecast payload has no 'list' of interval samples") from exc

    samples: List[IntervalSample] = []
    for i, item in enumerate(items):
        try:
            ts = item["dt"]
            temp = item["main"]["temp"]
        except (KeyError, TypeError) as exc:
            raise InvalidSampleError(f"interval sample #{i} lacks 'dt' or 'main.temp'") from exc

        try:
            weather = item.get("weather") or []
            icon = weather[0].get("icon") if weather else None
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise InvalidSampleError(f"interval sample #{i} has a malformed 'weather' field") from exc
        samples.append(IntervalSample(timestamp=ts, temperature_c=temp, icon=icon))
    return samples
