# orchestration and business rules.
# use ThreadPoolExecutor to run the current + forecast calls concurrently
# provides a pure parser for current conditions, fetch_report, and WeatherSearch which
# reduces every user-facing failure to one displayable message

from __future__ import annotations
import itertools
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass
from numbers import Real
from typing import Callable, Optional

from .client import ConfigurationError, CityNotFoundError, ProviderError, WeatherAPIClient, WeatherAPIError, API_KEY_ENV
from .forecast import DEFAULT_MAX_DAYS, aggregate_daily, parse_interval_samples
from .models import CurrentConditions, WeatherReport
from .storage import KeyValueStore, LAST_CITY_KEY

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a city."
NOT_FOUND_MESSAGE = "City not found. Try another search."
PROVIDER_MESSAGE = "Weather service unavailable. Please try again later."
CONFIG_MESSAGE = f"Missing {API_KEY_ENV}. Set it in the environment or a .env file."


class EmptyInputError(ValueError):
    pass


# transform raw provider payload into our small, typed value object
def parse_current(data) -> CurrentConditions:
    # openweathermap shape: data["main"]["temp"], data["weather"][0], data["sys"]["country"], data["wind"]["speed"]
    try:
        temp = data["main"]["temp"]
    except (KeyError, TypeError) as exc:
        raise ValueError("Unsupported payload shape for parse_current()") from exc
    if isinstance(temp, bool) or not isinstance(temp, Real):
        raise ValueError(f"Unsupported main.temp for parse_current(): {temp!r}")
    temp = float(temp)

    weather = data.get("weather") or [{}]
    main = data["main"]
    return CurrentConditions(
        city=data.get("name") or "",
        temperature_c=temp,
        country=(data.get("sys") or {}).get("country") or None,
        description=weather[0].get("description"),
        icon=weather[0].get("icon"),
        humidity=main.get("humidity"),
        wind_speed_ms=(data.get("wind") or {}).get("speed"),
    )


# fetch both endpoints at once; the first failure wins and no partial report is built
# pass a long-lived pool to keep the client's thread-local sessions warm across searches
def fetch_report(
    client: WeatherAPIClient,
    city: str,
    max_days: int = DEFAULT_MAX_DAYS,
    pool: ThreadPoolExecutor | None = None,
) -> WeatherReport:
    if pool is None:
        with ThreadPoolExecutor(max_workers=2) as own_pool:
            return fetch_report(client, city, max_days=max_days, pool=own_pool)

    futures = {
        pool.submit(client.get_current, city): "current",
        pool.submit(client.get_forecast, city): "forecast",
    }
    payloads = {}
    try:
        for fut in as_completed(futures):
            # re-raises the worker's exception unchanged
            payloads[futures[fut]] = fut.result()
    finally:
        # a shared pool is not torn down here, so wait for the sibling call before returning
        wait(futures)

    try:
        current = parse_current(payloads["current"])
    except ValueError as exc:
        raise ProviderError(f"Unusable current conditions for {city!r}: {exc}") from exc
    daily = aggregate_daily(parse_interval_samples(payloads["forecast"]), max_days=max_days)
    return WeatherReport(query=city, current=current, daily=daily)


@dataclass(frozen=True)
class SearchResult:
    # exactly one of report / error is set
    query: str
    report: Optional[WeatherReport] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.report is not None


def _message_for(exc: Exception) -> str:
    if isinstance(exc, EmptyInputError):
        return EMPTY_QUERY_MESSAGE
    if isinstance(exc, ConfigurationError):
        return CONFIG_MESSAGE
    if isinstance(exc, CityNotFoundError):
        return NOT_FOUND_MESSAGE
    return PROVIDER_MESSAGE


# search front door shared by the CLI and any other caller
# owns the last-searched-city state through an injected store, and guards against out-of-order
# completion: every search takes a generation number, a result finishing after a newer search started is dropped
class WeatherSearch:
    def __init__(
        self,
        store: KeyValueStore,
        client: WeatherAPIClient | None = None,
        api_key: str | None = None,
        max_days: int = DEFAULT_MAX_DAYS,
        client_factory: Callable[..., WeatherAPIClient] = WeatherAPIClient,
    ):
        self.store = store
        self.max_days = max_days
        self._client = client
        self._api_key = api_key
        self._client_factory = client_factory
        self._generations = itertools.count(1)
        self._latest = 0
        # one pool for the lifetime of the search, so worker threads and their sessions are reused
        self._pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="weatheryou")

    def __enter__(self) -> "WeatherSearch":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._pool.shutdown(wait=True)
        if self._client is not None and hasattr(self._client, "close"):
            self._client.close()

    def _get_client(self) -> WeatherAPIClient:
        # built lazily so a missing key only surfaces when a search is attempted
        if self._client is None:
            self._client = self._client_factory(api_key=self._api_key)
        return self._client

    def last_city(self) -> str | None:
        return self.store.get(LAST_CITY_KEY) or None

    def restore(self) -> SearchResult | None:
        city = self.last_city()
        if city is None:
            return None
        logger.debug("restoring last searched city %r", city)
        return self.search(city)

    def search(self, raw_query: str | None) -> SearchResult | None:
        # returns None when a newer search superseded this one
        query = (raw_query or "").strip()
        generation = next(self._generations)
        self._latest = generation

        try:
            if not query:
                raise EmptyInputError("blank search query")
            report = fetch_report(self._get_client(), query, max_days=self.max_days, pool=self._pool)
        except (WeatherAPIError, EmptyInputError) as exc:
            if generation != self._latest:
                logger.warning("discarding stale failure for %r: %s", query, exc)
                return None
            logger.warning("search for %r failed: %s", query, exc)
            return SearchResult(query=query, error=_message_for(exc))

        if generation != self._latest:
            logger.warning("discarding stale result for %r", query)
            return None

        self.store.set(LAST_CITY_KEY, query)
        logger.info("search for %r returned %d forecast days", query, len(report.daily))
        return SearchResult(query=query, report=report)
