# OOP boundary for external i/o
# all http and key handling live here, so the rest of the code is pure and testable
# a thread-local session per ThreadPoolExecutor worker, both endpoints are fetched in parallel

from __future__ import annotations
import logging
import os
import threading
from numbers import Real
from typing import Dict, Any, List
import requests
from dotenv import load_dotenv

load_dotenv()  # in production the environment variable is injected by the shell or the service manager

logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENWEATHERMAP_API_KEY"


class WeatherAPIError(RuntimeError):
    # root of every error this layer raises, carries a clear message for the caller
    pass


class ConfigurationError(WeatherAPIError):
    pass


class NotFoundOrProviderError(WeatherAPIError):
    # either endpoint did not deliver a usable answer
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CityNotFoundError(NotFoundOrProviderError):
    pass


class ProviderError(NotFoundOrProviderError):
    # rate limit, bad key, server or transport failure, unexpected payload
    pass


class WeatherAPIClient:
    # this class encapsulates provider details like base URL, params, auth and timeouts
    BASE_URL = "https://api.openweathermap.org/data/2.5"
    DEFAULT_TIMEOUT = 10.0
    UNITS = "metric"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = BASE_URL,
        user_agent: str = "weatheryou/0.1",
    ):
        self.api_key = api_key or os.getenv(API_KEY_ENV)
        if not self.api_key:
            # fail before any request is made
            raise ConfigurationError(f"{API_KEY_ENV} not set")

        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent

        # each worker thread lazily obtains its own session through _session()
        self._local = threading.local()
        # every session handed out, so close() can reach the ones owned by other threads
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        return s

    def _session(self) -> requests.Session:
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
            with self._sessions_lock:
                self._sessions.append(sess)
        return sess

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for sess in sessions:
            sess.close()
        # threads that survive close() build a fresh session on their next request
        self._local = threading.local()

    def _get(self, endpoint: str, city_query: str) -> Dict[str, Any]:
        # requests url-encodes the free-text city for us
        params = {
            "q": city_query,
            "appid": self.api_key,
            "units": self.UNITS,
        }
        url = f"{self.base_url}/{endpoint}"
        logger.debug("GET %s q=%r", url, city_query)

        try:
            resp = self._session().get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ProviderError(f"Request error for {city_query!r} on /{endpoint}: {exc}") from exc

        if resp.status_code == 404:
            raise CityNotFoundError(f"City {city_query!r} not found on /{endpoint}", status_code=404)
        if resp.status_code >= 400:
            # include a short response snippet to speed up triage
            snippet = (resp.text or "")[:300]
            raise ProviderError(
                f"HTTP {resp.status_code} for {city_query!r} on /{endpoint}. Body: {snippet}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(f"Invalid JSON for {city_query!r} on /{endpoint}: {exc}") from exc

    def get_current(self, city_query: str) -> Dict[str, Any]:
        data = self._get("weather", city_query)
        try:
            temp = data["main"]["temp"]
        except (KeyError, TypeError) as exc:
            raise ProviderError("Unexpected API shape: missing main.temp") from exc
        # bool is an int subclass but never a temperature
        if isinstance(temp, bool) or not isinstance(temp, Real):
            raise ProviderError(f"Unexpected API shape: main.temp is not a number ({temp!r})")
        return data

    def get_forecast(self, city_query: str) -> Dict[str, Any]:
        data = self._get("forecast", city_query)
        if not isinstance(data, dict) or not isinstance(data.get("list"), list):
            raise ProviderError("Unexpected API shape: missing list")
        return data
