"""OpenWeather Current Weather API client with observer delivery."""
import json
import logging
import math
import weakref
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

import requests

from request_builder import build_url
from weather_data import ByCity, ByCoordinates, LocationQuery, WeatherResult
from weather_observer import (
    BuildError,
    DecodeError,
    EmptyResponseError,
    TransportError,
    WeatherClientError,
    WeatherObserver,
)

Delivery = Callable[[], None]
Dispatcher = Callable[[Delivery], None]


def deliver_inline(delivery: Delivery) -> None:
    """Default dispatcher: run the delivery on the worker thread."""
    delivery()


class WeatherClient:
    """
    Fetches current weather by city name or coordinates.

    Uses the free Current Weather API: https://openweathermap.org/current

    Each fetch issues exactly one GET on a background executor and returns
    immediately with a Future for that call. When the request completes the
    registered observer gets exactly one callback, on_weather_updated or
    on_weather_failed, run through the configured dispatcher. The Future is
    resolved with the same WeatherResult, or fails with the same
    WeatherClientError, so overlapping calls can be told apart.

    The observer is held weakly and looked up at delivery time, so a
    replacement observer receives results of requests already in flight.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(
        self,
        api_key: str,
        units: str = "metric",
        base_url: str = BASE_URL,
        timeout: Optional[float] = None,
        observer: Optional[WeatherObserver] = None,
        dispatcher: Optional[Dispatcher] = None,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: OpenWeather API key
            units: Temperature units ("metric", "imperial", or "standard")
            base_url: Current Weather API endpoint
            timeout: HTTP timeout in seconds (None keeps the requests default)
            observer: Initial observer, held by weak reference
            dispatcher: Callable that runs a delivery on the execution context
                observers expect, e.g. loop.call_soon_threadsafe
            executor: Executor for requests; a 4-worker thread pool is created
                and owned by the client if omitted
        """
        self.api_key = api_key
        self.units = units
        self.base_url = base_url
        self.timeout = timeout
        self.dispatcher = dispatcher or deliver_inline
        self._observer_ref: Optional[weakref.ref] = None
        self.observer = observer

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="weather-fetch"
        )

    @property
    def observer(self) -> Optional[WeatherObserver]:
        if self._observer_ref is None:
            return None
        return self._observer_ref()

    @observer.setter
    def observer(self, observer: Optional[WeatherObserver]) -> None:
        self._observer_ref = weakref.ref(observer) if observer is not None else None

    def fetch_by_city(self, name: str) -> "Future[WeatherResult]":
        """Fetch current weather for a city name."""
        try:
            query = ByCity(name)
        except ValueError as e:
            return self._fail_now(BuildError(f"Invalid city name {name!r}: {e}"))
        return self.fetch(query)

    def fetch_by_coordinates(self, lat: float, lon: float) -> "Future[WeatherResult]":
        """Fetch current weather for a latitude/longitude pair (range not checked)."""
        try:
            query = ByCoordinates(lat, lon)
        except ValueError as e:
            return self._fail_now(BuildError(f"Invalid coordinates ({lat!r}, {lon!r}): {e}"))
        return self.fetch(query)

    def fetch(self, query: LocationQuery) -> "Future[WeatherResult]":
        """Fetch current weather for an already constructed location query."""
        try:
            url = build_url(self.base_url, self.api_key, self.units, query)
        except TypeError as e:
            return self._fail_now(BuildError(str(e)))
        return self.perform_request(url)

    def perform_request(self, url: str) -> "Future[WeatherResult]":
        """Issue one GET for url in the background. No retries, no dedupe."""
        try:
            return self._executor.submit(self._run_request, url)
        except RuntimeError as e:
            # Executor already shut down
            error = WeatherClientError(f"Client is closed: {e}")
            error.__cause__ = e
            return self._fail_now(error)

    def parse_response(self, body: Any) -> WeatherResult:
        """
        Decode a Current Weather API response body.

        Args:
            body: Raw response body (bytes or str)

        Returns:
            WeatherResult: Decoded weather

        Raises:
            DecodeError: If the body is empty, not JSON, or not the expected shape
        """
        if not body:
            logging.error("Response body is empty")
            raise EmptyResponseError("Response body is empty")

        try:
            data = json.loads(body)
        except ValueError as e:
            logging.error(f"Failed to parse API response: {e}")
            raise DecodeError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise DecodeError("Response is not a JSON object")
        logging.debug(f"API response data keys: {list(data.keys())}")

        name = data.get("name")
        if not isinstance(name, str):
            raise DecodeError("Response missing 'name'")

        main_data = data.get("main")
        if not isinstance(main_data, dict):
            raise DecodeError("Response missing 'main' block")
        temp = main_data.get("temp")
        if not _is_number(temp):
            raise DecodeError("Response missing numeric 'main.temp'")
        try:
            temperature = float(temp)
        except OverflowError as e:
            raise DecodeError(f"'main.temp' out of range: {e}") from e
        if not math.isfinite(temperature):
            raise DecodeError(f"'main.temp' is not finite: {temp!r}")

        weather_array = data.get("weather")
        if not isinstance(weather_array, list) or not weather_array:
            logging.error("Response missing 'weather' array")
            raise DecodeError("Response missing 'weather' array")
        for index, condition in enumerate(weather_array):
            if not isinstance(condition, dict):
                raise DecodeError(f"weather[{index}] is not an object")
            condition_id = condition.get("id")
            if isinstance(condition_id, bool) or not isinstance(condition_id, int):
                raise DecodeError(f"weather[{index}] missing integer 'id'")
            if not isinstance(condition.get("description"), str):
                raise DecodeError(f"weather[{index}] missing 'description'")

        weather = weather_array[0]
        result = WeatherResult(
            condition_id=weather["id"],
            city_name=name,
            temperature_celsius=temperature,
            condition_description=weather["description"],
        )
        logging.info(
            f"Successfully parsed weather data: {result.city_name} "
            f"{result.temperature_celsius}, condition {result.condition_id}"
        )
        return result

    def close(self) -> None:
        """Shut down the executor if the client created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "WeatherClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _run_request(self, url: str) -> WeatherResult:
        try:
            result = self._request(url)
        except WeatherClientError as e:
            self._dispatch("on_weather_failed", e)
            raise
        except Exception as e:
            logging.exception(f"Unexpected error during weather request: {e}")
            error = WeatherClientError(f"Unexpected error: {e}")
            error.__cause__ = e
            self._dispatch("on_weather_failed", error)
            raise error
        self._dispatch("on_weather_updated", result)
        return result

    def _request(self, url: str) -> WeatherResult:
        try:
            logging.info(f"Making OpenWeather API request: {self.base_url}")
            response = requests.get(url, timeout=self.timeout)
            logging.info(f"API response status: {response.status_code}")
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logging.error(f"API request failed: {e}")
            raise self._error_from_response(e.response) from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise TransportError(f"Network error: {e}") from e

        return self.parse_response(response.content)

    def _error_from_response(self, response: Optional[requests.Response]) -> TransportError:
        """Build a TransportError from an OpenWeather error response."""
        if response is None:
            return TransportError("HTTP error without response")

        status = response.status_code
        try:
            error_data = response.json()
            cod = error_data.get("cod", status)
            message = error_data.get("message", "Unknown error")
            logging.error(f"OpenWeather API error response: {error_data}")
            return TransportError(f"OpenWeather API error {cod}: {message}", status)
        except (ValueError, AttributeError):
            # Not a JSON object, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {status}, body: {response.text[:500]}")
            return TransportError(f"HTTP {status}: {response.text[:200]}", status)

    def _fail_now(self, error: WeatherClientError) -> "Future[WeatherResult]":
        logging.error(f"Weather request not issued: {error}")
        future: Future = Future()
        self._dispatch("on_weather_failed", error)
        future.set_exception(error)
        return future

    def _dispatch(self, hook: str, payload: Any) -> None:
        def deliver() -> None:
            # Resolved at delivery time, not at request time
            observer = self.observer
            if observer is None:
                logging.warning(f"No weather observer registered, dropping {hook}")
                return
            try:
                getattr(observer, hook)(payload)
            except Exception:
                logging.exception(f"Weather observer {hook} raised")

        try:
            self.dispatcher(deliver)
        except Exception:
            logging.exception(f"Dispatcher failed to schedule {hook}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
