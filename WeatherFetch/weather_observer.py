"""Observer contract for weather deliveries, plus the client error types."""
from abc import ABC, abstractmethod
from typing import Optional

from weather_data import WeatherResult


class WeatherObserver(ABC):
    """Recipient of fetch outcomes. Exactly one hook fires per fetch."""

    @abstractmethod
    def on_weather_updated(self, result: WeatherResult) -> None:
        """
        Called with the decoded weather after a successful fetch.

        Args:
            result: WeatherResult for the requested location
        """
        pass

    @abstractmethod
    def on_weather_failed(self, error: "WeatherClientError") -> None:
        """
        Called when a fetch fails at build, transport or decode time.

        Args:
            error: TransportError, DecodeError or BuildError
        """
        pass


class WeatherClientError(Exception):
    """Base exception for failures delivered by the weather client."""
    pass


class TransportError(WeatherClientError):
    """Connectivity, DNS, timeout or non-success HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(WeatherClientError):
    """Response body could not be read as current weather."""
    pass


class EmptyResponseError(DecodeError):
    """Request succeeded but the response had no body."""
    pass


class BuildError(WeatherClientError):
    """Location query could not be turned into a request URL."""
    pass
