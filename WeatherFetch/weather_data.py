"""Weather domain model - location queries and the decoded weather result."""
import math
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ByCity:
    """Location given as free-text city name, e.g. "London" or "Paris,FR"."""
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("City name must be a non-empty string")


@dataclass(frozen=True)
class ByCoordinates:
    """
    Location given as a latitude/longitude pair.

    Latitude is expected in [-90, 90] and longitude in [-180, 180], but the
    range is left for the remote API to enforce. Only non-finite values are
    rejected since they cannot be written into a request URL.
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        for label, value in (("latitude", self.latitude), ("longitude", self.longitude)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{label} must be a number, got {value!r}")
            try:
                finite = math.isfinite(value)
            except OverflowError as e:
                raise ValueError(f"{label} out of float range: {e}") from e
            if not finite:
                raise ValueError(f"{label} must be finite, got {value!r}")


LocationQuery = Union[ByCity, ByCoordinates]


@dataclass(frozen=True)
class WeatherResult:
    """Current weather for one location, as delivered to observers."""
    condition_id: int  # OpenWeather condition code, e.g. 800 for clear sky
    city_name: str
    temperature_celsius: float
    condition_description: str = ""  # e.g. "light rain"

    @property
    def condition_name(self) -> str:
        """Icon name for the condition group of condition_id."""
        cid = self.condition_id
        if 200 <= cid <= 232:
            return "cloud.bolt"
        elif 300 <= cid <= 321:
            return "cloud.drizzle"
        elif 500 <= cid <= 531:
            return "cloud.rain"
        elif 600 <= cid <= 622:
            return "cloud.snow"
        elif 701 <= cid <= 781:
            return "cloud.fog"
        elif cid == 800:
            return "sun.max"
        elif 801 <= cid <= 804:
            return "cloud.bolt"
        return "cloud"

    @property
    def temperature_string(self) -> str:
        """Temperature with one decimal place, e.g. "18.5"."""
        return f"{self.temperature_celsius:.1f}"
