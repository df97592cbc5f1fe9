"""Request URL construction for the OpenWeather Current Weather API."""
from urllib.parse import quote

from weather_data import ByCity, ByCoordinates, LocationQuery


def build_url(base: str, api_key: str, units: str, query: LocationQuery) -> str:
    """
    Build the GET URL for a location query.

    Args:
        base: API endpoint, e.g. "https://api.openweathermap.org/data/2.5/weather"
        api_key: OpenWeather API key (not validated here)
        units: Unit system ("metric", "imperial", or "standard")
        query: ByCity or ByCoordinates

    Returns:
        str: base?appid=...&units=... followed by &q=... or &lat=...&lon=...
    """
    url = f"{base}?appid={quote(api_key, safe='')}&units={quote(units, safe='')}"
    if isinstance(query, ByCity):
        return f"{url}&q={quote(query.name, safe='')}"
    if isinstance(query, ByCoordinates):
        # repr() of a float is locale-independent
        return f"{url}&lat={float(query.latitude)!r}&lon={float(query.longitude)!r}"
    raise TypeError(f"Unsupported location query: {query!r}")
