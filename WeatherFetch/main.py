"""Command-line front end: fetch current weather for a city or coordinates."""
import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from openweather_client import WeatherClient
from weather_data import WeatherResult
from weather_observer import WeatherClientError, WeatherObserver


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Current weather lookup")
    location = parser.add_mutually_exclusive_group(required=True)
    location.add_argument("--city", help="City name, e.g. 'London' or 'Paris,FR'")
    location.add_argument("--lat", type=float, help="Latitude (requires --lon)")
    parser.add_argument("--lon", type=float, help="Longitude (requires --lat)")
    parser.add_argument("--units", choices=["metric", "imperial", "standard"], default=None)
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.lat is not None and args.lon is None:
        parser.error("--lat requires --lon")
    if args.lon is not None and args.lat is None:
        parser.error("--lon requires --lat")
    return args


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def load_config(units: Optional[str]) -> Tuple[str, str, str]:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    base_url = os.getenv("WEATHER_BASE_URL", WeatherClient.BASE_URL)
    units = units or os.getenv("WEATHER_UNITS", "metric")

    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    logging.info("Configuration loaded: base_url=%s units=%s", base_url, units)
    return api_key, base_url, units


class PrintingObserver(WeatherObserver):
    """Writes each delivery to stdout."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.succeeded = False

    def on_weather_updated(self, result: WeatherResult) -> None:
        self.succeeded = True
        print(
            f"{result.city_name}: {result.temperature_string}° "
            f"{result.condition_name} ({result.condition_description})",
            file=self.stream,
        )

    def on_weather_failed(self, error: WeatherClientError) -> None:
        print(f"Weather lookup failed: {error}", file=self.stream)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, base_url, units = load_config(args.units)

    observer = PrintingObserver()
    with WeatherClient(
        api_key=api_key,
        units=units,
        base_url=base_url,
        timeout=args.timeout,
        observer=observer,
    ) as client:
        if args.city is not None:
            future = client.fetch_by_city(args.city)
        else:
            future = client.fetch_by_coordinates(args.lat, args.lon)

        # The observer has already reported the outcome; this only waits
        if future.exception() is not None:
            return 1
    return 0 if observer.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
