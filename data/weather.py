"""
OpenWeatherMap forecast client.

Given (lat, lon), returns the 5 day / 3 hour forecast and the current
conditions. Needs OPENWEATHER_API_KEY.

HTTP failures are not swallowed here: requests' exceptions propagate so the
web layer can tell the user what went wrong.
"""

import requests
from dataclasses import dataclass

from config import API_TIMEOUT, OPENWEATHER_BASE


FORECAST_URL = f"{OPENWEATHER_BASE}/data/2.5/forecast"
CURRENT_URL = f"{OPENWEATHER_BASE}/data/2.5/weather"


class WeatherDataError(Exception):
    """Provider answered, but not with the shape we expect."""


class ServiceNotConfigured(Exception):
    """No usable OPENWEATHER_API_KEY."""


@dataclass(frozen=True)
class ForecastSample:
    """One 3-hour forecast slot."""
    timestamp: int            # slot start, unix seconds
    rain_mm: float | None     # rain volume for the slot (mm), None if not reported
    description: str
    icon: str
    temp: float               # °C (metric) or °F (imperial)
    humidity: int             # %
    wind_speed: float         # m/s (metric) or mph (imperial)


@dataclass
class Forecast:
    city_name: str
    samples: list[ForecastSample]


@dataclass
class CurrentConditions:
    temp: float
    feels_like: float
    description: str
    icon: str
    humidity: int
    pressure: int             # hPa
    wind_speed: float
    wind_direction: int | None  # degrees
    visibility_m: int | None    # metres, regardless of units
    sunrise: int              # unix seconds
    sunset: int               # unix seconds


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _first_condition(item: dict) -> dict:
    conditions = item.get("weather") or [{}]
    return conditions[0]


def parse_forecast_sample(item: dict) -> ForecastSample:
    """Map one entry of the forecast "list" to a ForecastSample."""
    try:
        rain = (item.get("rain") or {}).get("3h")
        condition = _first_condition(item)
        return ForecastSample(
            timestamp=int(item["dt"]),
            rain_mm=float(rain) if rain is not None else None,
            description=condition.get("description", ""),
            icon=condition.get("icon", ""),
            temp=float(item["main"]["temp"]),
            humidity=int(item["main"]["humidity"]),
            wind_speed=float(item["wind"]["speed"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise WeatherDataError(f"malformed forecast entry: {e!r}") from e


def parse_current(data: dict) -> CurrentConditions:
    try:
        condition = _first_condition(data)
        main = data["main"]
        wind = data.get("wind") or {}
        return CurrentConditions(
            temp=float(main["temp"]),
            feels_like=float(main["feels_like"]),
            description=condition.get("description", ""),
            icon=condition.get("icon", ""),
            humidity=int(main["humidity"]),
            pressure=int(main["pressure"]),
            wind_speed=float(wind.get("speed", 0.0)),
            wind_direction=wind.get("deg"),
            visibility_m=data.get("visibility"),
            sunrise=int(data["sys"]["sunrise"]),
            sunset=int(data["sys"]["sunset"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise WeatherDataError(f"malformed current conditions: {e!r}") from e


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

def _get_json(url: str, lat: float, lon: float, units: str, api_key: str) -> dict:
    resp = requests.get(
        url,
        params={"lat": lat, "lon": lon, "units": units, "appid": api_key},
        timeout=API_TIMEOUT,
    )
    resp.raise_for_status()
    try:
        return resp.json()
    except ValueError as e:
        raise WeatherDataError(f"non-JSON response from {url}") from e


def fetch_forecast(lat: float, lon: float, units: str, api_key: str) -> Forecast:
    """Call /data/2.5/forecast and return every 3h slot, oldest first."""
    data = _get_json(FORECAST_URL, lat, lon, units, api_key)
    try:
        items = data["list"]
        city_name = data["city"]["name"]
    except (KeyError, TypeError) as e:
        raise WeatherDataError(f"malformed forecast response: {e!r}") from e

    samples = [parse_forecast_sample(item) for item in items]
    print(f"[WEATHER] Forecast for {city_name}: {len(samples)} slots")
    return Forecast(city_name=city_name, samples=samples)


def fetch_current(lat: float, lon: float, units: str, api_key: str) -> CurrentConditions:
    """Call /data/2.5/weather for the conditions right now."""
    return parse_current(_get_json(CURRENT_URL, lat, lon, units, api_key))
