"""
Core pipeline — one entry point shared by the web form and the CLI:

  check_weather(location, units, now)
     → Called with an already-validated location string.
     → Returns the result context dict rendered by result.html.

Steps:
  1. Geocode the location (must finish before anything else)
  2. Forecast + current conditions, fetched in parallel
  3. Derive tomorrow's rain summary
  4. Build the result context

Data source (live): OpenWeatherMap (api.openweathermap.org)
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import config
from data.weather import ServiceNotConfigured, fetch_current, fetch_forecast
from geocoder import LocationNotFound, geocode
from rain.engine import derive_rain_summary
from rain.response import build_result


def check_weather(
    location: str,
    units: str = "metric",
    now: datetime | None = None,
    api_key: str | None = None,
) -> dict:
    """
    Run the full rain check for a location.

    Raises:
        ServiceNotConfigured  no usable API key
        LocationNotFound      the geocoder has no match
        requests.RequestException, WeatherDataError  provider failures
    """
    api_key = api_key if api_key is not None else config.OPENWEATHER_API_KEY
    if not config.api_key_configured(api_key):
        print("[PIPELINE] OPENWEATHER_API_KEY is not properly configured")
        raise ServiceNotConfigured()

    print(f"\n{'='*60}")
    print(f"[PIPELINE] Checking rain for: {location} [{units}]")
    print(f"{'='*60}")

    # 1) Geocode
    place = geocode(location, api_key)
    if place is None:
        raise LocationNotFound(location)

    # 2) Forecast + current conditions in parallel
    with ThreadPoolExecutor(max_workers=2) as pool:
        forecast_future = pool.submit(fetch_forecast, place.lat, place.lon, units, api_key)
        current_future = pool.submit(fetch_current, place.lat, place.lon, units, api_key)
        forecast = forecast_future.result()
        current = current_future.result()

    # 3) Derive
    now = now or datetime.now()
    summary = derive_rain_summary(forecast.samples, now)
    print(
        f"[PIPELINE] Rain: will_rain={summary.will_rain} "
        f"chance={summary.chance_of_rain}% "
        f"total={summary.total_rain_mm:.1f}mm max={summary.max_rain_mm:.1f}mm "
        f"({summary.considered_count} slots"
        f"{', fallback' if summary.used_fallback else ''})"
    )

    # 4) Format
    result = build_result(place, forecast, current, summary, units, location)
    print(f"[PIPELINE] Successfully fetched weather for: {result['location']}")
    return result
