"""
Result formatter.

Turns a RainSummary plus the provider data into the flat context the
result page renders, and maps failures to messages the user can act on.

All times are shown in the same time frame the summary was derived in.
"""

import requests
from datetime import datetime, tzinfo

from data.weather import CurrentConditions, Forecast, ServiceNotConfigured
from geocoder import Location
from rain.engine import RainSummary, sample_time


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# OpenWeather reports rain volume in mm whatever units are requested
UNIT_LABELS = {
    "metric": {
        "rain_unit": "mm",
        "temperature_unit": "°C",
        "wind_unit": "m/s",
        "visibility_unit": "km",
    },
    "imperial": {
        "rain_unit": "mm",
        "temperature_unit": "°F",
        "wind_unit": "mph",
        "visibility_unit": "miles",
    },
}

METRES_PER_VISIBILITY_UNIT = {"metric": 1000.0, "imperial": 1609.344}

GENERIC_ERROR = "An error occurred while fetching weather data."

HTTP_STATUS_MESSAGES = {
    401: "Weather service authentication failed. Please contact support.",
    404: "Weather service is currently unavailable. Please try again later.",
    429: "Too many requests. Please wait a few minutes and try again.",
}
UPSTREAM_DOWN = (
    "Weather service is temporarily unavailable. Please try again in a few minutes."
)


# ---------------------------------------------------------------------------
# Date / time formatting  (en-US, 12-hour clock)
# ---------------------------------------------------------------------------

def format_clock(moment: datetime) -> str:
    """03:00 PM"""
    return moment.strftime("%I:%M %p")


def format_short_date(moment: datetime) -> str:
    """Sat, Oct 18"""
    return f"{moment:%a, %b} {moment.day}"


def format_long_date(moment: datetime) -> str:
    """Sunday, October 18, 2026"""
    return f"{moment:%A, %B} {moment.day}, {moment.year}"


def _format_visibility(visibility_m: int | None, units: str) -> str | None:
    if visibility_m is None:
        return None
    return f"{visibility_m / METRES_PER_VISIBILITY_UNIT[units]:.1f}"


# ---------------------------------------------------------------------------
# 1) Result page context
# ---------------------------------------------------------------------------

def format_rain_details(summary: RainSummary, tz: tzinfo | None) -> list[dict]:
    """One row per rainy slot, in forecast order."""
    rows = []
    for sample in summary.matched_samples:
        moment = sample_time(sample, tz)
        rows.append({
            "time": format_clock(moment),
            "date": format_short_date(moment),
            "rain_mm": sample.rain_mm,
            "description": sample.description,
            "icon": sample.icon,
            "temp": round(sample.temp),
            "humidity": sample.humidity,
            "wind_speed": sample.wind_speed,
        })
    return rows


def format_current(current: CurrentConditions, units: str, tz: tzinfo | None) -> dict:
    return {
        "temp": round(current.temp),
        "feels_like": round(current.feels_like),
        "description": current.description,
        "icon": current.icon,
        "humidity": current.humidity,
        "pressure": current.pressure,
        "wind_speed": current.wind_speed,
        "wind_direction": current.wind_direction,
        "visibility": _format_visibility(current.visibility_m, units),
        "sunrise": format_clock(datetime.fromtimestamp(current.sunrise, tz=tz)),
        "sunset": format_clock(datetime.fromtimestamp(current.sunset, tz=tz)),
    }


def build_result(
    location: Location,
    forecast: Forecast,
    current: CurrentConditions,
    summary: RainSummary,
    units: str,
    search_location: str,
) -> dict:
    """Context for result.html (and the CLI printout)."""
    tz = summary.window.start.tzinfo
    return {
        "location": location.display_name(forecast.city_name),
        "coordinates": {"lat": location.lat, "lon": location.lon},
        "will_rain": summary.will_rain,
        "chance_of_rain": summary.chance_of_rain,
        "max_rain_mm": round(summary.max_rain_mm, 2),
        "total_rain_mm": f"{summary.total_rain_mm:.1f}",
        "rain_details": format_rain_details(summary, tz),
        "tomorrow_date": format_long_date(summary.window.start),
        "current_weather": format_current(current, units, tz),
        **UNIT_LABELS[units],
        "forecast_count": summary.considered_count,
        "used_fallback": summary.used_fallback,
        "search_location": search_location,
    }


# ---------------------------------------------------------------------------
# 2) Error messages
# ---------------------------------------------------------------------------

def location_not_found_message(query: str) -> str:
    return f'Location "{query}" not found. Please try a different city name.'


def describe_error(exc: Exception) -> str:
    """User-facing message for a failed lookup."""
    if isinstance(exc, ServiceNotConfigured):
        return "Weather service is currently unavailable. Please try again later."

    # Timeout first: ConnectTimeout is also a ConnectionError
    if isinstance(exc, requests.Timeout):
        return (
            "Request timeout. The weather service is taking too long to respond. "
            "Please try again."
        )
    if isinstance(exc, requests.ConnectionError):
        return "Network error. Please check your internet connection and try again."

    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        status = exc.response.status_code
        if status in HTTP_STATUS_MESSAGES:
            return HTTP_STATUS_MESSAGES[status]
        if status in (500, 502, 503, 504):
            return UPSTREAM_DOWN
        return f"Weather service error: {status}. Please try again."

    return GENERIC_ERROR
