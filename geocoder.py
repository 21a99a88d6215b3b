"""
geocoder.py — city name → coordinates via OpenWeatherMap direct geocoding.

Single provider, single best match. No cache: every lookup goes to the API.
A query with no match returns None; transport and HTTP errors propagate.
"""

import requests
from dataclasses import dataclass

from config import API_TIMEOUT, OPENWEATHER_BASE
from data.weather import WeatherDataError

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

GEOCODE_URL = f"{OPENWEATHER_BASE}/geo/1.0/direct"
RESULT_LIMIT = 1


class LocationNotFound(Exception):
    def __init__(self, query: str):
        super().__init__(query)
        self.query = query


@dataclass
class Location:
    name: str
    country: str
    lat: float
    lon: float
    state: str | None = None

    def display_name(self, city_name: str | None = None) -> str:
        """'City, State, CC' or 'City, CC'. *city_name* overrides the geocoded name."""
        parts = [city_name or self.name]
        if self.state:
            parts.append(self.state)
        parts.append(self.country)
        return ", ".join(parts)


# ---------------------------------------------------------------------------
# Public API — geocode()
# ---------------------------------------------------------------------------

def geocode(query: str, api_key: str) -> Location | None:
    """
    Resolve *query* to the provider's best match.

    Returns None when the provider knows no such place.
    """
    print(f"[GEOCODER] Geocoding: {query}")
    resp = requests.get(
        GEOCODE_URL,
        params={"q": query, "limit": RESULT_LIMIT, "appid": api_key},
        timeout=API_TIMEOUT,
    )
    resp.raise_for_status()
    try:
        results = resp.json()
    except ValueError as e:
        raise WeatherDataError("non-JSON geocoding response") from e
    if not results:
        print(f"[GEOCODER] No match for: {query}")
        return None

    try:
        top = results[0]
        location = Location(
            name=top["name"],
            country=top.get("country", ""),
            lat=float(top["lat"]),
            lon=float(top["lon"]),
            state=top.get("state"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise WeatherDataError(f"malformed geocoding result: {e!r}") from e

    print(
        f"[GEOCODER] Found location: {location.name}, {location.country} "
        f"({location.lat:.4f}, {location.lon:.4f})"
    )
    return location
