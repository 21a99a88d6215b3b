"""
Canned OpenWeatherMap responses for offline tests.

fake_get() stands in for requests.get and routes on the URL path.
"""

import json
from datetime import datetime, timezone

import requests

# Reference "now" used across the tests: tomorrow is 2026-10-18 (UTC)
NOW = datetime(2026, 10, 17, 15, 0, tzinfo=timezone.utc)


def ts(day: int, hour: int) -> int:
    """Unix seconds for 2026-10-<day> <hour>:00 UTC."""
    return int(datetime(2026, 10, day, hour, tzinfo=timezone.utc).timestamp())


def forecast_item(timestamp: int, rain: float | None = None, description: str = "light rain") -> dict:
    item = {
        "dt": timestamp,
        "main": {"temp": 14.6, "humidity": 81},
        "weather": [{"description": description, "icon": "10d"}],
        "wind": {"speed": 4.1},
    }
    if rain is not None:
        item["rain"] = {"3h": rain}
    return item


GEOCODE_LONDON = [
    {"name": "London", "lat": 51.5073, "lon": -0.1276, "country": "GB", "state": "England"},
]

FORECAST_LONDON = {
    "city": {"name": "London"},
    "list": [
        forecast_item(ts(17, 21), rain=0.4),
        forecast_item(ts(18, 0), rain=2.0),
        forecast_item(ts(18, 3), rain=0, description="overcast clouds"),
        forecast_item(ts(18, 6), rain=1.5),
        forecast_item(ts(18, 9), description="broken clouds"),
        forecast_item(ts(18, 12), description="broken clouds"),
        forecast_item(ts(18, 15), description="broken clouds"),
        forecast_item(ts(18, 18), description="broken clouds"),
        forecast_item(ts(18, 21), description="broken clouds"),
        forecast_item(ts(19, 0), rain=5.0),
    ],
}

CURRENT_LONDON = {
    "main": {"temp": 15.4, "feels_like": 14.8, "humidity": 77, "pressure": 1012},
    "weather": [{"description": "scattered clouds", "icon": "03d"}],
    "wind": {"speed": 5.2, "deg": 240},
    "visibility": 10000,
    "sys": {"sunrise": ts(17, 6), "sunset": ts(17, 17)},
}


def make_response(payload, status: int = 200, url: str = "https://api.openweathermap.org/") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp.encoding = "utf-8"
    resp._content = json.dumps(payload).encode("utf-8")
    return resp


def fake_get(geocode=None, forecast=None, current=None, calls: list | None = None):
    """
    Build a requests.get replacement.

    Each argument is a payload, or an exception instance to raise for that
    endpoint. Defaults are the London fixtures above.
    """
    routes = {
        "/geo/1.0/direct": GEOCODE_LONDON if geocode is None else geocode,
        "/data/2.5/forecast": FORECAST_LONDON if forecast is None else forecast,
        "/data/2.5/weather": CURRENT_LONDON if current is None else current,
    }

    def _get(url, params=None, **kwargs):
        if calls is not None:
            calls.append((url, dict(params or {}), kwargs))
        for path, payload in routes.items():
            if url.endswith(path):
                if isinstance(payload, Exception):
                    raise payload
                if isinstance(payload, requests.Response):
                    return payload
                return make_response(payload, url=url)
        raise AssertionError(f"unexpected URL: {url}")

    return _get
