"""
app.py — Flask entry point for the "Will It Rain Tomorrow?" checker.

Exposes:
    GET  /               — the search form
    POST /check-weather  — validates the form, runs the pipeline, renders results
    GET  /health         — health check for the hosting platform

Bridges:
    parser/  → validates the raw form input
    pipeline → geocode + forecast + rain summary
"""

from datetime import datetime, timezone
from functools import wraps

import requests
from flask import Flask, jsonify, render_template, request
from flask_compress import Compress
from werkzeug.middleware.proxy_fix import ProxyFix

import config
from data.weather import ServiceNotConfigured, WeatherDataError
from geocoder import LocationNotFound
from parser.location_parser import InvalidLocation, clean_location, normalize_units
from pipeline import check_weather
from rain.response import describe_error, location_not_found_message
from ratelimit import RateLimiter

FORM_TITLE = "Will It Rain Tomorrow?"
RESULT_TITLE = "Rain Check Results"

RATE_LIMIT_MESSAGE = (
    "Too many requests from this IP, please try again after "
    f"{config.RATE_LIMIT_WINDOW_SECONDS // 60} minutes"
)

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "style-src 'self' 'unsafe-inline' https://cdnjs.cloudflare.com/ajax/libs https://fonts.googleapis.com",
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
    "font-src 'self' https://cdnjs.cloudflare.com/ajax/libs https://fonts.gstatic.com",
    "img-src 'self' data: https://openweathermap.org https:",
])

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}

# Failures that end up as a message on the form instead of a 500 page
LOOKUP_ERRORS = (requests.RequestException, WeatherDataError, ServiceNotConfigured)

app = Flask(__name__, static_folder="static", template_folder="templates")
app.config["SEND_FILE_MAX_AGE_DEFAULT"] = 24 * 60 * 60  # static files: 1 day
Compress(app)
if config.TRUST_PROXY:
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1)

limiter = RateLimiter(config.RATE_LIMIT_MAX, config.RATE_LIMIT_WINDOW_SECONDS)


def rate_limited(view_func):
    """Count the request against the client's IP; answer 429 once over the limit."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        status = limiter.hit(request.remote_addr or "unknown")
        if not status.allowed:
            print(f"[APP] Rate limit hit for {request.remote_addr}")
            return RATE_LIMIT_MESSAGE, 429, status.headers()
        response = app.make_response(view_func(*args, **kwargs))
        response.headers.update(status.headers())
        return response
    return wrapper


def render_form(error: str | None = None):
    return render_template(
        "index.html",
        title=FORM_TITLE,
        error=error,
        result=None,
        current_year=datetime.now().year,
    )


@app.after_request
def add_security_headers(response):
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    print(
        f"[HTTP] {request.remote_addr} \"{request.method} {request.path}\" "
        f"{response.status_code}"
    )
    return response


@app.route("/", methods=["GET"])
def home():
    return render_form()


@app.route("/health", methods=["GET"])
def health():
    """Health check for the hosting platform."""
    return jsonify(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        service=config.SERVICE_NAME,
    ), 200


@app.route("/check-weather", methods=["POST"])
@rate_limited
def check_weather_route():
    """
    Form handler.

    Flow:
      1. Validate location + units from the POST body
      2. Run the pipeline (geocode → forecast/current → rain summary)
      3. Render results, or the form again with a message on failure
    """
    try:
        location = clean_location(request.form.get("location"))
    except InvalidLocation as e:
        return render_form(str(e))
    units = normalize_units(request.form.get("units"))

    try:
        result = check_weather(location, units)
    except LocationNotFound as e:
        return render_form(location_not_found_message(e.query))
    except LOOKUP_ERRORS as e:
        print(f"[APP] Weather API Error: {e!r}")
        if isinstance(e, requests.HTTPError) and e.response is not None:
            print(f"[APP] Error details: {e.response.text[:500]}")
        return render_form(describe_error(e))

    return render_template(
        "result.html",
        title=RESULT_TITLE,
        result=result,
        error=None,
        current_year=datetime.now().year,
    )


# Wrong method on a known path looks the same as an unknown path
@app.errorhandler(404)
@app.errorhandler(405)
def not_found(_error):
    return render_template(
        "error.html",
        title="Page Not Found",
        message="The page you are looking for does not exist.",
        error=None,
        current_year=datetime.now().year,
    ), 404


@app.errorhandler(500)
def server_error(error):
    original = getattr(error, "original_exception", None) or error
    print(f"[APP] Unhandled error: {original!r}")
    return render_template(
        "error.html",
        title="Server Error",
        message="Something went wrong on our end. Please try again later.",
        error=str(original) if config.APP_ENV == "development" else None,
        current_year=datetime.now().year,
    ), 500


if __name__ == "__main__":
    print(f"[APP] Server running on port {config.PORT}")
    print(f"[APP] Environment: {config.APP_ENV}")
    print(f"[APP] API Key configured: {'Yes' if config.api_key_configured(config.OPENWEATHER_API_KEY) else 'No'}")
    print(f"[APP] Access the app at: http://localhost:{config.PORT}")
    print(f"[APP] Health check: http://localhost:{config.PORT}/health")
    app.run(host="0.0.0.0", port=config.PORT, debug=config.FLASK_DEBUG)
