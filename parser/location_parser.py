"""
location_parser.py — validate what the user typed into the form.

Flow:
  1. Strip the raw location; reject empty or overlong input (length as typed)
  2. Collapse internal whitespace so "New   York" geocodes like "New York"
  3. Normalize the units choice to one the provider understands
"""

MAX_LOCATION_LENGTH = 100

SUPPORTED_UNITS = ("metric", "imperial")
DEFAULT_UNITS = "metric"


class InvalidLocation(ValueError):
    """Raised with a message that can be shown to the user as-is."""


def clean_location(raw: str | None) -> str:
    """
    Return the cleaned location string.

    Raises InvalidLocation for empty or too-long input.
    """
    text = (raw or "").strip()
    if not text:
        raise InvalidLocation("Please enter a location")

    if len(text) > MAX_LOCATION_LENGTH:
        raise InvalidLocation(
            "Location name is too long. Please enter a valid city name."
        )
    return " ".join(text.split())


def normalize_units(raw: str | None) -> str:
    """'metric' or 'imperial'; anything else falls back to metric."""
    units = (raw or "").strip().lower()
    return units if units in SUPPORTED_UNITS else DEFAULT_UNITS
