"""
cli.py -- Command-line client for the rain checker.

Runs the same pipeline as the web form without Flask.
Enter a city to see whether it will rain tomorrow; switch units with
'units metric' or 'units imperial'.

Usage:  python cli.py
"""

import requests

from data.weather import ServiceNotConfigured, WeatherDataError
from geocoder import LocationNotFound
from parser.location_parser import InvalidLocation, clean_location, normalize_units
from pipeline import check_weather
from rain.response import describe_error, location_not_found_message


def parse_units_command(text: str) -> str | None:
    """Units for a 'units metric|imperial' line, None for anything else."""
    words = text.split(maxsplit=1)
    if not words or words[0].lower() != "units":
        return None
    return normalize_units(words[1] if len(words) > 1 else None)


def format_report(result: dict) -> str:
    """Plain-text version of the result page."""
    rain_unit = result["rain_unit"]
    temp_unit = result["temperature_unit"]
    verdict = "YES, rain expected" if result["will_rain"] else "No rain expected"

    lines = [
        f"{result['location']} -- {result['tomorrow_date']}",
        f"{verdict} ({result['chance_of_rain']}% of {result['forecast_count']} slots)",
        f"Total {result['total_rain_mm']}{rain_unit}, heaviest slot {result['max_rain_mm']}{rain_unit}",
    ]
    for slot in result["rain_details"]:
        lines.append(
            f"  {slot['date']} {slot['time']}: {slot['rain_mm']}{rain_unit}, "
            f"{slot['description']}, {slot['temp']}{temp_unit}"
        )

    now = result["current_weather"]
    lines.append(
        f"Now: {now['temp']}{temp_unit} (feels {now['feels_like']}{temp_unit}), "
        f"{now['description']}, humidity {now['humidity']}%"
    )
    return "\n".join(lines)


def main():
    units = "metric"

    print("=== Will It Rain Tomorrow? (CLI) ===")
    print("Type a city, or 'units metric|imperial'.")
    print("Type 'quit' or 'exit' to leave.\n")

    while True:
        try:
            text = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if text.lower() in ("quit", "exit"):
            print("Bye!")
            break

        new_units = parse_units_command(text)
        if new_units is not None:
            units = new_units
            print(f"Units: {units}\n")
            continue

        try:
            location = clean_location(text)
            result = check_weather(location, units)
        except InvalidLocation as e:
            print(f"{e}\n")
            continue
        except LocationNotFound as e:
            print(f"{location_not_found_message(e.query)}\n")
            continue
        except (requests.RequestException, WeatherDataError, ServiceNotConfigured) as e:
            print(f"{describe_error(e)}\n")
            continue

        print(f"\n{format_report(result)}\n")


if __name__ == "__main__":
    main()
