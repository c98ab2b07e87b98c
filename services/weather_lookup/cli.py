"""
Command-line weather lookup.

    python -m services.weather_lookup.cli "123 Chapel Street, Mount Morris, NY"
    python -m services.weather_lookup.cli "Albany, NY" --json

Uses the in-process cache, so repeated lookups only share results within one
invocation. Exit status 1 on geocode/weather failure or missing config.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from services.weather_lookup.cache.store import MemoryCacheStore
from services.weather_lookup.config import settings
from services.weather_lookup.errors import UsageError
from services.weather_lookup.lookup.factory import build_orchestrator
from services.weather_lookup.lookup.types import LookupOutcome, LookupState
from services.weather_lookup.weather.serialization import to_payload

logger = logging.getLogger(__name__)

_UNIT_SYMBOLS = {"imperial": "°F", "metric": "°C", "standard": "K"}


def _fmt_temp(value: float | None, units: str) -> str:
    if value is None:
        return "n/a"
    return f"{round(value)}{_UNIT_SYMBOLS.get(units, '')}"


def format_outcome(outcome: LookupOutcome) -> str:
    """Render an outcome as plain text for the terminal."""
    if outcome.state is LookupState.NO_QUERY:
        return "No address given."
    if outcome.state is not LookupState.DONE:
        return f"Error: {outcome.error_message}"

    weather = outcome.weather
    units = weather.units
    current = weather.current
    lines = [
        outcome.location.display_name,
        f"Current: {_fmt_temp(current.temp, units)} {current.description or ''}".rstrip(),
        f"  High {_fmt_temp(current.high_temp, units)} / Low {_fmt_temp(current.low_temp, units)}",
    ]
    for day, slots in weather.forecast.items():
        lines.append(day.strftime("%A, %b %d"))
        for slot in slots:
            lines.append(
                f"  {slot.timestamp.strftime('%I:%M %p').lstrip('0')}  "
                f"{_fmt_temp(slot.temp, units)}  {slot.description or ''}".rstrip()
            )
    if outcome.cache_hit:
        lines.append("(cached)")
    return "\n".join(lines)


async def run(address: str, as_json: bool = False) -> int:
    try:
        orchestrator = build_orchestrator(settings, MemoryCacheStore())
    except UsageError as exc:
        logger.error("%s (set OPENWEATHER_API_KEY)", exc)
        return 1

    outcome = await orchestrator.lookup(address)

    if as_json:
        body = {"state": outcome.state.value, "error": outcome.error_message}
        if outcome.succeeded:
            body["location"] = outcome.location.display_name
            body["weather"] = to_payload(outcome.weather)
        print(json.dumps(body, indent=2, ensure_ascii=False))
    else:
        print(format_outcome(outcome))

    return 0 if outcome.state in (LookupState.DONE, LookupState.NO_QUERY) else 1


def main() -> None:
    """CLI entry point for a single lookup."""
    parser = argparse.ArgumentParser(description="Look up current weather and forecast for an address")
    parser.add_argument("address", help="Free-text address, e.g. 'Mount Morris, NY'")
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    sys.exit(asyncio.run(run(args.address, as_json=args.json)))


if __name__ == "__main__":
    main()
