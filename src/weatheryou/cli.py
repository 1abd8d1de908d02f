# connects input (city -> search) to the service and prints the result.
# without a city argument the last searched city is looked up again

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from .forecast import DEFAULT_MAX_DAYS
from .render import UNITS, render_report
from .service import EMPTY_QUERY_MESSAGE, WeatherSearch
from .storage import JsonFileStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weatheryou", description="Current weather and a daily forecast for a city.")
    parser.add_argument("city", nargs="?", help="city to look up, e.g. 'Arlington VA' (default: last searched city)")
    parser.add_argument("--unit", choices=UNITS, default="C", help="display unit (default: C)")
    parser.add_argument("--days", type=int, default=DEFAULT_MAX_DAYS, help="number of forecast days (default: 5)")
    parser.add_argument("--state-file", help="where the last searched city is kept")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with WeatherSearch(JsonFileStore(args.state_file), max_days=max(args.days, 0)) as search:
        if args.city is not None:
            result = search.search(args.city)
        else:
            result = search.restore()
            if result is None:
                print(EMPTY_QUERY_MESSAGE, file=sys.stderr)
                return 1

    if result is None:
        # superseded by a newer search, nothing to show
        return 0
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1

    print(render_report(result.report, unit=args.unit))
    return 0


if __name__ == "__main__":
    sys.exit(main())
