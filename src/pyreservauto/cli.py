"""Command line entry point: watch for a car near you."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from pyreservauto.branches import Branch, resolve_branch, supported_cities
from pyreservauto.client import ReservautoClient
from pyreservauto.config import WatchConfig
from pyreservauto.exceptions import (
    FeedFetchError,
    LocationResolutionError,
    NotificationError,
    ReservautoConfigError,
)
from pyreservauto.location import resolve_observer
from pyreservauto.models.coordinate import Coordinate
from pyreservauto.models.vehicle import Vehicle
from pyreservauto.notify import NotificationController, NotifySendNotifier, WebBrowserOpener
from pyreservauto.poller import Poller

_logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="reservauto-watch",
        description="Poll Reservauto for available cars and alert when one is close by.",
        epilog=(
            "Examples:\n"
            "  reservauto-watch --delay 30 --city montreal\n"
            '  reservauto-watch -l "45.5,-73.6"'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d",
        "--delay",
        type=float,
        default=None,
        help="Delay between requests in seconds (default: 15)",
    )
    parser.add_argument(
        "-c",
        "--city",
        default=None,
        help=f"City name (default: toronto). Supported cities: {', '.join(supported_cities())}",
    )
    parser.add_argument(
        "-l",
        "--location",
        default=None,
        help='Location coordinates (e.g. "43.7,-79.4"); looked up automatically when omitted',
    )
    parser.add_argument(
        "-r",
        "--radius",
        type=float,
        default=None,
        help="Initial search radius in meters (default: 10000)",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=None,
        help="Exit when the feed keeps failing instead of waiting for the next poll",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


async def _watch(config: WatchConfig, branch: Branch) -> int:
    async with ReservautoClient(config) as client:
        try:
            observer = await resolve_observer(config, client.transport)
        except LocationResolutionError as exc:
            _logger.error("%s", exc)
            return EXIT_FAILURE
        _logger.info("Current location: %s", observer)

        async def fetch() -> list[Vehicle]:
            return await client.get_available_vehicles(branch.branch_id, observer)

        poller = Poller(
            config,
            branch,
            fetch,
            NotificationController(NotifySendNotifier()),
            WebBrowserOpener(),
        )
        await poller.run()
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = WatchConfig.from_env(
            delay=args.delay,
            city=args.city,
            location=args.location,
            initial_radius=args.radius,
            fail_fast=args.fail_fast,
        )
        branch = resolve_branch(config.city)
        if config.location:
            Coordinate.parse(config.location)
        if config.initial_radius is not None and config.initial_radius <= 0:
            raise ReservautoConfigError(f"Initial radius must be positive, got {config.initial_radius:g}")
    except (ReservautoConfigError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    _logger.info("Using City Branch: %s. Branch ID: %d", branch.city, branch.branch_id)

    try:
        return asyncio.run(_watch(config, branch))
    except (FeedFetchError, NotificationError) as exc:
        _logger.error("Giving up: %s", exc)
        raise
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    raise SystemExit(main())
