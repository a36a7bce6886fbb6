"""Poll, filter and notify loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from pyreservauto.branches import Branch
from pyreservauto.config import WatchConfig
from pyreservauto.exceptions import FeedFetchError, NotificationError, ReservautoConfigError
from pyreservauto.models.vehicle import Vehicle
from pyreservauto.notify import BookingOpener, NotificationController, NotifyAction
from pyreservauto.radius import RadiusLadder, human_distance
from pyreservauto.retry import run_with_retry

_logger = logging.getLogger(__name__)

FetchVehicles = Callable[[], Awaitable[list[Vehicle]]]


@dataclass(slots=True)
class PollContext:
    """Mutable loop state carried from one poll to the next.

    ``polls`` counts calls to :meth:`Poller.poll_once`, including ones
    that failed.
    """

    radius: float
    polls: int = 0


def select_candidates(vehicles: Iterable[Vehicle], radius: float) -> list[Vehicle]:
    """Vehicles within *radius*, nearest first.

    The sort is stable: equal distances keep feed order.
    """
    return sorted((v for v in vehicles if v.distance_m <= radius), key=lambda v: v.distance_m)


def initial_radius(config: WatchConfig, ladder: RadiusLadder) -> float:
    if config.initial_radius is None:
        return ladder.widest
    if config.initial_radius <= 0:
        raise ReservautoConfigError(f"Initial radius must be positive, got {config.initial_radius}")
    return float(config.initial_radius)


class Poller:
    """Repeatedly fetch vehicles and alert on the nearest one in range.

    Parameters
    ----------
    config : WatchConfig
        Delay, retry and failure policy.
    branch : Branch
        Service area; its booking page is opened on **open**.
    fetch : callable
        Zero-argument coroutine factory returning the branch's vehicles
        with distances already computed.
    controller : NotificationController
        Alert presentation state.
    opener : BookingOpener
        Opens the booking page.
    ladder : RadiusLadder
        Radius rungs offered on **reduce**.
    """

    def __init__(
        self,
        config: WatchConfig,
        branch: Branch,
        fetch: FetchVehicles,
        controller: NotificationController,
        opener: BookingOpener,
        *,
        ladder: RadiusLadder | None = None,
    ) -> None:
        self._config = config
        self._branch = branch
        self._fetch = fetch
        self._controller = controller
        self._opener = opener
        self._ladder = ladder if ladder is not None else RadiusLadder()
        self.context = PollContext(radius=initial_radius(config, self._ladder))

    @property
    def radius(self) -> float:
        return self.context.radius

    async def _fetch_with_retry(self) -> list[Vehicle]:
        return await run_with_retry(
            self._fetch,
            retries=self._config.retries,
            delay=self._config.retry_delay,
            retry_on=(FeedFetchError,),
        )

    async def poll_once(self) -> NotifyAction | None:
        """Run one fetch → filter → notify step.

        Returns the action the user picked, if an alert was shown.

        Raises
        ------
        FeedFetchError
            When the feed still fails after all retries.
        NotificationError
            When the alert could not be shown.
        """
        self.context.polls += 1
        vehicles = await self._fetch_with_retry()
        candidates = select_candidates(vehicles, self.context.radius)

        _logger.info(
            "%d cars found. %d within %s. Waiting %s seconds",
            len(vehicles),
            len(candidates),
            human_distance(self.context.radius),
            f"{self._config.delay:g}",
        )

        if not candidates:
            return None

        nearest = candidates[0]
        reduce_to = self._ladder.next_smaller(nearest.distance_m)
        action = await self._controller.alert(nearest, reduce_to)

        if action is NotifyAction.OPEN:
            _logger.info("Opening %s", self._branch.booking_url)
            await self._opener.open(self._branch.booking_url)
        elif action is NotifyAction.REDUCE:
            if reduce_to is None:
                _logger.warning("Radius already at its narrowest; ignoring reduce")
            else:
                self.context.radius = min(self.context.radius, reduce_to)
                _logger.info("Search radius reduced to %s", human_distance(self.context.radius))
        elif action is NotifyAction.STOP:
            _logger.info("Stop requested")
        return action

    async def run(self, *, max_polls: int | None = None) -> NotifyAction | None:
        """Poll until the user picks **stop**.

        A fetch that fails after all retries, or an alert that could not
        be shown, is logged and the loop moves on to the next scheduled
        poll.  With ``fail_fast`` set the error propagates instead.

        Parameters
        ----------
        max_polls : int or None
            Stop after this many more polls.  ``None`` polls forever.

        Returns
        -------
        NotifyAction or None
            ``NotifyAction.STOP`` when the user stopped the watch,
            ``None`` when *max_polls* was reached.
        """
        start = self.context.polls
        while max_polls is None or self.context.polls - start < max_polls:
            try:
                action = await self.poll_once()
            except FeedFetchError:
                if self._config.fail_fast:
                    raise
                _logger.error("Fetching vehicles failed after %d retries", self._config.retries, exc_info=True)
                action = None
            except NotificationError:
                if self._config.fail_fast:
                    raise
                _logger.error("Showing the alert failed", exc_info=True)
                action = None

            if action is NotifyAction.STOP:
                return action

            if self._config.delay > 0:
                await asyncio.sleep(self._config.delay)
        return None
