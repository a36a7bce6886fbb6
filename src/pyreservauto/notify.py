"""Desktop alerts for nearby vehicles.

:class:`NotificationController` tracks the alert currently on screen so
each new alert replaces it instead of stacking.  The presentation itself
goes through a :class:`Notifier`; :class:`NotifySendNotifier` drives the
freedesktop ``notify-send`` tool.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import math
import webbrowser
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from pyreservauto._constants import NOTIFY_EXPIRE_MS, NOTIFY_SEND, NOTIFY_URGENCY
from pyreservauto.exceptions import NotificationError
from pyreservauto.models.vehicle import Vehicle
from pyreservauto.radius import human_distance

_logger = logging.getLogger(__name__)

ALERT_TITLE = "Car found!"


class NotifyAction(enum.StrEnum):
    """Actions offered on an alert."""

    OPEN = "open"
    REDUCE = "reduce"
    STOP = "stop"


class AlertState(enum.Enum):
    IDLE = "idle"
    ALERTING = "alerting"


class Notifier(Protocol):
    """Notification surface.

    ``present`` shows a message with the given ``{key: label}`` actions,
    replacing the alert identified by *replaces* when set, and returns
    the new alert handle together with the chosen action key (``None``
    when dismissed or expired).
    """

    async def present(
        self,
        title: str,
        body: str,
        actions: Mapping[str, str],
        replaces: str | None = None,
    ) -> tuple[str, str | None]:
        ...


class BookingOpener(Protocol):
    async def open(self, url: str) -> None:
        ...


class WebBrowserOpener:
    """Open booking pages in the default browser."""

    async def open(self, url: str) -> None:
        opened = await asyncio.to_thread(webbrowser.open, url)
        if not opened:
            _logger.warning("No browser available to open %s", url)


def parse_notify_send_output(output: str) -> tuple[str, str | None]:
    """Split ``notify-send -p`` output into ``(handle, action)``.

    The first line is the notification id; the chosen action key, if
    any, follows on the next line.
    """
    lines = output.splitlines()
    handle = lines[0].strip() if lines else ""
    if not handle:
        raise NotificationError("notify-send did not print a notification id")
    action = lines[1].strip() if len(lines) > 1 else ""
    return handle, action or None


class NotifySendNotifier:
    """Present alerts with ``notify-send``.

    The call waits for the user to pick an action or for the
    notification to expire.
    """

    def __init__(
        self,
        executable: str = NOTIFY_SEND,
        *,
        urgency: str = NOTIFY_URGENCY,
        expire_ms: int = NOTIFY_EXPIRE_MS,
    ) -> None:
        self._executable = executable
        self._urgency = urgency
        self._expire_ms = expire_ms

    def build_args(
        self,
        title: str,
        body: str,
        actions: Mapping[str, str],
        replaces: str | None = None,
    ) -> list[str]:
        args = ["-u", self._urgency, "-t", str(self._expire_ms), "-p"]
        for key, label in actions.items():
            args.extend(["-A", f"{key}={label}"])
        if replaces:
            args.extend(["-r", replaces])
        args.extend([title, body])
        return args

    async def present(
        self,
        title: str,
        body: str,
        actions: Mapping[str, str],
        replaces: str | None = None,
    ) -> tuple[str, str | None]:
        args = self.build_args(title, body, actions, replaces)
        _logger.debug("%s %s", self._executable, args)
        try:
            proc = await asyncio.create_subprocess_exec(
                self._executable,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise NotificationError(f"Could not run {self._executable}: {exc}") from exc

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise NotificationError(
                f"{self._executable} exited with {proc.returncode}: {stderr.decode(errors='replace').strip()[:200]}"
            )
        return parse_notify_send_output(stdout.decode(errors="replace"))


@dataclass(slots=True)
class NotificationState:
    """Handle of the alert on screen and the last answer to it."""

    active_id: str | None = None
    last_action: NotifyAction | None = None


def build_actions(reduce_to: float | None) -> dict[str, str]:
    actions = {
        NotifyAction.OPEN.value: "Reserve",
        NotifyAction.STOP.value: "Stop looking",
    }
    if reduce_to is not None:
        actions[NotifyAction.REDUCE.value] = f"Reduce radius to {human_distance(reduce_to)}"
    return actions


def build_body(vehicle: Vehicle) -> str:
    return f"{vehicle.label} is {math.floor(vehicle.distance_m)}m away"


class NotificationController:
    """Present alerts for the nearest vehicle, one visual slot at a time.

    Starts :attr:`AlertState.IDLE`; the first alert moves it to
    :attr:`AlertState.ALERTING` and it stays there.  An alert that is no
    longer relevant is left on screen, never dismissed.
    """

    def __init__(self, notifier: Notifier, state: NotificationState | None = None) -> None:
        self._notifier = notifier
        self._state = state if state is not None else NotificationState()

    @property
    def state(self) -> AlertState:
        return AlertState.IDLE if self._state.active_id is None else AlertState.ALERTING

    @property
    def active_id(self) -> str | None:
        return self._state.active_id

    @property
    def last_action(self) -> NotifyAction | None:
        return self._state.last_action

    async def alert(self, vehicle: Vehicle, reduce_to: float | None) -> NotifyAction | None:
        """Show (or replace) the alert for *vehicle* and return the user's choice.

        ``reduce`` is offered only when *reduce_to* is set.  An action
        key that was not offered is ignored.
        """
        actions = build_actions(reduce_to)
        handle, key = await self._notifier.present(
            ALERT_TITLE,
            build_body(vehicle),
            actions,
            replaces=self._state.active_id,
        )
        self._state.active_id = handle

        action: NotifyAction | None = None
        if key is not None:
            if key in actions:
                action = NotifyAction(key)
            else:
                _logger.warning("Ignoring unexpected notification action %r", key)
        self._state.last_action = action
        _logger.debug("Alert %s answered with %s", handle, action)
        return action
