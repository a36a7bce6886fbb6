"""Search radius ladder."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pyreservauto._constants import DEFAULT_RADIUS_LADDER


def _plain_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def human_distance(meters: float) -> str:
    """Format a distance like ``"950m"`` or ``"1.5km"`` without rounding."""
    if meters < 1000:
        return f"{_plain_number(meters)}m"
    return f"{_plain_number(meters / 1000)}km"


class RadiusLadder:
    """Fixed, strictly descending sequence of radius thresholds in meters."""

    def __init__(self, rungs: Iterable[float] = DEFAULT_RADIUS_LADDER) -> None:
        values = tuple(float(rung) for rung in rungs)
        if not values:
            raise ValueError("radius ladder must not be empty")
        for wider, narrower in zip(values, values[1:]):
            if narrower >= wider:
                raise ValueError(f"radius ladder must be strictly descending, got {wider} then {narrower}")
        if values[-1] <= 0:
            raise ValueError("radius ladder rungs must be positive")
        self._rungs = values

    def __iter__(self) -> Iterator[float]:
        return iter(self._rungs)

    def __len__(self) -> int:
        return len(self._rungs)

    def __contains__(self, value: object) -> bool:
        return value in self._rungs

    def __repr__(self) -> str:
        return f"RadiusLadder({list(self._rungs)!r})"

    @property
    def widest(self) -> float:
        return self._rungs[0]

    @property
    def narrowest(self) -> float:
        return self._rungs[-1]

    def next_smaller(self, distance: float) -> float | None:
        """Return the largest rung strictly below *distance*.

        ``None`` means *distance* is already at or below the narrowest
        rung and the radius cannot be tightened further.
        """
        for rung in self._rungs:
            if rung < distance:
                return rung
        return None
