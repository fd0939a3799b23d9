"""Tabulated attitude playback.

``AngularEphemeris`` holds a time-sorted table of angular coordinates and
answers queries at arbitrary instants inside the table by interpolating a
small window of neighboring entries.
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Iterable, Iterator
from typing import Any

from attitudejax.angular_coordinates.filters import AngularDerivativesFilter
from attitudejax.angular_coordinates.interpolation import interpolate
from attitudejax.angular_coordinates.timestamped import TimeStampedAngularCoordinates
from attitudejax.errors import InsufficientDataError

logger = logging.getLogger(__name__)


class AngularEphemeris:
    """Attitude history interpolated from tabulated angular coordinates.

    Args:
        sample: Entries of the table, in any order.  Instants must be
            distinct and mutually comparable.
        n_interpolation_points (int): Number of neighboring entries used
            for each query. Default: 4.
        derivatives_filter (AngularDerivativesFilter): Derivative orders
            trusted in the table. Default: ``USE_RR``.

    Raises:
        InsufficientDataError: If the table holds fewer entries than one
            interpolation window, or the window is too small for the filter.
    """

    def __init__(
        self,
        sample: Iterable[TimeStampedAngularCoordinates],
        n_interpolation_points: int = 4,
        derivatives_filter: AngularDerivativesFilter = AngularDerivativesFilter.USE_RR,
    ) -> None:
        self._filter = AngularDerivativesFilter(derivatives_filter)
        self._entries = sorted(sample, key=lambda entry: entry.time)
        self._times = [entry.time for entry in self._entries]

        minimum = 2 if self._filter == AngularDerivativesFilter.USE_R else 1
        if n_interpolation_points < minimum:
            raise InsufficientDataError(
                f"{self._filter.name} needs at least {minimum} interpolation points, "
                f"got {n_interpolation_points}"
            )
        if len(self._entries) < n_interpolation_points:
            raise InsufficientDataError(
                f"Table holds {len(self._entries)} entries, fewer than the "
                f"{n_interpolation_points} interpolation points requested"
            )
        self._n_points = n_interpolation_points

        logger.debug(
            "Built angular ephemeris with %d entries from %s to %s",
            len(self._entries), self.min_time, self.max_time,
        )

    @property
    def min_time(self) -> Any:
        """First instant of the table."""
        return self._times[0]

    @property
    def max_time(self) -> Any:
        """Last instant of the table."""
        return self._times[-1]

    @property
    def n_interpolation_points(self) -> int:
        """Number of entries used for each query."""
        return self._n_points

    @property
    def derivatives_filter(self) -> AngularDerivativesFilter:
        """Derivative orders trusted in the table."""
        return self._filter

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TimeStampedAngularCoordinates]:
        return iter(self._entries)

    def neighbors(self, time: Any) -> list[TimeStampedAngularCoordinates]:
        """Return the interpolation window around ``time``.

        The window is centered on ``time`` when possible and slides inward
        at both ends of the table.

        Args:
            time: Query instant.

        Returns:
            list: ``n_interpolation_points`` consecutive entries.

        Raises:
            ValueError: If ``time`` lies outside ``[min_time, max_time]``.
        """
        if time < self.min_time or time > self.max_time:
            raise ValueError(
                f"Time {time} is outside the ephemeris range [{self.min_time}, {self.max_time}]"
            )

        # index of the last entry not after the query
        index = bisect.bisect_right(self._times, time) - 1
        start = index - (self._n_points - 1) // 2
        start = max(0, min(start, len(self._entries) - self._n_points))
        return self._entries[start:start + self._n_points]

    def interpolate(self, time: Any) -> TimeStampedAngularCoordinates:
        """Interpolated angular coordinates at ``time``.

        Args:
            time: Query instant inside ``[min_time, max_time]``.

        Returns:
            TimeStampedAngularCoordinates: Coordinates at ``time``.

        Raises:
            ValueError: If ``time`` lies outside the table.
        """
        return interpolate(time, self._filter, self.neighbors(time))
