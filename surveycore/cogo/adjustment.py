"""Traverse adjustment from measured leg distances.

The misclosure of the observed traverse is distributed over every
station in proportion to the cumulative measured distance to that
station (the compass rule, the standard least-squares approximation
for traverses).
"""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import BaseModel, Field

from surveycore.cogo.traverse import bearing_distance, calculate_coordinates
from surveycore.models.geometry import Point, as_point

logger = logging.getLogger(__name__)


class AdjustmentError(Exception):
    """Raised when observations cannot be adjusted."""


class Observation(BaseModel):
    """A measured traverse leg between two stations, by index."""

    from_index: int
    to_index: int
    distance: float
    bearing: float | None = None
    """Observed bearing in degrees; derived from the coordinates when absent."""


class AdjustmentResult(BaseModel):
    """Adjusted stations, or the reason adjustment was not possible."""

    points: list[Point] = Field(default_factory=list)
    misclosure: float = 0.0
    """Linear misclosure of the observed traverse before adjustment."""

    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def _check_observations(observations: Sequence[Observation], point_count: int) -> None:
    if not observations:
        raise AdjustmentError("No measured distances supplied")
    for obs in observations:
        for index in (obs.from_index, obs.to_index):
            if index < 0 or index >= point_count:
                raise AdjustmentError(f"Observation references unknown station {index}")
        if obs.distance <= 0:
            raise AdjustmentError(
                f"Observation {obs.from_index}->{obs.to_index} has non-positive distance {obs.distance}"
            )
    for prev, nxt in zip(observations, observations[1:]):
        if prev.to_index != nxt.from_index:
            raise AdjustmentError(
                f"Observations do not form a continuous traverse at station {prev.to_index}"
            )


def least_squares_adjustment(
    points: Sequence[Point | Sequence[float]],
    observations: Sequence[Observation | dict],
) -> AdjustmentResult:
    """Adjust a traverse so it closes on its starting (or fixed end) station.

    Parameters
    ----------
    points:
        Station coordinates referenced by the observation indices.
    observations:
        Consecutive measured legs.  When the last leg ends on the first
        station the traverse is a loop and closes on itself; otherwise
        it closes on the fixed coordinate of its final station.

    Returns
    -------
    AdjustmentResult
        ``error`` is set instead of raising when the observations are
        empty, out of range, or not a continuous chain.
    """
    pts = [as_point(p) for p in points]
    obs = [o if isinstance(o, Observation) else Observation.model_validate(o) for o in observations]

    try:
        _check_observations(obs, len(pts))
    except AdjustmentError as exc:
        logger.debug("Adjustment rejected: %s", exc)
        return AdjustmentResult(error=str(exc))

    start = pts[obs[0].from_index]
    is_loop = obs[-1].to_index == obs[0].from_index
    target = start if is_loop else pts[obs[-1].to_index]

    computed: list[Point] = []
    current = start
    for o in obs:
        bearing = o.bearing
        if bearing is None:
            bearing = bearing_distance(pts[o.from_index], pts[o.to_index]).bearing
        current = calculate_coordinates(current, bearing, o.distance)
        computed.append(current)

    error_x = current.x - target.x
    error_y = current.y - target.y
    total = sum(o.distance for o in obs)
    misclosure = (error_x**2 + error_y**2) ** 0.5

    adjusted = [start]
    cumulative = 0.0
    for o, station in zip(obs, computed):
        cumulative += o.distance
        share = cumulative / total
        adjusted.append(
            Point(
                x=station.x - error_x * share,
                y=station.y - error_y * share,
                id=pts[o.to_index].id,
            )
        )

    logger.debug(
        "Adjusted %d legs, misclosure %.4f m distributed over %.3f m", len(obs), misclosure, total
    )
    return AdjustmentResult(points=adjusted, misclosure=misclosure)
