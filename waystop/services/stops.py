"""
Stop generation along a routed path.

The walk visits every consecutive pair of path points once and interleaves
two triggers into a single travel-ordered stop list:

- Highway stops: once the distance accumulated since the last stop reaches
  the current speed (one hour of driving at that speed), a stop is placed at
  the start of the segment that crossed the threshold. The speed limit at
  that point then becomes the threshold for the following hour.
- User stops: a caller-supplied waypoint within the per-axis tolerance of the
  segment start becomes a stop at the waypoint's own coordinates.

Waypoints must be supplied in travel order. The walk only ever tests the
next unmatched waypoint, so a waypoint the path never passes near is
silently dropped together with every waypoint after it.
"""

import logging
from typing import List, Sequence

from waystop.models.location import Point
from waystop.models.stops import Stop
from waystop.services.distance import haversine_miles
from waystop.services.speed_limits import SpeedLimitResolver, DEFAULT_SPEED_MPH

logger = logging.getLogger(__name__)

USER_STOP_TOLERANCE_DEG = 0.05


class StopGenerator:
    def __init__(
        self,
        speed_resolver: SpeedLimitResolver,
        initial_speed: float = DEFAULT_SPEED_MPH,
        tolerance: float = USER_STOP_TOLERANCE_DEG,
    ):
        self.speed_resolver = speed_resolver
        self.initial_speed = initial_speed
        self.tolerance = tolerance

    def _is_near(self, waypoint: Point, point: Point) -> bool:
        return (
            abs(waypoint.latitude - point.latitude) < self.tolerance
            and abs(waypoint.longitude - point.longitude) < self.tolerance
        )

    async def generate_stops(self, path: Sequence[Point], user_waypoints: Sequence[Point]) -> List[Stop]:
        """Walk ``path`` and return highway and user stops in travel order."""
        stops: List[Stop] = []
        miles_traveled = 0.0
        current_speed = self.initial_speed
        user_index = 0

        for prev, cur in zip(path, path[1:]):
            miles_traveled += haversine_miles(prev, cur)

            if miles_traveled >= current_speed:
                # The new limit only applies to the next hour of driving
                current_speed = await self.speed_resolver.speed_limit_at(prev)
                stops.append(Stop.highway(prev))
                miles_traveled = 0.0

            while user_index < len(user_waypoints):
                waypoint = user_waypoints[user_index]
                if not self._is_near(waypoint, prev):
                    break
                stops.append(Stop.user(waypoint))
                user_index += 1
                miles_traveled = 0.0

        if user_index < len(user_waypoints):
            logger.info(f"{len(user_waypoints) - user_index} user waypoint(s) were not reached by the route")
        logger.info(f"Generated {len(stops)} stops over {len(path)} path points")
        return stops
