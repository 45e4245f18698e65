from typing import List, Optional, Sequence
import logging
import math
import re

from pydantic import ValidationError

from waystop.core.exceptions import InvalidInputError, RouteUnavailableError
from waystop.models.location import Point
from waystop.models.stops import Stop
from waystop.repositories.base import BaseRouteRepository
from waystop.services.stops import StopGenerator

logger = logging.getLogger(__name__)


def split_coordinate_query(raw: str) -> List[str]:
    """Split a ``coordinates`` query value into ``"lat,lon"`` strings.

    Accepts ``;`` or ``|`` between locations, tolerates repeated commas and a
    trailing separator.
    """
    normalized = raw.replace("|", ";")
    normalized = re.sub(r",+", ",", normalized)
    normalized = normalized.rstrip(";")
    return [part.strip() for part in normalized.split(";") if part.strip()]


def parse_location(value: str) -> Point:
    """Parse a ``"lat,lon"`` string into a Point."""
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 2:
        raise InvalidInputError(f"Invalid location '{value}'. Expected 'latitude,longitude'.")
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise InvalidInputError(f"Invalid location '{value}'. Coordinates must be numbers.") from e
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidInputError(f"Invalid location '{value}'. Coordinates must be finite.")
    try:
        return Point(latitude=lat, longitude=lon)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid location '{value}'. Coordinates out of range.") from e


def parse_locations(values: Sequence[str]) -> List[Point]:
    return [parse_location(value) for value in values]


class PlannerService:
    """Compose the route provider and the stop generator."""

    def __init__(self, route_repository: BaseRouteRepository, stop_generator: StopGenerator):
        self.route_repository = route_repository
        self.stop_generator = stop_generator

    async def plan_stops(
        self,
        input_locations: Sequence[str],
        user_waypoints: Optional[Sequence[str]] = None,
    ) -> List[Stop]:
        """Plan stops for a trip through ``input_locations``.

        When ``user_waypoints`` is omitted every input location is also a
        mandatory user stop. Raises InvalidInputError before any external
        call, or RouteUnavailableError when no route can be fetched.
        """
        if len(input_locations) < 2:
            raise InvalidInputError("Need at least two locations.")

        locations = parse_locations(input_locations)
        waypoints = locations if user_waypoints is None else parse_locations(user_waypoints)

        logger.info(f"Planning stops for {len(locations)} locations and {len(waypoints)} user waypoints")
        route = await self.route_repository.get_route(locations)
        if len(route.points) < 2:
            raise RouteUnavailableError("Route provider returned fewer than two points.")

        return await self.stop_generator.generate_stops(route.points, waypoints)
