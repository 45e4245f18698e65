from abc import ABC, abstractmethod
from typing import List

from waystop.models.location import Point
from waystop.models.route import RouteGeometry


class BaseRouteRepository(ABC):
    """Base class for route geometry providers."""

    @abstractmethod
    async def get_route(self, locations: List[Point]) -> RouteGeometry:
        """Get the driving path through the given locations, in order.

        Raises RouteUnavailableError when no usable geometry is returned.
        """
        pass


class BaseReverseGeocoder(ABC):
    """Base class for coordinate -> jurisdiction resolvers."""

    @abstractmethod
    async def reverse_geocode(self, location: Point) -> str:
        """Return the jurisdiction (state/province) name containing the point.

        Raises ReverseGeocodingError on any failure.
        """
        pass
