from typing import List, Optional, Dict, Any
import asyncio
import logging

import aiohttp
import polyline

from waystop.core.exceptions import RouteUnavailableError
from waystop.models.location import Point
from waystop.models.route import RouteGeometry
from waystop.repositories.base import BaseRouteRepository

logger = logging.getLogger(__name__)

OSRM_BASE_URL = "http://router.project-osrm.org/route/v1/driving"


class OSRMRepository(BaseRouteRepository):
    """Route geometry from an OSRM ``/route`` service."""

    def __init__(
        self,
        base_url: str = OSRM_BASE_URL,
        geometries: str = "geojson",
        timeout: float = 30.0,
    ):
        if geometries not in ("geojson", "polyline"):
            raise ValueError(f"Unsupported OSRM geometry format: {geometries}")
        self.base_url = base_url.rstrip("/")
        self.geometries = geometries
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def _make_request(self, coords: str, params: Optional[Dict[str, Any]] = None) -> Dict:
        """Make a request to the OSRM route endpoint."""
        url = f"{self.base_url}/{coords}"

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                return await response.json(content_type=None)

    async def get_route(self, locations: List[Point]) -> RouteGeometry:
        """Fetch the full-overview driving route through ``locations``."""
        coords = ";".join(location.as_lon_lat() for location in locations)
        params = {
            "overview": "full",
            "geometries": self.geometries,
            "steps": "false",
        }

        logger.info(f"Fetching route for locations: {coords}")
        try:
            data = await self._make_request(coords, params)
        except aiohttp.ClientResponseError as e:
            logger.error(f"OSRM request failed with status {e.status}: {e.message}")
            raise RouteUnavailableError(f"Route provider returned HTTP {e.status}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"OSRM request failed: {e!r}")
            raise RouteUnavailableError("Could not get route data.") from e
        except ValueError as e:
            logger.error(f"OSRM returned a non-JSON body: {e}")
            raise RouteUnavailableError("Invalid response from route provider.") from e

        route = self._parse_route(data)
        logger.info(f"Route fetched successfully with {len(route.points)} points")
        return route

    def _parse_route(self, data: Any) -> RouteGeometry:
        if not isinstance(data, dict) or data.get("code") != "Ok":
            message = data.get("message", "Unknown error") if isinstance(data, dict) else "Unknown error"
            raise RouteUnavailableError(f"OSRM routing failed: {message}")

        routes = data.get("routes") or []
        if not routes:
            raise RouteUnavailableError("Invalid response from OSRM: no routes returned.")

        route = routes[0]
        try:
            points = self._decode_geometry(route["geometry"])
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise RouteUnavailableError(f"Invalid route geometry from OSRM: {e}") from e

        if len(points) < 2:
            raise RouteUnavailableError("Route geometry has fewer than two points.")

        return RouteGeometry(
            points=points,
            distance_meters=route.get("distance", 0.0),
            duration_seconds=route.get("duration", 0.0),
        )

    def _decode_geometry(self, geometry: Any) -> List[Point]:
        if self.geometries == "polyline":
            # polyline.decode already yields (lat, lon) tuples
            return [Point(latitude=lat, longitude=lon) for lat, lon in polyline.decode(geometry)]
        # GeoJSON LineString coordinates are [lon, lat]
        return [Point.from_lon_lat(lon, lat) for lon, lat in geometry["coordinates"]]
