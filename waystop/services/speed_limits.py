import asyncio
import logging
from typing import Optional

from waystop.models.location import Point
from waystop.repositories.base import BaseReverseGeocoder
from waystop.repositories.speed_limits import SpeedLimitTable

logger = logging.getLogger(__name__)

UNKNOWN_JURISDICTION = "Unknown"
DEFAULT_SPEED_MPH = 60.0


class SpeedLimitResolver:
    """Resolve the speed limit in effect at a point.

    Lookups degrade instead of failing: a reverse geocoder error or timeout
    resolves to the "Unknown" jurisdiction, and a jurisdiction missing from
    the table resolves to the default speed.
    """

    def __init__(
        self,
        geocoder: BaseReverseGeocoder,
        speed_limits: SpeedLimitTable,
        default_speed: float = DEFAULT_SPEED_MPH,
        unknown_speed: Optional[float] = None,
        timeout: Optional[float] = 10.0,
    ):
        self.geocoder = geocoder
        self.speed_limits = speed_limits
        self.default_speed = default_speed
        self.unknown_speed = default_speed if unknown_speed is None else unknown_speed
        self.timeout = timeout

    async def jurisdiction_at(self, point: Point) -> str:
        try:
            return await asyncio.wait_for(self.geocoder.reverse_geocode(point), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Jurisdiction lookup timed out after {self.timeout}s at "
                f"lat={point.latitude}, lon={point.longitude}; using '{UNKNOWN_JURISDICTION}'"
            )
        except Exception as e:
            logger.warning(
                f"Jurisdiction lookup degraded at lat={point.latitude}, lon={point.longitude}: {e}; "
                f"using '{UNKNOWN_JURISDICTION}'"
            )
        return UNKNOWN_JURISDICTION

    async def speed_limit_at(self, point: Point) -> float:
        """Speed limit (mph) at ``point``. Never raises on lookup failure."""
        jurisdiction = await self.jurisdiction_at(point)
        speed = self.speed_limits.get(jurisdiction)
        if speed and speed > 0:
            logger.debug(f"Speed limit for {jurisdiction}: {speed} mph")
            return speed

        fallback = self.unknown_speed if jurisdiction == UNKNOWN_JURISDICTION else self.default_speed
        logger.info(f"No speed limit for '{jurisdiction}', using {fallback} mph")
        return fallback
