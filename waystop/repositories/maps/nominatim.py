from typing import Dict, Any
import logging

import httpx
from tenacity import before_sleep_log, retry, retry_if_exception, stop_after_attempt, wait_exponential

from waystop.core.exceptions import ReverseGeocodingError
from waystop.models.location import Point
from waystop.repositories.base import BaseReverseGeocoder

logger = logging.getLogger(__name__)

NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"


def _is_transient(exc: BaseException) -> bool:
    """Network failures, throttling and server errors are worth another attempt."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


class NominatimRepository(BaseReverseGeocoder):
    """Repository for the OpenStreetMap Nominatim reverse geocoding API."""

    def __init__(
        self,
        base_url: str = NOMINATIM_REVERSE_URL,
        user_agent: str = "Waystop/0.1",
        timeout: float = 10.0,
    ):
        self.base_url = base_url
        self.headers = {"User-Agent": user_agent}
        self.timeout = timeout

    # Total backoff must stay well under SpeedLimitResolver.timeout
    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _fetch(self, params: Dict[str, Any]) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            return response.json()

    async def reverse_geocode(self, location: Point) -> str:
        """Return the state/province name for a coordinate."""
        params = {
            "lat": location.latitude,
            "lon": location.longitude,
            "format": "json",
        }
        logger.debug(f"Reverse geocoding lat={location.latitude}, lon={location.longitude}")

        try:
            data = await self._fetch(params)
        except httpx.HTTPError as e:
            raise ReverseGeocodingError(f"Reverse geocoding request failed: {e!r}") from e
        except ValueError as e:
            raise ReverseGeocodingError(f"Reverse geocoding returned invalid JSON: {e}") from e

        address = data.get("address") if isinstance(data, dict) else None
        state = address.get("state") if isinstance(address, dict) else None
        if not state or not isinstance(state, str):
            raise ReverseGeocodingError(
                f"No state found for lat={location.latitude}, lon={location.longitude}"
            )
        return state
