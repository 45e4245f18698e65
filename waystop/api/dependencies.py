from functools import lru_cache
from fastapi import Depends

from waystop.core.settings import Settings, get_settings
from waystop.repositories.maps.nominatim import NominatimRepository
from waystop.repositories.maps.osrm import OSRMRepository
from waystop.repositories.speed_limits import SpeedLimitTable, load_speed_limits
from waystop.services.planner import PlannerService
from waystop.services.speed_limits import SpeedLimitResolver
from waystop.services.stops import StopGenerator


@lru_cache()
def get_speed_limit_table() -> SpeedLimitTable:
    """Load the speed limit table once per process."""
    return load_speed_limits(get_settings().SPEED_LIMITS_PATH)


@lru_cache()
def get_route_repository() -> OSRMRepository:
    """Get OSRMRepository instance."""
    settings = get_settings()
    return OSRMRepository(
        base_url=settings.OSRM_BASE_URL,
        geometries=settings.ROUTE_GEOMETRY,
        timeout=settings.ROUTE_TIMEOUT_S,
    )


@lru_cache()
def get_reverse_geocoder() -> NominatimRepository:
    """Get NominatimRepository instance."""
    settings = get_settings()
    return NominatimRepository(
        base_url=settings.NOMINATIM_URL,
        user_agent=settings.NOMINATIM_USER_AGENT,
        timeout=settings.REVERSE_GEOCODE_TIMEOUT_S,
    )


def get_speed_limit_resolver(
    geocoder: NominatimRepository = Depends(get_reverse_geocoder),
    speed_limits: SpeedLimitTable = Depends(get_speed_limit_table),
    settings: Settings = Depends(get_settings),
) -> SpeedLimitResolver:
    return SpeedLimitResolver(
        geocoder=geocoder,
        speed_limits=speed_limits,
        default_speed=settings.DEFAULT_SPEED_MPH,
        unknown_speed=settings.UNKNOWN_JURISDICTION_SPEED_MPH,
        timeout=settings.REVERSE_GEOCODE_TIMEOUT_S,
    )


def get_planner_service(
    route_repository: OSRMRepository = Depends(get_route_repository),
    speed_resolver: SpeedLimitResolver = Depends(get_speed_limit_resolver),
    settings: Settings = Depends(get_settings),
) -> PlannerService:
    """Get a PlannerService for one request; walk state never outlives it."""
    stop_generator = StopGenerator(
        speed_resolver=speed_resolver,
        initial_speed=settings.DEFAULT_SPEED_MPH,
        tolerance=settings.USER_STOP_TOLERANCE_DEG,
    )
    return PlannerService(route_repository=route_repository, stop_generator=stop_generator)
