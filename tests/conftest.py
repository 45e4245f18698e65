# tests/conftest.py
import os
from typing import Iterable, List, Optional

# Keep test runs from creating app.log in the working directory
os.environ.setdefault("LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient

from waystop.core.exceptions import RouteUnavailableError
from waystop.models.location import Point
from waystop.models.route import RouteGeometry
from waystop.repositories.base import BaseRouteRepository
from waystop.services.planner import PlannerService
from waystop.services.stops import StopGenerator


class StaticSpeedResolver:
    """Deterministic stand-in for SpeedLimitResolver.

    Returns ``speeds`` in order, repeating the last one, and records every
    point it was asked about.
    """

    def __init__(self, speeds: Iterable[float] = (60.0,)):
        self.speeds = list(speeds)
        self.calls: List[Point] = []

    async def speed_limit_at(self, point: Point) -> float:
        self.calls.append(point)
        index = min(len(self.calls) - 1, len(self.speeds) - 1)
        return self.speeds[index]


class StaticRouteRepository(BaseRouteRepository):
    """Returns a fixed path, or raises RouteUnavailableError when ``points`` is None."""

    def __init__(self, points: Optional[List[Point]] = None):
        self.points = points
        self.requests: List[List[Point]] = []

    async def get_route(self, locations: List[Point]) -> RouteGeometry:
        self.requests.append(list(locations))
        if self.points is None:
            raise RouteUnavailableError("Could not get route data.")
        return RouteGeometry(points=self.points)


def meridian_path(*latitudes: float, longitude: float = 0.0) -> List[Point]:
    """Points along a meridian; one degree of latitude is ~69.09 miles."""
    return [Point(latitude=lat, longitude=longitude) for lat in latitudes]


@pytest.fixture
def speed_resolver():
    return StaticSpeedResolver()


@pytest.fixture
def stop_generator(speed_resolver):
    return StopGenerator(speed_resolver=speed_resolver)


@pytest.fixture
def route_repository():
    return StaticRouteRepository(meridian_path(0.0, 1.0, 2.0))


@pytest.fixture
def planner(route_repository, stop_generator):
    return PlannerService(route_repository=route_repository, stop_generator=stop_generator)


@pytest.fixture
def client(planner, tmp_path):
    from waystop.api.dependencies import get_planner_service
    from waystop.core.settings import get_settings
    from waystop.main import app

    settings = get_settings().model_copy(update={"EXPORT_DIR": tmp_path})
    app.dependency_overrides[get_planner_service] = lambda: planner
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
